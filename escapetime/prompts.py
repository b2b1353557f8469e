"""Interactive terminal input for render parameters."""

from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO, TypeVar

T = TypeVar("T")


def get_line(prompt: str, *, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> str:
    """Print ``prompt`` and read one stripped line of input."""

    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stdout.write(prompt)
    stdout.flush()
    line = stdin.readline()
    if not line:
        raise EOFError("input closed while waiting for a value")
    return line.strip()


def get_number(
    prompt: str,
    kind: Callable[[str], T] = int,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> T:
    """Keep prompting until the input parses as ``kind``."""

    stderr = stderr if stderr is not None else sys.stderr
    while True:
        text = get_line(prompt, stdin=stdin, stdout=stdout)
        try:
            return kind(text)
        except ValueError as exc:
            print(f"\nInvalid input: {exc}\n", file=stderr)


def get_complex(
    prompt: str,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> complex:
    stdout = stdout if stdout is not None else sys.stdout
    stdout.write(prompt)
    re = get_number("Real part: ", float, stdin=stdin, stdout=stdout, stderr=stderr)
    im = get_number("Imaginary part: ", float, stdin=stdin, stdout=stdout, stderr=stderr)
    return complex(re, im)
