"""Pillow adapters for rendered pixel buffers."""

from __future__ import annotations

from pathlib import Path

import PIL.Image

from .renderer import PixelBuffer

_MODES = {1: "L", 3: "RGB"}


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def is_supported_format(image_format: str) -> bool:
    """Whether Pillow has a writer for the ``image_format`` extension."""

    PIL.Image.init()
    return _pil_format_name(image_format.lstrip(".")) in PIL.Image.SAVE


def to_image(buffer: PixelBuffer) -> PIL.Image.Image:
    """Wrap ``buffer`` in a Pillow image ("L" for one channel, "RGB" for three)."""

    try:
        mode = _MODES[buffer.channels]
    except KeyError:
        raise ValueError(f"No image mode for {buffer.channels}-channel samples.") from None
    image = PIL.Image.fromarray(buffer.to_array())
    return image if image.mode == mode else image.convert(mode)


def write_image(image: PIL.Image.Image, path: Path | str, image_format: str = "png") -> Path:
    """Write a single image to ``path`` using the provided format."""

    image_format = (image_format or "png").lower().lstrip(".")
    output_path = Path(path).expanduser()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=_pil_format_name(image_format))
    return output_path


def save_image(buffer: PixelBuffer, path: Path | str, image_format: str = "png") -> Path:
    return write_image(to_image(buffer), path, image_format)


def default_output_name(width: int, height: int, max_iterations: int, image_format: str = "png") -> str:
    return f"mandelbrot_{width}x{height}_{max_iterations}_iter.{image_format.lower().lstrip('.')}"
