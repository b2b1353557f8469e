import logging
import os
import sys
import time
import warnings
from argparse import ArgumentParser
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from . import EscapeTimeError, Viewport, get_profile, render
from .adapters import default_output_name, is_supported_format, to_image, write_image
from .evaluator import check_iteration_budget
from .profiles import PROFILES
from .prompts import get_complex, get_number
from .renderer import BACKENDS

logger = logging.getLogger("escapetime.cli")


def select_device() -> str:
    """Use the first visible GPU when there is one, otherwise the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        logger.debug("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        logger.debug("Could not configure GPU memory growth (%s), using CPU", e)
        return '/CPU:0'
    logger.debug("GPU found, using %s", gpus[0].name)
    return '/GPU:0'


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set as a grayscale escape-time image.')

    parser.add_argument('--width', type=int,
                        dest='width', help='image width in pixels',
                        metavar='WIDTH', default=1920)

    parser.add_argument('--height', type=int,
                        dest='height', help='image height in pixels',
                        metavar='HEIGHT', default=1080)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration budget before a point counts as bounded',
                        metavar='MAX_ITERATIONS', default=500)

    parser.add_argument('--origin-re', type=float,
                        dest='origin_re', help='real part of the point the default framing is shifted to',
                        metavar='ORIGIN_RE', default=0.0)

    parser.add_argument('--origin-im', type=float,
                        dest='origin_im', help='imaginary part of the point the default framing is shifted to',
                        metavar='ORIGIN_IM', default=0.0)

    parser.add_argument('--scale-factor', type=float,
                        dest='scale_factor', help='scale of the default [-2, 0.5] x [-1.2, 1.2] window. Choose < 1 to zoom in',
                        metavar='SCALE_FACTOR', default=0.5625)

    parser.add_argument('--center-re', type=float, default=None,
                        help='real part of the window center. Together with --plane-width, overrides the scale-factor framing.')

    parser.add_argument('--center-im', type=float, default=None,
                        help='imaginary part of the window center. Requires --center-re; defaults to 0.')

    parser.add_argument('--plane-width', type=float, default=None,
                        help='width of the window in the complex plane (used with --center-re).')

    parser.add_argument('--plane-height', type=float, default=None,
                        help='height of the window in the complex plane. Defaults to square pixels.')

    parser.add_argument('--profile', choices=sorted(PROFILES), default='linear',
                        help='mapping from escape step to gray level.')

    parser.add_argument('--backend', choices=BACKENDS, default='tensorflow',
                        help='"tensorflow" evaluates the grid vectorized, "python" evaluates pixel by pixel.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for the image. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('--output', dest='output', type=str,
                        help='Destination file. Defaults to mandelbrot_<W>x<H>_<ITER>_iter.<FORMAT> in the working directory.')

    parser.add_argument('--interactive', action='store_true',
                        help='prompt for resolution, scale factor, origin and iteration budget.')

    parser.add_argument('--timings', action='store_true',
                        help='print how long each stage took.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def prompt_parameters(opt) -> None:
    """Fill ``opt`` from the terminal, the way the interactive mode asks for them."""

    opt.width = get_number("Enter image width: ", int)
    opt.height = get_number("Enter image height: ", int)
    opt.scale_factor = get_number("Enter scale factor: ", float)
    origin = get_complex("Enter a complex number to be the origin of the image.\n")
    opt.origin_re, opt.origin_im = origin.real, origin.imag
    opt.max_iterations = get_number("Enter max number of iterations: ", int)
    opt.center_re = None
    opt.center_im = None


def resolve_viewport(opt, parser: ArgumentParser) -> Viewport:
    try:
        if opt.center_re is not None:
            if opt.plane_width is None:
                parser.error("--center-re requires --plane-width.")
            return Viewport.from_center(
                complex(opt.center_re, opt.center_im or 0.0),
                opt.plane_width,
                opt.width,
                opt.height,
                plane_height=opt.plane_height,
            )
        if opt.center_im is not None or opt.plane_width is not None or opt.plane_height is not None:
            parser.error("--center-im, --plane-width and --plane-height require --center-re.")
        return Viewport.from_scale_factor(
            complex(opt.origin_re, opt.origin_im),
            opt.scale_factor,
            opt.width,
            opt.height,
        )
    except EscapeTimeError as exc:
        parser.error(str(exc))


def resolve_output_path(opt, parser: ArgumentParser) -> tuple[Path, str]:
    image_format = (opt.format or "png").lower().lstrip(".")
    if not image_format:
        image_format = "png"
    if not is_supported_format(image_format):
        parser.error(f"--format {image_format} is not a format Pillow can write.")

    if not opt.output:
        return Path(default_output_name(opt.width, opt.height, opt.max_iterations, image_format)).resolve(), image_format

    output_path = Path(opt.output).expanduser()
    if str(opt.output).endswith(tuple(filter(None, {os.sep, os.altsep}))):
        parser.error("--output must be a file path.")
    if output_path.exists() and output_path.is_dir():
        parser.error("--output must point to a file, not a directory.")
    suffix = output_path.suffix
    expected_suffix = f".{image_format}"
    if suffix:
        if suffix.lower() != expected_suffix.lower():
            parser.error(f"--output extension {suffix} does not match --format {image_format}.")
    else:
        output_path = output_path.with_suffix(expected_suffix)
    return output_path.resolve(), image_format


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if opt.verbose else logging.INFO,
        format='%(levelname)s - %(message)s',
    )
    logger.debug("TensorFlow version: %s", tf.__version__)

    if opt.interactive:
        prompt_parameters(opt)

    viewport = resolve_viewport(opt, parser)
    try:
        check_iteration_budget(opt.max_iterations)
    except EscapeTimeError as exc:
        parser.error(str(exc))
    output_path, image_format = resolve_output_path(opt, parser)
    profile = get_profile(opt.profile)
    device = select_device() if opt.backend == 'tensorflow' else None

    grand_start = time.perf_counter()
    start = time.perf_counter()
    buffer = render(viewport, opt.max_iterations, profile, backend=opt.backend, device=device)
    pixel_delta = time.perf_counter() - start

    start = time.perf_counter()
    image = to_image(buffer)
    image_delta = time.perf_counter() - start

    start = time.perf_counter()
    write_image(image, output_path, image_format)
    save_delta = time.perf_counter() - start
    grand_delta = time.perf_counter() - grand_start

    print("Resolution: {0}x{1}".format(viewport.width, viewport.height))
    print("Number of iterations: {0}".format(opt.max_iterations))
    print("Saved {0}".format(output_path))
    if opt.timings:
        print("Grand total: {0:.3f}s".format(grand_delta))
        print("Calculating pixel data: {0:.3f}s".format(pixel_delta))
        print("Copying pixels into image: {0:.3f}s".format(image_delta))
        print("Saving: {0:.3f}s".format(save_delta))


if __name__ == '__main__':
    main()
