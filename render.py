import logging
import os
import sys
import time
from argparse import ArgumentParser

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")

# Must happen before anything imports TensorFlow.
if not _cli_verbose and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

from mandelbrot import (
    DEFAULT_LIMIT,
    ImageBounds,
    KERNELS,
    MandelbrotError,
    PlaneWindow,
    RenderSettings,
    parse_complex,
    parse_pair,
    render_parallel,
    write_image,
)

logger = logging.getLogger("mandelbrot.cli")


def build_parser():
    parser = ArgumentParser(
        prog="mandelbrot-render",
        description="Render a region of the Mandelbrot set as a grayscale image.",
        epilog="Example: mandelbrot-render mandel.png 1000x750 -1.20,0.35 -1,0.20 "
               "(options go before the corner points)",
    )

    parser.add_argument('file', metavar='FILE',
                        help='output image path; the extension selects the format unless --format is given')

    parser.add_argument('pixels', metavar='PIXELS',
                        help='image size as WIDTHxHEIGHT, e.g. 1000x750')

    parser.add_argument('upper_left', metavar='UPPERLEFT',
                        help='upper left corner of the plane window as RE,IM')

    parser.add_argument('lower_right', metavar='LOWERRIGHT',
                        help='lower right corner of the plane window as RE,IM')

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration limit before a point counts as inside the set',
                        metavar='MAX_ITERATIONS', default=DEFAULT_LIMIT)

    parser.add_argument('--workers', type=int,
                        dest='workers', help='number of worker threads. Default: one per CPU',
                        metavar='WORKERS', default=None)

    parser.add_argument('--rows-per-band', type=int,
                        dest='rows_per_band', help='number of image rows rendered by each task',
                        metavar='ROWS', default=1)

    parser.add_argument('--kernel', choices=KERNELS, default='numpy',
                        help='band implementation: pure python, vectorized numpy, or tensorflow')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for the image. Can be any extension supported by Pillow.',
                        metavar='FORMAT', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging, including TensorFlow diagnostics.')

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(format="%(levelname)s: %(message)s")
    logging.getLogger("mandelbrot").setLevel(logging.DEBUG if verbose else logging.INFO)
    if not verbose:
        # tf.get_logger() is this logger; TensorFlow is only imported by the workers.
        logging.getLogger("tensorflow").setLevel(logging.ERROR)


def _protect_negative_points(args):
    """Mark arguments from the first negative RE,IM point onward as positional.

    argparse mistakes ``-1.20,0.35`` for an option; everything after ``--``
    is taken literally.
    """

    if "--" in args:
        return args
    for index, arg in enumerate(args):
        if len(arg) > 1 and arg[0] == "-" and (arg[1].isdigit() or arg[1] == ".") and parse_complex(arg) is not None:
            return [*args[:index], "--", *args[index:]]
    return args


def main(argv=None) -> int:
    parser = build_parser()
    args = list(sys.argv[1:] if argv is None else argv)
    opt = parser.parse_args(_protect_negative_points(args))

    _configure_logging(bool(opt.verbose))

    size = parse_pair(opt.pixels, 'x')
    if size is None:
        parser.error("error parsing image dimensions")
    upper_left = parse_complex(opt.upper_left)
    if upper_left is None:
        parser.error("error parsing upper left corner point")
    lower_right = parse_complex(opt.lower_right)
    if lower_right is None:
        parser.error("error parsing lower right corner point")

    try:
        bounds = ImageBounds(*size)
        window = PlaneWindow(upper_left, lower_right).validate()
        settings = RenderSettings(
            max_iterations=opt.max_iterations,
            workers=opt.workers,
            rows_per_band=opt.rows_per_band,
            kernel=opt.kernel,
        )
    except MandelbrotError as exc:
        parser.error(str(exc))

    logger.debug(
        "window %s .. %s, %d iterations, %d workers",
        window.upper_left, window.lower_right, settings.max_iterations, settings.worker_count(),
    )

    start = time.perf_counter()
    try:
        pixels = render_parallel(bounds, window.upper_left, window.lower_right, settings)
        write_image(opt.file, pixels, bounds, image_format=opt.format)
    except (MandelbrotError, OSError, KeyError, ValueError) as exc:
        logger.error("%s", exc)
        if exc.__cause__ is not None:
            logger.error("caused by: %r", exc.__cause__)
        return 1

    logger.info("rendered %dx%d in %.2fs", bounds.width, bounds.height, time.perf_counter() - start)
    return 0


if __name__ == '__main__':
    sys.exit(main())
