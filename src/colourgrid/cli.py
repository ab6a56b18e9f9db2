import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import numpy as np

from colourgrid.colours import Conversion
from colourgrid.errors import ColourGridError
from colourgrid.paths import output_path_for
from colourgrid.rendering import DEFAULT_CELLS, DEFAULT_PIXELS, render
from colourgrid.sampling import DEFAULT_SAMPLES, extract, open_image


def _package_version() -> str:
    try:
        return version("colourgrid")
    except PackageNotFoundError:
        return "unknown"


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="colourgrid", description="Sample colours from an image, or paint a grid from sampled colours"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    common.add_argument("-q", "--quiet", action="store_true", default=False, help="Do not print progress")

    extract_parser = sub.add_parser(
        "extract", parents=[common], help="Write random pixel colours of an image to a CSV file"
    )
    extract_parser.add_argument("input", help="Path to input image")
    extract_parser.add_argument(
        "-p",
        dest="n_samples",
        type=_non_negative_int,
        default=DEFAULT_SAMPLES,
        help=f"Number of pixels to sample (default: {DEFAULT_SAMPLES})",
    )

    render_parser = sub.add_parser("render", parents=[common], help="Paint a grid image from a CSV file of colours")
    render_parser.add_argument("input", help="Path to colour CSV file")
    render_parser.add_argument(
        "-p",
        dest="pixels",
        type=_positive_int,
        default=DEFAULT_PIXELS,
        help=f"Width and height of the output image (default: {DEFAULT_PIXELS})",
    )
    render_parser.add_argument(
        "-n",
        dest="cells",
        type=_positive_int,
        default=DEFAULT_CELLS,
        help=f"Number of cells along each side of the grid (default: {DEFAULT_CELLS})",
    )
    render_parser.add_argument("-f", "--format", default="jpg", help="Output file extension (default: jpg)")
    render_parser.add_argument(
        "--round",
        action="store_true",
        default=False,
        help="Round colour values to bytes instead of truncating them",
    )
    return parser


def _run_extract(args, say) -> None:
    say(f"Collecting colours from {args.input}")
    image = open_image(args.input)
    output = output_path_for(args.input, "csv")
    say(f"Writing output to {output}")
    extract(image, output, args.n_samples, np.random.default_rng(args.seed))
    say(f"Output written to {output}")


def _run_render(args, say) -> None:
    output = output_path_for(args.input, args.format.lstrip("."))
    conversion = Conversion.ROUND if args.round else Conversion.TRUNCATE
    say(f"Reading colours from {args.input}")
    say(f"Writing output to {output}")
    render(
        args.input,
        output,
        pixels=args.pixels,
        cells=args.cells,
        rng=np.random.default_rng(args.seed),
        conversion=conversion,
    )
    say(f"Output written to {output}")


def main(argv=None):
    args = build_parser().parse_args(argv)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"File not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    def say(message: str) -> None:
        if not args.quiet:
            print(message)

    run = _run_extract if args.command == "extract" else _run_render
    try:
        run(args, say)
    except (ColourGridError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
