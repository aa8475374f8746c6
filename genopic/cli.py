"""
Command-line interface for genopic.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple


def _parse_rgb(value: str) -> Tuple[int, int, int]:
    parts = [p.strip() for p in str(value).split(",")]
    try:
        rgb = tuple(int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected R,G,B integers, got {value!r}")
    if len(rgb) != 3 or not all(0 <= c <= 255 for c in rgb):
        raise argparse.ArgumentTypeError(f"expected three values in 0-255, got {value!r}")
    return rgb


def build_parser() -> argparse.ArgumentParser:
    from .colors import PALETTE_METHODS
    from .exporter import COLOR_MODES, DEFAULT_HEIGHT, DEFAULT_WIDTH

    parser = argparse.ArgumentParser(
        prog="genopic",
        description="Draw a 23andMe raw genotype file as a grid of coloured squares"
    )
    parser.add_argument(
        "input",
        type=str,
        help="Path to a tab-delimited 23andMe raw data file"
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file path (default: genopic.svg, or genopic.png with --png)"
    )
    parser.add_argument(
        "--png",
        action="store_true",
        help="Rasterize to PNG with rsvg-convert instead of writing SVG"
    )
    parser.add_argument(
        "--print",
        dest="for_print",
        action="store_true",
        help="Print quality output: no tooltips, and PNG export at double size and 300 DPI"
    )
    parser.add_argument(
        "--width",
        type=float,
        default=DEFAULT_WIDTH,
        help=f"Canvas width (default: {DEFAULT_WIDTH})"
    )
    parser.add_argument(
        "--height",
        type=float,
        default=DEFAULT_HEIGHT,
        help=f"Canvas height (default: {DEFAULT_HEIGHT})"
    )
    parser.add_argument(
        "--scale",
        type=float,
        default=1.0,
        help="Scale factor for the whole drawing (default: 1.0)"
    )
    parser.add_argument("--xpad", type=float, default=10, help="Left padding (default: 10)")
    parser.add_argument("--ypad", type=float, default=10, help="Top padding (default: 10)")
    parser.add_argument(
        "--fill",
        type=_parse_rgb,
        default="0,0,255",
        help="Cell colour as R,G,B when not colouring by category (default: 0,0,255)"
    )
    parser.add_argument(
        "--color-by",
        choices=list(COLOR_MODES),
        default="fixed",
        help="'fixed' draws every cell in --fill, 'category' gives each genotype its own colour (default: fixed)"
    )
    parser.add_argument(
        "--palette-method",
        choices=list(PALETTE_METHODS),
        default="chroma_bisection",
        help="How category colours are picked from the HSV wheel (default: chroma_bisection)"
    )
    parser.add_argument(
        "--palette-value",
        type=float,
        default=None,
        help="HSV brightness of category colours (default: 0.95)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for palette shuffling beyond 12 colours"
    )
    parser.add_argument(
        "--strict-palette",
        action="store_true",
        help="Fail instead of falling back to --fill when no palette can be built"
    )
    parser.add_argument(
        "--tooltips",
        dest="annotate",
        action="store_true",
        help="Attach rsid/genotype tooltips to every cell (SVG output only)"
    )
    parser.add_argument(
        "--swatch",
        type=str,
        default=None,
        help="Also write a PNG preview of the category palette to this path"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Check input file
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    if args.scale <= 0:
        print("Error: --scale must be positive", file=sys.stderr)
        sys.exit(2)

    # Import here to avoid slow startup for --help
    from .data_loader import read_23andme
    from .exporter import RenderError, RenderOptions, category_palette, export_to_svg
    from .rasterizer import RasterizeError, export_to_png

    options = RenderOptions(
        width=args.width,
        height=args.height,
        scale=args.scale,
        for_print=args.for_print,
        force_png=args.png,
        xpad=args.xpad,
        ypad=args.ypad,
        fill=args.fill,
        color_by=args.color_by,
        palette_method=args.palette_method,
        palette_value=args.palette_value,
        annotate=args.annotate,
        strict_palette=args.strict_palette,
        seed=args.seed,
    )
    output = args.output or ("genopic.png" if args.png else "genopic.svg")

    try:
        dataset = read_23andme(input_path)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        # One palette feeds both the cells and the swatch so they agree
        palette = None
        if dataset.n_items and (args.color_by == "category" or args.swatch):
            palette = category_palette(dataset.categories, options)

        if args.png:
            print("Rasterizing to PNG...")
            output_path = export_to_png(dataset.genotypes, output, options=options, palette=palette)
        else:
            print("Exporting to SVG...")
            output_path = export_to_svg(dataset, output, options=options, palette=palette)
    except (RenderError, RasterizeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.swatch:
        from .swatch import write_swatch

        if palette is None:
            print("Warning: no palette to preview, skipping --swatch", file=sys.stderr)
        else:
            write_swatch(palette.colors, args.swatch)
            print(f"  - palette: {' '.join(palette.hex_colors())}")

    print(f"Done! Wrote {output_path}")


if __name__ == "__main__":
    main()
