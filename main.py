from __future__ import annotations
import argparse
import logging
import os
import sys
from PIL import Image
from svg_state import SVGState
from rasterizer import rasterize

def process_svg_file(svg_path: str, output_path: str = None, verbose: bool = False,
                     width: int = None, height: int = None,
                     background: tuple[int, int, int] = (255, 255, 255),
                     skip_render: bool = False, anti_aliasing: bool = False) -> bool:
    if not os.path.exists(svg_path):
        print(f"Error: File not found: {svg_path}")
        return False

    if not svg_path.lower().endswith('.svg'):
        print(f"Warning: {svg_path} does not have .svg extension")

    try:
        svg_state = SVGState.from_file(svg_path)

        if verbose:
            print(f"\nProcessing: {svg_path}")
            print(f"Viewport: {svg_state.viewport_width}x{svg_state.viewport_height}")
            if svg_state.viewbox:
                print(f"ViewBox: {svg_state.viewbox}")

        if not svg_state.is_valid():
            for error in svg_state.validation_errors:
                print(f"  ERROR: {error}")
            print(f"Error: {svg_path} has validation errors")
            return False

        if output_path is None:
            base_name = os.path.splitext(os.path.basename(svg_path))[0]
            output_path = f"{base_name}.png"

        if skip_render:
            print(f"[OK] Parsed: {svg_path} -> {output_path} (rendering skipped)")
            return True

        pixels = rasterize(svg_state, width=width, height=height,
                           background=background, anti_aliasing=anti_aliasing)
        Image.fromarray(pixels, 'RGBA').save(output_path)

        if verbose:
            print(f"[OK] Rendered {pixels.shape[1]}x{pixels.shape[0]} and saved: {output_path}")
        else:
            print(f"[OK] {svg_path} -> {output_path}")
        return True

    except OSError as e:
        print(f"Error processing {svg_path}: {e}")
        return False
    except Exception as e:
        print(f"Error during rendering of {svg_path}: {e}")
        if verbose:
            logging.getLogger(__name__).exception("rendering failed")
        return False

def parse_background(value: str) -> tuple[int, int, int]:
    parts = value.split(',')
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("background must be R,G,B (e.g. 255,255,255)")
    try:
        return tuple(max(0, min(255, int(part.strip()))) for part in parts)
    except ValueError:
        raise argparse.ArgumentTypeError("background must be R,G,B integers (e.g. 255,255,255)")

def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number <= 0:
        raise argparse.ArgumentTypeError("must be positive")
    return number

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SVG to PNG Converter")
    parser.add_argument('svg_files', nargs='+', help="SVG files to convert")
    parser.add_argument('-v', '--verbose', action='store_true', help="print detailed information")
    parser.add_argument('-o', '--output', help="output directory, or file name for a single input")
    parser.add_argument('-w', '--width', type=positive_int, help="override output width in pixels")
    parser.add_argument('-H', '--height', type=positive_int, help="override output height in pixels")
    parser.add_argument('-b', '--background', type=parse_background, default=(255, 255, 255),
                        help="background color as R,G,B (default: 255,255,255)")
    parser.add_argument('-aa', '--anti-aliasing', action='store_true', help="enable anti-aliasing")
    parser.add_argument('--skip-render', action='store_true', help="only parse and validate")
    return parser

def main(argv: list[str] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    success_count = 0
    for svg_file in args.svg_files:
        output_path = None
        if args.output:
            if os.path.isdir(args.output):
                base_name = os.path.splitext(os.path.basename(svg_file))[0]
                output_path = os.path.join(args.output, f"{base_name}.png")
            elif len(args.svg_files) == 1:
                output_path = args.output
            else:
                print("Warning: -o with multiple files requires a directory, not a file")

        if process_svg_file(svg_file, output_path, args.verbose, args.width, args.height,
                            args.background, args.skip_render, args.anti_aliasing):
            success_count += 1

    print(f"\nProcessed {success_count}/{len(args.svg_files)} file(s) successfully")
    return 0 if success_count == len(args.svg_files) else 1

if __name__ == "__main__":
    sys.exit(main())
