#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline - Command Line Interface
============================================================
One-shot conversion and an interactive session that keeps one pipeline
alive while settings change.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from ascii_art_pipeline.constants import CharSet, RenderMode
from ascii_art_pipeline.exceptions import PipelineError
from ascii_art_pipeline.formatters import AnsiColorFormatter, HtmlFormatter
from ascii_art_pipeline.pipeline import AsciiPipeline
from ascii_art_pipeline.renderers import RenderResult

logger = logging.getLogger(__name__)


# =============================================================================
# OUTPUT
# =============================================================================

def write_result(result: RenderResult, output_path: str, color_mode: str = '24bit') -> None:
    """Write a result to a file; the extension picks the format."""
    ext = os.path.splitext(output_path)[1].lower()
    if ext == '.html':
        content = HtmlFormatter.format_result(result)
    elif ext == '.ansi':
        content = AnsiColorFormatter.format_result(result, color_mode=color_mode)
    else:
        content = '\n'.join(result.lines)

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(content)
    logger.info('Wrote %s', output_path)


def terminal_text(result: RenderResult, color_mode: str = '24bit') -> str:
    if result.colors is not None:
        return AnsiColorFormatter.format_result(result, color_mode=color_mode)
    return result.text


# =============================================================================
# COMMAND LINE
# =============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='ascii-art-pipeline',
        description='Convert images to ASCII/Braille art',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s image.png                           # Grayscale, 150x150 glyphs
  %(prog)s image.png -w 100 --keep-aspect      # Width 100, height from aspect ratio
  %(prog)s image.png -m grayscaleBraille       # Braille dots
  %(prog)s image.png -m edgeDetectionFill      # Edge strokes over shading
  %(prog)s image.png -m color -o art.html      # True-color HTML output
  %(prog)s image.png --interactive             # Adjust settings interactively
        """
    )

    parser.add_argument('input', nargs='?', help='Input image file')
    parser.add_argument('-o', '--output', help='Output file (txt, html, or ansi)')

    # Size options
    parser.add_argument('-w', '--width', type=int, help='Output width in glyphs')
    parser.add_argument('-H', '--height', type=int, help='Output height in glyphs')
    parser.add_argument('--keep-aspect', action='store_true',
                        help='Derive height from width and the image aspect ratio')

    # Mode options
    parser.add_argument('-m', '--mode', choices=[m.value for m in RenderMode],
                        default=RenderMode.GRAYSCALE.value, help='Rendering mode')
    parser.add_argument('--charset', choices=[c.value for c in CharSet],
                        default=CharSet.ASCII.value, help='Glyph family')
    parser.add_argument('--braille-levels', type=int, choices=[9, 2], default=9,
                        help='Braille ramp levels')
    parser.add_argument('-i', '--invert', action='store_true', help='Use the reversed ramp')
    parser.add_argument('--contrast', type=float, default=1.0,
                        help='Contrast factor (1.0 = unchanged)')

    # Edge detection options
    parser.add_argument('-t', '--edge-threshold', type=float, default=50.0,
                        help='Gradient magnitude below which pixels are flat')
    parser.add_argument('--blur-radius', type=int, default=2,
                        help='Gaussian blur radius before edge detection')

    # Color options
    parser.add_argument('--color-mode', choices=['24bit', '256', '16'],
                        default='24bit', help='Terminal color mode')

    parser.add_argument('--interactive', action='store_true', help='Start an interactive session')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )


def pipeline_from_args(args: argparse.Namespace) -> AsciiPipeline:
    """Build a pipeline whose settings mirror the parsed arguments."""
    pipeline = AsciiPipeline()
    # With --keep-aspect the dimension set last drives the other; -w wins over -H
    if args.height is not None:
        pipeline.set_config('output_height', args.height)
    if args.width is not None:
        pipeline.set_config('output_width', args.width)
    pipeline.set_config('maintain_aspect_ratio', args.keep_aspect)
    pipeline.set_config('mode', args.mode)
    pipeline.set_config('charset', args.charset)
    pipeline.set_config('braille_levels', args.braille_levels)
    pipeline.set_config('reverse_intensity', args.invert)
    pipeline.set_config('contrast_factor', args.contrast)
    pipeline.set_config('edge_threshold', args.edge_threshold)
    pipeline.set_config('blur_radius', args.blur_radius)
    return pipeline


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command line usage."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        pipeline = pipeline_from_args(args)

        if args.interactive:
            session = InteractiveMode(pipeline, color_mode=args.color_mode)
            if args.input:
                session.load(args.input)
            session.run()
            return 0

        if not args.input:
            parser.print_help()
            return 1

        result = asyncio.run(pipeline.convert(args.input))

        if args.verbose:
            source = pipeline.source
            print(f"Source size: {source.width}x{source.height}", file=sys.stderr)
            print(f"Output size: {result.width}x{result.height}", file=sys.stderr)

        if args.output:
            write_result(result, args.output, args.color_mode)
            print(f"Saved to {args.output}")
        else:
            print(terminal_text(result, args.color_mode))
    except (PipelineError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


# =============================================================================
# INTERACTIVE MODE
# =============================================================================

class InteractiveMode:
    """Interactive preview; settings persist across renders."""

    HELP = """Commands:
  load <path>        - Load an image
  set <key> <value>  - Change a setting (e.g. set output_width 80)
  render [mode]      - Render with current settings
  save <file>        - Save the last render (txt, html, or ansi)
  show               - Show current settings
  q                  - Quit"""

    def __init__(self, pipeline: Optional[AsciiPipeline] = None, color_mode: str = '24bit'):
        self.pipeline = pipeline or AsciiPipeline()
        self.color_mode = color_mode
        self.result: Optional[RenderResult] = None

    def load(self, path: str) -> None:
        source = asyncio.run(self.pipeline.load_image(path))
        print(f"Loaded {source.origin} ({source.width}x{source.height})")

    def render(self, mode: Optional[str] = None) -> str:
        self.result = self.pipeline.render(mode)
        return terminal_text(self.result, self.color_mode)

    def show(self) -> str:
        config = self.pipeline.config
        return '\n'.join([
            f"output_width: {config.output_width}",
            f"output_height: {config.output_height}",
            f"maintain_aspect_ratio: {config.maintain_aspect_ratio}",
            f"contrast_factor: {config.contrast_factor}",
            f"reverse_intensity: {config.reverse_intensity}",
            f"mode: {config.mode.value}",
            f"charset: {config.charset.value}",
            f"braille_levels: {config.braille_levels}",
            f"edge_threshold: {config.edge_threshold}",
            f"blur_radius: {config.blur_radius}",
        ])

    def handle(self, line: str) -> bool:
        """Execute one command; returns False when the session should end."""
        cmd = line.strip().split(maxsplit=2)
        if not cmd:
            return True
        command = cmd[0].lower()

        if command in ('q', 'quit'):
            return False
        if command == 'load' and len(cmd) > 1:
            self.load(line.strip().split(maxsplit=1)[1])
        elif command == 'set' and len(cmd) > 2:
            self.pipeline.set_config(cmd[1], cmd[2])
            print(f"{cmd[1]} set to {cmd[2]}")
        elif command == 'render':
            print(self.render(cmd[1] if len(cmd) > 1 else None))
        elif command == 'save' and len(cmd) > 1:
            if self.result is None:
                self.render()
            write_result(self.result, cmd[1], self.color_mode)
            print(f"Saved to {cmd[1]}")
        elif command == 'show':
            print(self.show())
        else:
            print(self.HELP)
        return True

    def run(self) -> None:
        print("Interactive ASCII Art Mode")
        print("=" * 50)
        print(self.HELP)
        print()

        while True:
            try:
                line = input("> ")
            except EOFError:
                break
            except KeyboardInterrupt:
                print("\nUse 'q' to quit.")
                continue
            try:
                if not self.handle(line):
                    break
            except (PipelineError, OSError) as e:
                print(f"Error: {e}")


if __name__ == '__main__':
    sys.exit(main())
