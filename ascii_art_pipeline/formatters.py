#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline - Output Formatters
======================================================
Present a RenderResult on a terminal (ANSI escape codes) or as a standalone
HTML document.
"""

import html
from typing import Literal, Tuple

from ascii_art_pipeline.renderers import RenderResult


# =============================================================================
# ANSI COLOR OUTPUT
# =============================================================================

class AnsiColorFormatter:
    """Format glyph art with ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    @staticmethod
    def _cube_index(rgb: Tuple[int, int, int]) -> int:
        """Nearest xterm-256 palette entry: gray ramp for neutral tones, else 6x6x6 cube."""
        r, g, b = rgb
        if r == g == b:
            if r < 8:
                return 16
            if r > 248:
                return 231
            return 232 + round((r - 8) / 247 * 24)
        levels = [round(channel / 255 * 5) for channel in rgb]
        return 16 + 36 * levels[0] + 6 * levels[1] + levels[2]

    @staticmethod
    def _basic_code(rgb: Tuple[int, int, int], foreground: bool) -> int:
        """SGR code of the closest of the 8 base colors, bright variant above mid gray."""
        bits = sum(1 << i for i, channel in enumerate(rgb) if channel > 127)
        base = 30 if foreground else 40
        if sum(rgb) / 3 > 127:
            base += 60
        return base + bits

    @classmethod
    def color_code(cls, rgb: Tuple[int, int, int], color_mode: str = '24bit',
                   foreground: bool = True) -> str:
        """
        Escape sequence selecting a color.

        Args:
            rgb: Color as an (r, g, b) tuple
            color_mode: '24bit' (true color), '256' (xterm palette) or '16'
            foreground: Color the glyph rather than the cell background

        Returns:
            ANSI escape sequence
        """
        layer = 38 if foreground else 48
        if color_mode == '24bit':
            r, g, b = rgb
            return f"\033[{layer};2;{r};{g};{b}m"
        if color_mode == '256':
            return f"\033[{layer};5;{cls._cube_index(rgb)}m"
        if color_mode == '16':
            return f"\033[{cls._basic_code(rgb, foreground)}m"
        raise ValueError(f"Unknown color mode: {color_mode}")

    @classmethod
    def format_result(cls, result: RenderResult,
                      color_mode: Literal['24bit', '256', '16'] = '24bit',
                      background: bool = False,
                      bold: bool = False) -> str:
        """
        Format a render result with ANSI colors.

        Results without color data are returned as plain text.

        Args:
            result: RenderResult, usually from a colored mode
            color_mode: Color mode ('24bit', '256', or '16')
            background: Apply color to background instead of foreground
            bold: Apply bold styling

        Returns:
            String with ANSI color codes
        """
        if result.colors is None:
            return '\n'.join(result.lines)

        output_lines = []
        for cells, colors in zip(result.cells, result.colors):
            output = cls.BOLD if bold else ""
            prev_color = None
            for glyph, rgb in zip(cells, colors):
                # Only emit a code when the color changes
                if rgb != prev_color:
                    output += cls.color_code(rgb, color_mode, not background)
                    prev_color = rgb
                output += glyph
            output += cls.RESET
            output_lines.append(output)

        return '\n'.join(output_lines)


# =============================================================================
# HTML OUTPUT
# =============================================================================

class HtmlFormatter:
    """Format glyph art as an HTML document."""

    @staticmethod
    def format_result(result: RenderResult,
                      font_size: str = "10px",
                      font_family: str = "monospace",
                      background_color: str = "#000000",
                      foreground_color: str = "#FFFFFF",
                      line_height: float = 1.0) -> str:
        """
        Format a render result as HTML.

        Colored results keep their inline-styled spans; plain results are
        escaped.

        Args:
            result: RenderResult
            font_size: CSS font size
            font_family: CSS font family
            background_color: Background color
            foreground_color: Text color for uncolored glyphs
            line_height: Line height multiplier

        Returns:
            HTML string
        """
        if result.colors is None:
            body = html.escape('\n'.join(result.lines), quote=False)
        else:
            body = result.text

        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>
        .ascii-art {{
            font-family: {font_family};
            font-size: {font_size};
            line-height: {line_height};
            background-color: {background_color};
            color: {foreground_color};
            white-space: pre;
            display: inline-block;
            padding: 10px;
        }}
    </style>
</head>
<body>
<pre class="ascii-art">{body}</pre>
</body>
</html>"""
