#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline - Renderers
===============================================
Turn pixel, luminance and gradient buffers into glyph rows.

A render mode and character set are resolved once per render call into one
of a closed set of variants, each carrying exactly what it consumes:

- GrayscaleVariant: ramp glyph per pixel from contrast-remapped luminance
- TrueColorVariant: one fixed glyph per pixel, colored by the pixel
- ShadedColorVariant: ramp glyph from luminance, colored by the pixel
- EdgeVariant: direction glyphs from Sobel gradients, outline or filled
"""

import html
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np

from ascii_art_pipeline.charsets import CharacterSet, EdgeGlyphSet, GlyphRamp
from ascii_art_pipeline.constants import CharSet, RenderMode
from ascii_art_pipeline.edge_detection import EdgeMap
from ascii_art_pipeline.exceptions import ConfigError

RGB = Tuple[int, int, int]


# =============================================================================
# RESULT
# =============================================================================

@dataclass
class RenderResult:
    """Result of rendering one image."""
    text: str                                       # Final output (HTML spans for colored modes)
    lines: List[str]                                # Plain glyph rows
    cells: List[List[str]]                          # Emitted cells per row
    colors: Optional[List[List[RGB]]] = None        # Per-cell RGB if colorized
    width: int = 0                                  # Grid width before trimming
    height: int = 0                                 # Number of rows
    mode: RenderMode = RenderMode.GRAYSCALE


# =============================================================================
# VARIANTS
# =============================================================================

@dataclass(frozen=True)
class GrayscaleVariant:
    ramp: GlyphRamp
    coalesce_blank: bool = False     # Merge runs of blank cells into the next cell


@dataclass(frozen=True)
class TrueColorVariant:
    glyph: str = '@'


@dataclass(frozen=True)
class ShadedColorVariant:
    ramp: GlyphRamp
    trim_trailing: bool = True       # Drop the rightmost blank glyphs of each row


@dataclass(frozen=True)
class EdgeVariant:
    glyphs: EdgeGlyphSet
    ramp: GlyphRamp
    fill: bool = False               # Shade flat regions from the ramp


RenderVariant = Union[GrayscaleVariant, TrueColorVariant, ShadedColorVariant, EdgeVariant]


def resolve_variant(mode: RenderMode, charset: CharSet, reverse: bool = False,
                    braille_levels: int = 9) -> RenderVariant:
    """
    Resolve a mode and character set into a render variant.

    Raises:
        ConfigError: for an unsupported mode/charset pairing
    """
    def ramp(family: CharSet) -> GlyphRamp:
        return CharacterSet.ramp_for(family, reverse, braille_levels)

    if mode == RenderMode.GRAYSCALE:
        return GrayscaleVariant(ramp(charset), coalesce_blank=charset == CharSet.BRAILLE)
    if mode == RenderMode.GRAYSCALE_BRAILLE:
        return GrayscaleVariant(ramp(CharSet.BRAILLE), coalesce_blank=True)
    if mode == RenderMode.COLOR:
        return TrueColorVariant()
    if mode == RenderMode.COLOR_BRIGHTNESS_MAP:
        if charset != CharSet.ASCII:
            raise ConfigError(f"Mode {mode.value} does not support the {charset.value} character set")
        return ShadedColorVariant(ramp(CharSet.ASCII))
    if mode == RenderMode.EDGE_OUTLINE:
        return EdgeVariant(CharacterSet.edges_for(charset), ramp(charset), fill=False)
    if mode == RenderMode.EDGE_FILL:
        return EdgeVariant(CharacterSet.edges_for(charset), ramp(charset), fill=True)
    if mode == RenderMode.EDGE_BRAILLE:
        return EdgeVariant(CharacterSet.BRAILLE_EDGES, ramp(CharSet.BRAILLE), fill=False)
    raise ConfigError(f"Unsupported mode: {mode}")


# =============================================================================
# ROW ASSEMBLY
# =============================================================================

def color_span(glyph: str, rgb: RGB) -> str:
    r, g, b = rgb
    return f'<span style="color: rgb({r}, {g}, {b})">{html.escape(glyph, quote=False)}</span>'


def _result(cells: List[List[str]], colors: Optional[List[List[RGB]]],
            width: int, mode: RenderMode) -> RenderResult:
    lines = [''.join(row) for row in cells]
    if colors is None:
        text = '\n'.join(lines)
    else:
        text = '\n'.join(
            ''.join(color_span(glyph, rgb) for glyph, rgb in zip(row, row_colors))
            for row, row_colors in zip(cells, colors)
        )
    return RenderResult(text=text, lines=lines, cells=cells, colors=colors,
                        width=width, height=len(cells), mode=mode)


def _strip_trailing(row: List[str], blank: str) -> List[str]:
    end = len(row)
    while end > 0 and row[end - 1] == blank:
        end -= 1
    return row[:end]


def _coalesce(row: List[str], blank: str) -> List[str]:
    """Fold runs of blank glyphs into the following glyph; a trailing run is dropped."""
    cells = []
    pending = ''
    for glyph in row:
        if glyph == blank:
            pending += glyph
        else:
            cells.append(pending + glyph)
            pending = ''
    return cells


def _rgb_rows(pixels: np.ndarray) -> List[List[RGB]]:
    return [[(int(r), int(g), int(b)) for r, g, b in row[:, :3]] for row in pixels]


# =============================================================================
# RENDERERS
# =============================================================================

def render_grayscale(levels: np.ndarray, variant: GrayscaleVariant,
                     mode: RenderMode = RenderMode.GRAYSCALE) -> RenderResult:
    """Ramp glyph per pixel; trailing blanks dropped per row."""
    blank = variant.ramp.blank
    cells = []
    for row in variant.ramp.lookup(levels):
        glyphs = list(row)
        if variant.coalesce_blank:
            cells.append(_coalesce(glyphs, blank))
        else:
            cells.append(_strip_trailing(glyphs, blank))
    return _result(cells, None, levels.shape[1], mode)


def render_true_color(pixels: np.ndarray, variant: TrueColorVariant,
                      mode: RenderMode = RenderMode.COLOR) -> RenderResult:
    """A fixed glyph per pixel, colored by the pixel."""
    height, width = pixels.shape[:2]
    cells = [[variant.glyph] * width for _ in range(height)]
    return _result(cells, _rgb_rows(pixels), width, mode)


def render_shaded_color(pixels: np.ndarray, levels: np.ndarray, variant: ShadedColorVariant,
                        mode: RenderMode = RenderMode.COLOR_BRIGHTNESS_MAP) -> RenderResult:
    """Ramp glyph per pixel colored by the pixel."""
    glyph_rows = variant.ramp.lookup(levels)
    rgb_rows = _rgb_rows(pixels)
    cells, colors = [], []
    for glyphs, rgbs in zip(glyph_rows, rgb_rows):
        row, row_colors = [], []
        skipping = variant.trim_trailing
        # Scan right to left so the rightmost blank glyphs are never emitted
        for x in range(len(glyphs) - 1, -1, -1):
            glyph = glyphs[x]
            if skipping and not glyph.strip():
                continue
            skipping = False
            row.append(glyph)
            row_colors.append(rgbs[x])
        row.reverse()
        row_colors.reverse()
        cells.append(row)
        colors.append(row_colors)
    return _result(cells, colors, levels.shape[1], mode)


def render_edges(edges: EdgeMap, blurred_levels: np.ndarray, variant: EdgeVariant,
                 mode: RenderMode = RenderMode.EDGE_OUTLINE) -> RenderResult:
    """
    Direction glyphs over the interior of the image.

    Flat pixels get the empty glyph, or with ``fill`` the ramp glyph of the
    pixel's blurred luminance. The output grid excludes the outer ring.
    """
    table = np.array(variant.glyphs.as_table(), dtype=object)
    grid = table[edges.directions]
    if variant.fill and grid.size:
        interior = blurred_levels[1:-1, 1:-1]
        flat = edges.directions == 0
        grid[flat] = variant.ramp.lookup(interior)[flat]
    cells = [list(row) for row in grid]
    return _result(cells, None, edges.shape[1], mode)
