#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline - Character Sets
====================================================
Glyph ramps for intensity mapping and glyph sets for edge rendering.

A ramp is ordered from the least intense glyph (index 0) to the most intense
one. Sample values are bucketed with a fixed divider::

    divider = 255 // (len(ramp) - 1)
    index = min(value // divider, len(ramp) - 1)
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from ascii_art_pipeline.constants import BRAILLE_BASE, BRAILLE_DOTS, CharSet


def braille_from_dots(dots: Iterable[Tuple[int, int]]) -> str:
    """Build a braille glyph from (column, row) dot coordinates in a 2x4 cell."""
    wanted = set(dots)
    code = BRAILLE_BASE
    for dx, dy, bit in BRAILLE_DOTS:
        if (dx, dy) in wanted:
            code |= bit
    return chr(code)


@dataclass(frozen=True)
class GlyphRamp:
    """Ordered glyphs from least intense to most intense."""

    name: str
    glyphs: Tuple[str, ...]
    blank: str = ' '              # glyph treated as whitespace when trimming rows

    def __post_init__(self):
        if len(self.glyphs) < 2:
            raise ValueError(f"Ramp {self.name!r} needs at least two glyphs")

    def __len__(self) -> int:
        return len(self.glyphs)

    def __getitem__(self, index: int) -> str:
        return self.glyphs[index]

    @property
    def divider(self) -> int:
        """Width of one intensity bucket."""
        return 255 // (len(self.glyphs) - 1)

    def reversed(self) -> 'GlyphRamp':
        return GlyphRamp(f"{self.name}_reversed", self.glyphs[::-1], self.blank)

    def index_of(self, value: int) -> int:
        return min(int(value) // self.divider, len(self.glyphs) - 1)

    def indices(self, values: np.ndarray) -> np.ndarray:
        """Vectorised :meth:`index_of` over an integer array."""
        values = np.asarray(values, dtype=np.int64)
        return np.minimum(values // self.divider, len(self.glyphs) - 1)

    def lookup(self, values: np.ndarray) -> np.ndarray:
        """Map an integer array of samples to an object array of glyphs."""
        table = np.array(self.glyphs, dtype=object)
        return table[self.indices(values)]


@dataclass(frozen=True)
class EdgeGlyphSet:
    """Glyphs drawn for each gradient direction."""

    name: str
    horizontal: str
    vertical: str
    diagonal1: str
    diagonal2: str
    empty: str

    def as_table(self) -> Tuple[str, ...]:
        """Glyphs ordered by :class:`~ascii_art_pipeline.constants.EdgeDirection` value."""
        return (self.empty, self.horizontal, self.diagonal1, self.vertical, self.diagonal2)


BRAILLE_BLANK = chr(BRAILLE_BASE)


class CharacterSet:
    """Predefined ramps and edge glyph sets."""

    # Standard ASCII ramp (dark to light)
    STANDARD = GlyphRamp('standard', tuple(' _.,-=+:;cba!?0123456789$W#@Ñ'))

    # Braille ramps, from no dots raised to all eight
    BRAILLE = GlyphRamp(
        'braille',
        ('⠀', '⠁', '⠃', '⠇', '⠏', '⠟', '⠿', '⡿', '⣿'),
        blank=BRAILLE_BLANK,
    )
    BRAILLE_BINARY = GlyphRamp('braille_binary', ('⠀', '⣿'), blank=BRAILLE_BLANK)

    EDGES = EdgeGlyphSet(
        'edges',
        horizontal='─',
        vertical='│',
        diagonal1='/',
        diagonal2='\\',
        empty=' ',
    )
    BRAILLE_EDGES = EdgeGlyphSet(
        'braille_edges',
        horizontal=braille_from_dots([(0, 1), (1, 1)]),
        vertical=braille_from_dots([(0, 0), (0, 1), (0, 2), (0, 3)]),
        diagonal1=braille_from_dots([(0, 2), (1, 1)]),
        diagonal2=braille_from_dots([(0, 1), (1, 2)]),
        empty=BRAILLE_BLANK,
    )

    @classmethod
    def ramp_for(cls, charset: CharSet, reverse: bool = False,
                 braille_levels: int = 9) -> GlyphRamp:
        """Intensity ramp for a glyph family."""
        if charset == CharSet.BRAILLE:
            ramp = cls.BRAILLE_BINARY if braille_levels == 2 else cls.BRAILLE
        else:
            ramp = cls.STANDARD
        return ramp.reversed() if reverse else ramp

    @classmethod
    def edges_for(cls, charset: CharSet) -> EdgeGlyphSet:
        return cls.BRAILLE_EDGES if charset == CharSet.BRAILLE else cls.EDGES
