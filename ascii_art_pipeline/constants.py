#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline - Constants
===============================================
Enums and fixed numeric constants shared by the pipeline stages.
"""

from enum import Enum, IntEnum
from typing import List, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class RenderMode(Enum):
    """Rendering mode for ASCII art generation."""
    GRAYSCALE = 'grayscale'
    COLOR = 'color'
    COLOR_BRIGHTNESS_MAP = 'colorBrightnessMap'
    GRAYSCALE_BRAILLE = 'grayscaleBraille'
    EDGE_OUTLINE = 'edgeDetectionOutline'
    EDGE_FILL = 'edgeDetectionFill'
    EDGE_BRAILLE = 'edgeDetectionBraille'

    @classmethod
    def parse(cls, value) -> 'RenderMode':
        """Accept an enum member, its value ('edgeDetectionFill') or its name ('edge_fill')."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value == member.value or value.upper() == member.name:
                    return member
        raise ValueError(f"Unknown render mode: {value!r}")


class CharSet(Enum):
    """Glyph family used by ramp and edge renderers."""
    ASCII = 'ascii'
    BRAILLE = 'braille'

    @classmethod
    def parse(cls, value) -> 'CharSet':
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value.lower() == member.value:
                    return member
        raise ValueError(f"Unknown character set: {value!r}")


class EdgeDirection(IntEnum):
    """Gradient classification of a single interior pixel."""
    FLAT = 0
    HORIZONTAL = 1
    DIAGONAL1 = 2       # gradient around 45 / 225 degrees
    VERTICAL = 3
    DIAGONAL2 = 4       # gradient around 135 / 315 degrees


# =============================================================================
# NUMERIC CONSTANTS
# =============================================================================

MIN_DIMENSION = 1
MAX_DIMENSION = 1000

# Glyph cells are roughly twice as tall as they are wide
VERTICAL_COMPRESSION = 2

DEFAULT_WIDTH = 150
DEFAULT_HEIGHT = 150

DEFAULT_BLUR_RADIUS = 2
MAX_BLUR_RADIUS = 10
DEFAULT_EDGE_THRESHOLD = 50.0

# Luminance weights scaled to integers (Rec. 601)
LUMINANCE_WEIGHTS: Tuple[int, int, int] = (299, 587, 114)
LUMINANCE_SCALE = 1000

# Braille pattern base and dot positions (column, row, bit)
BRAILLE_BASE = 0x2800
BRAILLE_DOTS: List[Tuple[int, int, int]] = [
    (0, 0, 0x01), (0, 1, 0x02), (0, 2, 0x04), (0, 3, 0x40),
    (1, 0, 0x08), (1, 1, 0x10), (1, 2, 0x20), (1, 3, 0x80)
]
