#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline - Configuration
===================================================
Pipeline settings and their per-field update rules.

Every setter validates first and only then mutates, so a rejected update
leaves the configuration untouched. Setters return ``True`` when the change
affects a cached buffer; ``SETTERS`` names which one.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from ascii_art_pipeline.constants import (
    CharSet, RenderMode,
    DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_BLUR_RADIUS, DEFAULT_EDGE_THRESHOLD,
    MIN_DIMENSION, MAX_DIMENSION, MAX_BLUR_RADIUS, VERTICAL_COMPRESSION,
)
from ascii_art_pipeline.exceptions import ConfigError, ValidationError


def height_for_width(width: int, aspect_ratio: float) -> int:
    """Output height keeping the source aspect ratio at a given width."""
    return math.floor(width / aspect_ratio / VERTICAL_COMPRESSION)


def width_for_height(height: int, aspect_ratio: float) -> int:
    """Output width keeping the source aspect ratio at a given height."""
    return math.floor(height * aspect_ratio * VERTICAL_COMPRESSION)


def _check_dimension(name: str, value: int) -> None:
    if not MIN_DIMENSION <= value <= MAX_DIMENSION:
        raise ValidationError(
            f"{name} must be between {MIN_DIMENSION} and {MAX_DIMENSION}, got {value}"
        )


def _as_int(name: str, value) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be an integer, got {value!r}") from e
    if isinstance(value, float) and number != value:
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    return number


def _as_float(name: str, value) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number, got {value!r}") from e
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{name} must be finite, got {value!r}")
    return number


def _as_bool(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ('1', 'true', 'yes', 'on'):
            return True
        if lowered in ('0', 'false', 'no', 'off'):
            return False
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValidationError(f"{name} must be a boolean, got {value!r}")


@dataclass
class PipelineConfig:
    """Configuration for the image to glyph pipeline."""

    # Output grid, in glyph cells
    output_width: int = DEFAULT_WIDTH
    output_height: int = DEFAULT_HEIGHT

    # Intensity mapping
    contrast_factor: float = 1.0             # 1.0 leaves luminance unchanged
    reverse_intensity: bool = False          # Use the reversed glyph ramp
    maintain_aspect_ratio: bool = False      # Derive one dimension from the other

    # Rendering
    mode: RenderMode = RenderMode.GRAYSCALE
    charset: CharSet = CharSet.ASCII
    braille_levels: int = 9                  # 9-level ramp or 2-level on/off ramp

    # Edge detection
    edge_threshold: float = DEFAULT_EDGE_THRESHOLD   # Gradient magnitude below this is flat
    blur_radius: int = DEFAULT_BLUR_RADIUS           # Gaussian radius, sigma = radius / 3

    # Dimension the other one is derived from when the aspect ratio is kept
    anchor: str = field(default='width', init=False, repr=False, compare=False)

    def __post_init__(self):
        # Run every field through its setter so construction enforces the same ranges
        self.set_output_width(self.output_width)
        self.set_output_height(self.output_height)
        self.anchor = 'width'
        self.maintain_aspect_ratio = _as_bool('maintain_aspect_ratio', self.maintain_aspect_ratio)
        self.set_contrast_factor(self.contrast_factor)
        self.set_reverse_intensity(self.reverse_intensity)
        self.set_mode(self.mode)
        self.set_charset(self.charset)
        self.set_braille_levels(self.braille_levels)
        self.set_edge_threshold(self.edge_threshold)
        self.set_blur_radius(self.blur_radius)

    def copy(self) -> 'PipelineConfig':
        clone = replace(self)
        clone.anchor = self.anchor
        return clone

    @property
    def size(self) -> Tuple[int, int]:
        return self.output_width, self.output_height

    # -------------------------------------------------------------------------
    # Dimensions
    # -------------------------------------------------------------------------

    def set_output_width(self, value, aspect_ratio: Optional[float] = None) -> bool:
        width = _as_int('output_width', value)
        _check_dimension('output_width', width)
        height = self.output_height
        if self.maintain_aspect_ratio and aspect_ratio:
            height = height_for_width(width, aspect_ratio)
            _check_dimension('output_height', height)
        self.anchor = 'width'
        return self._commit_size(width, height)

    def set_output_height(self, value, aspect_ratio: Optional[float] = None) -> bool:
        height = _as_int('output_height', value)
        _check_dimension('output_height', height)
        width = self.output_width
        if self.maintain_aspect_ratio and aspect_ratio:
            width = width_for_height(height, aspect_ratio)
            _check_dimension('output_width', width)
        self.anchor = 'height'
        return self._commit_size(width, height)

    def set_maintain_aspect_ratio(self, value, aspect_ratio: Optional[float] = None) -> bool:
        enabled = _as_bool('maintain_aspect_ratio', value)
        size = self.size
        if enabled and aspect_ratio:
            size = self._derived_size(aspect_ratio)
        self.maintain_aspect_ratio = enabled
        return self._commit_size(*size)

    def apply_aspect_ratio(self, aspect_ratio: float) -> bool:
        """Re-derive the free dimension after a new source image is loaded."""
        if not self.maintain_aspect_ratio:
            return False
        return self._commit_size(*self._derived_size(aspect_ratio))

    def _derived_size(self, aspect_ratio: float) -> Tuple[int, int]:
        """Size keeping the aspect ratio, derived from the last dimension set."""
        if self.anchor == 'height':
            width = width_for_height(self.output_height, aspect_ratio)
            _check_dimension('output_width', width)
            return width, self.output_height
        height = height_for_width(self.output_width, aspect_ratio)
        _check_dimension('output_height', height)
        return self.output_width, height

    def _commit_size(self, width: int, height: int) -> bool:
        changed = (width, height) != (self.output_width, self.output_height)
        self.output_width = width
        self.output_height = height
        return changed

    # -------------------------------------------------------------------------
    # Intensity and rendering
    # -------------------------------------------------------------------------

    def set_contrast_factor(self, value) -> bool:
        factor = _as_float('contrast_factor', value)
        if factor < 0:
            raise ValidationError(f"contrast_factor must be >= 0, got {factor}")
        self.contrast_factor = factor
        return False

    def set_reverse_intensity(self, value) -> bool:
        self.reverse_intensity = _as_bool('reverse_intensity', value)
        return False

    def set_mode(self, value) -> bool:
        try:
            self.mode = RenderMode.parse(value)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return False

    def set_charset(self, value) -> bool:
        try:
            self.charset = CharSet.parse(value)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return False

    def set_braille_levels(self, value) -> bool:
        levels = _as_int('braille_levels', value)
        if levels not in (2, 9):
            raise ValidationError(f"braille_levels must be 2 or 9, got {levels}")
        self.braille_levels = levels
        return False

    def set_edge_threshold(self, value) -> bool:
        threshold = _as_float('edge_threshold', value)
        if threshold < 0:
            raise ValidationError(f"edge_threshold must be >= 0, got {threshold}")
        self.edge_threshold = threshold
        return False

    def set_blur_radius(self, value) -> bool:
        radius = _as_int('blur_radius', value)
        if not 1 <= radius <= MAX_BLUR_RADIUS:
            raise ValidationError(f"blur_radius must be between 1 and {MAX_BLUR_RADIUS}, got {radius}")
        changed = radius != self.blur_radius
        self.blur_radius = radius
        return changed


# Canonical key -> (setter name, needs source aspect ratio, buffer invalidated on change)
SETTERS = {
    'output_width': ('set_output_width', True, 'pixels'),
    'output_height': ('set_output_height', True, 'pixels'),
    'maintain_aspect_ratio': ('set_maintain_aspect_ratio', True, 'pixels'),
    'contrast_factor': ('set_contrast_factor', False, None),
    'reverse_intensity': ('set_reverse_intensity', False, None),
    'mode': ('set_mode', False, None),
    'charset': ('set_charset', False, None),
    'braille_levels': ('set_braille_levels', False, None),
    'edge_threshold': ('set_edge_threshold', False, None),
    'blur_radius': ('set_blur_radius', False, 'blurred_pixels'),
}

KEY_ALIASES = {
    'outputWidth': 'output_width',
    'outputHeight': 'output_height',
    'width': 'output_width',
    'height': 'output_height',
    'contrastFactor': 'contrast_factor',
    'contrast': 'contrast_factor',
    'reverseIntensity': 'reverse_intensity',
    'maintainAspectRatio': 'maintain_aspect_ratio',
    'charSet': 'charset',
    'brailleLevels': 'braille_levels',
    'edgeThreshold': 'edge_threshold',
    'blurRadius': 'blur_radius',
}


def canonical_key(key: str) -> str:
    """Resolve a camelCase or short alias to the dataclass field name."""
    key = KEY_ALIASES.get(key, key)
    if key not in SETTERS:
        raise ConfigError(f"Invalid setting: {key}")
    return key
