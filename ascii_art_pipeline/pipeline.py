#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline
===================================
The pipeline owns the configuration, the loaded source image and every buffer
derived from it::

    SourceImage -> pixels -> luminance
                          -> blurred_pixels -> blurred_luminance

Derived buffers are computed on first read and cached until an upstream
change marks them dirty. Invalidation is transitive, so a resolution change
re-derives everything while a blur radius change only re-derives the blurred
branch.
"""

import asyncio
import logging
from collections import Counter
from typing import Callable, Dict, Optional

import numpy as np

from ascii_art_pipeline.blur import gaussian_blur
from ascii_art_pipeline.config import PipelineConfig, SETTERS, canonical_key
from ascii_art_pipeline.constants import CharSet, RenderMode
from ascii_art_pipeline.edge_detection import EdgeProcessor
from ascii_art_pipeline.exceptions import ConfigError, LoadError, StateError, ValidationError
from ascii_art_pipeline.imaging import ImageSource, SourceImage, decode_image, resample
from ascii_art_pipeline.luminance import apply_contrast, luminance
from ascii_art_pipeline.renderers import (
    EdgeVariant, GrayscaleVariant, RenderResult, ShadedColorVariant, TrueColorVariant,
    render_edges, render_grayscale, render_shaded_color, render_true_color, resolve_variant,
)

logger = logging.getLogger(__name__)


# =============================================================================
# BUFFER CACHE
# =============================================================================

class BufferCache:
    """Lazily computed buffers with explicit dirty flags."""

    DEPENDENTS = {
        'pixels': ('luminance', 'blurred_pixels'),
        'luminance': (),
        'blurred_pixels': ('blurred_luminance',),
        'blurred_luminance': (),
    }

    def __init__(self):
        self._values: Dict[str, np.ndarray] = {}
        self._dirty = set(self.DEPENDENTS)
        self.computations = Counter()

    def is_dirty(self, name: str) -> bool:
        return name in self._dirty

    def get(self, name: str, compute: Callable[[], np.ndarray]) -> np.ndarray:
        if name in self._dirty:
            self._values[name] = compute()
            self._dirty.discard(name)
            self.computations[name] += 1
        return self._values[name]

    def invalidate(self, name: str) -> None:
        """Mark a buffer and everything derived from it dirty."""
        pending = [name]
        while pending:
            current = pending.pop()
            self._dirty.add(current)
            self._values.pop(current, None)
            pending.extend(self.DEPENDENTS[current])
        logger.debug('Invalidated %s and dependents', name)


# =============================================================================
# PIPELINE
# =============================================================================

class AsciiPipeline:
    """Converts one loaded image into glyph art under the current settings."""

    def __init__(self, config: Optional[PipelineConfig] = None,
                 decoder: Callable[[ImageSource], SourceImage] = decode_image):
        self._config = config.copy() if config else PipelineConfig()
        self._decoder = decoder
        self._source: Optional[SourceImage] = None
        self._cache = BufferCache()
        self._generation = 0
        self._loading = False

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def config(self) -> PipelineConfig:
        """A snapshot of the current settings."""
        return self._config.copy()

    @property
    def source(self) -> Optional[SourceImage]:
        return self._source

    @property
    def aspect_ratio(self) -> Optional[float]:
        return self._source.aspect_ratio if self._source else None

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def cache(self) -> BufferCache:
        return self._cache

    def set_config(self, key: str, value) -> None:
        """
        Update one setting.

        Raises:
            ConfigError: unknown key or enum value
            ValidationError: value out of range
        """
        key = canonical_key(key)
        method_name, needs_aspect, invalidates = SETTERS[key]
        setter = getattr(self._config, method_name)
        changed = setter(value, self.aspect_ratio) if needs_aspect else setter(value)
        logger.debug('Set %s=%r (size now %dx%d)', key, value, *self._config.size)
        if changed and invalidates:
            self._cache.invalidate(invalidates)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load_image(self, source: ImageSource) -> SourceImage:
        """
        Decode a new source image and make it current.

        Decoding runs in the default executor. If another load starts before
        this one finishes, this result is closed and discarded. A failed load
        leaves the previous image in place.

        Raises:
            LoadError: no source, decode failure, or superseded by a newer load
        """
        if source is None:
            raise LoadError('No file provided')

        self._generation += 1
        generation = self._generation
        self._loading = True
        logger.debug('Load %d started', generation)

        loop = asyncio.get_running_loop()
        try:
            decoded = await loop.run_in_executor(None, self._decoder, source)
            if generation != self._generation:
                decoded.close()
                logger.debug('Load %d superseded by load %d', generation, self._generation)
                raise LoadError('Image load was superseded by a newer load')
            try:
                self._config.apply_aspect_ratio(decoded.aspect_ratio)
            except ValidationError as e:
                decoded.close()
                raise LoadError(f'Cannot keep aspect ratio of {decoded.origin}: {e}') from e

            previous, self._source = self._source, decoded
            self._cache.invalidate('pixels')
            if previous is not None:
                previous.close()
        finally:
            if generation == self._generation:
                self._loading = False

        logger.info('Loaded %s (%dx%d)', decoded.origin, decoded.width, decoded.height)
        return decoded

    # -------------------------------------------------------------------------
    # Derived buffers
    # -------------------------------------------------------------------------

    def _require_source(self) -> SourceImage:
        if self._loading:
            raise StateError('An image load is in progress')
        if self._source is None:
            raise StateError('No image loaded')
        return self._source

    @property
    def pixel_data(self) -> np.ndarray:
        source = self._require_source()
        return self._cache.get(
            'pixels', lambda: resample(source, *self._config.size)
        )

    @property
    def luminance_data(self) -> np.ndarray:
        self._require_source()
        return self._cache.get('luminance', lambda: luminance(self.pixel_data))

    @property
    def blurred_pixel_data(self) -> np.ndarray:
        self._require_source()
        return self._cache.get(
            'blurred_pixels', lambda: gaussian_blur(self.pixel_data, self._config.blur_radius)
        )

    @property
    def blurred_luminance_data(self) -> np.ndarray:
        self._require_source()
        return self._cache.get('blurred_luminance', lambda: luminance(self.blurred_pixel_data))

    def contrasted_data(self) -> np.ndarray:
        return apply_contrast(self.luminance_data, self._config.contrast_factor)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, mode=None, charset=None) -> RenderResult:
        """
        Render the current image.

        Args:
            mode: RenderMode or its name; defaults to the configured mode
            charset: CharSet or its name; defaults to the configured charset

        Raises:
            ConfigError: unknown mode/charset or unsupported pairing
            StateError: no image loaded, or a load is in flight
        """
        try:
            mode = RenderMode.parse(self._config.mode if mode is None else mode)
            charset = CharSet.parse(self._config.charset if charset is None else charset)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        variant = resolve_variant(mode, charset, self._config.reverse_intensity,
                                  self._config.braille_levels)
        self._require_source()
        logger.debug('Rendering %s/%s at %dx%d', mode.value, charset.value, *self._config.size)

        if isinstance(variant, GrayscaleVariant):
            return render_grayscale(self.contrasted_data(), variant, mode)
        if isinstance(variant, TrueColorVariant):
            return render_true_color(self.pixel_data, variant, mode)
        if isinstance(variant, ShadedColorVariant):
            return render_shaded_color(self.pixel_data, self.luminance_data, variant, mode)
        if isinstance(variant, EdgeVariant):
            blurred = self.blurred_luminance_data
            edges = EdgeProcessor.detect(blurred, self._config.edge_threshold)
            return render_edges(edges, blurred, variant, mode)
        raise ConfigError(f"Unsupported render variant: {variant!r}")

    async def convert(self, source: ImageSource, mode=None, charset=None) -> RenderResult:
        """Load an image and render it."""
        await self.load_image(source)
        return self.render(mode, charset)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def image_to_ascii(source: ImageSource, mode='grayscale', charset='ascii',
                   **settings) -> RenderResult:
    """
    Convenience function to convert an image to glyph art.

    Not usable from inside a running event loop; await
    :meth:`AsciiPipeline.convert` there instead.

    Args:
        source: Path, bytes, file object or Pillow image
        mode: Render mode name
        charset: 'ascii' or 'braille'
        **settings: Any other setting accepted by :meth:`AsciiPipeline.set_config`

    Returns:
        RenderResult
    """
    pipeline = AsciiPipeline()
    for key, value in settings.items():
        pipeline.set_config(key, value)
    return asyncio.run(pipeline.convert(source, mode, charset))
