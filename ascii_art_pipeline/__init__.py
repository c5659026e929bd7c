"""
Image to ASCII/Braille Art Pipeline
===================================
Converts raster images to glyph art.

Features:
- Grayscale ramp mapping with contrast remapping
- Braille dot ramps
- True-color glyphs and luminance-shaded colored glyphs
- Edge-direction rendering from Sobel gradients over a Gaussian-blurred image
- Cached intermediate buffers re-derived when settings change

Basic usage::

    >>> from ascii_art_pipeline import image_to_ascii
    >>> print(image_to_ascii('photo.png', output_width=80).text)
"""

from ascii_art_pipeline.charsets import CharacterSet, EdgeGlyphSet, GlyphRamp
from ascii_art_pipeline.config import PipelineConfig
from ascii_art_pipeline.constants import CharSet, EdgeDirection, RenderMode
from ascii_art_pipeline.exceptions import (
    ConfigError, LoadError, PipelineError, StateError, ValidationError,
)
from ascii_art_pipeline.imaging import SourceImage
from ascii_art_pipeline.pipeline import AsciiPipeline, image_to_ascii
from ascii_art_pipeline.renderers import RenderResult

__version__ = '0.1.0'

__all__ = [
    'AsciiPipeline', 'image_to_ascii',
    'PipelineConfig', 'RenderMode', 'CharSet', 'EdgeDirection',
    'CharacterSet', 'GlyphRamp', 'EdgeGlyphSet',
    'SourceImage', 'RenderResult',
    'PipelineError', 'LoadError', 'ValidationError', 'ConfigError', 'StateError',
]
