#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline - Decoding and Resampling
=============================================================
Pillow is the decoding collaborator: it turns a file, bytes or an existing
image into an RGBA image, which is then resampled onto the output grid.
"""

import io
import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ascii_art_pipeline.exceptions import LoadError

logger = logging.getLogger(__name__)

ImageSource = Union[str, os.PathLike, bytes, bytearray, BinaryIO, Image.Image]


@dataclass
class SourceImage:
    """A decoded image owned by one pipeline."""
    image: Image.Image          # RGBA
    width: int
    height: int
    origin: str = '<image>'

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def close(self) -> None:
        self.image.close()


def _describe(source: ImageSource) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    if isinstance(source, (bytes, bytearray)):
        return f'<{len(source)} bytes>'
    if isinstance(source, Image.Image):
        return f'<{source.mode} image {source.width}x{source.height}>'
    return getattr(source, 'name', '<stream>')


def decode_image(source: ImageSource) -> SourceImage:
    """
    Decode an image source into an RGBA :class:`SourceImage`.

    Args:
        source: Path, raw bytes, binary file object or Pillow image

    Returns:
        SourceImage holding an RGBA copy of the image

    Raises:
        LoadError: if no source is given or decoding fails
    """
    if source is None or (isinstance(source, (bytes, bytearray, str)) and not source):
        raise LoadError('No file provided')

    origin = _describe(source)
    try:
        if isinstance(source, Image.Image):
            image = source.convert('RGBA')
        else:
            if isinstance(source, (bytes, bytearray)):
                source = io.BytesIO(source)
            with Image.open(source) as opened:
                # Force the lazy decoder so errors surface here
                opened.load()
                image = opened.convert('RGBA')
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as e:
        raise LoadError(f'Failed to load image {origin}: {e}') from e

    if image.width < 1 or image.height < 1:
        raise LoadError(f'Image {origin} has no pixels')

    logger.debug('Decoded %s (%dx%d)', origin, image.width, image.height)
    return SourceImage(image=image, width=image.width, height=image.height, origin=origin)


def resample(source: SourceImage, width: int, height: int) -> np.ndarray:
    """
    Resample the source onto a width x height grid of RGBA samples.

    Returns:
        uint8 array of shape (height, width, 4)
    """
    if source is None:
        raise LoadError('No image data available')
    resized = source.image.resize((width, height), Image.Resampling.BILINEAR)
    pixels = np.array(resized, dtype=np.uint8)
    logger.debug('Resampled %s to %dx%d', source.origin, width, height)
    return pixels
