"""Synthetic images for the test suite."""

import io

import numpy as np
from PIL import Image


def solid_image(width, height, rgb, alpha=255):
    return Image.new('RGBA', (width, height), tuple(rgb) + (alpha,))


def image_from_levels(levels):
    """Opaque gray RGBA image whose channels all equal the given 2D levels."""
    arr = np.asarray(levels, dtype=np.uint8)
    alpha = np.full(arr.shape, 255, dtype=np.uint8)
    return Image.fromarray(np.stack([arr, arr, arr, alpha], axis=-1))


def step_levels(size, axis, low=0, high=255):
    """Square level map whose second half along ``axis`` is bright."""
    levels = np.full((size, size), low, dtype=np.uint8)
    if axis == 1:
        levels[:, size // 2:] = high
    else:
        levels[size // 2:, :] = high
    return levels


def png_bytes(image):
    buffer = io.BytesIO()
    image.save(buffer, format='PNG')
    return buffer.getvalue()
