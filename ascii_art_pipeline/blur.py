#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline - Gaussian Blur
===================================================
Separable Gaussian smoothing of RGBA buffers, used before gradient estimation.
"""

import numpy as np
from scipy import ndimage

from ascii_art_pipeline.constants import DEFAULT_BLUR_RADIUS


def gaussian_kernel(radius: int = DEFAULT_BLUR_RADIUS) -> np.ndarray:
    """
    Normalised 1D Gaussian kernel of length ``2 * radius + 1``.

    Weights are ``exp(-i^2 / (2 sigma^2))`` for i in [-radius, radius] with
    ``sigma = radius / 3``.
    """
    if radius < 1:
        raise ValueError(f"radius must be >= 1, got {radius}")
    sigma = radius / 3
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    kernel = np.exp(-(offsets ** 2) / (2 * sigma * sigma))
    return kernel / kernel.sum()


def _pass(arr: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    # mode='nearest' clamps sample coordinates to the image (edge replication)
    out = ndimage.correlate1d(arr.astype(np.float64), kernel, axis=axis, mode='nearest')
    out /= kernel.sum()
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def gaussian_blur(pixels: np.ndarray, radius: int = DEFAULT_BLUR_RADIUS) -> np.ndarray:
    """
    Blur an RGBA buffer with a horizontal pass followed by a vertical pass.

    Args:
        pixels: uint8 array of shape (height, width, channels)
        radius: Kernel radius

    Returns:
        uint8 array of the same shape; each pass is rounded back to bytes
    """
    if pixels.ndim != 3:
        raise ValueError(f"expected (height, width, channels) array, got shape {pixels.shape}")
    kernel = gaussian_kernel(radius)
    horizontal = _pass(pixels, kernel, axis=1)
    return _pass(horizontal, kernel, axis=0)
