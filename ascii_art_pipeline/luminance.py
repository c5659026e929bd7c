"""Luminance extraction and contrast remapping."""

import numpy as np

from ascii_art_pipeline.constants import LUMINANCE_WEIGHTS, LUMINANCE_SCALE


def luminance(pixels: np.ndarray) -> np.ndarray:
    """
    Reduce RGBA samples to perceptual luminance.

    Computes ``floor(0.299 r + 0.587 g + 0.114 b)`` per pixel with integer
    weights, ignoring alpha. Accepts an array whose last axis holds the four
    channels (or a flat buffer whose length is divisible by 4) and returns a
    uint8 array with the channel axis removed.
    """
    arr = np.asarray(pixels)
    if arr.ndim == 1:
        if arr.size % 4:
            raise ValueError(f"RGBA buffer length must be divisible by 4, got {arr.size}")
        arr = arr.reshape(-1, 4)
    rgb = arr[..., :3].astype(np.int64)
    wr, wg, wb = LUMINANCE_WEIGHTS
    lum = (wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]) // LUMINANCE_SCALE
    return lum.astype(np.uint8)


def apply_contrast(levels: np.ndarray, factor: float) -> np.ndarray:
    """
    Stretch luminance about the midpoint.

    ``floor(((v / 255 - 0.5) * factor + 0.5) * 255)`` evaluated as
    ``floor((v - 127.5) * factor + 127.5)``, then saturated to [0, 255].
    """
    arr = np.asarray(levels, dtype=np.float64)
    stretched = np.floor((arr - 127.5) * factor + 127.5)
    return np.clip(stretched, 0, 255).astype(np.uint8)
