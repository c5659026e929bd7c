#!/usr/bin/env python3
"""
Image to ASCII/Braille Art Pipeline - Edge Detection
====================================================
This module contains the EdgeProcessor class for estimating gradients and
classifying them into directional bins.
"""

from dataclasses import dataclass

import numpy as np
from scipy import ndimage

from ascii_art_pipeline.constants import DEFAULT_EDGE_THRESHOLD, EdgeDirection


@dataclass
class EdgeMap:
    """Gradient estimate over the interior of a luminance buffer."""
    magnitude: np.ndarray       # (height - 2, width - 2) float
    angle: np.ndarray           # degrees in [0, 360)
    directions: np.ndarray      # EdgeDirection values, uint8

    @property
    def shape(self):
        return self.directions.shape


class EdgeProcessor:
    """Sobel gradient estimation and direction classification."""

    # Sobel kernels, normalised by 8
    SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64) / 8
    SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.float64) / 8

    @classmethod
    def sobel(cls, levels: np.ndarray):
        """
        Apply the Sobel operator to the interior pixels of a luminance buffer.

        Args:
            levels: 2D luminance array

        Returns:
            Tuple of (gx, gy) arrays covering x in [1, w-2] and y in [1, h-2]
        """
        arr = np.asarray(levels, dtype=np.float64)
        if arr.ndim != 2:
            raise ValueError(f"expected 2D luminance array, got shape {arr.shape}")
        if arr.shape[0] < 3 or arr.shape[1] < 3:
            empty = np.zeros((max(arr.shape[0] - 2, 0), max(arr.shape[1] - 2, 0)))
            return empty, empty.copy()

        gx = ndimage.correlate(arr, cls.SOBEL_X)[1:-1, 1:-1]
        gy = ndimage.correlate(arr, cls.SOBEL_Y)[1:-1, 1:-1]
        return gx, gy

    @staticmethod
    def classify(magnitude: np.ndarray, angle: np.ndarray,
                 threshold: float = DEFAULT_EDGE_THRESHOLD) -> np.ndarray:
        """
        Bin gradients into directions.

        Sectors are 45 degrees wide, centred on 0/180 (horizontal), 45/225
        (diagonal1), 90/270 (vertical) and 135/315 (diagonal2), with half-open
        boundaries at 22.5 + 45k degrees. Magnitudes below the threshold are flat.

        Bins name the gradient direction, not the edge line: a boundary between
        a dark top and a bright bottom has a vertical gradient and is VERTICAL.
        """
        sector = (np.floor(np.mod(angle + 22.5, 180.0) / 45.0).astype(np.int64)) % 4
        table = np.array([
            EdgeDirection.HORIZONTAL,
            EdgeDirection.DIAGONAL1,
            EdgeDirection.VERTICAL,
            EdgeDirection.DIAGONAL2,
        ], dtype=np.uint8)
        directions = table[sector]
        directions[magnitude < threshold] = EdgeDirection.FLAT
        return directions

    @classmethod
    def detect(cls, levels: np.ndarray,
               threshold: float = DEFAULT_EDGE_THRESHOLD) -> EdgeMap:
        """Estimate and classify gradients of a (blurred) luminance buffer."""
        gx, gy = cls.sobel(levels)
        magnitude = np.sqrt(gx ** 2 + gy ** 2)
        angle = np.mod(np.degrees(np.arctan2(gy, gx)), 360.0)
        directions = cls.classify(magnitude, angle, threshold)
        return EdgeMap(magnitude=magnitude, angle=angle, directions=directions)

    @staticmethod
    def get_edge_direction(magnitude: float, angle: float,
                           threshold: float = DEFAULT_EDGE_THRESHOLD) -> EdgeDirection:
        """Classify a single gradient; angle in degrees."""
        if magnitude < threshold:
            return EdgeDirection.FLAT
        deg = angle % 360
        if deg >= 337.5 or deg < 22.5 or 157.5 <= deg < 202.5:
            return EdgeDirection.HORIZONTAL
        if 22.5 <= deg < 67.5 or 202.5 <= deg < 247.5:
            return EdgeDirection.DIAGONAL1
        if 67.5 <= deg < 112.5 or 247.5 <= deg < 292.5:
            return EdgeDirection.VERTICAL
        return EdgeDirection.DIAGONAL2
