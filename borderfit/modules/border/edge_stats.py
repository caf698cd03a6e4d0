# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Edge Strip Statistics
Summarises the colour of thin strips along each side of an image so the
classifier can judge border uniformity without scanning the whole frame.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from borderfit.utils.image_utils import channel_means_rgb


@dataclass(frozen=True)
class EdgeStats:
    """Mean RGB of one edge strip plus derived brightness / variance."""
    red: float
    green: float
    blue: float

    @property
    def brightness(self) -> float:
        return (self.red + self.green + self.blue) / 3

    @property
    def color_variance(self) -> float:
        """Largest single-channel deviation from brightness."""
        b = self.brightness
        return max(abs(self.red - b), abs(self.green - b), abs(self.blue - b))


def sample_edge_strips(img: np.ndarray, width: int) -> dict[str, np.ndarray]:
    """
    Return full-length strips of `width` pixels along each side.
    Strips are clamped to the image size, so tiny images still yield
    non-empty strips (overlapping ones, in that case).
    """
    h, w = img.shape[:2]
    sw = max(1, min(width, w))
    sh = max(1, min(width, h))
    return {
        "top": img[:sh, :],
        "bottom": img[h - sh:, :],
        "left": img[:, :sw],
        "right": img[:, w - sw:],
    }


def compute_edge_stats(strip: np.ndarray) -> EdgeStats:
    red, green, blue = channel_means_rgb(strip)
    return EdgeStats(red=red, green=green, blue=blue)


def edge_stats(img: np.ndarray, width: int) -> dict[str, EdgeStats]:
    """EdgeStats for the top, bottom, left and right strips of img."""
    return {
        name: compute_edge_stats(strip)
        for name, strip in sample_edge_strips(img, width).items()
    }
