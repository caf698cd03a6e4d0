# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Background Trimmer
Crops away the outer frame that matches the top-left pixel colour.

A pixel counts as background when every channel (alpha included) is
within `threshold` of the reference pixel. The crop is the bounding box
of all non-background pixels, so a higher threshold trims more
aggressively.
"""

from __future__ import annotations

import cv2
import numpy as np

from borderfit.core.errors import TrimCandidateError


def find_trim_box(img: np.ndarray, threshold: int) -> tuple[int, int, int, int]:
    """
    Return (x, y, w, h) of the content left after trimming at threshold.
    Raises TrimCandidateError if the image is empty or entirely background.
    """
    if img.size == 0 or img.shape[0] == 0 or img.shape[1] == 0:
        raise TrimCandidateError("Cannot trim an empty image.")

    reference = np.empty_like(img)
    reference[:] = img[0, 0]
    diff = cv2.absdiff(img, reference)
    if diff.ndim == 3:
        diff = diff.max(axis=2)
    content = diff > threshold

    rows = np.flatnonzero(content.any(axis=1))
    cols = np.flatnonzero(content.any(axis=0))
    if rows.size == 0 or cols.size == 0:
        raise TrimCandidateError(
            f"Image is uniform at threshold {threshold}; nothing left after trim."
        )

    x, y = int(cols[0]), int(rows[0])
    return x, y, int(cols[-1]) - x + 1, int(rows[-1]) - y + 1


def trim_image(img: np.ndarray, threshold: int) -> np.ndarray:
    """Crop img to its non-background bounding box. Always returns a copy."""
    try:
        x, y, w, h = find_trim_box(img, threshold)
    except (cv2.error, ValueError, IndexError) as exc:
        raise TrimCandidateError(f"Trim at threshold {threshold} failed: {exc}") from exc
    return img[y:y + h, x:x + w].copy()


def size_reduction(original_shape: tuple, trimmed_shape: tuple) -> float:
    """Relative reduction (Δw + Δh) / (w + h) between two image shapes."""
    oh, ow = original_shape[:2]
    th, tw = trimmed_shape[:2]
    if ow + oh == 0:
        return 0.0
    return ((ow - tw) + (oh - th)) / (ow + oh)
