# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Output Geometry
Fits a trimmed image into the configured ResizePolicy.

  cover     — centre-crop the source to the target aspect ratio, then
              scale to the target. Small images are upscaled.
  contain   — scale until the image fits, centre it on a background canvas.
              The canvas is BGRA when the image keeps alpha or the
              background is not opaque.
  original  — no resize.
"""

import cv2
import numpy as np

from borderfit.models.options import Background, ResizeMode, ResizePolicy
from borderfit.utils.image_utils import has_alpha


def _interpolation(scale: float) -> int:
    return cv2.INTER_AREA if scale < 1.0 else cv2.INTER_CUBIC


def resize_cover(img: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Centre-crop the source to the target aspect ratio, then resize straight
    to (width, height). Peak memory stays at one source plus one target.
    """
    h, w = img.shape[:2]
    crop_w = max(1, min(w, int(round(h * width / height))))
    crop_h = max(1, min(h, int(round(w * height / width))))
    x = (w - crop_w) // 2
    y = (h - crop_h) // 2
    cropped = img[y:y + crop_h, x:x + crop_w]
    scale = width / crop_w
    return cv2.resize(cropped, (width, height), interpolation=_interpolation(scale))


def resize_contain(
    img: np.ndarray,
    width: int,
    height: int,
    background: Background,
) -> np.ndarray:
    h, w = img.shape[:2]
    scale = min(width / w, height / h)
    new_w = min(width, max(1, int(round(w * scale))))
    new_h = min(height, max(1, int(round(h * scale))))
    resized = cv2.resize(img, (new_w, new_h), interpolation=_interpolation(scale))

    if has_alpha(resized) or not background.is_opaque:
        if not has_alpha(resized):
            resized = cv2.cvtColor(resized, cv2.COLOR_BGR2BGRA)
        canvas = np.empty((height, width, 4), dtype=np.uint8)
        canvas[:] = background.as_bgra()
    else:
        canvas = np.empty((height, width, 3), dtype=np.uint8)
        canvas[:] = background.as_bgra()[:3]

    x = (width - new_w) // 2
    y = (height - new_h) // 2
    canvas[y:y + new_h, x:x + new_w] = resized
    return canvas


def apply_resize_policy(
    img: np.ndarray,
    policy: ResizePolicy,
    background: Background,
) -> np.ndarray:
    if policy.mode == ResizeMode.COVER:
        return resize_cover(img, policy.width, policy.height)
    if policy.mode == ResizeMode.CONTAIN:
        return resize_contain(img, policy.width, policy.height, background)
    return img
