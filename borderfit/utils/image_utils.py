# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Image I/O and Conversion Utilities
Shared helpers used by the border classifier and the normalizer.
All internal processing uses BGR or BGRA uint8 numpy arrays (OpenCV
convention). Decoding goes through Pillow so palette and greyscale
transparency survive; encoding goes through OpenCV.
"""

import io

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from borderfit.core.errors import DecodeError

# Greyscale modes Pillow uses for 16-bit PNG / TIFF; convert("RGB") would clip them
_HIGH_BIT_MODES = frozenset({"I", "I;16", "I;16B", "I;16L", "I;16N"})


# ─── Decode / Encode ─────────────────────────────────────────────────────────

def _pil_has_alpha(pil_img: Image.Image) -> bool:
    return "A" in pil_img.getbands() or "transparency" in pil_img.info


def decode_image_bytes(data: bytes) -> np.ndarray:
    """
    Decode raw image bytes into a BGR (opaque) or BGRA (alpha) uint8 array.
    Raises DecodeError if the bytes are empty, truncated or not an image.
    """
    if not data:
        raise DecodeError("Input image is empty.")
    try:
        with Image.open(io.BytesIO(data)) as pil_img:
            pil_img.load()
            if pil_img.mode in _HIGH_BIT_MODES:
                return high_bit_to_bgr(pil_img)
            if _pil_has_alpha(pil_img):
                return pil_to_bgra(pil_img)
            return pil_to_bgr(pil_img)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as exc:
        raise DecodeError(f"Could not decode image: {exc}") from exc


def encode_png(img: np.ndarray) -> bytes:
    """Encode a BGR/BGRA numpy array to PNG bytes (lossless)."""
    success, buf = cv2.imencode(".png", img)
    if not success:
        raise RuntimeError("Failed to encode image to PNG bytes.")
    return buf.tobytes()


# ─── Channels ────────────────────────────────────────────────────────────────

def has_alpha(img: np.ndarray) -> bool:
    return img.ndim == 3 and img.shape[2] == 4


def channel_means_rgb(img: np.ndarray) -> tuple[float, float, float]:
    """Mean red, green, blue intensity of a BGR/BGRA region."""
    means = img[:, :, :3].reshape(-1, 3).mean(axis=0)
    return float(means[2]), float(means[1]), float(means[0])


def flatten_alpha(img: np.ndarray, bgr: tuple[int, int, int]) -> np.ndarray:
    """
    Composite a BGRA image onto a solid BGR colour and drop the alpha channel.
    Opaque BGR input is returned unchanged.
    """
    if not has_alpha(img):
        return img
    alpha = img[:, :, 3:4].astype(np.float32) / 255.0
    background = np.empty_like(img[:, :, :3])
    background[:] = bgr
    result = (img[:, :, :3].astype(np.float32) * alpha
              + background.astype(np.float32) * (1.0 - alpha))
    return np.clip(np.rint(result), 0, 255).astype(np.uint8)


# ─── PIL Bridge ──────────────────────────────────────────────────────────────

def pil_to_bgr(pil_img: Image.Image) -> np.ndarray:
    """Convert PIL Image to BGR numpy array."""
    return cv2.cvtColor(np.array(pil_img.convert("RGB")), cv2.COLOR_RGB2BGR)


def pil_to_bgra(pil_img: Image.Image) -> np.ndarray:
    """Convert PIL Image to BGRA numpy array, keeping transparency."""
    return cv2.cvtColor(np.array(pil_img.convert("RGBA")), cv2.COLOR_RGBA2BGRA)


def high_bit_to_bgr(pil_img: Image.Image) -> np.ndarray:
    """
    Scale a 16-bit greyscale image down to 8-bit BGR.
    A tRNS grey value becomes a BGRA alpha channel.
    """
    raw = np.array(pil_img)
    gray = (np.clip(raw, 0, 65535).astype(np.uint16) >> 8).astype(np.uint8)
    bgr = cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)
    transparency = pil_img.info.get("transparency")
    if isinstance(transparency, int):
        alpha = np.where(raw == transparency, 0, 255).astype(np.uint8)
        return np.dstack([bgr, alpha])
    return bgr
