# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Image Normalizer
Turns one raw product photo into a canonical output image. Steps, in order:

  1. Decode      — Pillow decode to BGR / BGRA, alpha presence recorded
  2. Border      — uniform-border trim or adaptive trim search
                   (only when options.detect_borders)
  3. Flatten     — composite alpha onto options.background, only when the
                   input has alpha, background.alpha == 1 and border
                   detection is on. background.alpha == 0 keeps
                   transparency in the output.
  4. Resize      — options.resize (default 800×800 cover)
  5. Encode      — PNG

Decode failures raise DecodeError unchanged; anything failing after a
successful decode is wrapped in ProcessingError with the cause attached.
"""

from __future__ import annotations

import numpy as np
import structlog

from borderfit.core.errors import ProcessingError
from borderfit.models.options import NormalizationOptions
from borderfit.modules.border.classifier import BorderPolicy, remove_border
from borderfit.modules.normalization.resizer import apply_resize_policy
from borderfit.utils.image_utils import (
    decode_image_bytes,
    encode_png,
    flatten_alpha,
    has_alpha,
)
from borderfit.utils.logger import get_logger

log = get_logger(__name__)


def normalize_array(
    img: np.ndarray,
    options: NormalizationOptions,
    policy: BorderPolicy,
) -> np.ndarray:
    """Steps 2–4 on an already decoded BGR/BGRA array. img is not modified."""
    source_has_alpha = has_alpha(img)

    if options.detect_borders:
        img, decision = remove_border(img, options.trim_threshold, policy)
        log.debug(
            "border_decision",
            uniform=decision.uniform,
            trimmed=decision.trimmed,
            threshold=decision.threshold,
            reduction=round(decision.reduction, 4),
            shape=img.shape,
        )

    if source_has_alpha and options.background.is_opaque and options.detect_borders:
        bg = options.background
        img = flatten_alpha(img, (bg.b, bg.g, bg.r))

    return apply_resize_policy(img, options.resize, options.background)


def normalize(
    raw_bytes: bytes,
    filename: str,
    options: NormalizationOptions | None = None,
    policy: BorderPolicy | None = None,
) -> bytes:
    """
    Normalize one image and return the encoded PNG bytes.

    Args:
        raw_bytes: Encoded input image (JPEG, PNG, WebP, ...).
        filename:  Used for log context only.
        options:   Normalization options; defaults from settings.
        policy:    Border heuristics; defaults from settings.

    Raises:
        DecodeError:     raw_bytes is not a decodable image.
        ProcessingError: any later step failed.
    """
    options = options or NormalizationOptions.from_settings()
    policy = policy or BorderPolicy.from_settings()

    with structlog.contextvars.bound_contextvars(filename=filename):
        img = decode_image_bytes(raw_bytes)
        log.debug(
            "normalize_start",
            width=img.shape[1],
            height=img.shape[0],
            alpha=has_alpha(img),
        )

        try:
            out = normalize_array(img, options, policy)
            buffer = encode_png(out)
        except Exception as exc:
            log.error(
                "normalize_failed",
                error=str(exc),
                exc_type=type(exc).__name__,
            )
            raise ProcessingError(
                f"{type(exc).__name__}: {exc}", cause=exc
            ) from exc

        log.debug("normalize_complete", shape=out.shape, bytes=len(buffer))
        return buffer
