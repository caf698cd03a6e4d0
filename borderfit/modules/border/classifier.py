# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Border Classifier
Decides whether a product photo sits inside a uniform light border and
removes it. Two paths:

  1. Uniform border  — at least 3 of the 4 edge strips are light
                       (bright, neutral, no dark channel). One trim at
                       max(5, trim_threshold - 200), which cuts closer to
                       the real edge than the detection test tolerates.
  2. Adaptive search — product or a patterned backdrop touches several
                       edges. Trim at each candidate threshold, keep the
                       largest size reduction above the 2% floor, else
                       keep the original.

A light edge needs all three of: brightness > 150, colour variance < 30
and every channel > 120. Bright-but-colourful edges (a yellow product)
and dark vignettes both fail.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from borderfit.config import Settings, get_settings
from borderfit.core.errors import TrimCandidateError
from borderfit.modules.border.edge_stats import EdgeStats, edge_stats
from borderfit.modules.border.trimmer import size_reduction, trim_image
from borderfit.utils.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class BorderPolicy:
    """Tunable heuristics for light-edge detection and trim search."""
    edge_strip_width: int = 3
    min_brightness: float = 150.0
    max_color_variance: float = 30.0
    min_channel: float = 120.0
    min_light_edges: int = 3
    trim_candidates: tuple[int, ...] = (1, 3, 8, 15, 25)
    min_reduction: float = 0.02
    trim_offset: int = 200
    min_trim_threshold: int = 5

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> BorderPolicy:
        settings = settings or get_settings()
        return cls(
            edge_strip_width=settings.edge_strip_width,
            min_brightness=settings.light_min_brightness,
            max_color_variance=settings.light_max_color_variance,
            min_channel=settings.light_min_channel,
            min_light_edges=settings.min_light_edges,
            trim_candidates=tuple(settings.trim_candidates),
            min_reduction=settings.min_trim_reduction,
            trim_offset=settings.trim_offset,
            min_trim_threshold=settings.min_trim_threshold,
        )

    def uniform_trim_threshold(self, trim_threshold: int) -> int:
        return max(self.min_trim_threshold, trim_threshold - self.trim_offset)


DEFAULT_POLICY = BorderPolicy()


@dataclass(frozen=True)
class TrimCandidate:
    threshold: int
    image: np.ndarray
    reduction: float


@dataclass(frozen=True)
class BorderDecision:
    """What the classifier concluded for one image (for logging and tests)."""
    uniform: bool
    trimmed: bool
    threshold: Optional[int] = None
    reduction: float = 0.0


# ─── Uniform Border Detection ────────────────────────────────────────────────

def is_light_edge(stats: EdgeStats, policy: BorderPolicy = DEFAULT_POLICY) -> bool:
    return (
        stats.brightness > policy.min_brightness
        and stats.color_variance < policy.max_color_variance
        and min(stats.red, stats.green, stats.blue) > policy.min_channel
    )


def count_light_edges(
    img: np.ndarray, policy: BorderPolicy = DEFAULT_POLICY
) -> int:
    light = 0
    for name, stats in edge_stats(img, policy.edge_strip_width).items():
        is_light = is_light_edge(stats, policy)
        log.debug(
            "edge_classified",
            edge=name,
            rgb=(round(stats.red), round(stats.green), round(stats.blue)),
            brightness=round(stats.brightness, 1),
            variance=round(stats.color_variance, 1),
            is_light=is_light,
        )
        light += is_light
    return light


def has_uniform_border(
    img: np.ndarray,
    threshold: int = 240,
    policy: BorderPolicy = DEFAULT_POLICY,
) -> bool:
    """
    True when at least policy.min_light_edges of the four edge strips are
    light. `threshold` is the caller's trim sensitivity; detection itself
    uses the fixed light-edge criteria so off-white borders still count.
    """
    light = count_light_edges(img, policy)
    uniform = light >= policy.min_light_edges
    log.debug(
        "border_detected",
        light_edges=light,
        threshold=threshold,
        uniform=uniform,
    )
    return uniform


# ─── Adaptive Trim Search ────────────────────────────────────────────────────

def _try_trim(img: np.ndarray, threshold: int) -> Optional[TrimCandidate]:
    try:
        trimmed = trim_image(img, threshold)
    except TrimCandidateError as exc:
        log.debug("trim_candidate_failed", threshold=threshold, error=str(exc))
        return None
    reduction = size_reduction(img.shape, trimmed.shape)
    log.debug(
        "trim_candidate",
        threshold=threshold,
        size=(trimmed.shape[1], trimmed.shape[0]),
        reduction=round(reduction, 4),
    )
    return TrimCandidate(threshold=threshold, image=trimmed, reduction=reduction)


def best_trim_candidate(
    img: np.ndarray, policy: BorderPolicy = DEFAULT_POLICY
) -> Optional[TrimCandidate]:
    """
    Largest-reduction candidate above policy.min_reduction, or None.
    Ties go to the lower (less aggressive) threshold.
    """
    candidates = [_try_trim(img, t) for t in policy.trim_candidates]
    best: Optional[TrimCandidate] = None
    for candidate in candidates:
        if candidate is None or candidate.reduction <= policy.min_reduction:
            continue
        if best is None or candidate.reduction > best.reduction:
            best = candidate
    if best is not None:
        log.debug(
            "adaptive_trim_selected",
            threshold=best.threshold,
            reduction=round(best.reduction, 4),
        )
    return best


def search_adaptive_trim(
    img: np.ndarray, policy: BorderPolicy = DEFAULT_POLICY
) -> tuple[np.ndarray, bool]:
    """Return (image, did_trim). img itself comes back when no candidate qualifies."""
    best = best_trim_candidate(img, policy)
    if best is None:
        return img, False
    return best.image, True


# ─── Entry Point ─────────────────────────────────────────────────────────────

def remove_border(
    img: np.ndarray,
    trim_threshold: int = 240,
    policy: BorderPolicy = DEFAULT_POLICY,
) -> tuple[np.ndarray, BorderDecision]:
    """
    Run the classifier on one decoded image and apply whichever trim it
    settles on. Returns (image, decision); img itself is never modified.
    """
    if has_uniform_border(img, trim_threshold, policy):
        threshold = policy.uniform_trim_threshold(trim_threshold)
        try:
            trimmed = trim_image(img, threshold)
        except TrimCandidateError as exc:
            log.warning("uniform_trim_failed", threshold=threshold, error=str(exc))
            return img, BorderDecision(uniform=True, trimmed=False, threshold=threshold)
        return trimmed, BorderDecision(
            uniform=True,
            trimmed=True,
            threshold=threshold,
            reduction=size_reduction(img.shape, trimmed.shape),
        )

    best = best_trim_candidate(img, policy)
    if best is None:
        return img, BorderDecision(uniform=False, trimmed=False)
    return best.image, BorderDecision(
        uniform=False,
        trimmed=True,
        threshold=best.threshold,
        reduction=best.reduction,
    )
