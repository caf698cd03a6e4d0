# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Normalization Options
Immutable configuration shared read-only by every image in a batch.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from borderfit.config import Settings, get_settings


class ResizeMode(str, Enum):
    """How the trimmed image is fitted into the output geometry."""
    COVER = "cover"          # fill target exactly, crop overflow
    CONTAIN = "contain"      # fit inside target, pad with background
    ORIGINAL = "original"    # keep trimmed dimensions


class ResizePolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: ResizeMode = ResizeMode.COVER
    width: int = Field(800, gt=0)
    height: int = Field(800, gt=0)


class Background(BaseModel):
    """Flatten colour for transparent regions. alpha == 1 means opaque."""
    model_config = ConfigDict(frozen=True)

    r: int = Field(255, ge=0, le=255)
    g: int = Field(255, ge=0, le=255)
    b: int = Field(255, ge=0, le=255)
    alpha: float = Field(0.0, ge=0.0, le=1.0)

    @property
    def is_opaque(self) -> bool:
        return self.alpha == 1

    def as_bgra(self) -> tuple[int, int, int, int]:
        """OpenCV channel order, alpha scaled to 0–255."""
        return (self.b, self.g, self.r, int(round(self.alpha * 255)))


class NormalizationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    detect_borders: bool = True
    trim_threshold: int = Field(240, ge=0, le=255)
    background: Background = Field(default_factory=Background)
    resize: ResizePolicy = Field(default_factory=ResizePolicy)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> NormalizationOptions:
        settings = settings or get_settings()
        return cls(
            detect_borders=settings.detect_borders,
            trim_threshold=settings.trim_threshold,
            resize=ResizePolicy(
                mode=ResizeMode(settings.resize_mode),
                width=settings.output_size,
                height=settings.output_size,
            ),
        )
