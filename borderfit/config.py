# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Application Configuration
All settings are loaded from environment variables with product-photo
defaults. Override via .env or environment.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Normalization Defaults ──────────────────────────────────────────────
    detect_borders: bool = True
    trim_threshold: int = Field(240, ge=0, le=255)
    resize_mode: Literal["cover", "contain", "original"] = "cover"
    output_size: int = Field(800, gt=0)

    # ─── Batch Orchestration ─────────────────────────────────────────────────
    # Max images decoded at once per group
    batch_size: int = Field(5, ge=1)

    # ─── Border Heuristics ───────────────────────────────────────────────────
    # Found empirically on product photography; tune with care
    edge_strip_width: int = Field(3, ge=1)
    light_min_brightness: float = 150.0
    light_max_color_variance: float = 30.0
    light_min_channel: float = 120.0
    min_light_edges: int = Field(3, ge=1, le=4)
    trim_candidates: tuple[int, ...] = (1, 3, 8, 15, 25)
    min_trim_reduction: float = 0.02
    # Uniform-border trim uses max(min_trim_threshold, trim_threshold - trim_offset)
    trim_offset: int = 200
    min_trim_threshold: int = 5

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
