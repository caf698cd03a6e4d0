# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Task and Result Models
Input unit (ImageTask), per-item outcome (ProcessingResult), aggregate
counts (BatchSummary) and the progress payload pushed after each group.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ImageTask(BaseModel):
    """Raw image bytes plus the caller's filename (logging only)."""
    model_config = ConfigDict(frozen=True)

    raw_bytes: bytes
    filename: str


class ProcessingResult(BaseModel):
    """Exactly one of buffer / error is populated."""
    model_config = ConfigDict(frozen=True)

    filename: str
    buffer: Optional[bytes] = None
    error: Optional[str] = None
    # Untouched input bytes, set on failure only
    original: Optional[bytes] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> ProcessingResult:
        if (self.buffer is None) == (self.error is None):
            raise ValueError(
                f"ProcessingResult for {self.filename!r} must carry exactly "
                "one of buffer or error."
            )
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, filename: str, buffer: bytes) -> ProcessingResult:
        return cls(filename=filename, buffer=buffer)

    @classmethod
    def failure(
        cls, filename: str, error: str, original: bytes | None = None
    ) -> ProcessingResult:
        return cls(filename=filename, error=error, original=original)


class BatchSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = Field(0, ge=0)
    success: int = Field(0, ge=0)
    failures: int = Field(0, ge=0)
    errors: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _counts_add_up(self) -> BatchSummary:
        if self.success + self.failures != self.total:
            raise ValueError(
                f"success ({self.success}) + failures ({self.failures}) "
                f"!= total ({self.total})"
            )
        if len(self.errors) != self.failures:
            raise ValueError("errors must hold one entry per failed item.")
        return self

    @classmethod
    def from_results(cls, results: list[ProcessingResult]) -> BatchSummary:
        errors = [f"{r.filename}: {r.error}" for r in results if not r.ok]
        return cls(
            total=len(results),
            success=len(results) - len(errors),
            failures=len(errors),
            errors=errors,
        )


class BatchProgress(BaseModel):
    """Cumulative counts pushed to the progress callback after each group."""
    model_config = ConfigDict(frozen=True)

    total: int
    processed: int
    successful: int
    failed: int
    current_batch: int
    total_batches: int
    # Tail of the error list, most recent last
    errors: list[str] = Field(default_factory=list)
