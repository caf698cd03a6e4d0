# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Error Taxonomy
DecodeError and ProcessingError are fatal for a single image only and are
captured into ProcessingResult.error by the batch orchestrator.
TrimCandidateError never leaves the border classifier.
PipelineError is the only exception process_all() raises itself.
"""

from __future__ import annotations


class BorderfitError(Exception):
    """Base class for all borderfit errors."""


class DecodeError(BorderfitError, ValueError):
    """Raised when input bytes are not a valid or supported image."""


class TrimCandidateError(BorderfitError):
    """Raised when a single trim attempt cannot produce a usable crop."""


class ProcessingError(BorderfitError, RuntimeError):
    """Raised when a normalization step fails after a successful decode."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class PipelineError(BorderfitError, RuntimeError):
    """Raised when a batch cannot be processed at all (malformed input)."""
