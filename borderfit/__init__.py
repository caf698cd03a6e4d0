# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Border-aware product image normalization.
Public API.
"""

from borderfit.core.batch import process_all, process_all_sync
from borderfit.core.errors import (
    BorderfitError,
    DecodeError,
    PipelineError,
    ProcessingError,
    TrimCandidateError,
)
from borderfit.models.options import (
    Background,
    NormalizationOptions,
    ResizeMode,
    ResizePolicy,
)
from borderfit.models.result import (
    BatchProgress,
    BatchSummary,
    ImageTask,
    ProcessingResult,
)
from borderfit.modules.border.classifier import (
    BorderPolicy,
    has_uniform_border,
    search_adaptive_trim,
)
from borderfit.modules.normalization.normalizer import normalize

__version__ = "1.0.0"

__all__ = [
    # Batch
    "process_all",
    "process_all_sync",
    # Single image
    "normalize",
    "has_uniform_border",
    "search_adaptive_trim",
    "BorderPolicy",
    # Models
    "ImageTask",
    "ProcessingResult",
    "BatchSummary",
    "BatchProgress",
    "NormalizationOptions",
    "Background",
    "ResizeMode",
    "ResizePolicy",
    # Errors
    "BorderfitError",
    "DecodeError",
    "TrimCandidateError",
    "ProcessingError",
    "PipelineError",
]
