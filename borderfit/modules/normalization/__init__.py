# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Normalization Module
Public API for single-image normalization.
"""

from borderfit.modules.normalization.normalizer import normalize, normalize_array
from borderfit.modules.normalization.resizer import (
    apply_resize_policy,
    resize_contain,
    resize_cover,
)

__all__ = [
    "normalize",
    "normalize_array",
    "apply_resize_policy",
    "resize_cover",
    "resize_contain",
]
