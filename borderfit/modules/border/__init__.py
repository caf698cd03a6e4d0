# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Border Module
Public API for light-border detection and removal.
"""

from borderfit.modules.border.classifier import (
    BorderDecision,
    BorderPolicy,
    best_trim_candidate,
    has_uniform_border,
    is_light_edge,
    remove_border,
    search_adaptive_trim,
)
from borderfit.modules.border.edge_stats import EdgeStats, edge_stats
from borderfit.modules.border.trimmer import size_reduction, trim_image

__all__ = [
    # Edge statistics
    "EdgeStats",
    "edge_stats",
    # Trimmer
    "trim_image",
    "size_reduction",
    # Classifier
    "BorderPolicy",
    "BorderDecision",
    "is_light_edge",
    "has_uniform_border",
    "best_trim_candidate",
    "search_adaptive_trim",
    "remove_border",
]
