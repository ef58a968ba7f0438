"""
Completion Tracker - Per-Category and Overall Checklist Progress

Completion counts filled required fields. It never looks at validation
errors: a filled but invalid field still counts as filled, so progress
only moves when the user adds or removes data.

Percentages round half-up (2.5 -> 3), the way a browser's Math.round
does, rather than Python's round-half-to-even.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Mapping, Optional

from property_wizard.catalog.registry import StepSchemaRegistry, get_default_registry
from property_wizard.catalog.schema import is_filled


# =============================================================================
# Completion Result
# =============================================================================


@dataclass(frozen=True)
class CompletionResult:
    """
    Completion percentages derived from a snapshot.

    categories maps category id to a whole percentage 0-100. filled and
    total carry the raw counts behind each percentage.
    """

    categories: Mapping[str, int] = field(default_factory=dict)
    overall: int = 100
    filled: Mapping[str, int] = field(default_factory=dict)
    total: Mapping[str, int] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.overall == 100

    def category(self, category_id: str) -> int:
        """Percentage for one category (KeyError if unknown)."""
        return self.categories[category_id]

    def to_dict(self) -> dict:
        """Convert result to dictionary."""
        return {
            "categories": dict(self.categories),
            "overall": self.overall,
            "filled": dict(self.filled),
            "total": dict(self.total),
        }


# =============================================================================
# Computation
# =============================================================================


def percent(filled: int, total: int) -> int:
    """
    Whole percentage of filled over total, rounded half-up.

    An empty checklist is complete.
    """
    if total == 0:
        return 100
    return math.floor(Fraction(100 * filled, total) + Fraction(1, 2))


def compute_completion(
    snapshot: Mapping[str, Any],
    catalog: Mapping[str, tuple[str, ...]],
) -> CompletionResult:
    """
    Compute completion for every category in the catalog.

    Args:
        snapshot: Field name to raw value
        catalog: Category id to its required field names

    Returns:
        CompletionResult with per-category and overall percentages
    """
    categories: dict[str, int] = {}
    filled_counts: dict[str, int] = {}
    total_counts: dict[str, int] = {}

    for category_id, required in catalog.items():
        filled = sum(1 for name in required if is_filled(snapshot.get(name)))
        filled_counts[category_id] = filled
        total_counts[category_id] = len(required)
        categories[category_id] = percent(filled, len(required))

    overall = percent(sum(filled_counts.values()), sum(total_counts.values()))

    return CompletionResult(
        categories=categories,
        overall=overall,
        filled=filled_counts,
        total=total_counts,
    )


class CompletionTracker:
    """Computes completion against the required fields of a registry."""

    def __init__(self, registry: Optional[StepSchemaRegistry] = None):
        self._catalog = (registry or get_default_registry()).required_fields_by_category()

    @property
    def catalog(self) -> dict[str, tuple[str, ...]]:
        return dict(self._catalog)

    def compute(self, snapshot: Mapping[str, Any]) -> CompletionResult:
        return compute_completion(snapshot, self._catalog)
