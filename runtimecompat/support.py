"""Single-target support percentage."""

from __future__ import annotations

import math

from .models import APINode, Status, SupportSummary
from .aggregator import Aggregator
from .exceptions import EmptyBaselineError

# A mismatched type still means the API exists in the runtime
PRESENT_STATUSES = frozenset({Status.SUPPORTED, Status.MISMATCH})


def support_ratio(supported: int, total: int) -> float:
    """Percentage to one decimal, rounding halves up like JavaScript's Math.round."""
    return math.floor(supported / total * 1000 + 0.5) / 10


def percentage(baseline: APINode, target: APINode) -> SupportSummary:
    """
    Reduce one target's classification to a support percentage.

    Placeholder (mock) modules count as unsupported here, unlike in tables.

    Args:
        baseline: Baseline tree
        target: Target tree

    Returns:
        SupportSummary with leaf totals and the percentage to one decimal

    Raises:
        EmptyBaselineError: If the baseline has no leaves
    """
    aggregator = Aggregator({"target": target}, mock_module_status=Status.UNSUPPORTED)
    result = aggregator.aggregate(baseline)

    statuses = [row.cells[0] for row in result.rows if row.is_leaf]
    total_apis = len(statuses)
    if total_apis == 0:
        raise EmptyBaselineError("Baseline tree has no API leaves")

    supported_apis = sum(1 for status in statuses if status in PRESENT_STATUSES)

    return SupportSummary(
        total_apis=total_apis,
        supported_apis=supported_apis,
        support_percentage=support_ratio(supported_apis, total_apis),
    )
