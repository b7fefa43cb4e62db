"""Historical support series over monthly runtime snapshots."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .aggregator import require_baseline
from .models import APINode, HistoricalPoint, Snapshot
from .support import percentage
from .tree import parse_tree
from .versions import CompatibilityDateResolver, Probe

logger = logging.getLogger(__name__)

TreeExtractor = Callable[[Snapshot, str], Any]


class HistoricalCollector:
    """
    Computes the support percentage of a runtime at each snapshot.

    Installing a runtime version and dumping its API surface are supplied by
    the caller. A snapshot whose hooks fail is logged and left out of the
    series; the rest of the batch still runs. An empty baseline is rejected
    up front with EmptyBaselineError.
    """

    def __init__(
        self,
        baseline: APINode,
        extract_tree: TreeExtractor,
        prepare: Optional[Callable[[Snapshot], None]] = None,
        probe: Optional[Probe] = None
    ):
        """
        Args:
            baseline: Baseline tree
            extract_tree: Returns the decoded API dump for (snapshot, compatibility date)
            prepare: Called before a snapshot is scanned (e.g. to install it)
            probe: Compatibility date check; without it the version's own date is used
        """
        self.baseline = require_baseline(baseline)
        self.extract_tree = extract_tree
        self.prepare = prepare
        self.resolver = CompatibilityDateResolver(probe) if probe else None

    def compatibility_date(self, snapshot: Snapshot) -> str:
        if self.resolver is None:
            return snapshot.date
        return self.resolver.resolve(snapshot.version)

    def collect_one(self, snapshot: Snapshot) -> HistoricalPoint:
        if self.prepare:
            self.prepare(snapshot)

        compat_date = self.compatibility_date(snapshot)
        target = parse_tree(self.extract_tree(snapshot, compat_date))
        summary = percentage(self.baseline, target)

        return HistoricalPoint(
            date=snapshot.month,
            workerd_version=snapshot.version,
            support_percentage=summary.support_percentage,
            total_apis=summary.total_apis,
            supported_apis=summary.supported_apis,
            published_at=snapshot.published_at,
        )

    def collect(self, snapshots: list[Snapshot]) -> list[HistoricalPoint]:
        points = []
        logger.info("Collecting data for %d monthly snapshots", len(snapshots))

        for index, snapshot in enumerate(snapshots, start=1):
            logger.info(
                "[%d/%d] Processing %s (%s)",
                index, len(snapshots), snapshot.month, snapshot.version
            )
            try:
                point = self.collect_one(snapshot)
            except Exception as e:
                logger.warning("Skipping %s (%s): %s", snapshot.month, snapshot.version, e)
                continue

            logger.info(
                "%s: %s%% (%d/%d)",
                point.date, point.support_percentage, point.supported_apis, point.total_apis
            )
            points.append(point)

        return points


def summarize(points: list[HistoricalPoint]) -> str:
    """One-line description of the change across a series."""
    if not points:
        return "No data points collected"
    return (
        f"Collected {len(points)} data points; support went from "
        f"{points[0].support_percentage}% to {points[-1].support_percentage}%"
    )
