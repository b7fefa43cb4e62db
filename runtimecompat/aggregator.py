"""Recursive classification and roll-up of an API tree."""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import APINode, ClassificationRow, Interior, Leaf, Status, Tally
from .classifier import classify
from .exceptions import EmptyBaselineError


@dataclass
class AggregateResult:
    """Pre-order rows of a baseline walk plus its total leaf count."""
    rows: list[ClassificationRow] = field(default_factory=list)
    leaf_total: int = 0


def require_baseline(baseline: APINode | None) -> Interior:
    """Return the baseline root, failing when there is nothing to compare against."""
    if baseline is None:
        raise EmptyBaselineError("Baseline tree is absent")
    if not isinstance(baseline, Interior) or not baseline.children:
        raise EmptyBaselineError("Baseline tree has no modules")
    return baseline


def tally_leaf_rows(rows: list[ClassificationRow], column: int) -> Tally:
    """Tally one target column over the leaf rows only; interior rows are skipped."""
    tally = Tally()
    for row in rows:
        if row.is_leaf:
            tally.add(row.cells[column])
    return tally


class Aggregator:
    """
    Walks the baseline tree and classifies every leaf for each target.

    Rows come out depth-first in declared key order, with each interior row
    placed before its children. Interior rows carry, per target, the tally of
    the leaf rows in their subtree.
    """

    def __init__(
        self,
        targets: dict[str, APINode],
        mock_module_status: Status = Status.STUB
    ):
        """
        Args:
            targets: Target trees by name; order defines the column order
            mock_module_status: Status reported for leaves of placeholder modules
        """
        self.targets = targets
        self.mock_module_status = mock_module_status

    def aggregate(self, baseline: APINode) -> AggregateResult:
        root = require_baseline(baseline)
        rows, leaf_total = self._visit(root, ())
        return AggregateResult(rows=rows, leaf_total=leaf_total)

    def _visit(
        self,
        node: Interior,
        path: tuple[str, ...]
    ) -> tuple[list[ClassificationRow], int]:
        rows: list[ClassificationRow] = []
        leaf_total = 0

        for key, child in node.children.items():
            key_path = path + (key,)

            if isinstance(child, Leaf) or not child.children:
                rows.append(self._leaf_row(child, key_path))
                leaf_total += 1
                continue

            children, count = self._visit(child, key_path)
            tallies = [
                tally_leaf_rows(children, column)
                for column in range(len(self.targets))
            ]
            rows.append(ClassificationRow(key_path, count, count, tallies))
            rows.extend(children)
            leaf_total += count

        return rows, leaf_total

    def _leaf_row(self, node: APINode, key_path: tuple[str, ...]) -> ClassificationRow:
        # An empty object is a leaf without a type tag
        tag = node.tag if isinstance(node, Leaf) else None
        statuses = [
            classify(tag, target, key_path, self.mock_module_status)
            for target in self.targets.values()
        ]
        return ClassificationRow(key_path, 0, Status.SUPPORTED.value, statuses)


def aggregate(
    baseline: APINode,
    targets: dict[str, APINode],
    mock_module_status: Status = Status.STUB
) -> AggregateResult:
    """
    Convenience function to classify a baseline against several targets.

    Args:
        baseline: Baseline tree
        targets: Target trees by name, in column order
        mock_module_status: Status reported for leaves of placeholder modules

    Returns:
        AggregateResult with the pre-order rows and the total leaf count
    """
    return Aggregator(targets, mock_module_status).aggregate(baseline)
