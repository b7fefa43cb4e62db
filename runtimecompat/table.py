"""Support table construction and its CSV projection."""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import APINode, ClassificationRow, Status
from .aggregator import Aggregator, tally_leaf_rows

TOTALS_KEY = "Totals"
CSV_HEADER = ["Module", "Path", "baseline"]


@dataclass
class Table:
    """A Totals row followed by the aggregated rows, for named targets."""
    target_names: list[str]
    totals: ClassificationRow
    rows: list[ClassificationRow] = field(default_factory=list)

    def to_rows(self) -> list[list]:
        """Rows in the JSON table format; row 0 is Totals."""
        return [self.totals.to_list()] + [row.to_list() for row in self.rows]

    def leaf_rows(self) -> list[ClassificationRow]:
        return [row for row in self.rows if row.is_leaf]

    def to_csv_rows(self, versions: dict[str, str] = None) -> list[list[str]]:
        """
        Project the table onto leaf rows for CSV download.

        Args:
            versions: Runtime version per target name, written below the header

        Returns:
            Header row, version row, then one row per leaf with the key path
            split into module and remaining path
        """
        versions = versions or {}
        csv_rows = [
            CSV_HEADER + list(self.target_names),
            ["", "", ""] + [versions.get(name, "") for name in self.target_names],
        ]

        for row in self.leaf_rows():
            module, _, remainder = row.key.partition(".")
            values = row.to_list()[2:]
            csv_rows.append([module, remainder] + values)

        return csv_rows


class TableBuilder:
    """Builds the support table for an ordered set of targets."""

    def __init__(self, targets: dict[str, APINode]):
        self.targets = targets
        self.aggregator = Aggregator(targets, mock_module_status=Status.STUB)

    def build(self, baseline: APINode) -> Table:
        result = self.aggregator.aggregate(baseline)

        totals = ClassificationRow(
            key_path=(TOTALS_KEY,),
            leaf_count=result.leaf_total,
            baseline=result.leaf_total,
            cells=[
                tally_leaf_rows(result.rows, column)
                for column in range(len(self.targets))
            ],
        )

        return Table(
            target_names=list(self.targets),
            totals=totals,
            rows=result.rows,
        )


def build_table(baseline: APINode, targets: dict[str, APINode]) -> Table:
    """Convenience function to build a support table."""
    return TableBuilder(targets).build(baseline)
