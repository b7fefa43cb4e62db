"""Report runner that loads a YAML config and the API dumps it names."""

from __future__ import annotations

import logging
import yaml
from pathlib import Path
from typing import Optional

from .models import APINode, HistoricalPoint, ReportConfig
from .table import Table, TableBuilder
from .history import HistoricalCollector, summarize
from .versions import select_monthly_snapshots
from .tree import parse_tree
from .exceptions import ConfigError
from .utils import load_json, write_csv, write_json

logger = logging.getLogger(__name__)


def load_config(config_path: str | Path) -> ReportConfig:
    """Load a report config from YAML (or JSON, which is valid YAML)."""
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        content = f.read()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file: {e}", {"path": str(config_path)})

    return ReportConfig.from_dict(data, base_dir=config_path.parent)


def load_tree(path: str | Path) -> APINode:
    return parse_tree(load_json(path))


class ReportRunner:
    """
    Builds and writes the runtime support table described by a config.

    Usage:
        runner = ReportRunner.from_file("report.yaml")
        table = runner.run()
    """

    def __init__(self, config: ReportConfig):
        self.config = config
        self._baseline: Optional[APINode] = None

    @classmethod
    def from_file(cls, config_path: str | Path) -> 'ReportRunner':
        return cls(load_config(config_path))

    @property
    def baseline(self) -> APINode:
        """Load and cache the baseline tree."""
        if self._baseline is None:
            logger.info("Loading baseline from %s", self.config.baseline_path)
            self._baseline = load_tree(self.config.baseline_path)
        return self._baseline

    def load_targets(self) -> dict[str, APINode]:
        targets = {}
        for name, path in self.config.targets.items():
            logger.info("Loading target %s from %s", name, path)
            targets[name] = load_tree(path)
        return targets

    def load_versions(self) -> dict[str, str]:
        versions = dict(self.config.versions)
        if self.config.versions_path is not None:
            data = load_json(self.config.versions_path)
            if not isinstance(data, dict):
                raise ConfigError(
                    "Version map must be a JSON object",
                    {"path": str(self.config.versions_path)}
                )
            versions.update({str(k): str(v) for k, v in data.items()})
        return versions

    def build(self) -> Table:
        logger.info("Generating table data...")
        return TableBuilder(self.load_targets()).build(self.baseline)

    def write(self, table: Table):
        if self.config.table_output:
            write_json(self.config.table_output, table.to_rows())
            logger.info("Wrote table data to %s", self.config.table_output)

        if self.config.csv_output:
            write_csv(self.config.csv_output, table.to_csv_rows(self.load_versions()))
            logger.info("Wrote CSV to %s", self.config.csv_output)

    def run(self) -> Table:
        table = self.build()
        self.write(table)
        logger.info("Totals: %s", table.totals.to_list())
        return table

    def run_history(
        self,
        dumps_dir: str | Path,
        versions: list[str],
        output: Optional[str | Path] = None,
        since_year: Optional[int] = None
    ) -> list[HistoricalPoint]:
        """
        Build the historical series from pre-extracted dumps.

        Each snapshot's API dump is read from <dumps_dir>/<version>.json;
        versions without a dump are skipped.

        Args:
            dumps_dir: Folder of per-version API dumps
            versions: Released version identifiers
            output: Where to write the series as JSON
            since_year: Ignore versions released before this year

        Returns:
            The collected series, oldest first
        """
        dumps_dir = Path(dumps_dir)
        snapshots = select_monthly_snapshots(versions, since_year=since_year)
        logger.info("Selected %d monthly snapshots", len(snapshots))

        collector = HistoricalCollector(
            self.baseline,
            extract_tree=lambda snapshot, _date: load_json(dumps_dir / f"{snapshot.version}.json"),
        )
        points = collector.collect(snapshots)

        if output:
            write_json(output, [point.to_dict() for point in points])
            logger.info("Wrote historical data to %s", output)

        logger.info(summarize(points))
        return points
