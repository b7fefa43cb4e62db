"""Data models for runtimecompat."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from .exceptions import ConfigError


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class TypeTag(Enum):
    FUNCTION = "function"
    CLASS = "class"
    OBJECT = "object"
    STRING = "string"
    NUMBER = "number"
    MISSING = "missing"
    STUB = "stub"


class Status(Enum):
    SUPPORTED = "supported"
    MISMATCH = "mismatch"
    STUB = "stub"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Leaf:
    """Terminal API node carrying a type tag."""
    tag: TypeTag


@dataclass(frozen=True)
class Interior:
    """API node with named children, in declared order."""
    children: dict[str, "APINode"] = field(default_factory=dict)


APINode = Union[Leaf, Interior]


@dataclass
class Tally:
    """Per-target counts of leaf statuses, rendered as "supported/mismatch/stub/unsupported"."""
    supported: int = 0
    mismatch: int = 0
    stub: int = 0
    unsupported: int = 0

    def add(self, status: Status):
        setattr(self, status.value, getattr(self, status.value) + 1)

    @property
    def total(self) -> int:
        return self.supported + self.mismatch + self.stub + self.unsupported

    def __str__(self) -> str:
        return f"{self.supported}/{self.mismatch}/{self.stub}/{self.unsupported}"


@dataclass
class ClassificationRow:
    """
    One row of a classification table.

    Leaf rows have leaf_count == 0, baseline == "supported" and one Status per
    target. Interior rows have the descendant leaf count in both leaf_count and
    baseline, and one Tally per target.
    """
    key_path: tuple[str, ...]
    leaf_count: int
    baseline: Union[int, str]
    cells: list[Union[Status, Tally]] = field(default_factory=list)

    @property
    def key(self) -> str:
        return ".".join(self.key_path)

    @property
    def is_leaf(self) -> bool:
        return self.leaf_count == 0

    def to_list(self) -> list:
        cells = [c.value if isinstance(c, Status) else str(c) for c in self.cells]
        return [self.key, self.leaf_count, self.baseline, *cells]


@dataclass
class SupportSummary:
    """Scalar conformance of a single target against the baseline."""
    total_apis: int
    supported_apis: int
    support_percentage: float

    def to_dict(self) -> dict:
        return {
            "totalApis": self.total_apis,
            "supportedApis": self.supported_apis,
            "supportPercentage": self.support_percentage,
        }


@dataclass(frozen=True)
class Snapshot:
    """The version chosen to represent one calendar month."""
    month: str
    version: str
    date: str

    @property
    def published_at(self) -> str:
        return f"{self.date}T00:00:00.000Z"

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "version": self.version,
            "date": self.date,
            "publishedAt": self.published_at,
        }


@dataclass
class HistoricalPoint:
    """One entry of the historical support series."""
    date: str
    workerd_version: str
    support_percentage: float
    total_apis: int
    supported_apis: int
    published_at: str

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "workerdVersion": self.workerd_version,
            "supportPercentage": self.support_percentage,
            "totalApis": self.total_apis,
            "supportedApis": self.supported_apis,
            "publishedAt": self.published_at,
        }


@dataclass
class ReportConfig:
    """Configuration for building a runtime support report."""
    baseline_path: Path
    targets: dict[str, Path]
    versions: dict[str, str] = field(default_factory=dict)
    versions_path: Optional[Path] = None
    table_output: Optional[Path] = None
    csv_output: Optional[Path] = None
    log_level: LogLevel = LogLevel.INFO

    @classmethod
    def from_dict(cls, data: Any, base_dir: Path = Path(".")) -> 'ReportConfig':
        """Build a config from a parsed YAML/JSON mapping; relative paths resolve against base_dir."""
        if not isinstance(data, dict):
            raise ConfigError(
                "Config must be a mapping",
                {"type": type(data).__name__}
            )

        if not isinstance(data.get('baseline'), str) or not data['baseline']:
            raise ConfigError("Config is missing 'baseline'")

        targets = data.get('targets')
        if not targets or not isinstance(targets, dict):
            raise ConfigError("Config 'targets' must be a non-empty mapping")

        for name, target_path in targets.items():
            if not isinstance(target_path, str):
                raise ConfigError(
                    f"Target '{name}' must map to a file path",
                    {"target": name, "type": type(target_path).__name__}
                )

        versions = data.get('versions') or {}
        versions_path = None
        if isinstance(versions, str):
            versions_path = base_dir / versions
            versions = {}
        elif not isinstance(versions, dict):
            raise ConfigError(
                "Config 'versions' must be a path or a mapping",
                {"type": type(versions).__name__}
            )

        output = data.get('output') or {}
        if not isinstance(output, dict):
            raise ConfigError("Config 'output' must be a mapping")
        table_output = output.get('table')
        csv_output = output.get('csv')

        level_name = str(data.get('log_level', 'INFO')).upper()
        try:
            log_level = LogLevel(level_name)
        except ValueError:
            raise ConfigError(
                f"Unknown log level: {level_name}",
                {"allowed": [level.value for level in LogLevel]}
            )

        return cls(
            baseline_path=base_dir / data['baseline'],
            targets={name: base_dir / p for name, p in targets.items()},
            versions={str(k): str(v) for k, v in versions.items()},
            versions_path=versions_path,
            table_output=base_dir / table_output if table_output else None,
            csv_output=base_dir / csv_output if csv_output else None,
            log_level=log_level,
        )
