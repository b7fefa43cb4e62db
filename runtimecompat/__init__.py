"""
runtimecompat - Runtime API Conformance Reports

Compares a baseline description of a JavaScript runtime API surface against
the surfaces dumped from other runtimes, classifies every API element as
supported, mismatch, stub or unsupported, and rolls the results up into
support tables and historical support percentages.
"""

from .models import (
    TypeTag,
    Status,
    Leaf,
    Interior,
    Tally,
    ClassificationRow,
    SupportSummary,
    Snapshot,
    HistoricalPoint,
    ReportConfig,
    LogLevel,
)
from .exceptions import (
    CompatError,
    TreeParseError,
    EmptyBaselineError,
    ConfigError,
    InvalidJSONError,
)
from .tree import parse_tree, lookup, is_mock_module
from .classifier import classify
from .aggregator import Aggregator, AggregateResult, aggregate
from .table import Table, TableBuilder, build_table
from .support import percentage
from .versions import (
    CompatibilityDateResolver,
    resolve_compatibility_date,
    select_monthly_snapshots,
)
from .history import HistoricalCollector
from .runner import ReportRunner, load_config

__version__ = "1.0.0"
__all__ = [
    # Tree model
    "TypeTag",
    "Leaf",
    "Interior",
    "parse_tree",
    "lookup",
    "is_mock_module",
    # Classification
    "Status",
    "classify",
    "Aggregator",
    "AggregateResult",
    "aggregate",
    # Reports
    "Tally",
    "ClassificationRow",
    "Table",
    "TableBuilder",
    "build_table",
    "SupportSummary",
    "percentage",
    # Versions and history
    "Snapshot",
    "HistoricalPoint",
    "CompatibilityDateResolver",
    "resolve_compatibility_date",
    "select_monthly_snapshots",
    "HistoricalCollector",
    # Runner
    "ReportConfig",
    "LogLevel",
    "ReportRunner",
    "load_config",
    # Errors
    "CompatError",
    "TreeParseError",
    "EmptyBaselineError",
    "ConfigError",
    "InvalidJSONError",
]
