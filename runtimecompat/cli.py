"""Command line interface for runtimecompat."""

from __future__ import annotations

import argparse
import json
import sys

from .models import LogLevel
from .runner import ReportRunner, load_config, load_tree
from .support import percentage
from .versions import select_monthly_snapshots
from .exceptions import CompatError
from .utils import configure_logging, load_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runtimecompat",
        description="Compare runtime API surfaces against a baseline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  runtimecompat table -c report.yaml
  runtimecompat percentage data/baseline.json data/workerd.json
  runtimecompat snapshots versions.json --since-year 2024
  runtimecompat history -c report.yaml --dumps dumps/ --versions versions.json -o history.json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    commands = parser.add_subparsers(dest="command", required=True)

    table = commands.add_parser("table", help="Build the support table and CSV")
    table.add_argument("-c", "--config", required=True, help="Path to YAML/JSON report config")

    pct = commands.add_parser("percentage", help="Support percentage of one target")
    pct.add_argument("baseline", help="Baseline API dump (JSON)")
    pct.add_argument("target", help="Target API dump (JSON)")

    snapshots = commands.add_parser("snapshots", help="Pick one version per month")
    snapshots.add_argument("versions", help="JSON list of version identifiers")
    snapshots.add_argument("--since-year", type=int, help="Ignore versions before this year")

    history = commands.add_parser("history", help="Build the historical support series")
    history.add_argument("-c", "--config", required=True, help="Path to YAML/JSON report config")
    history.add_argument("--dumps", required=True, help="Folder with <version>.json API dumps")
    history.add_argument("--versions", required=True, help="JSON list of version identifiers")
    history.add_argument("-o", "--output", required=True, help="Path to output JSON series")
    history.add_argument("--since-year", type=int, help="Ignore versions before this year")

    return parser


def _log_level(args: argparse.Namespace, default: LogLevel = LogLevel.INFO) -> LogLevel:
    if args.verbose:
        return LogLevel.DEBUG
    if args.quiet:
        return LogLevel.ERROR
    return default


def _load_versions(path: str) -> list[str]:
    data = load_json(path)
    if not isinstance(data, list):
        raise CompatError(f"Versions file must hold a JSON list: {path}")
    return [str(version) for version in data]


def run(args: argparse.Namespace) -> int:
    if args.command == "table":
        config = load_config(args.config)
        configure_logging(_log_level(args, config.log_level))
        ReportRunner(config).run()

    elif args.command == "percentage":
        configure_logging(_log_level(args))
        summary = percentage(load_tree(args.baseline), load_tree(args.target))
        print(json.dumps(summary.to_dict(), indent=2))

    elif args.command == "snapshots":
        configure_logging(_log_level(args))
        snapshots = select_monthly_snapshots(
            _load_versions(args.versions), since_year=args.since_year
        )
        print(json.dumps([s.to_dict() for s in snapshots], indent=2))

    elif args.command == "history":
        config = load_config(args.config)
        configure_logging(_log_level(args, config.log_level))
        ReportRunner(config).run_history(
            args.dumps,
            _load_versions(args.versions),
            output=args.output,
            since_year=args.since_year,
        )

    return 0


def main(argv: list[str] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        return run(args)
    except (CompatError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
