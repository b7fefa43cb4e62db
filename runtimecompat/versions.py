"""Dated runtime versions: compatibility date resolution and monthly snapshots."""

from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from typing import Callable, Iterable, Optional

from .models import Snapshot

logger = logging.getLogger(__name__)

# Dated release identifiers: 1.YYYYMMDD.patch
VERSION_PATTERN = re.compile(r'^1\.(\d{4})(\d{2})(\d{2})\.\d+$')

FALLBACK_COMPATIBILITY_DATE = "2024-01-01"
DEFAULT_SEARCH_WINDOW = 30

Probe = Callable[[str], bool]


def parse_version_date(version: str) -> Optional[date]:
    """Return the release date embedded in a version, or None if it is not a dated version."""
    match = VERSION_PATTERN.match(version)
    if not match:
        return None

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _accepts(probe: Probe, candidate: str) -> bool:
    try:
        return bool(probe(candidate))
    except Exception as e:
        logger.debug("Probe raised for %s: %s", candidate, e)
        return False


def resolve_compatibility_date(
    version: str,
    probe: Probe,
    window: int = DEFAULT_SEARCH_WINDOW,
    fallback: str = FALLBACK_COMPATIBILITY_DATE
) -> str:
    """
    Find the most recent compatibility date a runtime version accepts.

    The version's own date is probed first, then each preceding day, for at
    most window extra probes. A probe that raises counts as a rejection.

    Args:
        version: Version identifier (1.YYYYMMDD.patch)
        probe: Returns True when the runtime accepts a YYYY-MM-DD date
        window: Number of earlier days to try after the version date
        fallback: Date returned when nothing is accepted or the version is not dated

    Returns:
        Compatibility date as YYYY-MM-DD
    """
    version_date = parse_version_date(version)
    if version_date is None:
        logger.debug("Version %s is not dated, using %s", version, fallback)
        return fallback

    for days_back in range(window + 1):
        candidate = (version_date - timedelta(days=days_back)).isoformat()
        logger.debug("Testing compatibility date %s for %s", candidate, version)
        if _accepts(probe, candidate):
            logger.info("Using compatibility date %s for %s", candidate, version)
            return candidate

    logger.warning(
        "No compatibility date accepted within %d days of %s, using %s",
        window, version, fallback
    )
    return fallback


class CompatibilityDateResolver:
    """Memoizes compatibility date resolution per version identifier."""

    def __init__(
        self,
        probe: Probe,
        window: int = DEFAULT_SEARCH_WINDOW,
        fallback: str = FALLBACK_COMPATIBILITY_DATE
    ):
        self.probe = probe
        self.window = window
        self.fallback = fallback
        self._resolved: dict[str, str] = {}

    def resolve(self, version: str) -> str:
        if version not in self._resolved:
            self._resolved[version] = resolve_compatibility_date(
                version, self.probe, self.window, self.fallback
            )
        return self._resolved[version]


def select_monthly_snapshots(
    versions: Iterable[str],
    since_year: Optional[int] = None
) -> list[Snapshot]:
    """
    Pick the earliest dated version of each calendar month.

    Entries that are not dated versions are skipped. On equal days the first
    version seen is kept.

    Args:
        versions: Version identifiers, in any order
        since_year: Skip versions released before this year

    Returns:
        One Snapshot per month, oldest first
    """
    earliest: dict[tuple[int, int], tuple[date, str]] = {}

    for version in versions:
        version_date = parse_version_date(version)
        if version_date is None:
            continue
        if since_year is not None and version_date.year < since_year:
            continue

        month = (version_date.year, version_date.month)
        if month not in earliest or version_date < earliest[month][0]:
            earliest[month] = (version_date, version)

    return [
        Snapshot(
            month=f"{version_date.year:04d}-{version_date.month:02d}",
            version=version,
            date=version_date.isoformat(),
        )
        for version_date, version in sorted(earliest.values(), key=lambda item: item[0])
    ]
