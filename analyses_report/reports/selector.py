"""Latest-report selection."""

import re
from typing import Iterable

from analyses_report.models import AnalysesError, Report

# Base-10 integer with an optional sign; no whitespace or digit separators
_TIMESTAMP_RE = re.compile(r"[+-]?[0-9]+")


class InvalidTimestampError(AnalysesError):
    """Raised when a report's timestamp is not a base-10 integer."""

    def __init__(self, report: Report) -> None:
        super().__init__(
            f"Report has an invalid timestamp {report.timestamp!r} (url={report.url!r})"
        )
        self.report = report


def _parse_timestamp(report: Report) -> int:
    if not _TIMESTAMP_RE.fullmatch(report.timestamp):
        raise InvalidTimestampError(report)
    return int(report.timestamp)


def select_latest(reports: Iterable[Report]) -> Report | None:
    """Return the report with the most recent timestamp, or None if there are none.

    Every timestamp is validated before anything is selected, so a single
    bad timestamp fails the whole call. Among reports sharing the greatest
    timestamp, the first one in input order wins.

    Raises:
        InvalidTimestampError: a report's timestamp is empty or non-numeric
    """
    stamped = [(_parse_timestamp(r), r) for r in reports]

    latest: Report | None = None
    latest_ts = 0
    for ts, report in stamped:
        if latest is None or ts > latest_ts:
            latest, latest_ts = report, ts
    return latest
