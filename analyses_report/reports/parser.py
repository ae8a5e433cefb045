"""Report parsing from raw git-note payloads.

Functions:
    parse(raw_note)                                -> Report
    parse_all_valid(raw_notes, accepted_versions)  -> list[Report]
"""

import json
import logging
from typing import Iterable

from analyses_report.models import FORMAT_VERSION, AnalysesError, Report, SchemaError

SUPPORTED_VERSIONS: frozenset[int] = frozenset({FORMAT_VERSION})

log = logging.getLogger(__name__)


class MalformedReportError(AnalysesError):
    """Raised when a note is not valid report JSON."""


def parse(raw_note: bytes | str) -> Report:
    """Decode a single git note into a Report.

    Unknown fields are ignored. The format version is *not* checked here;
    use ``parse_all_valid`` to drop reports in unsupported versions.

    Raises:
        MalformedReportError: invalid UTF-8, invalid JSON, or a field of
                              the wrong type
    """
    try:
        data = json.loads(raw_note)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise MalformedReportError(f"Note is not valid JSON: {exc}") from exc
    try:
        return Report.from_dict(data)
    except SchemaError as exc:
        raise MalformedReportError(f"Note is not a valid report: {exc}") from exc


def parse_all_valid(
    raw_notes: Iterable[bytes | str],
    accepted_versions: Iterable[int] = SUPPORTED_VERSIONS,
) -> list[Report]:
    """Parse every note, keeping only valid reports in an accepted version.

    Notes that fail to parse or carry another version are skipped silently;
    the relative order of the remaining reports is preserved.
    """
    accepted = frozenset(accepted_versions)
    reports: list[Report] = []
    for index, raw in enumerate(raw_notes):
        try:
            report = parse(raw)
        except MalformedReportError as exc:
            log.debug("Skipping note #%d: %s", index, exc)
            continue
        if report.version not in accepted:
            log.debug("Skipping note #%d: unsupported format version %d", index, report.version)
            continue
        reports.append(report)
    return reports
