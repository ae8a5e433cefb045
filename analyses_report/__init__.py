"""Static-analysis reports attached to code-review commits through git notes."""

from analyses_report.client import FetchError, ResultsClient
from analyses_report.models import (
    FORMAT_VERSION,
    REF,
    STATUS_FOR_YOUR_INFORMATION,
    STATUS_LOOKS_GOOD_TO_ME,
    STATUS_NEEDS_MORE_WORK,
    AnalysesError,
    AnalyzeResponse,
    Location,
    LocationRange,
    Note,
    Report,
    ReportDetails,
    SchemaError,
)
from analyses_report.reports.fetcher import MalformedPayloadError, fetch_results, get_notes
from analyses_report.reports.parser import MalformedReportError, parse, parse_all_valid
from analyses_report.reports.selector import InvalidTimestampError, select_latest

__version__ = "0.1.0"

__all__ = [
    "FORMAT_VERSION",
    "REF",
    "STATUS_FOR_YOUR_INFORMATION",
    "STATUS_LOOKS_GOOD_TO_ME",
    "STATUS_NEEDS_MORE_WORK",
    "AnalysesError",
    "AnalyzeResponse",
    "FetchError",
    "InvalidTimestampError",
    "Location",
    "LocationRange",
    "MalformedPayloadError",
    "MalformedReportError",
    "Note",
    "Report",
    "ReportDetails",
    "ResultsClient",
    "SchemaError",
    "fetch_results",
    "get_notes",
    "parse",
    "parse_all_valid",
    "select_latest",
]
