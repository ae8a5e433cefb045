"""Data models for static-analysis reports.

Contains frozen dataclasses mirroring the JSON wire format:
    - Report           (the pointer stored in a git note)
    - LocationRange
    - Location
    - Note             (a single analysis message)
    - AnalyzeResponse  (one tool's output)
    - ReportDetails    (the remote payload a Report points to)

Every field is optional on the wire. ``from_dict`` ignores unknown keys and
treats ``null`` as absent; ``to_dict`` omits empty fields.
"""

import json
from dataclasses import dataclass, field
from typing import Any

# Git-notes ref expected to contain analysis reports
REF = "refs/notes/devtools/analyses"

STATUS_LOOKS_GOOD_TO_ME = "lgtm"
STATUS_FOR_YOUR_INFORMATION = "fyi"
STATUS_NEEDS_MORE_WORK = "nmw"

# Latest version of the report format supported by this package
FORMAT_VERSION = 0


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class AnalysesError(Exception):
    """Base exception for all analyses-report errors."""


class SchemaError(AnalysesError, ValueError):
    """Raised when a decoded JSON value does not match the expected field type."""


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _require_mapping(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise SchemaError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _str_field(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SchemaError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _int_field(data: dict, key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # bool is an int subclass; JSON true/false is not a number
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaError(f"'{key}' must be an integer, got {type(value).__name__}")
    return value


def _list_field(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SchemaError(f"'{key}' must be an array, got {type(value).__name__}")
    return value


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Report:
    """A build/test status report generated by an analyses tool."""

    timestamp: str = ""
    url: str = ""
    status: str = ""
    # Version of the metadata format, serialized as "v"
    version: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Report":
        if data is None:
            return cls()
        data = _require_mapping(data, "report")
        return cls(
            timestamp=_str_field(data, "timestamp"),
            url=_str_field(data, "url"),
            status=_str_field(data, "status"),
            version=_int_field(data, "v"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.timestamp:
            out["timestamp"] = self.timestamp
        if self.url:
            out["url"] = self.url
        if self.status:
            out["status"] = self.status
        if self.version:
            out["v"] = self.version
        return out

    def to_json(self) -> bytes:
        """Return the compact wire form, as stored in a git note."""
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")


# ---------------------------------------------------------------------------
# Remote payload
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LocationRange:
    start_line: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocationRange":
        data = _require_mapping(data, "range")
        return cls(start_line=_int_field(data, "start_line"))

    def to_dict(self) -> dict[str, Any]:
        return {"start_line": self.start_line} if self.start_line else {}


@dataclass(frozen=True)
class Location:
    path: str = ""
    range: LocationRange | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Location":
        data = _require_mapping(data, "location")
        raw_range = data.get("range")
        return cls(
            path=_str_field(data, "path"),
            range=LocationRange.from_dict(raw_range) if raw_range is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.path:
            out["path"] = self.path
        if self.range is not None:
            out["range"] = self.range.to_dict()
        return out


@dataclass(frozen=True)
class Note:
    """A single analysis message, e.g. one lint warning."""

    location: Location | None = None
    category: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        data = _require_mapping(data, "note")
        raw_location = data.get("location")
        return cls(
            location=Location.from_dict(raw_location) if raw_location is not None else None,
            category=_str_field(data, "category"),
            description=_str_field(data, "description"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.location is not None:
            out["location"] = self.location.to_dict()
        if self.category:
            out["category"] = self.category
        out["description"] = self.description
        return out


@dataclass(frozen=True)
class AnalyzeResponse:
    """The response from one static-analysis tool."""

    notes: tuple[Note, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalyzeResponse":
        data = _require_mapping(data, "analyze response")
        return cls(notes=tuple(
            Note.from_dict(n) if n is not None else Note()
            for n in _list_field(data, "note")
        ))

    def to_dict(self) -> dict[str, Any]:
        return {"note": [n.to_dict() for n in self.notes]} if self.notes else {}


@dataclass(frozen=True)
class ReportDetails:
    """An entire analysis run, possibly spanning several tools."""

    analyze_responses: tuple[AnalyzeResponse, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ReportDetails":
        if data is None:
            return cls()
        data = _require_mapping(data, "report details")
        return cls(analyze_responses=tuple(
            AnalyzeResponse.from_dict(r) if r is not None else AnalyzeResponse()
            for r in _list_field(data, "analyze_response")
        ))

    def to_dict(self) -> dict[str, Any]:
        if not self.analyze_responses:
            return {}
        return {"analyze_response": [r.to_dict() for r in self.analyze_responses]}
