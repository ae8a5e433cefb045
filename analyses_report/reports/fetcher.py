"""Remote result fetching.

Functions:
    fetch_results(client, report)  -> list[AnalyzeResponse]
    get_notes(client, report)      -> list[Note]

``client`` is any object exposing ``fetch(url) -> bytes``, normally an
``analyses_report.client.ResultsClient``.
"""

import json
import logging

from analyses_report.models import (
    AnalysesError,
    AnalyzeResponse,
    Note,
    Report,
    ReportDetails,
    SchemaError,
)

log = logging.getLogger(__name__)


class MalformedPayloadError(AnalysesError):
    """Raised when the remote results are not a valid report-details document."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def fetch_results(client, report: Report) -> list[AnalyzeResponse]:
    """Download the details of *report* and return the responses embedded in it.

    A report without a URL carries no remote results: an empty list is
    returned and the client is not used.

    Raises:
        FetchError:            the client could not retrieve the body
        MalformedPayloadError: the body is not a valid ReportDetails document
    """
    if not report.url:
        return []

    body = client.fetch(report.url)
    details = _decode_details(body, report.url)
    log.debug("Fetched %d analyze response(s) from %s",
              len(details.analyze_responses), report.url)
    return list(details.analyze_responses)


def get_notes(client, report: Report) -> list[Note]:
    """Download the details of *report* and return all of its notes, flattened.

    Notes keep the order of their responses, then their order within each
    response.
    """
    notes: list[Note] = []
    for response in fetch_results(client, report):
        notes.extend(response.notes)
    return notes


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _decode_details(body: bytes, url: str) -> ReportDetails:
    try:
        data = json.loads(body)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise MalformedPayloadError(
            f"Results at '{url}' are not valid JSON: {exc}", url=url
        ) from exc
    try:
        return ReportDetails.from_dict(data)
    except SchemaError as exc:
        raise MalformedPayloadError(
            f"Results at '{url}' do not match the expected shape: {exc}", url=url
        ) from exc
