"""HTTP transport for remote analysis results.

Usage:
    client = ResultsClient(timeout=30)
    body   = client.fetch("https://ci.example.com/lint/1234.json")

Anything with a ``fetch(url) -> bytes`` method can stand in for
ResultsClient wherever the report fetcher expects a client.
"""

import logging

import requests

from analyses_report.models import AnalysesError

DEFAULT_TIMEOUT = 30

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class FetchError(AnalysesError):
    """Raised when the remote results cannot be retrieved."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class ResultsClient:
    """Thin wrapper around a requests session performing plain GETs."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT,
                 headers: dict[str, str] | None = None) -> None:
        self._timeout = timeout
        self._session = requests.Session()
        if headers:
            self._session.headers.update(headers)

    def fetch(self, url: str) -> bytes:
        """GET *url* and return the full response body.

        Raises:
            FetchError: timeout, connection failure, invalid URL or any
                        non-2xx response
        """
        log.debug("GET %s", url)
        try:
            # The context manager releases the connection on every path
            with self._session.get(url, timeout=self._timeout) as response:
                if not response.ok:
                    raise FetchError(
                        f"Unexpected response {response.status_code} from {url}: "
                        f"{response.text[:200]}",
                        url=url,
                        status_code=response.status_code,
                    )
                return response.content
        except requests.exceptions.Timeout as exc:
            raise FetchError(
                f"Request timed out after {self._timeout}s while fetching '{url}'", url=url
            ) from exc
        except requests.exceptions.ConnectionError as exc:
            raise FetchError(f"Unable to reach '{url}'", url=url) from exc
        except requests.exceptions.RequestException as exc:
            raise FetchError(f"Request to '{url}' failed: {exc}", url=url) from exc

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "ResultsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
