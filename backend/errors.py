"""Error taxonomy for the analyze pipeline.

Each error carries the HTTP status the API answers with, so the route layer
only has to render it.
"""


class AnalyzerError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidURLError(AnalyzerError):
    """Missing or malformed target URL. Raised before any network call."""

    status_code = 400


class SiteUnreachableError(AnalyzerError):
    """The target produced no HTTP response (DNS, connect, timeout)."""

    status_code = 503


class UpstreamStatusError(AnalyzerError):
    """The target answered with a non-2xx status, which is passed through."""

    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(f"Error fetching website: {reason}", status_code=status_code)
        self.reason = reason


class AnalysisFailedError(AnalyzerError):
    """Unexpected internal failure while analyzing a fetched page."""

    status_code = 500
