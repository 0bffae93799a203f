"""Page fetcher: normalize the target URL and download its HTML.

Only the single requested page is fetched. No retries, no caching.
"""

import requests
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

import config
from errors import InvalidURLError, SiteUnreachableError, UpstreamStatusError
from logging_config import get_logger

logger = get_logger(__name__)

_REQUEST_HEADERS = {
    "User-Agent": config.USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

_HTTP_URL = TypeAdapter(AnyHttpUrl)

UNREACHABLE_MESSAGE = (
    "Unable to reach the website. Please check if the URL is correct and the website is online."
)


def normalize_url(raw: str | None) -> str:
    """
    Return `raw` with an https:// scheme added when it has none.
    Raises InvalidURLError if the value is blank or not a well-formed http(s) URL.
    """
    value = (raw or "").strip()
    if not value:
        raise InvalidURLError("URL parameter is required")

    if not value.lower().startswith(("http://", "https://")):
        value = f"https://{value}"

    try:
        _HTTP_URL.validate_python(value)
    except ValidationError as exc:
        raise InvalidURLError("Invalid URL format") from exc

    return value


def fetch_html(url: str, timeout: float | None = None) -> str:
    """
    GET `url` and return the response body as text.
    Raises SiteUnreachableError when no response arrives and
    UpstreamStatusError when the site answers with a non-2xx status.
    """
    if timeout is None:
        timeout = config.REQUEST_TIMEOUT_SECONDS

    logger.info("Fetching %s", url)
    try:
        response = requests.get(url, timeout=timeout, headers=_REQUEST_HEADERS)
    except requests.RequestException as exc:
        logger.warning("Could not reach %s: %s", url, exc)
        raise SiteUnreachableError(UNREACHABLE_MESSAGE) from exc

    if not 200 <= response.status_code < 300:
        reason = response.reason or str(response.status_code)
        logger.warning("%s answered %s %s", url, response.status_code, reason)
        raise UpstreamStatusError(response.status_code, reason)

    # requests falls back to ISO-8859-1 for text/* without a declared charset
    if "charset" not in response.headers.get("Content-Type", "").lower():
        response.encoding = response.apparent_encoding or "utf-8"
    return response.text
