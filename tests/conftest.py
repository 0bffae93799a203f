"""Shared HTML builders for analyzer and API tests."""

import pytest
import requests

GOOD_TITLE = "Acme Widgets - Quality Widgets Since 1990"
GOOD_DESCRIPTION = (
    "Acme builds durable widgets for homes and offices, with free shipping "
    "on every order over fifty dollars."
)

HEAD_LINES = {
    "charset": '<meta charset="utf-8">',
    "title": f"<title>{GOOD_TITLE}</title>",
    "description": f'<meta name="description" content="{GOOD_DESCRIPTION}">',
    "canonical": '<link rel="canonical" href="https://example.com/">',
    "viewport": '<meta name="viewport" content="width=device-width, initial-scale=1">',
    "og:title": '<meta property="og:title" content="Acme Widgets">',
    "og:description": '<meta property="og:description" content="Durable widgets for everyone.">',
    "og:image": '<meta property="og:image" content="https://example.com/og.png">',
    "twitter:card": '<meta name="twitter:card" content="summary_large_image">',
}


def build_head(overrides: dict[str, str | None] | None = None, extra: str = "") -> str:
    """Fully tagged head; an override of None drops that line."""
    lines = dict(HEAD_LINES)
    lines.update(overrides or {})
    return "\n".join(line for line in lines.values() if line) + extra


def build_page(
    overrides: dict[str, str | None] | None = None,
    extra_head: str = "",
    body: str = "<h1>Acme Widgets</h1>",
    lang: str | None = "en",
) -> str:
    lang_attr = f' lang="{lang}"' if lang else ""
    return (
        f"<!DOCTYPE html>\n<html{lang_attr}>\n"
        f"<head>{build_head(overrides, extra_head)}</head>\n"
        f"<body>{body}</body>\n</html>"
    )


@pytest.fixture
def good_html() -> str:
    return build_page()


def make_response(
    status_code: int = 200,
    body: str = "",
    content_type: str = "text/html; charset=utf-8",
    reason: str = "OK",
) -> requests.Response:
    """A real requests Response carrying UTF-8 bytes, decoded the way requests does it."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.headers["Content-Type"] = content_type
    response._content = body.encode("utf-8")
    response.encoding = requests.utils.get_encoding_from_headers(response.headers)
    return response
