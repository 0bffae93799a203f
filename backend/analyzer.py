"""Meta tag extraction and scoring.

The page is parsed once into an immutable map of extracted values. Three
independent passes read that map:

1. tag evaluation against the rule table (tags, issues, counts, score)
2. recommendations
3. search and social previews

Nothing here performs I/O except `analyze_website`, which fetches first.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType

from bs4 import BeautifulSoup

import config
from fetcher import fetch_html
from logging_config import get_logger
from models import PREVIEW_KEYS, ExtractedValues, TagCategory, TagStatus, Verdict
from schemas import AnalysisResponse, Issue, Preview, Recommendation, Tag

logger = get_logger(__name__)

TITLE_LENGTH = (20, 70)
DESCRIPTION_LENGTH = (50, 160)

WARNING_PENALTY = 5
ERROR_PENALTY = 15

RESTRICTIVE_ROBOTS_TOKENS = ("noindex", "nofollow")
TRUNCATION_MARKER = "... (truncated)"
HEAD_ELEMENTS = ["title", "meta", "link", "base", "style", "script", "noscript"]

Extractor = Callable[[BeautifulSoup], str | None]
Evaluator = Callable[[str | None], Verdict]


@dataclass(frozen=True)
class TagRule:
    """One row of the tag catalog."""

    id: str
    name: str
    category: TagCategory
    description: str
    extract: Extractor
    markup: Callable[[str], str]
    evaluate: Evaluator


# --- Extraction helpers ---


def _clean(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _exact(name: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(name)}$", re.I)


def _meta_name(name: str) -> Extractor:
    def extract(soup: BeautifulSoup) -> str | None:
        tag = soup.find("meta", attrs={"name": _exact(name)})
        return _clean(tag.get("content")) if tag else None

    return extract


def _meta_property(prop: str) -> Extractor:
    def extract(soup: BeautifulSoup) -> str | None:
        tag = soup.find("meta", attrs={"property": prop})
        return _clean(tag.get("content")) if tag else None

    return extract


def _extract_title(soup: BeautifulSoup) -> str | None:
    tag = soup.find("title")
    return _clean(tag.get_text()) if tag else None


def _extract_canonical(soup: BeautifulSoup) -> str | None:
    tag = soup.find("link", attrs={"rel": "canonical"})
    return _clean(tag.get("href")) if tag else None


def _extract_h1(soup: BeautifulSoup) -> str | None:
    tag = soup.find("h1")
    return _clean(tag.get_text()) if tag else None


def _extract_lang(soup: BeautifulSoup) -> str | None:
    tag = soup.find("html")
    return _clean(tag.get("lang")) if tag else None


def _extract_charset(soup: BeautifulSoup) -> str | None:
    tag = soup.find("meta", attrs={"charset": True})
    if tag and _clean(tag.get("charset")):
        return _clean(tag.get("charset"))
    tag = soup.find("meta", attrs={"http-equiv": _exact("content-type")})
    return _clean(tag.get("content")) if tag else None


def _charset_markup(value: str) -> str:
    if "charset" in value.lower():
        return f'<meta http-equiv="Content-Type" content="{value}">'
    return f'<meta charset="{value}">'


# --- Status mappers ---


def length_rule(bounds: tuple[int, int], messages: dict[str, str]) -> Evaluator:
    """Success inside `bounds`, warning outside, error when absent."""
    min_len, max_len = bounds

    def evaluate(value: str | None) -> Verdict:
        if value is None:
            return {
                "status": "error",
                "statusText": "Missing",
                "recommendation": messages["missing"],
                "issue": {"type": "error", "message": messages["missing_issue"]},
            }
        length = len(value)
        if min_len <= length <= max_len:
            return {"status": "success", "statusText": "Good"}

        side = "short" if length < min_len else "long"
        return {
            "status": "warning",
            "statusText": "Needs Improvement",
            "recommendation": messages[side],
            "info": f"Length: {length} characters (Recommended: {messages['recommended']})",
            "issue": {"type": "warning", "message": messages[f"{side}_issue"]},
        }

    return evaluate


def presence_rule(
    absent_status: TagStatus,
    recommendation: str,
    issue: str | None = None,
    info: str | None = None,
) -> Evaluator:
    """Success when present; `absent_status` otherwise, with an issue only if `issue` is given."""

    def evaluate(value: str | None) -> Verdict:
        if value is not None:
            verdict: Verdict = {"status": "success", "statusText": "Implemented"}
            if info:
                verdict["info"] = info
            return verdict

        verdict = {
            "status": absent_status,
            "statusText": "Missing",
            "recommendation": recommendation,
        }
        if issue:
            verdict["issue"] = {
                "type": "error" if absent_status == "error" else "warning",
                "message": issue,
            }
        return verdict

    return evaluate


def evaluate_robots(value: str | None) -> Verdict:
    if value is None:
        return {
            "status": "success",
            "statusText": "Default",
            "info": "No robots meta tag found. Default behavior allows all search engines to index and follow links.",
        }
    lowered = value.lower()
    if any(token in lowered for token in RESTRICTIVE_ROBOTS_TOKENS):
        return {
            "status": "warning",
            "statusText": "Restrictive",
            "recommendation": (
                "Your robots meta tag is blocking search engines. Only use noindex/nofollow "
                "if you intentionally want to restrict search engines."
            ),
            "issue": {
                "type": "warning",
                "message": f"Robots meta tag contains restrictive directives: {value}",
            },
        }
    return {"status": "success", "statusText": "Implemented"}


def evaluate_keywords(value: str | None) -> Verdict:
    if value is None:
        return {
            "status": "success",
            "statusText": "Not Used",
            "info": "Meta keywords are not used, which is fine as they are largely ignored by modern search engines.",
        }
    return {
        "status": "warning",
        "statusText": "Legacy",
        "info": "Meta keywords are largely ignored by major search engines and provide limited SEO value.",
    }


# --- Catalog ---

TAG_RULES: tuple[TagRule, ...] = (
    TagRule(
        id="title",
        name="Title Tag",
        category="essential",
        description="Primary title that appears in search results",
        extract=_extract_title,
        markup=lambda v: f"<title>{v}</title>",
        evaluate=length_rule(
            TITLE_LENGTH,
            {
                "recommended": "50-60 characters",
                "short": "Title tag may be too short. Recommended length is 50-60 characters.",
                "long": "Title tag is too long. Recommended length is 50-60 characters.",
                "short_issue": "Title tag is too short and may not be descriptive enough.",
                "long_issue": "Title tag is too long and may be truncated in search results.",
                "missing": "Add a title tag to your page. This is crucial for SEO.",
                "missing_issue": "Missing title tag will severely impact SEO performance.",
            },
        ),
    ),
    TagRule(
        id="description",
        name="Meta Description",
        category="essential",
        description="Brief description that appears in search results",
        extract=_meta_name("description"),
        markup=lambda v: f'<meta name="description" content="{v}">',
        evaluate=length_rule(
            DESCRIPTION_LENGTH,
            {
                "recommended": "150-160 characters",
                "short": "Meta description may be too short. Aim for 150-160 characters.",
                "long": "Meta description is too long. Recommended length is 150-160 characters.",
                "short_issue": "Meta description is too short and may not be descriptive enough.",
                "long_issue": "Meta description is too long and may be truncated in search results.",
                "missing": (
                    "Add a meta description tag with a compelling summary of your page content. "
                    "Keep it between 150-160 characters and include relevant keywords."
                ),
                "missing_issue": "Missing meta description may affect click-through rates from search results.",
            },
        ),
    ),
    TagRule(
        id="canonical",
        name="Canonical URL",
        category="essential",
        description="Specifies the preferred version of a page",
        extract=_extract_canonical,
        markup=lambda v: f'<link rel="canonical" href="{v}">',
        evaluate=presence_rule(
            "warning",
            "Add a canonical URL tag to indicate the preferred version of this page, especially "
            "if your site has multiple URLs that access the same content.",
        ),
    ),
    TagRule(
        id="viewport",
        name="Viewport",
        category="essential",
        description="Controls how the page is displayed on mobile devices",
        extract=_meta_name("viewport"),
        markup=lambda v: f'<meta name="viewport" content="{v}">',
        evaluate=presence_rule(
            "error",
            "Add a viewport meta tag for proper mobile rendering. "
            "Recommended value: width=device-width, initial-scale=1.0",
            issue="Missing viewport meta tag will cause mobile display issues.",
            info=(
                "The viewport meta tag is configured for mobile responsiveness, which is important "
                "for mobile-first indexing and user experience."
            ),
        ),
    ),
    TagRule(
        id="og:title",
        name="OG:Title",
        category="social",
        description="Title used when sharing on social media",
        extract=_meta_property("og:title"),
        markup=lambda v: f'<meta property="og:title" content="{v}">',
        evaluate=presence_rule(
            "warning",
            "Add an Open Graph title tag for better social media sharing. "
            "This can be the same as your page title.",
        ),
    ),
    TagRule(
        id="og:description",
        name="OG:Description",
        category="social",
        description="Description used when sharing on social media",
        extract=_meta_property("og:description"),
        markup=lambda v: f'<meta property="og:description" content="{v}">',
        evaluate=presence_rule(
            "warning",
            "Add an Open Graph description tag for better social media sharing. "
            "This can be the same as your meta description.",
        ),
    ),
    TagRule(
        id="og:image",
        name="OG:Image",
        category="social",
        description="Image displayed when sharing on social media",
        extract=_meta_property("og:image"),
        markup=lambda v: f'<meta property="og:image" content="{v}">',
        evaluate=presence_rule(
            "warning",
            "Add an Open Graph image tag with dimensions of at least 1200×630 pixels "
            "for optimal social media sharing.",
            issue="Missing OG:Image may result in poor presentation when shared on social media.",
        ),
    ),
    TagRule(
        id="twitter:card",
        name="Twitter Card",
        category="social",
        description="Controls Twitter card type when shared",
        extract=_meta_name("twitter:card"),
        markup=lambda v: f'<meta name="twitter:card" content="{v}">',
        evaluate=presence_rule(
            "warning",
            "Add a Twitter card meta tag. Recommended value: summary_large_image",
        ),
    ),
    TagRule(
        id="robots",
        name="Robots Meta Tag",
        category="essential",
        description="Controls search engine crawling and indexing",
        extract=_meta_name("robots"),
        markup=lambda v: f'<meta name="robots" content="{v}">',
        evaluate=evaluate_robots,
    ),
    TagRule(
        id="keywords",
        name="Meta Keywords",
        category="other",
        description="Keywords related to page content (largely ignored by search engines)",
        extract=_meta_name("keywords"),
        markup=lambda v: f'<meta name="keywords" content="{v}">',
        evaluate=evaluate_keywords,
    ),
    TagRule(
        id="h1",
        name="H1 Heading",
        category="other",
        description="Primary heading on the page (important for SEO)",
        extract=_extract_h1,
        markup=lambda v: f"<h1>{v}</h1>",
        evaluate=presence_rule(
            "error",
            "Add an H1 heading tag that clearly describes the page content.",
            issue="Missing H1 heading may negatively impact SEO and content hierarchy.",
        ),
    ),
    TagRule(
        id="html-lang",
        name="HTML Language",
        category="other",
        description="Specifies the language of the document",
        extract=_extract_lang,
        markup=lambda v: f'<html lang="{v}">',
        evaluate=presence_rule(
            "warning",
            "Add a lang attribute to the HTML tag to specify the content language.",
            issue="Missing HTML language attribute may affect accessibility and search engine understanding.",
        ),
    ),
    TagRule(
        id="charset",
        name="Character Set",
        category="other",
        description="Defines the character encoding for the document",
        extract=_extract_charset,
        markup=_charset_markup,
        evaluate=presence_rule(
            "warning",
            "Add a charset meta tag. Recommended value: UTF-8",
            issue="Missing character set declaration may cause character rendering issues.",
        ),
    ),
)

_PREVIEW_EXTRACTORS: dict[str, Extractor] = {key: _meta_name(key) for key in PREVIEW_KEYS}


# --- Parsing ---


def parse_document(html: str | None) -> BeautifulSoup:
    """Parse `html`; an unparseable document is treated as empty."""
    try:
        return BeautifulSoup(html or "", "html.parser")
    except Exception:
        logger.warning("Could not parse document, treating every tag as absent", exc_info=True)
        return BeautifulSoup("", "html.parser")


def extract_values(soup: BeautifulSoup) -> ExtractedValues:
    """Read every catalog tag and preview-only key from the parsed page."""
    values: dict[str, str | None] = {rule.id: rule.extract(soup) for rule in TAG_RULES}
    for key, extract in _PREVIEW_EXTRACTORS.items():
        values[key] = extract(soup)
    return MappingProxyType(values)


# --- Pass 1: tags and score ---


def evaluate_tags(values: ExtractedValues) -> tuple[list[Tag], list[Issue]]:
    tags: list[Tag] = []
    issues: list[Issue] = []
    for rule in TAG_RULES:
        value = values.get(rule.id)
        verdict = rule.evaluate(value)
        tags.append(
            Tag(
                id=rule.id,
                name=rule.name,
                value=rule.markup(value) if value is not None else None,
                content=value,
                status=verdict["status"],
                statusText=verdict["statusText"],
                category=rule.category,
                description=rule.description,
                recommendation=verdict.get("recommendation"),
                info=verdict.get("info"),
            )
        )
        if "issue" in verdict:
            issues.append(Issue(**verdict["issue"]))
    return tags, issues


def count_statuses(tags: list[Tag]) -> tuple[int, int, int]:
    """Return (valid, warning, error) counts."""
    valid = sum(1 for t in tags if t.status == "success")
    warnings = sum(1 for t in tags if t.status == "warning")
    errors = sum(1 for t in tags if t.status == "error")
    return valid, warnings, errors


def compute_score(warning_count: int, error_count: int) -> int:
    score = 100 - warning_count * WARNING_PENALTY - error_count * ERROR_PENALTY
    return max(0, min(100, score))


# --- Pass 2: recommendations ---


def _outside(value: str | None, bounds: tuple[int, int]) -> bool:
    return value is not None and not bounds[0] <= len(value) <= bounds[1]


_RECOMMENDATIONS: tuple[tuple[Callable[[ExtractedValues], bool], Recommendation], ...] = (
    (
        lambda v: v.get("title") is None,
        Recommendation(
            id="title-missing",
            title="Add a Title Tag",
            description="Every page should have a unique, descriptive title tag that accurately represents the page content.",
            impact="high",
            category="technical",
        ),
    ),
    (
        lambda v: _outside(v.get("title"), TITLE_LENGTH),
        Recommendation(
            id="title-length",
            title="Optimize Title Tag Length",
            description="Keep title tags between 50-60 characters to ensure they display properly in search results.",
            impact="medium",
            category="content",
        ),
    ),
    (
        lambda v: v.get("description") is None,
        Recommendation(
            id="meta-desc-missing",
            title="Add a Meta Description",
            description="Include a compelling meta description that summarizes page content and includes relevant keywords.",
            impact="medium",
            category="content",
        ),
    ),
    (
        lambda v: _outside(v.get("description"), DESCRIPTION_LENGTH),
        Recommendation(
            id="meta-desc-length",
            title="Optimize Meta Description Length",
            description="Keep meta descriptions between 150-160 characters to prevent truncation in search results.",
            impact="medium",
            category="content",
        ),
    ),
    (
        lambda v: any(v.get(k) is None for k in ("og:title", "og:description", "og:image")),
        Recommendation(
            id="social-tags",
            title="Add Open Graph Tags",
            description="Implement Open Graph tags to control how your content appears when shared on social media platforms.",
            impact="medium",
            category="social",
        ),
    ),
    (
        lambda v: v.get("h1") is None,
        Recommendation(
            id="h1-missing",
            title="Add an H1 Heading",
            description="Include a single H1 heading that clearly describes the page topic and includes relevant keywords.",
            impact="medium",
            category="content",
        ),
    ),
    (
        lambda v: v.get("viewport") is None,
        Recommendation(
            id="viewport-missing",
            title="Add Viewport Meta Tag",
            description="Include a viewport meta tag to ensure proper rendering on mobile devices and improved mobile rankings.",
            impact="high",
            category="technical",
        ),
    ),
    (
        lambda v: v.get("canonical") is None,
        Recommendation(
            id="canonical-missing",
            title="Add Canonical URL",
            description="Implement a canonical URL tag to prevent duplicate content issues and consolidate ranking signals.",
            impact="medium",
            category="technical",
        ),
    ),
    (
        lambda v: v.get("html-lang") is None,
        Recommendation(
            id="lang-missing",
            title="Add HTML Language Attribute",
            description=(
                "Specify the language of your content using the lang attribute on the HTML tag "
                "for better accessibility and international SEO."
            ),
            impact="low",
            category="technical",
        ),
    ),
)


def build_recommendations(values: ExtractedValues) -> list[Recommendation]:
    return [rec for applies, rec in _RECOMMENDATIONS if applies(values)]


# --- Pass 3: previews ---


def _first(*candidates: str | None) -> str | None:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def build_previews(values: ExtractedValues, url: str) -> tuple[Preview, Preview, Preview]:
    """Return (google, facebook, twitter) previews."""
    title = values.get("title")
    description = values.get("description")
    og_title = values.get("og:title")
    og_description = values.get("og:description")
    og_image = values.get("og:image")

    google = Preview(title=title, description=description, url=url, image=None)
    facebook = Preview(
        title=_first(og_title, title),
        description=_first(og_description, description),
        url=url,
        image=og_image,
    )
    twitter = Preview(
        title=_first(values.get("twitter:title"), og_title, title),
        description=_first(values.get("twitter:description"), og_description, description),
        url=url,
        image=_first(values.get("twitter:image"), og_image),
    )
    return google, facebook, twitter


# --- Raw head and timestamp ---


def truncate_markup(markup: str, limit: int) -> str:
    if len(markup) <= limit:
        return markup
    return markup[:limit] + TRUNCATION_MARKER


def _implied_head(soup: BeautifulSoup) -> str:
    """Head-level elements of a page that omits the <head> tag, wrapped in one."""
    elements = [
        el
        for el in soup.find_all(HEAD_ELEMENTS)
        if el.find_parent("body") is None and el.find_parent(HEAD_ELEMENTS) is None
    ]
    if not elements:
        return ""
    return "<head>" + "".join(str(el) for el in elements) + "</head>"


def capture_head(soup: BeautifulSoup, limit: int | None = None) -> str:
    """Serialize the <head> element for display."""
    if limit is None:
        limit = config.RAW_HTML_LIMIT
    head = soup.find("head")
    markup = str(head) if head is not None else _implied_head(soup)
    return truncate_markup(markup, limit)


def format_timestamp(now: datetime) -> str:
    """Format like 'October 18, 2026 at 3:04 PM'."""
    hour = now.hour % 12 or 12
    meridiem = "AM" if now.hour < 12 else "PM"
    return f"{now:%B} {now.day}, {now.year} at {hour}:{now:%M} {meridiem}"


# --- Entry points ---


def analyze_html(html: str | None, url: str, now: datetime | None = None) -> AnalysisResponse:
    """Build the full report for an already fetched page."""
    soup = parse_document(html)
    values = extract_values(soup)

    tags, issues = evaluate_tags(values)
    valid_count, warning_count, error_count = count_statuses(tags)
    google, facebook, twitter = build_previews(values, url)

    report = AnalysisResponse(
        url=url,
        overallScore=compute_score(warning_count, error_count),
        validCount=valid_count,
        warningCount=warning_count,
        errorCount=error_count,
        tags=tags,
        issues=issues,
        recommendations=build_recommendations(values),
        googlePreview=google,
        facebookPreview=facebook,
        twitterPreview=twitter,
        rawHtml=capture_head(soup),
        lastUpdated=format_timestamp(now or datetime.now()),
    )
    logger.info(
        "Analyzed %s: score=%d (%d valid, %d warnings, %d errors)",
        url,
        report.overallScore,
        valid_count,
        warning_count,
        error_count,
    )
    return report


def analyze_website(url: str) -> AnalysisResponse:
    """Fetch `url` (already normalized) and analyze it."""
    html = fetch_html(url)
    return analyze_html(html, url)
