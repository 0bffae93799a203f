"""Meta Tag Analyzer API – FastAPI app and endpoints."""

import re
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from analyzer import analyze_website
from errors import AnalysisFailedError, AnalyzerError
from fetcher import normalize_url
from logging_config import get_logger, setup_logging
from schemas import AnalysisResponse, ErrorResponse, ExportResponse, HealthResponse

logger = get_logger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}

app = FastAPI(
    title="Meta Tag Analyzer API",
    description="On-page SEO meta tag checker",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup() -> None:
    setup_logging(level=config.LOG_LEVEL, log_file=config.LOG_FILE)


@app.exception_handler(AnalyzerError)
async def analyzer_error_handler(request: Request, exc: AnalyzerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def run_analysis(url: str | None) -> AnalysisResponse:
    """
    Pipeline: validate URL -> fetch page -> extract and score tags.
    Known failures propagate as AnalyzerError; anything else becomes a 500.
    """
    target = normalize_url(url)
    try:
        return analyze_website(target)
    except AnalyzerError:
        raise
    except Exception as exc:
        logger.exception("Error analyzing website %s", target)
        raise AnalysisFailedError(
            "An unexpected error occurred while analyzing the website."
        ) from exc


def export_filename(url: str, exported_at: datetime) -> str:
    """seo_analysis_<domain>_<date>.json, with the scheme dropped and unsafe characters replaced."""
    domain = re.sub(r"^https?://", "", url)
    domain = re.sub(r"[^\w.-]", "_", domain, flags=re.ASCII)
    return f"seo_analysis_{domain}_{exported_at.date().isoformat()}.json"


@app.get("/api/analyze", response_model=AnalysisResponse, responses=ERROR_RESPONSES)
def analyze(url: str | None = None) -> AnalysisResponse:
    """Fetch `url` and return its meta tag report."""
    return run_analysis(url)


@app.get("/api/export", response_model=ExportResponse, responses=ERROR_RESPONSES)
def export(url: str | None = None) -> JSONResponse:
    """Same report as /api/analyze, served as a downloadable JSON file."""
    report = run_analysis(url)
    exported_at = datetime.now(timezone.utc)
    body = ExportResponse(
        **report.model_dump(),
        exportedAt=exported_at.isoformat().replace("+00:00", "Z"),
    )
    return JSONResponse(
        content=body.model_dump(mode="json"),
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(report.url, exported_at)}"'
        },
    )


@app.get("/api/health", response_model=HealthResponse)
def health() -> dict:
    """Health check for deployment."""
    return {"status": "ok"}
