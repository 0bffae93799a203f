"""
Runtime settings are read from the environment. A .env file in the backend
root is loaded automatically using python-dotenv:

REQUEST_TIMEOUT_SECONDS=15
LOG_LEVEL=INFO
CORS_ORIGINS=*
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SEOMetaAnalyzer/1.0; +https://seo-analyzer.example.com)"

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))
USER_AGENT = os.getenv("USER_AGENT", "").strip() or DEFAULT_USER_AGENT
RAW_HTML_LIMIT = int(os.getenv("RAW_HTML_LIMIT", "50000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip() or "INFO"
LOG_FILE = os.getenv("LOG_FILE", "").strip() or None

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()] or ["*"]
