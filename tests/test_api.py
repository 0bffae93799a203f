"""Tests for the HTTP endpoints."""

from datetime import datetime
from unittest.mock import patch

import pytest
import requests
from fastapi.testclient import TestClient

from conftest import build_page, make_response
from main import app, export_filename


@pytest.fixture
def client():
    return TestClient(app)


def ok_response(html, content_type="text/html; charset=utf-8"):
    return make_response(body=html, content_type=content_type)


class TestAnalyzeEndpoint:
    @patch("fetcher.requests.get")
    def test_success_returns_full_report(self, mock_get, client, good_html):
        mock_get.return_value = ok_response(good_html)

        response = client.get("/api/analyze", params={"url": "example.com"})

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {
            "url",
            "overallScore",
            "validCount",
            "warningCount",
            "errorCount",
            "tags",
            "issues",
            "recommendations",
            "googlePreview",
            "facebookPreview",
            "twitterPreview",
            "rawHtml",
            "lastUpdated",
        }
        assert body["url"] == "https://example.com"
        assert body["overallScore"] == 100
        assert len(body["tags"]) == 13
        assert body["tags"][0]["statusText"] == "Good"
        assert body["twitterPreview"]["url"] == "https://example.com"
        assert mock_get.call_args[0][0] == "https://example.com"

    def test_missing_url_is_400(self, client):
        response = client.get("/api/analyze")

        assert response.status_code == 400
        assert response.json() == {"message": "URL parameter is required"}

    @patch("fetcher.requests.get")
    def test_malformed_url_is_400_without_fetch(self, mock_get, client):
        response = client.get("/api/analyze", params={"url": "not a url"})

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid URL format"}
        mock_get.assert_not_called()

    @patch("fetcher.requests.get")
    def test_unresolvable_host_is_503(self, mock_get, client):
        mock_get.side_effect = requests.ConnectionError("Name or service not known")

        response = client.get("/api/analyze", params={"url": "https://does-not-resolve.invalid"})

        assert response.status_code == 503
        assert "Unable to reach the website" in response.json()["message"]

    @patch("fetcher.requests.get")
    def test_upstream_404_passthrough(self, mock_get, client):
        mock_get.return_value = make_response(404, "<h1>Not Found</h1>", reason="Not Found")

        response = client.get("/api/analyze", params={"url": "https://example.com/missing"})

        assert response.status_code == 404
        assert response.json() == {"message": "Error fetching website: Not Found"}

    @patch("main.analyze_website")
    def test_unexpected_failure_is_500(self, mock_analyze, client):
        mock_analyze.side_effect = RuntimeError("boom")

        response = client.get("/api/analyze", params={"url": "example.com"})

        assert response.status_code == 500
        assert response.json() == {
            "message": "An unexpected error occurred while analyzing the website."
        }

    @patch("fetcher.requests.get")
    def test_non_ascii_title_measured_in_characters(self, mock_get, client):
        title = "日本語のページ" * 5
        html = build_page({"title": f"<title>{title}</title>"})
        mock_get.return_value = ok_response(html, content_type="text/html")

        response = client.get("/api/analyze", params={"url": "example.jp"})

        tag = response.json()["tags"][0]
        assert tag["content"] == title
        assert tag["status"] == "success"

    @patch("fetcher.requests.get")
    def test_near_empty_page_still_reports(self, mock_get, client):
        mock_get.return_value = ok_response("")

        response = client.get("/api/analyze", params={"url": "example.com"})

        assert response.status_code == 200
        assert response.json()["overallScore"] == 5


class TestExportEndpoint:
    @patch("fetcher.requests.get")
    def test_export_is_downloadable(self, mock_get, client):
        mock_get.return_value = ok_response(build_page({"canonical": None}))

        response = client.get("/api/export", params={"url": "example.com/shop"})

        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="seo_analysis_example.com_shop_')
        body = response.json()
        assert body["overallScore"] == 95
        assert body["exportedAt"].endswith("Z")

    def test_export_validates_url(self, client):
        assert client.get("/api/export").status_code == 400

    def test_export_filename(self):
        name = export_filename("https://example.com/a b?c=d", datetime(2026, 10, 18))
        assert name == "seo_analysis_example.com_a_b_c_d_2026-10-18.json"


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
