"""
Tests for POST /api/v1/sentiment/analyze

Validates that:
1. A valid request returns the structured analysis plus the narrative text
2. The narrative call happens exactly once per request
3. A Gemini failure returns {"success": false, "error"} with no analysis
4. A missing API key fails before the body is parsed or any call is made
5. Malformed bodies return 400 in the same error envelope
6. Unexpected exceptions return 500
7. CORS preflight and /health respond

All tests mock httpx.AsyncClient — no real Gemini calls are made.

Run with: pytest tests/test_sentiment_api.py -v
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from restaurant_insights.core.config import NarrativeConfig, get_narrative_config
from restaurant_insights.main import app

CLIENT_PATH = "restaurant_insights.services.narrative.httpx.AsyncClient"
ENDPOINT = "/api/v1/sentiment/analyze"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def client():
    """Test client with a configured narrative credential."""
    app.dependency_overrides[get_narrative_config] = lambda: NarrativeConfig(
        api_key="test-gemini-key",
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client():
    """Test client whose narrative credential is empty."""
    app.dependency_overrides[get_narrative_config] = lambda: NarrativeConfig(api_key="")
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _sample_body(**overrides) -> dict:
    body = {
        "feedbackData": [
            {
                "id": "fb-1",
                "source": "reviews",
                "content": "Lovely ambiance and live music",
                "rating": 5,
                "date": "2026-10-14T19:00:00Z",
            },
            {
                "id": "fb-2",
                "source": "surveys",
                "content": "Great service tonight",
                "rating": 5,
                "date": "2026-10-15T19:00:00Z",
            },
            {
                "id": "fb-3",
                "source": "complaints",
                "content": "The food was cold and bland",
                "rating": 1,
                "date": "2026-10-16T19:00:00Z",
            },
        ],
        "analysisType": "comprehensive",
        "timeframe": "last_7_days",
    }
    body.update(overrides)
    return body


def _mock_gemini(status_code: int = 200, text: str = "Guests want Special Dietary Options."):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    body = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    mock_response.json.return_value = body
    mock_response.text = json.dumps(body)

    mock_client = AsyncMock()
    mock_client.post.return_value = mock_response
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


# ===================================================================
# Success path
# ===================================================================

class TestAnalyzeSentimentSuccess:

    def test_returns_analysis_envelope(self, client):
        mock_client = _mock_gemini()
        with patch(CLIENT_PATH, return_value=mock_client):
            resp = client.post(ENDPOINT, json=_sample_body())

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["analysisType"] == "comprehensive"
        assert data["processedFeedbackCount"] == 3
        assert data["aiInsights"] == "Guests want Special Dietary Options."

    def test_scores_from_ratings(self, client):
        with patch(CLIENT_PATH, return_value=_mock_gemini()):
            analysis = client.post(ENDPOINT, json=_sample_body()).json()["analysis"]

        assert analysis["overallSentiment"]["score"] == 33
        assert analysis["overallSentiment"]["confidence"] == 75
        food = analysis["categoryBreakdown"]["Food Quality"]
        assert food["volume"] >= 1
        assert "food was cold" in food["keyIssues"][0]
        assert len(analysis["trends"]["daily"]) == 7
        assert len(analysis["actionItems"]) == 8
        assert "industryComparison" in analysis["benchmarking"]

    def test_narrative_evidence_reaches_opportunities(self, client):
        with patch(CLIENT_PATH, return_value=_mock_gemini()):
            analysis = client.post(ENDPOINT, json=_sample_body()).json()["analysis"]
        dietary = analysis["insights"]["opportunities"][0]
        assert dietary["area"] == "Special Dietary Options"
        assert "Highlighted in narrative analysis" in dietary["evidence"]

    def test_single_narrative_call(self, client):
        mock_client = _mock_gemini()
        with patch(CLIENT_PATH, return_value=mock_client):
            client.post(ENDPOINT, json=_sample_body())
        assert mock_client.post.call_count == 1
        prompt = mock_client.post.call_args.kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert "The food was cold and bland" in prompt

    def test_empty_feedback(self, client):
        with patch(CLIENT_PATH, return_value=_mock_gemini()):
            resp = client.post(ENDPOINT, json=_sample_body(feedbackData=[]))
        assert resp.status_code == 200
        data = resp.json()
        assert data["processedFeedbackCount"] == 0
        assert data["analysis"]["overallSentiment"]["score"] == 0
        assert data["analysis"]["overallSentiment"]["trend"] == "stable"

    def test_empty_narrative_still_scores(self, client):
        with patch(CLIENT_PATH, return_value=_mock_gemini(text="")):
            resp = client.post(ENDPOINT, json=_sample_body())
        assert resp.status_code == 200
        assert resp.json()["aiInsights"] == ""
        assert resp.json()["analysis"]["overallSentiment"]["score"] == 33


# ===================================================================
# Failure paths
# ===================================================================

class TestAnalyzeSentimentFailures:

    def test_gemini_error_returns_envelope(self, client):
        with patch(CLIENT_PATH, return_value=_mock_gemini(status_code=500)):
            resp = client.post(ENDPOINT, json=_sample_body())

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "Gemini API error: 500"}

    def test_missing_api_key(self, unconfigured_client):
        mock_client = _mock_gemini()
        with patch(CLIENT_PATH, return_value=mock_client):
            resp = unconfigured_client.post(ENDPOINT, json=_sample_body())

        assert resp.status_code == 500
        assert resp.json() == {
            "success": False, "error": "GOOGLE_GEMINI_API_KEY not configured",
        }
        mock_client.post.assert_not_called()

    def test_missing_api_key_checked_before_body(self, unconfigured_client):
        resp = unconfigured_client.post(
            ENDPOINT, content=b"{broken", headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 500
        assert "GOOGLE_GEMINI_API_KEY" in resp.json()["error"]

    def test_invalid_json(self, client):
        mock_client = _mock_gemini()
        with patch(CLIENT_PATH, return_value=mock_client):
            resp = client.post(
                ENDPOINT, content=b"{broken", headers={"Content-Type": "application/json"},
            )
        assert resp.status_code == 400
        data = resp.json()
        assert data["success"] is False
        assert data["error"].startswith("Request body is not valid JSON")
        mock_client.post.assert_not_called()

    def test_missing_required_field(self, client):
        body = _sample_body()
        del body["timeframe"]
        resp = client.post(ENDPOINT, json=body)
        assert resp.status_code == 400
        assert "timeframe" in resp.json()["error"]

    def test_unexpected_exception(self, client):
        with patch(
            "restaurant_insights.api.sentiment.run_sentiment_analysis",
            side_effect=RuntimeError("kaboom"),
        ):
            resp = client.post(ENDPOINT, json=_sample_body())
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "kaboom"}


# ===================================================================
# App-level routes
# ===================================================================

class TestAppRoutes:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_cors_preflight(self, client):
        resp = client.options(
            ENDPOINT,
            headers={
                "Origin": "https://dashboard.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type, apikey",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"
