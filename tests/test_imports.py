"""
Import Test Script

Tests that all backend dependencies and application modules are importable.
Run with: pytest tests/test_imports.py -v
"""


def test_fastapi():
    """FastAPI — Web framework."""
    import fastapi
    assert hasattr(fastapi, "FastAPI")
    print(f"  fastapi {fastapi.__version__}")


def test_uvicorn():
    """Uvicorn — ASGI server."""
    import uvicorn
    assert hasattr(uvicorn, "run")
    print(f"  uvicorn {uvicorn.__version__}")


def test_pydantic():
    """Pydantic — Request/response validation."""
    from pydantic import BaseModel
    assert BaseModel is not None
    import pydantic
    print(f"  pydantic {pydantic.__version__}")


def test_httpx():
    """httpx — Async HTTP client for the Gemini REST API."""
    import httpx
    assert hasattr(httpx, "AsyncClient")
    print(f"  httpx {httpx.__version__}")


def test_python_dotenv():
    """python-dotenv — Environment variable loading."""
    from dotenv import load_dotenv
    assert callable(load_dotenv)


def test_app_modules():
    """Every application module imports without side effects beyond config."""
    from restaurant_insights.main import app
    from restaurant_insights.services import (
        meeting_analyzer,
        sentiment_analysis,
        sentiment_scorer,
        voice_analysis,
    )
    assert app.title == "Restaurant Insights API"
    assert sentiment_scorer.SentimentScorer is not None
    assert meeting_analyzer.MeetingAnalyzer is not None
    assert callable(sentiment_analysis.run_sentiment_analysis)
    assert callable(voice_analysis.run_voice_analysis)
