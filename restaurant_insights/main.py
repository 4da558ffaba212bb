"""
Restaurant Insights Backend — FastAPI Entry Point

Initializes the FastAPI app, enables CORS for any configured origin,
and registers the sentiment and voice analysis routers.
"""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from restaurant_insights.api.sentiment import router as sentiment_router
from restaurant_insights.api.voice import router as voice_router
from restaurant_insights.core.config import (
    CORS_ALLOW_ORIGINS,
    PROJECT_NAME,
    is_gemini_configured,
)
from restaurant_insights.core.logging import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

if not is_gemini_configured():
    logger.warning(
        "GOOGLE_GEMINI_API_KEY is not set; analysis endpoints will return errors"
    )

app = FastAPI(
    title=f"{PROJECT_NAME} API",
    description="Feedback sentiment scoring and meeting analysis",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["POST", "OPTIONS", "GET"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# --- Register API routers ---
app.include_router(sentiment_router)
app.include_router(voice_router)


@app.get("/health")
async def health_check():
    """Health check endpoint. Returns service status."""
    return {"status": "ok"}


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run("restaurant_insights.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
