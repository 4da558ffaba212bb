"""
Sentiment Analysis API — Feedback scoring endpoint.

POST /api/v1/sentiment/analyze — Score a batch of feedback records
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from restaurant_insights.api.responses import error_response
from restaurant_insights.core.config import NarrativeConfig, get_narrative_config
from restaurant_insights.core.errors import InsightsError
from restaurant_insights.models.sentiment import SentimentAnalysisResponse
from restaurant_insights.services.sentiment_analysis import run_sentiment_analysis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sentiment", tags=["sentiment"])


# ===================================================================
# POST /api/v1/sentiment/analyze
# ===================================================================

@router.post(
    "/analyze",
    status_code=status.HTTP_200_OK,
    response_model=SentimentAnalysisResponse,
)
async def analyze_sentiment(
    request: Request,
    config: NarrativeConfig = Depends(get_narrative_config),
):
    """
    Run the sentiment pipeline over the posted feedback records.

    The body is read raw so that malformed JSON lands in the same
    {"success": false, "error"} envelope as every other failure.

    Returns:
        200: Structured analysis plus the narrative text.
        400: Malformed request body.
        500: Missing credential, narrative service failure, or unexpected error.
    """
    body = await request.body()

    try:
        return await run_sentiment_analysis(body, config)
    except InsightsError as exc:
        logger.warning("Sentiment analysis failed: %s", exc)
        return error_response(exc)
    except Exception as exc:
        logger.error("Error in sentiment analyzer: %s", exc, exc_info=True)
        return error_response(exc)
