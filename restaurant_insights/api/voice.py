"""
Voice Analysis API — Meeting transcription and analysis endpoint.

POST /api/v1/voice/analyze — Transcribe a recording and analyze the meeting
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from restaurant_insights.api.responses import error_response
from restaurant_insights.core.config import NarrativeConfig, get_narrative_config
from restaurant_insights.core.errors import InsightsError
from restaurant_insights.models.meeting import VoiceAnalysisResponse
from restaurant_insights.services.voice_analysis import run_voice_analysis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/voice", tags=["voice"])


# ===================================================================
# POST /api/v1/voice/analyze
# ===================================================================

@router.post(
    "/analyze",
    status_code=status.HTTP_200_OK,
    response_model=VoiceAnalysisResponse,
    response_model_exclude_none=True,
)
async def analyze_voice(
    request: Request,
    config: NarrativeConfig = Depends(get_narrative_config),
):
    """
    Transcribe base64 audio and return speaker-level meeting analysis.

    Returns:
        200: Segments, speaker analytics and (except for plain
             transcription requests) insights, action items and summary.
        400: Malformed request body.
        500: Missing credential, upstream failure, or unexpected error.
    """
    body = await request.body()

    try:
        return await run_voice_analysis(body, config)
    except InsightsError as exc:
        logger.warning("Voice analysis failed: %s", exc)
        return error_response(exc)
    except Exception as exc:
        logger.error("Error in voice separator: %s", exc, exc_info=True)
        return error_response(exc)
