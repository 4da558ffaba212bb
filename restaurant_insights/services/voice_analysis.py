"""
Voice Analysis Service — Runs the meeting pipeline for one request.

Steps:
1. Require the narrative credential (fails before any processing)
2. Normalize the raw body into a VoiceAnalysisRequest
3. Transcribe the audio
4. Call the narrative analyzer once with the transcript
5. Derive segments, speaker analytics, insights and action items
"""

import logging
import time
from typing import Any, Optional, Union

from restaurant_insights.core.config import NarrativeConfig
from restaurant_insights.models.meeting import VoiceAnalysisResponse
from restaurant_insights.services.ingestion import normalize_voice_request
from restaurant_insights.services.meeting_analyzer import MeetingAnalyzer
from restaurant_insights.services.narrative import GeminiNarrativeAnalyzer, NarrativeAnalyzer
from restaurant_insights.services.prompts import MeetingPromptBuilder
from restaurant_insights.services.transcription import PlaceholderTranscriber, Transcriber

logger = logging.getLogger(__name__)


async def run_voice_analysis(
    body: Union[bytes, str, dict[str, Any]],
    config: NarrativeConfig,
    analyzer: Optional[NarrativeAnalyzer] = None,
    transcriber: Optional[Transcriber] = None,
    meeting_analyzer: Optional[MeetingAnalyzer] = None,
    prompt_builder: Optional[MeetingPromptBuilder] = None,
) -> VoiceAnalysisResponse:
    """
    Transcribe and analyze a meeting recording.

    Raises:
        ConfigurationError: the narrative API key is missing.
        ValidationError: the body is malformed or audioData is not base64.
        UpstreamAnalysisError: transcription or the narrative call failed.
    """
    started = time.perf_counter()

    config.require_api_key()
    request = normalize_voice_request(body)

    analyzer = analyzer or GeminiNarrativeAnalyzer(config)
    transcriber = transcriber or PlaceholderTranscriber()
    meeting_analyzer = meeting_analyzer or MeetingAnalyzer()
    prompt_builder = prompt_builder or MeetingPromptBuilder()

    logger.info(
        "Processing voice analysis request: type=%s, participants=%d",
        request.analysis_type, len(request.participants),
    )

    transcription = await transcriber.transcribe(request.audio_data, request.language)

    narrative = await analyzer.generate(prompt_builder.build(
        transcript=transcription.text,
        participants=request.participants,
        analysis_type=request.analysis_type,
        context=request.context,
    ))

    result = meeting_analyzer.analyze(
        transcript=transcription.text,
        participants=request.participants,
        narrative_text=narrative.text,
        confidence=transcription.confidence,
        include_insights=request.analysis_type != "transcription",
    )

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    logger.info(
        "Voice analysis complete: %d segments, %d speakers in %dms",
        len(result.transcription), len(result.speaker_analysis), elapsed_ms,
    )
    return VoiceAnalysisResponse(result=result, processing_time=elapsed_ms)
