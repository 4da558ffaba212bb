"""
Transcription Service — Audio to speaker-labelled text.

There is no speech-recognition backend yet: every decodable recording is
transcribed to the same restaurant stand-up meeting, one "Speaker: text"
line per turn. The meeting analyzer only relies on that line format, so a
real ASR client can replace PlaceholderTranscriber behind the Transcriber
protocol without touching anything downstream.
"""

import logging
from typing import Protocol

from pydantic import BaseModel

from restaurant_insights.core.errors import UpstreamAnalysisError
from restaurant_insights.services.ingestion import decode_audio

logger = logging.getLogger(__name__)

PLACEHOLDER_CONFIDENCE = 0.92

PLACEHOLDER_TRANSCRIPT = """\
Manager: Good morning everyone, let's start our daily standup meeting.
Sarah: Hi team, I completed the inventory check yesterday and we're running low on salmon and organic vegetables.
Mike: The lunch prep is on track, but we need to discuss the new menu items for next week.
Manager: Great points. Sarah, can you coordinate with our suppliers for the salmon order?
Sarah: Absolutely, I'll reach out to them this morning and get delivery scheduled for tomorrow.
Mike: Also, I think we should train the evening staff on the new pasta preparation technique.
Manager: Good idea. Let's schedule a training session for Friday afternoon. Any other concerns?
Sarah: The walk-in cooler temperature has been fluctuating. Should we call the repair service?
Manager: Yes, please schedule that immediately. We can't afford any food safety issues.
Mike: I'll help coordinate the repair schedule around our prep times.
Manager: Perfect. Let's wrap up - Sarah handles supplier orders and cooler repair, Mike organizes staff training. Meeting adjourned."""


class TranscriptionResult(BaseModel):
    text: str
    confidence: float
    language: str = "en"


class Transcriber(Protocol):
    async def transcribe(self, audio_data: str, language: str = "en") -> TranscriptionResult:
        ...


class PlaceholderTranscriber:
    """Deterministic stand-in for a speech-recognition call."""

    async def transcribe(self, audio_data: str, language: str = "en") -> TranscriptionResult:
        try:
            audio = decode_audio(audio_data)
        except ValueError as exc:
            logger.error("Audio transcription failed: %s", exc)
            raise UpstreamAnalysisError("Audio transcription failed") from exc

        logger.info(
            "Transcribing %d bytes of audio (language=%s) with placeholder transcript",
            len(audio), language,
        )
        return TranscriptionResult(
            text=PLACEHOLDER_TRANSCRIPT,
            confidence=PLACEHOLDER_CONFIDENCE,
            language=language,
        )
