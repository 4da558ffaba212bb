"""
Ingestion Normalizer — Validates raw request bodies into typed requests.

Both endpoints read the raw body and hand it here before any scoring or
upstream call happens. Pure transformation, no I/O.
"""

import base64
import binascii
import json
import logging
from typing import Any, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from restaurant_insights.core.errors import ValidationError
from restaurant_insights.models.meeting import VoiceAnalysisRequest
from restaurant_insights.models.sentiment import SentimentAnalysisRequest

logger = logging.getLogger(__name__)

RequestModel = TypeVar("RequestModel", bound=BaseModel)


def _decode_body(body: Union[bytes, str, dict[str, Any]]) -> dict[str, Any]:
    """Parse a raw body into a JSON object, or raise ValidationError."""
    if isinstance(body, dict):
        return body

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    if not body.strip():
        raise ValidationError("Request body is empty")

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Request body is not valid JSON: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _format_errors(exc: PydanticValidationError) -> str:
    """Flatten pydantic errors into 'loc: message' pairs."""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ())) or "body"
        parts.append(f"{loc}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def _validate(model: type[RequestModel], payload: dict[str, Any]) -> RequestModel:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        message = _format_errors(exc)
        logger.info("Rejected %s: %s", model.__name__, message)
        raise ValidationError(f"Invalid request: {message}") from exc


def decode_audio(audio_data: str) -> bytes:
    """Decode base64 audio, accepting a "data:<mime>;base64," prefix."""
    if audio_data.startswith("data:") and "," in audio_data:
        audio_data = audio_data.split(",", 1)[1]
    return base64.b64decode(audio_data, validate=True)


def normalize_sentiment_request(
    body: Union[bytes, str, dict[str, Any]],
) -> SentimentAnalysisRequest:
    """
    Validate a sentiment analysis request body.

    feedbackData may be empty. Every present record must carry id,
    source, content and a parseable date; rating is optional.

    Raises:
        ValidationError: body is not a JSON object matching the shape.
    """
    request = _validate(SentimentAnalysisRequest, _decode_body(body))
    logger.debug(
        "Normalized sentiment request: %d records, type=%s, timeframe=%s",
        len(request.feedback_data), request.analysis_type, request.timeframe,
    )
    return request


def normalize_voice_request(
    body: Union[bytes, str, dict[str, Any]],
) -> VoiceAnalysisRequest:
    """
    Validate a voice/meeting analysis request body.

    Raises:
        ValidationError: body is malformed or audioData is not base64.
    """
    request = _validate(VoiceAnalysisRequest, _decode_body(body))
    try:
        decode_audio(request.audio_data)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("audioData must be base64-encoded audio") from exc
    return request
