"""
Narrative Analyzer — Gemini generateContent integration.

Sends one prompt per request to the Gemini REST API and returns the raw
narrative text. The text is advisory: the scorers compute every numeric
field themselves and only run coarse keyword searches over it.

No retries. A missing credential, a non-2xx status, a timeout, or a body
without candidates[0].content.parts[0].text fails the whole request.
"""

import logging
import math
from typing import Any, Optional, Protocol

import httpx
from pydantic import BaseModel

from restaurant_insights.core.config import NarrativeConfig
from restaurant_insights.core.errors import UpstreamAnalysisError

logger = logging.getLogger(__name__)


class NarrativeResult(BaseModel):
    """Opaque narrative text plus whatever confidence the service reported."""

    text: str
    confidence: Optional[float] = None
    model: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        return bool(self.text.strip())


class NarrativeAnalyzer(Protocol):
    async def generate(self, prompt: str) -> NarrativeResult:
        ...


def _extract_text(data: dict[str, Any]) -> str:
    """Pull candidates[0].content.parts[0].text, or raise UpstreamAnalysisError."""
    try:
        candidate = data["candidates"][0]
        parts = candidate["content"]["parts"]
        text = parts[0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise UpstreamAnalysisError("Invalid response from Gemini API") from exc

    if not isinstance(text, str):
        raise UpstreamAnalysisError("Invalid response from Gemini API")
    return text


def _extract_confidence(data: dict[str, Any]) -> Optional[float]:
    """
    Convert the candidate's average token log-probability into [0, 1].

    Gemini only reports avgLogprobs for some models; returns None otherwise.
    """
    try:
        avg_logprobs = data["candidates"][0].get("avgLogprobs")
    except (KeyError, IndexError, AttributeError):
        return None
    if not isinstance(avg_logprobs, (int, float)):
        return None
    return round(min(1.0, max(0.0, math.exp(avg_logprobs))), 4)


class GeminiNarrativeAnalyzer:
    """Single-shot Gemini text generation over httpx."""

    def __init__(self, config: NarrativeConfig):
        self.config = config
        self.api_key = config.require_api_key()

    @property
    def endpoint(self) -> str:
        base = self.config.base_url.rstrip("/")
        return f"{base}/models/{self.config.model}:generateContent"

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topK": self.config.top_k,
                "topP": self.config.top_p,
                "maxOutputTokens": self.config.max_output_tokens,
            },
        }

    async def generate(self, prompt: str) -> NarrativeResult:
        """
        Run one generateContent call.

        Returns:
            NarrativeResult with the first candidate's text.

        Raises:
            UpstreamAnalysisError: on timeout, transport error, non-2xx
                status, or a body missing the expected content structure.
        """
        logger.info(
            "Requesting narrative analysis from %s (%d prompt chars)",
            self.config.model, len(prompt),
        )

        async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
            try:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    headers={"Content-Type": "application/json"},
                    json=self._build_payload(prompt),
                )
            except httpx.TimeoutException as exc:
                logger.error("Gemini API timeout after %.0fs", self.config.timeout_seconds)
                raise UpstreamAnalysisError("Gemini API timeout") from exc
            except httpx.HTTPError as exc:
                logger.error("Gemini API request error: %s", exc)
                raise UpstreamAnalysisError(f"Gemini API request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logger.error(
                "Gemini API HTTP error %d: %s",
                response.status_code, response.text,
            )
            raise UpstreamAnalysisError(f"Gemini API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamAnalysisError("Gemini API returned a non-JSON body") from exc

        if not isinstance(data, dict):
            raise UpstreamAnalysisError("Invalid response from Gemini API")

        text = _extract_text(data)
        confidence = _extract_confidence(data)
        logger.info(
            "Gemini returned %d narrative chars (confidence=%s)",
            len(text), confidence,
        )
        return NarrativeResult(text=text, confidence=confidence, model=self.config.model)
