"""
Sentiment Analysis Service — Runs the feedback pipeline for one request.

Steps:
1. Require the narrative credential (fails before any processing)
2. Normalize the raw body into a SentimentAnalysisRequest
3. Call the narrative analyzer exactly once
4. Score the records deterministically

Returns the success envelope; every failure propagates as an InsightsError.
"""

import logging
from typing import Any, Optional, Union

from restaurant_insights.core.config import NarrativeConfig
from restaurant_insights.models.sentiment import SentimentAnalysisResponse
from restaurant_insights.services.ingestion import normalize_sentiment_request
from restaurant_insights.services.narrative import GeminiNarrativeAnalyzer, NarrativeAnalyzer
from restaurant_insights.services.prompts import SentimentPromptBuilder
from restaurant_insights.services.sentiment_scorer import SentimentScorer

logger = logging.getLogger(__name__)


async def run_sentiment_analysis(
    body: Union[bytes, str, dict[str, Any]],
    config: NarrativeConfig,
    analyzer: Optional[NarrativeAnalyzer] = None,
    scorer: Optional[SentimentScorer] = None,
    prompt_builder: Optional[SentimentPromptBuilder] = None,
) -> SentimentAnalysisResponse:
    """
    Analyze a batch of feedback records.

    Args:
        body: Raw request body (bytes/str JSON) or an already-decoded dict.
        config: Narrative service settings; the API key must be set.
        analyzer: Narrative analyzer; defaults to Gemini over httpx.
        scorer: Structured scorer; defaults to the catalog-backed scorer.
        prompt_builder: Prompt template; defaults to SentimentPromptBuilder.

    Raises:
        ConfigurationError: the narrative API key is missing.
        ValidationError: the body is malformed.
        UpstreamAnalysisError: the narrative call failed.
    """
    config.require_api_key()
    request = normalize_sentiment_request(body)

    analyzer = analyzer or GeminiNarrativeAnalyzer(config)
    scorer = scorer or SentimentScorer()
    prompt_builder = prompt_builder or SentimentPromptBuilder()

    logger.info(
        "Starting sentiment analysis: %d records (type=%s, timeframe=%s)",
        len(request.feedback_data), request.analysis_type, request.timeframe,
    )

    narrative = await analyzer.generate(prompt_builder.build(request))
    if not narrative.is_usable:
        logger.warning("Narrative text is empty, scoring from ratings only")

    analysis = scorer.score(request.feedback_data, narrative.text)

    logger.info(
        "Sentiment analysis complete: score=%d trend=%s confidence=%d",
        analysis.overall_sentiment.score,
        analysis.overall_sentiment.trend,
        analysis.overall_sentiment.confidence,
    )

    return SentimentAnalysisResponse(
        analysis=analysis,
        analysis_type=request.analysis_type,
        processed_feedback_count=len(request.feedback_data),
        ai_insights=narrative.text,
    )
