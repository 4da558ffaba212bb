"""
Narrative Prompt Builders — Templates for the external text-generation call.

Each pipeline sends exactly one prompt. Builders own the wording so the
prompt can change without touching the scoring code.
"""

import json
from typing import Optional

from restaurant_insights.models.meeting import Participant
from restaurant_insights.models.sentiment import SentimentAnalysisRequest


# ======================================================================
# Sentiment prompt
# ======================================================================

SENTIMENT_PROMPT_TEMPLATE = """\
As an expert customer experience analyst and sentiment analysis specialist \
for restaurants, analyze this customer feedback data comprehensively.

FEEDBACK DATA TO ANALYZE:
{feedback_json}

ANALYSIS PARAMETERS:
- Type: {analysis_type}
- Timeframe: {timeframe}
- Focus Areas: {focus_areas}

Please provide a detailed sentiment analysis that includes:

1. OVERALL SENTIMENT ASSESSMENT:
   - Calculate weighted sentiment score (-100 to 100 scale)
   - Identify overall trend (improving/declining/stable)
   - Provide confidence level in the analysis
   - Summarize key sentiment drivers

2. CATEGORY-SPECIFIC BREAKDOWN:
   Analyze sentiment by key restaurant categories:
   - Food Quality (taste, freshness, presentation, variety)
   - Service Quality (speed, friendliness, accuracy, professionalism)
   - Atmosphere (ambiance, cleanliness, noise level, decor)
   - Value for Money (pricing, portion sizes, perceived worth)
   - Overall Experience (satisfaction, likelihood to return/recommend)

   For each category provide:
   - Sentiment score and volume
   - Key positive highlights
   - Main issues and complaints
   - Specific improvement suggestions

3. TEMPORAL TREND ANALYSIS:
   - Daily, weekly, and monthly sentiment trends
   - Identify patterns and seasonal variations
   - Correlate trends with business events or changes

4. CRITICAL INSIGHTS AND OPPORTUNITIES:
   - Identify urgent issues requiring immediate attention
   - Spot opportunities for competitive advantage
   - Highlight strengths to leverage in marketing
   - Assess risk factors and their potential impact

5. ACTIONABLE RECOMMENDATIONS:
   - Prioritized action items with owners and timelines
   - Quick wins vs. long-term improvements
   - Resource requirements and success metrics
   - Implementation strategies

6. COMPETITIVE AND INDUSTRY BENCHMARKING:
   - Compare performance against industry standards
   - Identify areas where performance exceeds expectations
   - Highlight competitive vulnerabilities and advantages

Consider factors like source credibility and customer segment differences, \
recency bias and seasonal variations, correlation between feedback channels, \
external factors (events, promotions, competitors), and the actionability \
and business impact of each insight.

Provide specific, data-driven recommendations with clear priorities and \
measurable outcomes."""


class SentimentPromptBuilder:
    """Embeds the full feedback set and analysis parameters in one prompt."""

    template: str = SENTIMENT_PROMPT_TEMPLATE

    def build(self, request: SentimentAnalysisRequest) -> str:
        records = [
            record.model_dump(by_alias=True, exclude_none=True)
            for record in request.feedback_data
        ]
        focus_areas = ", ".join(request.focus_areas or []) or "All aspects"
        return self.template.format(
            feedback_json=json.dumps(records, indent=2, ensure_ascii=False),
            analysis_type=request.analysis_type,
            timeframe=request.timeframe,
            focus_areas=focus_areas,
        )


# ======================================================================
# Meeting prompt
# ======================================================================

DEFAULT_MEETING_CONTEXT = "Restaurant team meeting"

MEETING_PROMPT_TEMPLATE = """\
As an expert AI meeting analyst and voice separation specialist, analyze \
this meeting transcription and provide detailed insights.

TRANSCRIPTION TO ANALYZE:
"{transcript}"

KNOWN PARTICIPANTS:
{participants_json}

ANALYSIS TYPE: {analysis_type}
MEETING CONTEXT: {context}

Please provide a comprehensive analysis that includes:

1. SPEAKER IDENTIFICATION AND SEPARATION:
   - Identify distinct speakers from the conversation
   - Map speakers to known participants when possible
   - Separate the text by speaker with timestamps
   - Analyze speaking patterns and characteristics

2. VOICE PATTERN ANALYSIS:
   - Calculate speaking time distribution
   - Identify interruptions and conversation flow
   - Analyze emotional tone and engagement levels
   - Detect leadership dynamics and participation levels

3. CONTENT ANALYSIS AND INSIGHTS:
   - Extract key topics discussed
   - Identify decisions made during the meeting
   - Track sentiment progression throughout the conversation
   - Assess meeting effectiveness and engagement

4. ACTION ITEM DETECTION:
   - Automatically identify tasks and commitments
   - Extract assignees and deadlines
   - Categorize by priority and urgency
   - Provide context for each action item

5. MEETING SUMMARY AND RECOMMENDATIONS:
   - Comprehensive meeting summary
   - Key takeaways and decisions
   - Follow-up recommendations
   - Process improvement suggestions

Return structured data with speaker segments, analysis metrics, and \
actionable insights."""


class MeetingPromptBuilder:
    """Embeds the transcript and known participants in one prompt."""

    template: str = MEETING_PROMPT_TEMPLATE

    def build(
        self,
        transcript: str,
        participants: list[Participant],
        analysis_type: str,
        context: Optional[str] = None,
    ) -> str:
        participants_json = json.dumps(
            [p.model_dump(by_alias=True, exclude_none=True) for p in participants],
            indent=2,
            ensure_ascii=False,
        )
        return self.template.format(
            transcript=transcript,
            participants_json=participants_json,
            analysis_type=analysis_type,
            context=context or DEFAULT_MEETING_CONTEXT,
        )
