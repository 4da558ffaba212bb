"""
Sentiment Analysis Models — Pydantic schemas for the feedback scoring pipeline.

Defines request/response models for:
- POST /api/v1/sentiment/analyze — score a batch of feedback records
- The structured SentimentAnalysisResult produced by the scorer

The wire format is camelCase; attributes are snake_case with camelCase
aliases, and either spelling is accepted on input.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

FeedbackSourceType = Literal[
    "reviews", "surveys", "social_media", "complaints", "staff_feedback",
]
AnalysisType = Literal["comprehensive", "quick", "trend", "competitive"]
TrendDirection = Literal["improving", "declining", "stable"]
Severity = Literal["high", "medium", "low"]
ActionPriority = Literal["urgent", "high", "medium", "low"]


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into an aware UTC datetime.

    Accepts a trailing "Z" and date-only strings. Naive values are
    treated as UTC. Raises ValueError when the string does not parse.
    """
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ======================================================================
# Request models
# ======================================================================

class CustomerProfile(_WireModel):
    """Who left the feedback, when the source knows."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = None
    type: Literal["regular", "new", "vip"] = "regular"
    demographics: Optional[dict[str, Any]] = None


class FeedbackMetadata(_WireModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    platform: Optional[str] = None
    location: Optional[str] = None
    order_type: Optional[str] = Field(default=None, alias="orderType")


class FeedbackRecord(_WireModel):
    """One piece of customer or staff feedback. Never mutated by the pipeline."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    source: FeedbackSourceType
    content: str
    rating: Optional[float] = Field(default=None, ge=1, le=5)
    date: str
    customer: Optional[CustomerProfile] = None
    metadata: Optional[FeedbackMetadata] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        """Reject timestamps that cannot be bucketed into trends."""
        try:
            parse_timestamp(v)
        except ValueError:
            raise ValueError(f"date must be an ISO 8601 timestamp, got {v!r}")
        return v

    @property
    def timestamp(self) -> datetime:
        return parse_timestamp(self.date)


class SentimentAnalysisRequest(_WireModel):
    """Body of POST /api/v1/sentiment/analyze."""

    feedback_data: list[FeedbackRecord] = Field(..., alias="feedbackData")
    analysis_type: AnalysisType = Field(..., alias="analysisType")
    timeframe: str
    focus_areas: Optional[list[str]] = Field(default=None, alias="focusAreas")


# ======================================================================
# Result models
# ======================================================================

class CategoryScore(_WireModel):
    """Sentiment scoped to one fixed restaurant-experience dimension."""

    score: int = Field(..., ge=-100, le=100)
    volume: int = 0
    key_issues: list[str] = Field(default_factory=list, alias="keyIssues")
    positive_highlights: list[str] = Field(
        default_factory=list, alias="positiveHighlights",
    )
    improvement_suggestions: list[str] = Field(
        default_factory=list, alias="improvementSuggestions",
    )


class TrendPoint(_WireModel):
    label: str
    score: int
    volume: int


class SentimentTrends(_WireModel):
    daily: list[TrendPoint] = Field(default_factory=list)
    weekly: list[TrendPoint] = Field(default_factory=list)
    monthly: list[TrendPoint] = Field(default_factory=list)


class CriticalIssue(_WireModel):
    category: str
    severity: Severity
    description: str
    frequency: float
    impact_score: int = Field(..., ge=0, le=100, alias="impactScore")
    suggested_actions: list[str] = Field(default_factory=list, alias="suggestedActions")
    time_to_resolve: str = Field(..., alias="timeToResolve")
    resources_required: list[str] = Field(default_factory=list, alias="resourcesRequired")


class Opportunity(_WireModel):
    area: str
    potential: Severity
    description: str
    evidence: list[str] = Field(default_factory=list)
    implementation_difficulty: str = Field(..., alias="implementationDifficulty")
    expected_impact: str = Field(..., alias="expectedImpact")


class RiskFactor(_WireModel):
    risk: str
    probability: float = Field(..., ge=0, le=1)
    impact: int = Field(..., ge=0, le=100)
    mitigation_strategies: list[str] = Field(
        default_factory=list, alias="mitigationStrategies",
    )


class ActionItem(_WireModel):
    """A concrete, owned, deadlined task derived from an issue or opportunity."""

    priority: ActionPriority
    category: str
    action: str
    owner: str
    deadline: str
    success_metrics: list[str] = Field(default_factory=list, alias="successMetrics")


class OverallSentiment(_WireModel):
    score: int = Field(..., ge=-100, le=100)
    trend: TrendDirection
    confidence: int = Field(..., ge=0, le=100)
    summary: str


class SentimentInsights(_WireModel):
    critical_issues: list[CriticalIssue] = Field(default_factory=list, alias="criticalIssues")
    opportunities: list[Opportunity] = Field(default_factory=list)
    competitive_advantages: list[str] = Field(
        default_factory=list, alias="competitiveAdvantages",
    )
    risk_factors: list[RiskFactor] = Field(default_factory=list, alias="riskFactors")


class Benchmarking(_WireModel):
    """Simulated comparison figures, not measured externals."""

    industry_comparison: float = Field(..., alias="industryComparison")
    local_comparison: float = Field(..., alias="localComparison")
    historical_comparison: float = Field(..., alias="historicalComparison")


class SentimentAnalysisResult(_WireModel):
    overall_sentiment: OverallSentiment = Field(..., alias="overallSentiment")
    category_breakdown: dict[str, CategoryScore] = Field(..., alias="categoryBreakdown")
    trends: SentimentTrends
    insights: SentimentInsights
    action_items: list[ActionItem] = Field(default_factory=list, alias="actionItems")
    benchmarking: Benchmarking


# ======================================================================
# API Response models
# ======================================================================

class SentimentAnalysisResponse(_WireModel):
    """Response from POST /api/v1/sentiment/analyze."""

    success: bool = True
    analysis: SentimentAnalysisResult
    analysis_type: AnalysisType = Field(..., alias="analysisType")
    processed_feedback_count: int = Field(..., alias="processedFeedbackCount")
    ai_insights: str = Field(default="", alias="aiInsights")


class ErrorResponse(BaseModel):
    """Failure envelope shared by every endpoint."""

    success: bool = False
    error: str
