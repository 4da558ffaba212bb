"""
Structured Sentiment Scorer — Deterministic post-processing of feedback records.

Turns a list of FeedbackRecord into a SentimentAnalysisResult:
1. Overall score from the mean rating (1-5 stars mapped onto -100..100)
2. Trend direction from the most recent vs oldest rating windows
3. Per-category breakdown via keyword matching on content
4. Daily / weekly / monthly trend buckets
5. Critical issues, opportunities and risks from catalog templates
6. Action items derived from issues and opportunities
7. Simulated benchmarking figures

Numeric fields never depend on the narrative text. The narrative is only
searched for coarse keyword evidence. Empty or partially populated input
degrades to neutral defaults; the scorer never raises on it.
"""

import logging
import math
import random
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from restaurant_insights.models.sentiment import (
    ActionItem,
    Benchmarking,
    CategoryScore,
    CriticalIssue,
    FeedbackRecord,
    Opportunity,
    OverallSentiment,
    RiskFactor,
    SentimentAnalysisResult,
    SentimentInsights,
    SentimentTrends,
    TrendPoint,
)
from restaurant_insights.services.catalogs import ScoringCatalog

logger = logging.getLogger(__name__)

# ======================================================================
# Constants
# ======================================================================

NEUTRAL_RATING = 3.0
SCORE_PER_STAR = 50

TREND_WINDOW = 10
TREND_THRESHOLD = 0.3

BASE_CONFIDENCE = 60
CONFIDENCE_PER_RECORD = 5
MAX_CONFIDENCE = 95

POSITIVE_RATING_MIN = 4
NEGATIVE_RATING_MAX = 2
MAX_CATEGORY_EXCERPTS = 3
EXCERPT_MAX_CHARS = 160

DAILY_BUCKETS = 7
WEEKLY_BUCKETS = 4
MONTHLY_BUCKETS = 6

INDUSTRY_JITTER = 10
LOCAL_JITTER = 7

ISSUE_OWNER = "Restaurant Manager"
OPPORTUNITY_OWNER = "Operations Team"


# ======================================================================
# Scoring helpers
# ======================================================================

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rating_to_score(average_rating: float) -> int:
    """
    Map a 1-5 star average onto the -100..100 sentiment scale.

      1 star → -100, 3 stars → 0, 5 stars → +100
    """
    return _round_half_up((average_rating - NEUTRAL_RATING) * SCORE_PER_STAR)


def effective_rating(record: FeedbackRecord) -> float:
    """A record's rating, or neutral when it has none."""
    return record.rating if record.rating is not None else NEUTRAL_RATING


def average_rating(records: Iterable[FeedbackRecord]) -> float:
    """Mean of the ratings that are present; neutral when none are."""
    ratings = [r.rating for r in records if r.rating is not None]
    if not ratings:
        return NEUTRAL_RATING
    return sum(ratings) / len(ratings)


def compute_confidence(feedback_count: int) -> int:
    """60% baseline, +5 per record, capped at 95%."""
    return min(MAX_CONFIDENCE, feedback_count * CONFIDENCE_PER_RECORD + BASE_CONFIDENCE)


def classify_trend(recent_avg: float, older_avg: float) -> str:
    """Strict comparison against the ±0.3 star band."""
    # Rounded so that e.g. 3.3 vs 3.0 + 0.3 compares as equal
    delta = round(recent_avg - older_avg, 9)
    if delta > TREND_THRESHOLD:
        return "improving"
    if delta < -TREND_THRESHOLD:
        return "declining"
    return "stable"


def matches_keywords(record: FeedbackRecord, keywords: Iterable[str]) -> bool:
    content = record.content.lower()
    return any(keyword.lower() in content for keyword in keywords)


def filter_by_keywords(
    records: Iterable[FeedbackRecord], keywords: list[str],
) -> list[FeedbackRecord]:
    """Records whose content contains any keyword (case-insensitive)."""
    return [r for r in records if matches_keywords(r, keywords)]


def _excerpt(content: str) -> str:
    text = " ".join(content.split())
    if len(text) <= EXCERPT_MAX_CHARS:
        return text
    return text[: EXCERPT_MAX_CHARS - 3].rstrip() + "..."


def summarize_sentiment(score: int, trend: str, feedback_count: int) -> str:
    """One-paragraph human summary of the overall sentiment."""
    sentiment = "neutral"
    if score > 20:
        sentiment = "positive"
    elif score < -20:
        sentiment = "negative"

    if score > 50:
        tail = "Strong customer satisfaction with multiple positive highlights."
    elif score < -30:
        tail = "Significant customer concerns requiring immediate attention."
    else:
        tail = "Mixed feedback with opportunities for improvement."

    return (
        f"Overall sentiment is {sentiment} ({score}/100) based on "
        f"{feedback_count} reviews, with a {trend} trend over recent periods. {tail}"
    )


def generate_action_items(
    critical_issues: list[CriticalIssue],
    opportunities: list[Opportunity],
) -> list[ActionItem]:
    """
    One action per suggested action of each issue, then one per opportunity.

    Issue priority: high severity → urgent, anything else → high.
    Opportunity priority: high potential → high, anything else → medium.
    """
    actions: list[ActionItem] = []

    for issue in critical_issues:
        for index, action in enumerate(issue.suggested_actions):
            actions.append(ActionItem(
                priority="urgent" if issue.severity == "high" else "high",
                category=issue.category,
                action=action,
                owner=ISSUE_OWNER,
                deadline="1 week" if index == 0 else "2 weeks",
                success_metrics=[f"Reduce {issue.category.lower()} complaints by 50%"],
            ))

    for opportunity in opportunities:
        actions.append(ActionItem(
            priority="high" if opportunity.potential == "high" else "medium",
            category=opportunity.area,
            action=f"Implement {opportunity.area.lower()} initiative",
            owner=OPPORTUNITY_OWNER,
            deadline="1 month",
            success_metrics=[opportunity.expected_impact],
        ))

    return actions


# ======================================================================
# Scorer
# ======================================================================

class SentimentScorer:
    """
    Deterministic scorer over an in-memory record list.

    Args:
        catalog: Heuristic tables; defaults to ScoringCatalog.default().
        rng: Random source for the simulated benchmarking figures.
        now: Clock used to anchor the trend buckets.
        non_overlapping_windows: When True, shrink the trend windows to
            half the dataset so recent and older never share records.
            Off by default: the first-10 and last-10 windows overlap
            below 20 records.
    """

    def __init__(
        self,
        catalog: Optional[ScoringCatalog] = None,
        rng: Optional[random.Random] = None,
        now: Optional[Callable[[], datetime]] = None,
        non_overlapping_windows: bool = False,
    ):
        self.catalog = catalog or ScoringCatalog.default()
        self.rng = rng or random.Random()
        self.now = now or (lambda: datetime.now(timezone.utc))
        self.non_overlapping_windows = non_overlapping_windows

    # ------------------------------------------------------------------
    # Trend direction
    # ------------------------------------------------------------------

    def trend_windows(
        self, records: list[FeedbackRecord],
    ) -> tuple[list[FeedbackRecord], list[FeedbackRecord]]:
        """Return (recent, older) windows from records sorted by date."""
        ordered = sorted(records, key=lambda r: r.timestamp)
        window = TREND_WINDOW
        if self.non_overlapping_windows:
            window = min(TREND_WINDOW, len(ordered) // 2)
        if window == 0:
            return [], []
        return ordered[-window:], ordered[:window]

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def analyze_category(
        self, category: str, records: list[FeedbackRecord],
    ) -> CategoryScore:
        keywords = self.catalog.category_keywords.get(category, [])
        relevant = filter_by_keywords(records, keywords)

        positives = [r for r in relevant if effective_rating(r) >= POSITIVE_RATING_MIN]
        negatives = [r for r in relevant if effective_rating(r) <= NEGATIVE_RATING_MAX]

        suggestions = self.catalog.suggestions_for(category)
        return CategoryScore(
            score=rating_to_score(average_rating(relevant)),
            volume=len(relevant),
            key_issues=[_excerpt(r.content) for r in negatives[:MAX_CATEGORY_EXCERPTS]],
            positive_highlights=[
                _excerpt(r.content) for r in positives[:MAX_CATEGORY_EXCERPTS]
            ],
            improvement_suggestions=suggestions[: max(1, len(negatives))],
        )

    def category_breakdown(
        self, records: list[FeedbackRecord],
    ) -> dict[str, CategoryScore]:
        return {
            category: self.analyze_category(category, records)
            for category in self.catalog.category_keywords
        }

    # ------------------------------------------------------------------
    # Time buckets
    # ------------------------------------------------------------------

    @staticmethod
    def _bucket(
        label: str, dated: list[tuple[FeedbackRecord, date]], start: date, end: date,
    ) -> TrendPoint:
        in_range = [record for record, day in dated if start <= day <= end]
        return TrendPoint(
            label=label,
            score=rating_to_score(average_rating(in_range)),
            volume=len(in_range),
        )

    def generate_trends(self, records: list[FeedbackRecord]) -> SentimentTrends:
        """
        Bucket records by UTC calendar date, oldest bucket first.

        daily:   the 7 days ending today, labelled YYYY-MM-DD
        weekly:  4 trailing 7-day windows, labelled "Week of YYYY-MM-DD"
        monthly: 6 trailing calendar months, labelled YYYY-MM
        Empty buckets score 0 with volume 0.
        """
        today = self.now().astimezone(timezone.utc).date()
        dated = [(r, r.timestamp.date()) for r in records]

        daily = []
        for offset in range(DAILY_BUCKETS - 1, -1, -1):
            day = today - timedelta(days=offset)
            daily.append(self._bucket(day.isoformat(), dated, day, day))

        weekly = []
        for offset in range(WEEKLY_BUCKETS - 1, -1, -1):
            end = today - timedelta(days=7 * offset)
            start = end - timedelta(days=6)
            weekly.append(self._bucket(f"Week of {start.isoformat()}", dated, start, end))

        monthly = []
        for offset in range(MONTHLY_BUCKETS - 1, -1, -1):
            month_index = today.year * 12 + (today.month - 1) - offset
            year, month = divmod(month_index, 12)
            start = date(year, month + 1, 1)
            next_index = month_index + 1
            next_start = date(next_index // 12, next_index % 12 + 1, 1)
            monthly.append(self._bucket(
                f"{year:04d}-{month + 1:02d}", dated, start, next_start - timedelta(days=1),
            ))

        return SentimentTrends(daily=daily, weekly=weekly, monthly=monthly)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def identify_critical_issues(self, negative_count: int) -> list[CriticalIssue]:
        return [
            CriticalIssue(
                category=t.category,
                severity=t.severity,
                description=t.description,
                frequency=round(negative_count * t.frequency_ratio, 2),
                impact_score=t.impact_score,
                suggested_actions=list(t.suggested_actions),
                time_to_resolve=t.time_to_resolve,
                resources_required=list(t.resources_required),
            )
            for t in self.catalog.critical_issues
        ]

    def identify_opportunities(self, narrative_text: str = "") -> list[Opportunity]:
        narrative = narrative_text.lower()
        opportunities = []
        for t in self.catalog.opportunities:
            evidence = list(t.evidence)
            if narrative and t.area.lower() in narrative:
                evidence.append("Highlighted in narrative analysis")
            opportunities.append(Opportunity(
                area=t.area,
                potential=t.potential,
                description=t.description,
                evidence=evidence,
                implementation_difficulty=t.implementation_difficulty,
                expected_impact=t.expected_impact,
            ))
        return opportunities

    def identify_risk_factors(self, overall_score: int) -> list[RiskFactor]:
        return [
            RiskFactor(
                risk=t.risk,
                probability=t.probability_for(overall_score),
                impact=t.impact,
                mitigation_strategies=list(t.mitigation_strategies),
            )
            for t in self.catalog.risks
        ]

    def benchmark(
        self, overall_score: int, recent_avg: float, older_avg: float,
    ) -> Benchmarking:
        """Simulated comparisons; replace wholesale when real benchmarks exist."""
        return Benchmarking(
            industry_comparison=round(
                overall_score + self.rng.uniform(-INDUSTRY_JITTER, INDUSTRY_JITTER), 2,
            ),
            local_comparison=round(
                overall_score + self.rng.uniform(-LOCAL_JITTER, LOCAL_JITTER), 2,
            ),
            historical_comparison=round(
                overall_score - (recent_avg - older_avg) * SCORE_PER_STAR, 2,
            ),
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def score(
        self, records: list[FeedbackRecord], narrative_text: str = "",
    ) -> SentimentAnalysisResult:
        """Build the full structured result for one request."""
        feedback_count = len(records)
        overall_score = rating_to_score(average_rating(records))

        recent, older = self.trend_windows(records)
        recent_avg = average_rating(recent)
        older_avg = average_rating(older)
        trend = classify_trend(recent_avg, older_avg)

        negative_count = sum(
            1 for r in records if effective_rating(r) <= NEGATIVE_RATING_MAX
        )

        critical_issues = self.identify_critical_issues(negative_count)
        opportunities = self.identify_opportunities(narrative_text)

        logger.debug(
            "Scored %d records: score=%d trend=%s negatives=%d",
            feedback_count, overall_score, trend, negative_count,
        )

        return SentimentAnalysisResult(
            overall_sentiment=OverallSentiment(
                score=overall_score,
                trend=trend,
                confidence=compute_confidence(feedback_count),
                summary=summarize_sentiment(overall_score, trend, feedback_count),
            ),
            category_breakdown=self.category_breakdown(records),
            trends=self.generate_trends(records),
            insights=SentimentInsights(
                critical_issues=critical_issues,
                opportunities=opportunities,
                competitive_advantages=list(self.catalog.competitive_advantages),
                risk_factors=self.identify_risk_factors(overall_score),
            ),
            action_items=generate_action_items(critical_issues, opportunities),
            benchmarking=self.benchmark(overall_score, recent_avg, older_avg),
        )
