"""
Scoring Catalogs — Heuristic data tables for the structured sentiment scorer.

Keyword sets, improvement suggestions, and the restaurant-domain templates
for critical issues, opportunities and risks. The scorer loads a
ScoringCatalog when it is constructed, so callers can extend or replace
any table without touching control flow.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

# ======================================================================
# Category keywords: case-insensitive substring match against content.
# The first keyword of each list keys IMPROVEMENT_SUGGESTIONS.
# ======================================================================

CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "Food Quality": ["food", "taste", "meal", "dish", "flavor", "quality"],
    "Service Quality": ["service", "staff", "server", "waiter", "friendly", "attentive"],
    "Atmosphere": ["atmosphere", "ambiance", "environment", "clean", "decor", "noise"],
    "Value for Money": ["price", "value", "worth", "expensive", "cheap", "cost"],
    "Overall Experience": ["experience", "overall", "recommend", "return", "satisfied"],
}

IMPROVEMENT_SUGGESTIONS: dict[str, list[str]] = {
    "food": [
        "Implement quality control checks for food temperature",
        "Review portion consistency across all dishes",
        "Add more vegetarian and dietary-specific options",
    ],
    "service": [
        "Increase staff during peak hours",
        "Implement service training program",
        "Set up better table management system",
    ],
    "atmosphere": [
        "Improve lighting and acoustics",
        "Regular deep cleaning schedule",
        "Update decor and furniture",
    ],
    "price": [
        "Review pricing strategy for competitive positioning",
        "Introduce value meal options",
        "Implement loyalty rewards program",
    ],
}

DEFAULT_IMPROVEMENT_SUGGESTION = "General service improvements needed"

# ======================================================================
# Insight templates
# ======================================================================

CRITICAL_ISSUE_TEMPLATES: list[dict] = [
    {
        "category": "Service Speed",
        "severity": "high",
        "description": "Multiple complaints about slow service during peak hours",
        "frequency_ratio": 0.6,
        "impact_score": 85,
        "suggested_actions": [
            "Hire additional staff for peak hours",
            "Implement order management system",
            "Train staff on efficiency protocols",
        ],
        "time_to_resolve": "2-4 weeks",
        "resources_required": [
            "Additional staff budget", "Training time", "Management system",
        ],
    },
    {
        "category": "Food Quality",
        "severity": "medium",
        "description": "Inconsistent food temperature and presentation",
        "frequency_ratio": 0.3,
        "impact_score": 70,
        "suggested_actions": [
            "Implement quality control checkpoints",
            "Review kitchen workflow",
            "Additional chef training",
        ],
        "time_to_resolve": "1-2 weeks",
        "resources_required": ["Kitchen training", "Process documentation"],
    },
]

OPPORTUNITY_TEMPLATES: list[dict] = [
    {
        "area": "Special Dietary Options",
        "potential": "high",
        "description": "High demand for vegetarian and gluten-free options",
        "evidence": [
            "Multiple requests in feedback", "Growing market trend", "Competitor advantage",
        ],
        "implementation_difficulty": "Medium - requires menu development",
        "expected_impact": "15-20% increase in customer satisfaction",
    },
    {
        "area": "Digital Ordering",
        "potential": "medium",
        "description": "Customers requesting online ordering and delivery options",
        "evidence": ["Feedback mentions", "Industry trend", "Convenience factor"],
        "implementation_difficulty": "High - requires technology investment",
        "expected_impact": "10-25% revenue increase through new channel",
    },
]

# elevated_probability applies when the overall score is below elevated_below_score
RISK_TEMPLATES: list[dict] = [
    {
        "risk": "Negative review spiral",
        "probability": 0.3,
        "elevated_probability": 0.7,
        "elevated_below_score": -20,
        "impact": 80,
        "mitigation_strategies": [
            "Proactive customer service recovery",
            "Address critical issues immediately",
            "Implement review response strategy",
        ],
    },
    {
        "risk": "Staff turnover impact",
        "probability": 0.4,
        "impact": 60,
        "mitigation_strategies": [
            "Improve working conditions",
            "Competitive compensation",
            "Better training and support",
        ],
    },
]

COMPETITIVE_ADVANTAGES: list[str] = [
    "Unique menu items highly praised by customers",
    "Excellent customer service compared to local competitors",
    "Strong reputation for special occasion dining",
    "Consistent food quality and presentation",
]


# ======================================================================
# Typed catalog
# ======================================================================

class CriticalIssueTemplate(BaseModel):
    category: str
    severity: Literal["high", "medium", "low"]
    description: str
    frequency_ratio: float = Field(..., ge=0)
    impact_score: int = Field(..., ge=0, le=100)
    suggested_actions: list[str]
    time_to_resolve: str
    resources_required: list[str] = Field(default_factory=list)


class OpportunityTemplate(BaseModel):
    area: str
    potential: Literal["high", "medium", "low"]
    description: str
    evidence: list[str] = Field(default_factory=list)
    implementation_difficulty: str
    expected_impact: str


class RiskTemplate(BaseModel):
    risk: str
    probability: float = Field(..., ge=0, le=1)
    elevated_probability: Optional[float] = Field(default=None, ge=0, le=1)
    elevated_below_score: Optional[int] = None
    impact: int = Field(..., ge=0, le=100)
    mitigation_strategies: list[str] = Field(default_factory=list)

    def probability_for(self, overall_score: int) -> float:
        if (
            self.elevated_probability is not None
            and self.elevated_below_score is not None
            and overall_score < self.elevated_below_score
        ):
            return self.elevated_probability
        return self.probability


class ScoringCatalog(BaseModel):
    """All heuristic tables the scorer reads, validated once at load time."""

    category_keywords: dict[str, list[str]]
    improvement_suggestions: dict[str, list[str]]
    default_improvement_suggestion: str = DEFAULT_IMPROVEMENT_SUGGESTION
    critical_issues: list[CriticalIssueTemplate]
    opportunities: list[OpportunityTemplate]
    risks: list[RiskTemplate]
    competitive_advantages: list[str] = Field(default_factory=list)

    @classmethod
    def default(cls) -> ScoringCatalog:
        return cls(
            category_keywords=CATEGORY_KEYWORDS,
            improvement_suggestions=IMPROVEMENT_SUGGESTIONS,
            critical_issues=CRITICAL_ISSUE_TEMPLATES,
            opportunities=OPPORTUNITY_TEMPLATES,
            risks=RISK_TEMPLATES,
            competitive_advantages=COMPETITIVE_ADVANTAGES,
        )

    def suggestions_for(self, category: str) -> list[str]:
        """Improvement suggestions keyed by the category's lead keyword."""
        keywords = self.category_keywords.get(category) or [""]
        return list(
            self.improvement_suggestions.get(
                keywords[0], [self.default_improvement_suggestion],
            )
        )
