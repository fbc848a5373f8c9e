"""
Category scoring and top-fix selection.

Every category starts at 100. Each issue subtracts its full penalty from
every category it lists (floored at 0); the overall score is a fixed
weighted blend of the six categories.
"""

import math

from seo_analyzer.schemas.report import ScoreMap, TopFix
from seo_analyzer.services.rules import Issue

CATEGORY_BASE = 100

# Weights in percent; they sum to 100
CATEGORY_WEIGHTS = {
    "technical": 25,
    "content_tags": 15,
    "performance": 20,
    "mobile": 15,
    "navigability": 15,
    "social": 10,
}

IMPACT_ORDER = {"high": 0, "medium": 1, "low": 2}

TOP_FIXES_LIMIT = 5


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp_score(value: float) -> int:
    return min(100, max(0, round_half_up(value)))


def weighted_overall(category_scores: dict[str, int]) -> int:
    """``round(sum(weight * score))`` computed in integer percent to avoid float drift."""
    total = sum(category_scores[category] * weight for category, weight in CATEGORY_WEIGHTS.items())
    return (total + 50) // 100


def rank_issues(issues: list[Issue]) -> list[Issue]:
    """Order by impact tier (high first), then by penalty descending. Stable for ties."""
    return sorted(issues, key=lambda issue: (IMPACT_ORDER[issue.impact], -issue.penalty))


def build_top_fixes(issues: list[Issue], limit: int = TOP_FIXES_LIMIT) -> list[TopFix]:
    return [
        TopFix(
            title=issue.title,
            why=issue.why,
            how_to_fix=issue.how_to_fix,
            impact=issue.impact,
        )
        for issue in rank_issues(issues)[:limit]
    ]


def compute_scores(issues: list[Issue], limit: int = TOP_FIXES_LIMIT) -> tuple[ScoreMap, list[TopFix]]:
    scores = {category: CATEGORY_BASE for category in CATEGORY_WEIGHTS}

    for issue in issues:
        for category in issue.categories:
            scores[category] = max(0, scores[category] - issue.penalty)

    overall = weighted_overall(scores)
    score_map = ScoreMap(
        **{category: clamp_score(value) for category, value in scores.items()},
        overall=clamp_score(overall),
    )
    return score_map, build_top_fixes(issues, limit)
