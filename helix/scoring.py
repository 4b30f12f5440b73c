"""
Deterministic scoring rules: complexity classes, the weighted overall score
and the fallback analysis used when the LLM answer is unusable.
"""

import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from helix.estimates import DEFAULT_DELIVERY_WEEKS
from helix.models import Analysis, CandidateIdea, Complexity
from helix.prompts.analysis import FALLBACK_EXPLANATION, FALLBACK_REVENUE

Number = Union[int, float]

COMPLEXITY_BONUS = {
    Complexity.SIMPLE: 100,
    Complexity.MEDIUM: 70,
    Complexity.COMPLEX: 40,
}

WEIGHTS = {
    "severity": Decimal("0.25"),
    "feasibility": Decimal("0.20"),
    "competition_gap": Decimal("0.20"),
    "viability": Decimal("0.20"),
    "complexity_bonus": Decimal("0.15"),
}

FALLBACK_BASE_SCORE = 60

_REVENUE_NUMBER = re.compile(r"\$?\s*([0-9][0-9,]*(?:\.[0-9]+)?)\s*([kK])?")


def round_half_up(value: Number, places: int = 0) -> float:
    """Round halves away from zero (58.5 -> 59), unlike the built-in round()."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def classify_complexity(weeks: Optional[Number]) -> Complexity:
    """Map a delivery estimate to a complexity class: <=2 Simple, <=3 Medium, else Complex."""
    if weeks is None:
        weeks = DEFAULT_DELIVERY_WEEKS
    if weeks <= 2:
        return Complexity.SIMPLE
    if weeks <= 3:
        return Complexity.MEDIUM
    return Complexity.COMPLEX


def weighted_overall(
    severity: Number,
    feasibility: Number,
    competition_gap: Number,
    viability: Number,
    complexity: Complexity,
) -> int:
    total = (
        WEIGHTS["severity"] * Decimal(str(severity))
        + WEIGHTS["feasibility"] * Decimal(str(feasibility))
        + WEIGHTS["competition_gap"] * Decimal(str(competition_gap))
        + WEIGHTS["viability"] * Decimal(str(viability))
        + WEIGHTS["complexity_bonus"] * COMPLEXITY_BONUS[Complexity(complexity)]
    )
    return int(total.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def fallback_analysis(idea: CandidateIdea, now: Optional[datetime] = None) -> Analysis:
    """Static-formula analysis for an idea whose LLM scoring failed."""
    complexity = classify_complexity(idea.delivery_timeline_weeks)
    base = FALLBACK_BASE_SCORE
    return Analysis(
        idea_id=idea.id or "",
        painpoint_severity_score=base,
        technical_feasibility=base,
        build_complexity=complexity,
        revenue_potential_monthly=FALLBACK_REVENUE,
        competition_gap_score=base,
        saas_viability_score=base,
        overall_score=weighted_overall(base, base, base, base, complexity),
        explanation=FALLBACK_EXPLANATION.format(source=idea.source),
        analysis_date=(now or datetime.utcnow()).isoformat(),
        source="fallback",
    )


def parse_revenue_ceiling(text: Optional[str]) -> float:
    """
    Largest dollar figure in a revenue range such as "$500-2K/month".

    Returns 0.0 when no number is present.
    """
    if not text:
        return 0.0
    values = []
    for digits, suffix in _REVENUE_NUMBER.findall(str(text)):
        try:
            value = float(digits.replace(",", ""))
        except ValueError:
            continue
        values.append(value * 1000 if suffix else value)
    return max(values) if values else 0.0
