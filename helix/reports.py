import logging
import re
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import numpy as np

from helix import database as db
from helix.config import (
    BUILD_TOGETHER_CATEGORY,
    BUILD_TOGETHER_REPORT_TYPE,
    NEW_ENTRY_WINDOW_DAYS,
    REPORT_TOP_N,
)
from helix.estimates import DEFAULT_DELIVERY_WEEKS, DEFAULT_TECH_STACK
from helix.models import Complexity, DailyReport, ReportSummary
from helix.scoring import parse_revenue_ceiling, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_REVENUE_POTENTIAL = "$0-100/month"
TRENDING_KEYWORD_COUNT = 10
STOP_WORDS = {"the", "and", "for", "with", "that", "this", "are", "can", "has", "will"}
_WORD = re.compile(r"\b\w{3,}\b")


def average_delivery_time(ideas: List[Dict[str, Any]]) -> float:
    if not ideas:
        return 0.0
    weeks = [idea.get("delivery_timeline_weeks") or DEFAULT_DELIVERY_WEEKS for idea in ideas]
    return round_half_up(float(np.mean(weeks)), 1)


def most_common_tech_stack(ideas: List[Dict[str, Any]]) -> str:
    """Mode of the ideas' stacks; on a tie the stack seen first wins."""
    counts = Counter(idea.get("technical_stack_required") or DEFAULT_TECH_STACK for idea in ideas)
    if not counts:
        return DEFAULT_TECH_STACK
    # Counter keeps insertion order and most_common() is a stable sort
    return counts.most_common(1)[0][0]


def highest_revenue_potential(ideas: List[Dict[str, Any]]) -> str:
    best = 0.0
    for idea in ideas:
        ceiling = parse_revenue_ceiling((idea.get("analysis") or {}).get("revenue_potential_monthly"))
        best = max(best, ceiling)
    if not best:
        return DEFAULT_REVENUE_POTENTIAL
    return f"${int(best):,}/month"


def count_easiest_builds(ideas: List[Dict[str, Any]]) -> int:
    return sum(
        1 for idea in ideas
        if (idea.get("analysis") or {}).get("build_complexity") == Complexity.SIMPLE.value
    )


def trending_keywords(ideas: List[Dict[str, Any]], limit: int = TRENDING_KEYWORD_COUNT) -> List[Dict[str, Any]]:
    counts: Counter = Counter()
    for idea in ideas:
        text = f"{idea.get('title', '')} {idea.get('description', '')}".lower()
        counts.update(word for word in _WORD.findall(text) if word not in STOP_WORDS)
    return [{"word": word, "count": count} for word, count in counts.most_common(limit)]


def summarize(ideas: List[Dict[str, Any]]) -> ReportSummary:
    return ReportSummary(
        avg_delivery_time=average_delivery_time(ideas),
        most_common_tech_stack=most_common_tech_stack(ideas),
        highest_revenue_potential=highest_revenue_potential(ideas),
        easiest_builds=count_easiest_builds(ideas),
        trending_keywords=trending_keywords(ideas),
    )


class ReportAggregator:
    """
    Builds the daily snapshot of the best scored ideas.

    Only ideas that already have an analysis are ranked. Re-running on the
    same day overwrites that day's report rather than adding a second one.
    """

    def __init__(self,
                 top_n: int = REPORT_TOP_N,
                 category: str = BUILD_TOGETHER_CATEGORY,
                 report_type: str = BUILD_TOGETHER_REPORT_TYPE):
        self.top_n = top_n
        self.category = category
        self.report_type = report_type

    async def build(self, now: Optional[datetime] = None) -> DailyReport:
        now = now or datetime.utcnow()
        ideas = await db.top_scored_ideas(self.category, self.top_n)
        since = (now - timedelta(days=NEW_ENTRY_WINDOW_DAYS)).isoformat()
        new_ideas = await db.count_new_entries(self.category, since)

        top_score = 0.0
        if ideas:
            top_score = ideas[0].get("overall_score") or ideas[0]["analysis"].get("overall_score") or 0.0

        return DailyReport(
            report_date=now.date().isoformat(),
            report_type=self.report_type,
            total_ideas=len(ideas),
            new_ideas=new_ideas,
            top_score=top_score,
            summary=summarize(ideas),
            top_opportunities=ideas,
            generated_at=now.isoformat(),
        )

    async def run(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        logger.info("Generating daily Build Together report...")
        report = await self.build(now)
        report_id = await db.save_daily_report(report)
        logger.info(f"Stored report {report_id} with {report.total_ideas} opportunities")
        return {
            "report_id": report_id,
            "report_date": report.report_date,
            "total_opportunities": report.total_ideas,
            "new_this_week": report.new_ideas,
            "top_score": report.top_score,
        }
