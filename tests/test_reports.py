import asyncio
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from helix.reports import (
    ReportAggregator,
    average_delivery_time,
    most_common_tech_stack,
    trending_keywords,
)

NOW = datetime(2026, 10, 19, 9, 30, 0)


def seed_scored(store, idea_id, score, weeks, stack, complexity, revenue,
                title="Invoice reminders", is_new=False, discovered="2026-10-01T00:00:00"):
    store.collection("ideas").document(idea_id).set({
        "title": title,
        "description": "Freelancers chase invoices by hand",
        "category": "build_together",
        "delivery_timeline_weeks": weeks,
        "technical_stack_required": stack,
        "is_new_entry": is_new,
        "date_discovered": discovered,
        "analysis_id": idea_id,
        "overall_score": score,
    })
    store.collection("analysis").document(idea_id).set({
        "idea_id": idea_id,
        "build_complexity": complexity,
        "revenue_potential_monthly": revenue,
        "overall_score": score,
        "source": "llm",
    })


def seed_unscored(store, idea_id):
    store.collection("ideas").document(idea_id).set({
        "title": "Unscored",
        "category": "build_together",
        "is_new_entry": True,
        "date_discovered": "2026-10-18T00:00:00",
        "analysis_id": None,
        "overall_score": None,
    })


def test_report_summary(fake_db):
    seed_scored(fake_db, "a", 80, 2, "React, Node.js, PostgreSQL", "Simple", "$500-2000/month")
    seed_scored(fake_db, "b", 70, 3, "React, D3.js, Python, PostgreSQL", "Medium", "$1K-5K/month")
    seed_scored(fake_db, "c", 60, 4, "React, D3.js, Python, PostgreSQL", "Complex", "$200/month")
    seed_unscored(fake_db, "d")

    report = asyncio.run(ReportAggregator().build(now=NOW))

    assert report.report_date == "2026-10-19"
    assert report.total_ideas == 3
    assert report.top_score == 80
    assert [idea["id"] for idea in report.top_opportunities] == ["a", "b", "c"]
    assert report.top_opportunities[0]["analysis"]["build_complexity"] == "Simple"
    assert report.summary.avg_delivery_time == 3.0
    assert report.summary.most_common_tech_stack == "React, D3.js, Python, PostgreSQL"
    assert report.summary.highest_revenue_potential == "$5,000/month"
    assert report.summary.easiest_builds == 1
    assert report.new_ideas == 1


def test_empty_report(fake_db):
    report = asyncio.run(ReportAggregator().build(now=NOW))
    assert report.total_ideas == 0
    assert report.top_score == 0
    assert report.summary.avg_delivery_time == 0
    assert report.summary.highest_revenue_potential == "$0-100/month"
    assert report.summary.easiest_builds == 0


def test_report_respects_top_n(fake_db):
    for i in range(5):
        seed_scored(fake_db, f"idea-{i}", 50 + i, 2, "React", "Simple", "$100/month")
    report = asyncio.run(ReportAggregator(top_n=2).build(now=NOW))
    assert [idea["id"] for idea in report.top_opportunities] == ["idea-4", "idea-3"]


def test_same_day_rerun_replaces_report(fake_db):
    seed_scored(fake_db, "a", 80, 2, "React", "Simple", "$500-2000/month")
    aggregator = ReportAggregator()

    first = asyncio.run(aggregator.run(now=NOW))
    seed_scored(fake_db, "b", 90, 1, "React", "Simple", "$900/month")
    second = asyncio.run(aggregator.run(now=NOW.replace(hour=18)))

    reports = fake_db.rows("daily_reports")
    assert list(reports) == ["2026-10-19_build_together"]
    assert first["report_id"] == second["report_id"]
    assert reports["2026-10-19_build_together"]["total_ideas"] == 2
    assert reports["2026-10-19_build_together"]["top_score"] == 90


def test_average_delivery_time_rounds_to_one_decimal():
    ideas = [{"delivery_timeline_weeks": 1}, {"delivery_timeline_weeks": 2}, {}]
    # missing weeks count as 2: 5 / 3
    assert average_delivery_time(ideas) == 1.7


def test_most_common_tech_stack_tie_keeps_first_seen():
    ideas = [
        {"technical_stack_required": "Vue, Firebase"},
        {"technical_stack_required": "React, Node.js"},
    ]
    assert most_common_tech_stack(ideas) == "Vue, Firebase"


def test_trending_keywords_drop_stop_words():
    ideas = [
        {"title": "Invoice reminders for freelancers", "description": "The invoice tool"},
        {"title": "Invoice portal", "description": "and that is all"},
    ]
    keywords = trending_keywords(ideas)
    assert keywords[0] == {"word": "invoice", "count": 3}
    words = {item["word"] for item in keywords}
    assert "the" not in words
    assert "for" not in words
    assert "is" not in words
