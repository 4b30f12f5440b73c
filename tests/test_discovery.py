import asyncio
import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from helix.discovery import PainpointDiscovery
from helix.models import SearchResult
from helix.queries import daily_queries, painpoint_queries

NOW = datetime(2026, 10, 19, 12, 0, 0)

PAINPOINT = SearchResult(
    title="I wish there was an app for invoice reminders",
    snippet="Chasing clients for payment is a daily struggle",
    link="https://www.reddit.com/r/entrepreneur/comments/1",
)
NOISE = SearchResult(
    title="Show HN: my new product",
    snippet="Launched today, feedback welcome",
    link="https://example.com/launch",
)
URGENT = SearchResult(
    title="Urgent: desperately need a tool for invoice follow ups",
    snippet="Would pay for this ASAP",
    link="https://www.indiehackers.com/post/urgent",
)
MILD = SearchResult(
    title="Nice tool idea",
    snippet="Slightly frustrating workflow",
    link="https://www.reddit.com/r/startups/comments/2",
)


def search_returning(results, only_query=None):
    client = Mock()

    def search(query, num, time_range):
        if only_query is not None and query != only_query:
            return []
        return list(results)

    client.search.side_effect = search
    return client


def test_backfill_keeps_only_results_with_painpoint_phrases(fake_db):
    client = search_returning([PAINPOINT, NOISE], only_query=painpoint_queries()[0])
    discovery = PainpointDiscovery(client, delay=0)

    result = asyncio.run(discovery.run_backfill())

    assert result == {"found": 1, "stored": 1}
    assert client.search.call_count == 12
    rows = list(fake_db.rows("ideas").values())
    assert len(rows) == 1
    row = rows[0]
    assert row["url"] == PAINPOINT.link
    assert row["source"] == "Reddit"
    assert row["is_new_entry"] is False
    assert row["analysis_id"] is None
    assert row["category"] == "build_together"
    assert row["severity_indicators"] == ["i wish there was", "daily struggle"]
    assert row["delivery_timeline_weeks"] == 2


def test_backfill_query_uses_six_month_window(fake_db):
    client = search_returning([])
    asyncio.run(PainpointDiscovery(client, delay=0).run_backfill())
    query, num, time_range = client.search.call_args_list[0][0]
    assert query == painpoint_queries()[0]
    assert num == 20
    assert time_range == "qdr:m6"


def test_backfill_insert_failure_skips_item(fake_db):
    second = PAINPOINT.model_copy(update={"link": "https://www.reddit.com/r/entrepreneur/comments/9"})
    client = search_returning([PAINPOINT, second], only_query=painpoint_queries()[0])
    insert = AsyncMock(side_effect=[RuntimeError("write failed"), "idea-2"])

    with patch("helix.discovery.db.insert_idea", insert):
        result = asyncio.run(PainpointDiscovery(client, delay=0).run_backfill())

    assert result == {"found": 2, "stored": 1}
    assert insert.await_count == 2


def test_daily_keeps_urgent_new_results_and_expires_old_flags(fake_db):
    ideas = fake_db.collection("ideas")
    ideas.document("old").set({
        "url": "https://www.reddit.com/r/old",
        "category": "build_together",
        "is_new_entry": True,
        "date_discovered": "2026-10-01T00:00:00",
    })
    ideas.document("recent").set({
        "url": "https://www.reddit.com/r/recent",
        "category": "build_together",
        "is_new_entry": True,
        "date_discovered": "2026-10-18T00:00:00",
    })
    already_stored = URGENT.model_copy(update={"link": "https://www.reddit.com/r/recent"})

    # Every daily query returns the same results; the urgent one must be stored once
    client = search_returning([URGENT, MILD, already_stored])
    result = asyncio.run(PainpointDiscovery(client, delay=0).run_daily(now=NOW))

    assert result == {"new_painpoints": 1, "total_processed": 1, "expired_new_flags": 1}
    assert client.search.call_count == len(daily_queries())

    rows = fake_db.rows("ideas")
    assert rows["old"]["is_new_entry"] is False
    assert rows["recent"]["is_new_entry"] is True
    stored = [row for row in rows.values() if row["url"] == URGENT.link]
    assert len(stored) == 1
    assert stored[0]["is_new_entry"] is True
    assert stored[0]["source"] == "Indie Hackers"
    assert stored[0]["date_discovered"] == NOW.isoformat()
    assert "desperately need" in stored[0]["severity_indicators"]


def test_searches_are_spaced_by_the_request_delay(fake_db):
    client = search_returning([])
    with patch("helix.discovery.asyncio.sleep", new_callable=AsyncMock) as sleep:
        asyncio.run(PainpointDiscovery(client, delay=1.0).run_backfill())

    assert client.search.call_count == len(painpoint_queries())
    # Only between consecutive queries, never after the last one
    assert sleep.await_count == len(painpoint_queries()) - 1
    assert all(args == (1.0,) for args, _ in sleep.await_args_list)
