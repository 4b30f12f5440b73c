import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from helix import database as db
from helix.config import (
    BACKFILL_PAGE_SIZE,
    BACKFILL_TIME_RANGE,
    BUILD_TOGETHER_CATEGORY,
    DAILY_PAGE_SIZE,
    DAILY_TIME_RANGE,
    NEW_ENTRY_WINDOW_DAYS,
    REQUEST_DELAY_SECONDS,
    URGENCY_THRESHOLD,
)
from helix.estimates import estimate_delivery_weeks, estimate_tech_stack, suggest_monetization
from helix.indicators import (
    extract_indicators,
    extract_source,
    extract_urgency_indicators,
    urgency_score,
)
from helix.models import CandidateIdea, SearchResult
from helix.queries import daily_queries, painpoint_queries
from helix.search import SearchClient

logger = logging.getLogger(__name__)


def build_candidate(result: SearchResult,
                    indicators: List[str],
                    category: str,
                    is_new_entry: bool,
                    now: Optional[datetime] = None) -> CandidateIdea:
    """Turn a search result into an idea row tagged with its build estimates."""
    description = result.snippet or ""
    return CandidateIdea(
        title=result.title,
        description=description,
        source=extract_source(result.link),
        url=result.link,
        date_discovered=(now or datetime.utcnow()).isoformat(),
        category=category,
        painpoint_description=description,
        delivery_timeline_weeks=estimate_delivery_weeks(description),
        technical_stack_required=estimate_tech_stack(description),
        monetization_model=suggest_monetization(description),
        is_new_entry=is_new_entry,
        severity_indicators=indicators,
    )


class PainpointDiscovery:
    """
    Search forums for painpoint phrasing and store what survives filtering.

    Queries run strictly one after another with a fixed delay between them.
    """

    def __init__(self,
                 search_client: SearchClient,
                 delay: float = REQUEST_DELAY_SECONDS,
                 category: str = BUILD_TOGETHER_CATEGORY):
        self.search_client = search_client
        self.delay = delay
        self.category = category

    async def _search_all(self, queries: List[str], num: int, time_range: str) -> List[SearchResult]:
        results: List[SearchResult] = []
        for index, query in enumerate(tqdm(queries, desc="Searching")):
            if index and self.delay:
                await asyncio.sleep(self.delay)
            logger.info(f"Searching for: {query}")
            batch = await asyncio.to_thread(self.search_client.search, query, num, time_range)
            results.extend(batch)
        return results

    async def _store(self, candidates: List[CandidateIdea]) -> int:
        stored = 0
        for candidate in candidates:
            try:
                await db.insert_idea(candidate)
                stored += 1
            except Exception as e:
                logger.error(f"Error storing painpoint {candidate.url}: {e}")
        return stored

    async def run_backfill(self) -> Dict[str, Any]:
        """Historical sweep: keep every result with at least one painpoint phrase."""
        logger.info("Starting historical painpoint backfill...")
        results = await self._search_all(painpoint_queries(), BACKFILL_PAGE_SIZE, BACKFILL_TIME_RANGE)

        candidates = []
        for result in results:
            indicators = extract_indicators(f"{result.title} {result.snippet}")
            if not indicators:
                continue
            candidates.append(build_candidate(result, indicators, self.category, is_new_entry=False))

        logger.info(f"Found {len(candidates)} potential painpoints")
        stored = await self._store(candidates)
        logger.info(f"Successfully stored {stored} painpoints")
        return {"found": len(candidates), "stored": stored}

    async def run_daily(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Last-24h sweep for urgent painpoints, flagged NEW for a week."""
        now = now or datetime.utcnow()
        logger.info("Starting daily painpoint discovery...")
        results = await self._search_all(daily_queries(), DAILY_PAGE_SIZE, DAILY_TIME_RANGE)

        candidates = []
        seen_urls = set()
        for result in results:
            content = f"{result.title} {result.snippet}"
            indicators = extract_urgency_indicators(content)
            if urgency_score(content) <= URGENCY_THRESHOLD or not indicators:
                continue
            if not result.link or result.link in seen_urls:
                continue
            seen_urls.add(result.link)
            if await db.idea_exists_with_url(result.link):
                continue
            candidates.append(build_candidate(result, indicators, self.category, is_new_entry=True, now=now))

        logger.info(f"Found {len(candidates)} new daily painpoints")
        stored = await self._store(candidates)

        cutoff = (now - timedelta(days=NEW_ENTRY_WINDOW_DAYS)).isoformat()
        expired = await db.clear_stale_new_flags(self.category, cutoff)
        logger.info(f"Stored {stored} new daily painpoints, expired {expired} NEW flags")

        return {
            "new_painpoints": stored,
            "total_processed": len(candidates),
            "expired_new_flags": expired,
        }
