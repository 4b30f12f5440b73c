import logging
import os
from typing import List, Optional

import requests

from helix.config import SEARCH_ENDPOINT, SEARCH_TIMEOUT_SECONDS
from helix.models import SearchResult

logger = logging.getLogger(__name__)


class SearchClient:
    """
    Thin client for the Serper web search API.

    Failures are per-query and soft: a transport error or non-2xx answer is
    logged and the query yields no results, so a batch never aborts.
    """

    def __init__(self,
                 api_key: Optional[str] = None,
                 endpoint: str = SEARCH_ENDPOINT,
                 timeout: float = SEARCH_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key or os.environ.get("SERPER_API_KEY")
        if not self.api_key:
            logger.warning("SERPER_API_KEY not set. Search requests will be rejected upstream.")
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, query: str, num: int = 20, time_range: Optional[str] = None,
               pages: int = 1) -> List[SearchResult]:
        results: List[SearchResult] = []
        for page in range(1, pages + 1):
            batch = self._search_page(query, num, time_range, page)
            results.extend(batch)
            if len(batch) < num:
                break
        return results

    def _search_page(self, query: str, num: int, time_range: Optional[str],
                     page: int) -> List[SearchResult]:
        payload = {"q": query, "num": num}
        if time_range:
            payload["tbs"] = time_range
        if page > 1:
            payload["page"] = page

        try:
            response = self.session.post(
                self.endpoint,
                json=payload,
                headers={"X-API-KEY": self.api_key or "", "Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Search request failed for query {query!r}: {e}")
            return []

        if not response.ok:
            logger.warning(f"Search failed for query {query!r}: status {response.status_code}")
            return []

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Search returned a non-JSON body for query {query!r}: {e}")
            return []

        organic = data.get("organic") or []
        return [
            SearchResult(
                title=item.get("title") or "",
                snippet=item.get("snippet") or "",
                link=item.get("link") or "",
            )
            for item in organic
            if isinstance(item, dict)
        ]
