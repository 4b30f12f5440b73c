"""
Search query generation for painpoint discovery
"""

from typing import List, Sequence

from helix.prompts.discovery import BACKFILL_PATTERNS, DAILY_PATTERNS


def _or_group(phrases: Sequence[str]) -> str:
    return " OR ".join(f'"{phrase}"' for phrase in phrases)


def build_query(forum: str, phrases: Sequence[str]) -> str:
    """Compose one site-restricted query from a forum and its phrase pattern."""
    return f"site:{forum} {_or_group(phrases)}"


def painpoint_queries() -> List[str]:
    """Fixed ordered list of backfill queries, one per (forum, phrase pattern)."""
    return [build_query(forum, phrases) for forum, phrases in BACKFILL_PATTERNS]


def daily_queries() -> List[str]:
    """Fixed ordered list of queries for the daily urgency-oriented run."""
    queries = []
    for forum, groups in DAILY_PATTERNS:
        body = " ".join(_or_group(group) for group in groups)
        queries.append(f"site:{forum} {body}")
    return queries
