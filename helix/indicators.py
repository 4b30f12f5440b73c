"""
Phrase-presence checks applied to search result text
"""

from typing import List, Sequence

from helix.prompts.discovery import (
    BUSINESS_IMPACT_TERMS,
    HIGH_URGENCY_TERMS,
    MEDIUM_URGENCY_TERMS,
    PAINPOINT_PHRASES,
    URGENCY_PATTERNS,
)

SOURCE_DOMAINS = [
    ("reddit.com", "Reddit"),
    ("indiehackers.com", "Indie Hackers"),
    ("github.com", "GitHub"),
    ("stackoverflow.com", "Stack Overflow"),
    ("twitter.com", "Twitter"),
]


def extract_indicators(text: str, vocabulary: Sequence[str] = PAINPOINT_PHRASES) -> List[str]:
    """
    Return the vocabulary phrases present in text (case-insensitive), in vocabulary order.

    An empty list means the text carries no painpoint signal.
    """
    lowered = (text or "").lower()
    return [phrase for phrase in vocabulary if phrase in lowered]


def extract_urgency_indicators(text: str) -> List[str]:
    return extract_indicators(text, URGENCY_PATTERNS)


def urgency_score(text: str) -> int:
    """Weighted count of urgency and business-impact terms, capped at 100."""
    lowered = (text or "").lower()
    score = 0
    score += 30 * sum(1 for term in HIGH_URGENCY_TERMS if term in lowered)
    score += 20 * sum(1 for term in MEDIUM_URGENCY_TERMS if term in lowered)
    score += 25 * sum(1 for term in BUSINESS_IMPACT_TERMS if term in lowered)
    return min(score, 100)


def extract_source(url: str) -> str:
    """Map a result link to the platform name shown in the dashboard."""
    for domain, name in SOURCE_DOMAINS:
        if domain in (url or ""):
            return name
    return "Web"
