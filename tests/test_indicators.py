import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from helix.indicators import (
    extract_indicators,
    extract_source,
    extract_urgency_indicators,
    urgency_score,
)


def test_extract_indicators_case_insensitive_in_vocabulary_order():
    text = "Such a PAIN POINT. I wish there was an app for invoice reminders"
    assert extract_indicators(text) == ["i wish there was", "pain point"]


def test_extract_indicators_no_signal():
    assert extract_indicators("Launched my side project today") == []
    assert extract_indicators("") == []
    assert extract_indicators(None) == []


def test_extract_indicators_custom_vocabulary():
    assert extract_indicators("Rust is great", ["rust", "go"]) == ["rust"]


def test_urgency_score_weights():
    text = "URGENT: desperately need a tool, would pay for it"
    # urgent + desperately (30 each) and "would pay" (25)
    assert urgency_score(text) == 85
    assert extract_urgency_indicators(text) == ["desperately need", "would pay for"]


def test_urgency_score_capped():
    assert urgency_score("urgent asap immediately critical") == 100


def test_urgency_score_low_signal():
    assert urgency_score("This is frustrating") == 20
    assert urgency_score("Nice weather") == 0


@pytest.mark.parametrize("url,expected", [
    ("https://www.reddit.com/r/SideProject/comments/abc", "Reddit"),
    ("https://www.indiehackers.com/post/xyz", "Indie Hackers"),
    ("https://github.com/org/repo/issues/1", "GitHub"),
    ("https://stackoverflow.com/questions/1", "Stack Overflow"),
    ("https://twitter.com/someone/status/1", "Twitter"),
    ("https://example.com/blog", "Web"),
    ("", "Web"),
])
def test_extract_source(url, expected):
    assert extract_source(url) == expected
