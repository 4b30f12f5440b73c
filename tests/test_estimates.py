import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from helix.estimates import (
    DEFAULT_MONETIZATION,
    DEFAULT_TECH_STACK,
    estimate_delivery_weeks,
    estimate_tech_stack,
    suggest_monetization,
)


@pytest.mark.parametrize("description,weeks", [
    ("analytics dashboard that needs an API sync", 4),
    ("Zapier style integration for invoices", 3),
    ("a basic form builder", 1),
    ("todo list for freelancers", 2),
    ("", 2),
])
def test_estimate_delivery_weeks(description, weeks):
    assert estimate_delivery_weeks(description) == weeks


def test_estimate_tech_stack():
    assert estimate_tech_stack("Mobile app for chat") == "React Native, Node.js, PostgreSQL"
    assert estimate_tech_stack("live chat widget") == "React, WebSockets, Node.js, Redis"
    assert estimate_tech_stack("data visualization for sales") == "React, D3.js, Python, PostgreSQL"
    assert estimate_tech_stack("invoice generator") == DEFAULT_TECH_STACK


def test_suggest_monetization():
    assert suggest_monetization("standups for a remote team").startswith("Team SaaS")
    assert suggest_monetization("tracker for solo freelancers").startswith("Personal SaaS")
    assert suggest_monetization("pay per API requests").startswith("Usage-based")
    assert suggest_monetization("recipe notes") == DEFAULT_MONETIZATION
