"""
Keyword heuristics that tag a candidate with build estimates
"""

DEFAULT_DELIVERY_WEEKS = 2
DEFAULT_TECH_STACK = "React, Node.js, PostgreSQL"

# Checked in order; first match wins
DELIVERY_RULES = [
    (("dashboard", "analytics", "complex"), 4),
    (("integration", "api", "sync"), 3),
    (("form", "simple", "basic"), 1),
]

TECH_STACK_RULES = [
    (("mobile", "app"), "React Native, Node.js, PostgreSQL"),
    (("real-time", "chat", "live"), "React, WebSockets, Node.js, Redis"),
    (("data", "analytics", "visualization"), "React, D3.js, Python, PostgreSQL"),
]

MONETIZATION_RULES = [
    (("team", "business", "enterprise"), "Team SaaS ($29-99/month)"),
    (("personal", "individual", "solo"), "Personal SaaS ($9-29/month)"),
    (("usage", "api", "requests"), "Usage-based ($0.01-1/request)"),
]
DEFAULT_MONETIZATION = "Freemium SaaS ($0-49/month)"


def _first_match(description: str, rules, default):
    lowered = (description or "").lower()
    for keywords, value in rules:
        if any(keyword in lowered for keyword in keywords):
            return value
    return default


def estimate_delivery_weeks(description: str) -> int:
    """Estimated build time in weeks (1-4)."""
    return _first_match(description, DELIVERY_RULES, DEFAULT_DELIVERY_WEEKS)


def estimate_tech_stack(description: str) -> str:
    return _first_match(description, TECH_STACK_RULES, DEFAULT_TECH_STACK)


def suggest_monetization(description: str) -> str:
    return _first_match(description, MONETIZATION_RULES, DEFAULT_MONETIZATION)
