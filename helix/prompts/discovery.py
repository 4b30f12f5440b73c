"""
Search query patterns and phrase vocabularies used for painpoint discovery
"""

# (forum, phrase pattern) pairs for the historical backfill, one query each
BACKFILL_PATTERNS = [
    ("reddit.com/r/entrepreneur", ["I wish there was an app", "why doesn't anyone build", "this manual process"]),
    ("reddit.com/r/SideProject", ["need an app for", "someone should build", "frustrating that"]),
    ("reddit.com/r/startups", ["pain point", "major problem", "daily struggle"]),
    ("reddit.com/r/webdev", ["this should exist", "missing tool", "no good solution"]),
    ("indiehackers.com", ["problem to solve", "pain point", "build this"]),
    ("indiehackers.com", ["wish someone would", "market gap", "underserved"]),
    ("github.com", ["feature request", "enhancement", "this would be helpful"]),
    ("github.com", ["missing functionality", "would love to see", "pain point"]),
    ("stackoverflow.com", ["no good way to", "is there a tool", "better solution"]),
    ("stackoverflow.com", ["frustrating", "time consuming", "manual process"]),
    ("twitter.com", ["why is there no", "someone please build", "this is so annoying"]),
    ("twitter.com developers", ["pain point", "daily struggle", "workflow issue"]),
]

# Fresher, urgency oriented patterns for the daily run.
# Each entry is (forum, phrase groups); groups are ANDed, phrases inside a group ORed.
DAILY_PATTERNS = [
    ("reddit.com/r/entrepreneur", [["urgent need", "desperately need", "ASAP"], ["app", "tool", "solution"]]),
    ("reddit.com/r/SideProject", [["quick build", "simple app", "weekend project"], ["need"]]),
    ("reddit.com/r/startups", [["immediate pain", "daily frustration", "killing productivity"]]),
    ("indiehackers.com", [["would pay for", "market opportunity", "unmet need"]]),
    ("indiehackers.com", [["build together", "co-founder", "technical partner"], ["idea"]]),
    ("twitter.com", [["why doesn't exist", "someone build this", "take my money"]]),
    ("stackoverflow.com", [["no solution", "manual workaround", "time wasting"]]),
    ("github.com", [["feature request", "enhancement needed", "would love"]]),
]

# Phrases whose presence marks a search result as a painpoint
PAINPOINT_PHRASES = [
    "i wish there was",
    "why doesn't anyone build",
    "this manual process",
    "need an app for",
    "someone should build",
    "frustrating that",
    "pain point",
    "major problem",
    "daily struggle",
    "this should exist",
    "missing tool",
    "no good solution",
    "problem to solve",
    "wish someone would",
    "market gap",
    "underserved",
    "feature request",
    "would be helpful",
    "missing functionality",
    "would love to see",
    "no good way to",
    "is there a tool",
    "better solution",
    "time consuming",
    "why is there no",
    "someone please build",
    "this is so annoying",
    "workflow issue",
]

URGENCY_PATTERNS = [
    "urgent need",
    "desperately need",
    "asap",
    "immediately",
    "daily pain",
    "major frustration",
    "killing productivity",
    "would pay for",
    "willing to subscribe",
    "business critical",
    "manual workaround",
    "time wasting",
    "repetitive task",
]

# Term weights feeding the urgency score
HIGH_URGENCY_TERMS = [
    "urgent", "asap", "immediately", "desperately", "critical",
    "daily pain", "killing productivity", "losing money", "major blocker",
]
MEDIUM_URGENCY_TERMS = [
    "frustrating", "annoying", "time consuming", "inefficient",
    "manual process", "repetitive task", "would save time",
]
BUSINESS_IMPACT_TERMS = [
    "would pay", "willing to pay", "subscription", "saas",
    "business need", "enterprise", "team tool",
]
