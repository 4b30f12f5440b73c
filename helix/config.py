# Configuration settings shared across the application

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Mapping, Optional

# Default model
DEFAULT_MODEL = "gemini-2.5-flash"

# Analysis generation settings
DEFAULT_ANALYSIS_TEMP = 0.7
ANALYSIS_MAX_TOKENS = 1000

# Search API
SEARCH_ENDPOINT = "https://google.serper.dev/search"
SEARCH_TIMEOUT_SECONDS = 15
BACKFILL_PAGE_SIZE = 20
BACKFILL_TIME_RANGE = "qdr:m6"  # last 6 months
DAILY_PAGE_SIZE = 15
DAILY_TIME_RANGE = "qdr:d"  # last 24 hours

# Pipeline pacing and sizes
REQUEST_DELAY_SECONDS = 1.0
ANALYSIS_BATCH_SIZE = 20
REPORT_TOP_N = 15
NEW_ENTRY_WINDOW_DAYS = 7
URGENCY_THRESHOLD = 60

# Workflow step retries
STEP_ATTEMPTS = 2
STEP_WAIT_MULTIPLIER = 1.0

# Categories and report types
BUILD_TOGETHER_CATEGORY = "build_together"
BUILD_TOGETHER_REPORT_TYPE = "build_together"

# Firestore collections
IDEAS_COLLECTION = "ideas"
ANALYSIS_COLLECTION = "analysis"
REPORTS_COLLECTION = "daily_reports"
PROFILES_COLLECTION = "user_profiles"
GIFT_RECORDS_COLLECTION = "tier_gift_records"
HIDDEN_IDEAS_COLLECTION = "hidden_ideas"
JOB_RUNS_COLLECTION = "job_runs"

# Subscription tiers, lowest first
TIER_ORDER = ["free", "starter", "professional", "enterprise"]
ADMIN_TIER = "professional"
DEFAULT_GIFT_DAYS = 30

# Headers accepted on CORS preflight
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
CORS_ALLOW_METHODS = ["POST", "GET", "OPTIONS", "PUT", "DELETE", "PATCH"]
CORS_MAX_AGE = 86400

# Variables reported by the environment status endpoint
ENV_VARIABLES = [
    "GEMINI_API_KEY",
    "SERPER_API_KEY",
    "HELIX_SERVICE_TOKEN",
    "ADMIN_EMAILS",
    "GOOGLE_CLOUD_PROJECT",
    "GOOGLE_APPLICATION_CREDENTIALS",
]


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Process configuration, read once from the environment and passed explicitly."""
    gemini_api_key: Optional[str] = None
    serper_api_key: Optional[str] = None
    service_token: Optional[str] = None
    admin_emails: List[str] = field(default_factory=list)
    model_name: str = DEFAULT_MODEL
    request_delay: float = REQUEST_DELAY_SECONDS
    analysis_batch_size: int = ANALYSIS_BATCH_SIZE
    report_top_n: int = REPORT_TOP_N
    step_attempts: int = STEP_ATTEMPTS
    step_wait_multiplier: float = STEP_WAIT_MULTIPLIER
    env_status: Mapping[str, bool] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            gemini_api_key=env.get("GEMINI_API_KEY") or None,
            serper_api_key=env.get("SERPER_API_KEY") or None,
            service_token=env.get("HELIX_SERVICE_TOKEN") or None,
            admin_emails=_split_csv(env.get("ADMIN_EMAILS", "")),
            model_name=env.get("HELIX_MODEL", DEFAULT_MODEL),
            request_delay=float(env.get("HELIX_REQUEST_DELAY", REQUEST_DELAY_SECONDS)),
            analysis_batch_size=int(env.get("HELIX_ANALYSIS_BATCH_SIZE", ANALYSIS_BATCH_SIZE)),
            report_top_n=int(env.get("HELIX_REPORT_TOP_N", REPORT_TOP_N)),
            step_attempts=int(env.get("HELIX_STEP_ATTEMPTS", STEP_ATTEMPTS)),
            env_status={name: bool(env.get(name)) for name in ENV_VARIABLES},
        )


@lru_cache
def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return Settings.from_env()
