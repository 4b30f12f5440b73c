# Database module for Firestore operations
# Provides the row-level reads and writes used by the pipeline and the API

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from pydantic import ValidationError

from helix.config import (
    ANALYSIS_COLLECTION,
    GIFT_RECORDS_COLLECTION,
    HIDDEN_IDEAS_COLLECTION,
    IDEAS_COLLECTION,
    JOB_RUNS_COLLECTION,
    PROFILES_COLLECTION,
    REPORTS_COLLECTION,
)
from helix.models import Analysis, CandidateIdea, DailyReport, UserProfile

logger = logging.getLogger(__name__)

# Firestore client (lazy initialization)
_db = None


def get_db() -> firestore.Client:
    """Get or create Firestore client."""
    global _db
    if _db is None:
        _db = firestore.Client()
    return _db


def _with_id(doc) -> Dict[str, Any]:
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return data


def _now() -> str:
    return datetime.utcnow().isoformat()


# --- Ideas ---

async def insert_idea(idea: CandidateIdea) -> str:
    """Insert one candidate idea and return its document id."""
    db = get_db()
    _, ref = db.collection(IDEAS_COLLECTION).add(idea.to_record())
    return ref.id


async def idea_exists_with_url(url: str) -> bool:
    db = get_db()
    docs = (db.collection(IDEAS_COLLECTION)
            .where(filter=FieldFilter("url", "==", url))
            .limit(1)
            .stream())
    return any(True for _ in docs)


async def get_idea(idea_id: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    doc = db.collection(IDEAS_COLLECTION).document(idea_id).get()
    if doc.exists:
        return _with_id(doc)
    return None


async def list_ideas(category: Optional[str] = None, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
    """List ideas newest first, optionally restricted to a category."""
    db = get_db()
    query = db.collection(IDEAS_COLLECTION)
    if category:
        query = query.where(filter=FieldFilter("category", "==", category))
    query = query.order_by("date_discovered", direction=firestore.Query.DESCENDING)
    if offset:
        query = query.offset(offset)
    return [_with_id(doc) for doc in query.limit(limit).stream()]


async def list_unscored_ideas(category: str, limit: int) -> List[CandidateIdea]:
    """Ideas in a category with no analysis attached yet."""
    db = get_db()
    docs = (db.collection(IDEAS_COLLECTION)
            .where(filter=FieldFilter("category", "==", category))
            .where(filter=FieldFilter("analysis_id", "==", None))
            .limit(limit)
            .stream())
    ideas = []
    for doc in docs:
        try:
            ideas.append(CandidateIdea(**_with_id(doc)))
        except ValidationError as e:
            logger.warning(f"Skipping malformed idea {doc.id}: {e.error_count()} invalid fields")
    return ideas


async def clear_stale_new_flags(category: str, cutoff: str) -> int:
    """Drop the NEW badge from ideas discovered before cutoff. Returns rows touched."""
    db = get_db()
    docs = (db.collection(IDEAS_COLLECTION)
            .where(filter=FieldFilter("category", "==", category))
            .where(filter=FieldFilter("is_new_entry", "==", True))
            .where(filter=FieldFilter("date_discovered", "<", cutoff))
            .stream())
    count = 0
    for doc in docs:
        doc.reference.update({"is_new_entry": False})
        count += 1
    return count


async def count_new_entries(category: str, since: str) -> int:
    db = get_db()
    docs = (db.collection(IDEAS_COLLECTION)
            .where(filter=FieldFilter("category", "==", category))
            .where(filter=FieldFilter("is_new_entry", "==", True))
            .where(filter=FieldFilter("date_discovered", ">=", since))
            .stream())
    return sum(1 for _ in docs)


async def top_scored_ideas(category: str, limit: int) -> List[Dict[str, Any]]:
    """
    Highest scoring ideas in a category, each with its analysis embedded
    under "analysis". Ideas without an analysis are never returned.
    """
    db = get_db()
    docs = (db.collection(IDEAS_COLLECTION)
            .where(filter=FieldFilter("category", "==", category))
            .order_by("overall_score", direction=firestore.Query.DESCENDING)
            .limit(limit)
            .stream())

    ideas = []
    for doc in docs:
        idea = _with_id(doc)
        analysis_id = idea.get("analysis_id")
        if not analysis_id:
            continue
        analysis_doc = db.collection(ANALYSIS_COLLECTION).document(analysis_id).get()
        if not analysis_doc.exists:
            logger.warning(f"Idea {idea['id']} references missing analysis {analysis_id}")
            continue
        idea["analysis"] = _with_id(analysis_doc)
        ideas.append(idea)
    return ideas


# --- Analysis ---

async def create_analysis(analysis: Analysis) -> str:
    """
    Store an analysis under its idea's id.

    Raises google.api_core.exceptions.AlreadyExists if the idea was scored before,
    so an idea never ends up with two analyses.
    """
    db = get_db()
    ref = db.collection(ANALYSIS_COLLECTION).document(analysis.idea_id)
    ref.create(analysis.to_record())
    return ref.id


async def get_analysis(analysis_id: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    doc = db.collection(ANALYSIS_COLLECTION).document(analysis_id).get()
    if doc.exists:
        return _with_id(doc)
    return None


async def attach_analysis(idea_id: str, analysis_id: str, overall_score: float) -> None:
    db = get_db()
    db.collection(IDEAS_COLLECTION).document(idea_id).update({
        "analysis_id": analysis_id,
        "overall_score": overall_score,
    })


# --- Daily reports ---

async def save_daily_report(report: DailyReport) -> str:
    """Write the report for its (date, type), replacing an earlier run of the same day."""
    db = get_db()
    db.collection(REPORTS_COLLECTION).document(report.report_id).set(report.model_dump(mode="json"))
    return report.report_id


async def get_latest_report(report_type: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    docs = (db.collection(REPORTS_COLLECTION)
            .where(filter=FieldFilter("report_type", "==", report_type))
            .order_by("report_date", direction=firestore.Query.DESCENDING)
            .limit(1)
            .stream())
    for doc in docs:
        return _with_id(doc)
    return None


# --- User profiles ---

async def get_user_profile(user_id: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    doc = db.collection(PROFILES_COLLECTION).document(user_id).get()
    if doc.exists:
        return _with_id(doc)
    return None


async def create_user_profile(profile: UserProfile) -> Dict[str, Any]:
    db = get_db()
    now = _now()
    data = profile.model_dump(exclude={"id"})
    data["created_at"] = data.get("created_at") or now
    data["updated_at"] = now
    db.collection(PROFILES_COLLECTION).document(profile.id).set(data)
    data["id"] = profile.id
    return data


async def find_profile_by_email(email: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    docs = (db.collection(PROFILES_COLLECTION)
            .where(filter=FieldFilter("email", "==", email))
            .limit(1)
            .stream())
    for doc in docs:
        return _with_id(doc)
    return None


async def update_user_tier(user_id: str, tier: str, gift_tier_expiry: str) -> None:
    db = get_db()
    db.collection(PROFILES_COLLECTION).document(user_id).update({
        "current_tier": tier,
        "gift_tier_expiry": gift_tier_expiry,
        "updated_at": _now(),
    })


async def record_tier_gift(admin_id: str, user_id: str, tier: str, expiry_date: str) -> str:
    db = get_db()
    _, ref = db.collection(GIFT_RECORDS_COLLECTION).add({
        "admin_id": admin_id,
        "user_id": user_id,
        "tier_granted": tier,
        "expiry_date": expiry_date,
        "created_at": _now(),
    })
    return ref.id


async def increment_usage(user_id: str) -> int:
    """Bump the user's usage counter and return the new value."""
    db = get_db()
    ref = db.collection(PROFILES_COLLECTION).document(user_id)
    doc = ref.get()
    if not doc.exists:
        return 0
    count = int((doc.to_dict() or {}).get("daily_usage_count", 0)) + 1
    ref.update({"daily_usage_count": count, "updated_at": _now()})
    return count


async def get_all_users_summary() -> List[Dict[str, Any]]:
    """Get summary of all users for admin view."""
    db = get_db()
    users = []
    for doc in db.collection(PROFILES_COLLECTION).stream():
        data = doc.to_dict() or {}
        hidden = list(db.collection(HIDDEN_IDEAS_COLLECTION)
                      .where(filter=FieldFilter("user_id", "==", doc.id))
                      .limit(100)
                      .stream())
        users.append({
            "user_id": doc.id,
            "email": data.get("email"),
            "current_tier": data.get("current_tier", "free"),
            "gift_tier_expiry": data.get("gift_tier_expiry"),
            "daily_usage_count": data.get("daily_usage_count", 0),
            "hidden_idea_count": len(hidden),
            "last_activity": data.get("updated_at"),
        })
    return users


# --- Hidden ideas ---

def _hidden_doc_id(user_id: str, idea_id: str) -> str:
    return f"{user_id}_{idea_id}"


async def hide_idea(user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    db = get_db()
    now = _now()
    record = dict(data)
    record.update({"user_id": user_id, "created_at": now, "updated_at": now})
    db.collection(HIDDEN_IDEAS_COLLECTION).document(_hidden_doc_id(user_id, data["idea_id"])).set(record)
    return record


async def list_hidden_ideas(user_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
    db = get_db()
    query = (db.collection(HIDDEN_IDEAS_COLLECTION)
             .where(filter=FieldFilter("user_id", "==", user_id)))
    if status:
        query = query.where(filter=FieldFilter("status", "==", status))
    docs = query.order_by("created_at", direction=firestore.Query.DESCENDING).stream()
    return [_with_id(doc) for doc in docs]


async def update_hidden_idea(user_id: str, idea_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    db = get_db()
    ref = db.collection(HIDDEN_IDEAS_COLLECTION).document(_hidden_doc_id(user_id, idea_id))
    doc = ref.get()
    if not doc.exists:
        return None
    changes = dict(updates)
    changes["updated_at"] = _now()
    ref.update(changes)
    merged = doc.to_dict() or {}
    merged.update(changes)
    merged["id"] = ref.id
    return merged


async def unhide_idea(user_id: str, idea_id: str) -> bool:
    db = get_db()
    ref = db.collection(HIDDEN_IDEAS_COLLECTION).document(_hidden_doc_id(user_id, idea_id))
    if ref.get().exists:
        ref.delete()
        return True
    return False


async def hidden_idea_ids(user_id: str) -> set:
    return {item["idea_id"] for item in await list_hidden_ideas(user_id)}


# --- Job runs ---

async def get_job_run(key: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    doc = db.collection(JOB_RUNS_COLLECTION).document(key).get()
    if doc.exists:
        return _with_id(doc)
    return None


async def save_job_run(key: str, data: Dict[str, Any]) -> None:
    db = get_db()
    save_data = dict(data)
    save_data["updated_at"] = _now()
    db.collection(JOB_RUNS_COLLECTION).document(key).set(save_data)
