# Read routes for ideas and daily reports

from typing import Optional

from fastapi import APIRouter, Depends, Query

from helix import database as db
from helix.auth import UserInfo, get_current_user, require_tier
from helix.config import BUILD_TOGETHER_CATEGORY, BUILD_TOGETHER_REPORT_TYPE, REPORT_TOP_N
from helix.responses import NotFoundError, error_response, ok

router = APIRouter(prefix="/api", tags=["ideas"])

PAID_TIER = "starter"


@router.get("/ideas")
async def list_ideas(category: Optional[str] = None,
                     limit: int = Query(50, ge=1, le=100),
                     offset: int = Query(0, ge=0),
                     user: Optional[UserInfo] = Depends(get_current_user)):
    """List ideas newest first. Signed-in callers do not see ideas they hid."""
    try:
        ideas = await db.list_ideas(category=category, limit=limit, offset=offset)
        if user is not None:
            hidden = await db.hidden_idea_ids(user.uid)
            ideas = [idea for idea in ideas if idea["id"] not in hidden]
        return ok({"ideas": ideas, "total": len(ideas)})
    except Exception as e:
        return error_response(e)


@router.get("/ideas/top")
async def top_ideas(category: str = BUILD_TOGETHER_CATEGORY,
                    limit: int = Query(REPORT_TOP_N, ge=1, le=100),
                    user: UserInfo = Depends(require_tier(PAID_TIER))):
    try:
        ideas = await db.top_scored_ideas(category, limit)
        return ok({"ideas": ideas, "total": len(ideas)})
    except Exception as e:
        return error_response(e)


@router.get("/ideas/{idea_id}")
async def get_idea(idea_id: str, user: UserInfo = Depends(require_tier(PAID_TIER))):
    """Idea with its analysis. Each view counts toward the caller's usage."""
    try:
        idea = await db.get_idea(idea_id)
        if idea is None:
            raise NotFoundError(f"Idea {idea_id} not found")
        if idea.get("analysis_id"):
            idea["analysis"] = await db.get_analysis(idea["analysis_id"])
        usage = await db.increment_usage(user.uid)
        return ok({"idea": idea, "daily_usage_count": usage})
    except Exception as e:
        return error_response(e)


@router.get("/reports/latest")
async def latest_report(report_type: str = BUILD_TOGETHER_REPORT_TYPE,
                        user: UserInfo = Depends(require_tier(PAID_TIER))):
    try:
        report = await db.get_latest_report(report_type)
        if report is None:
            raise NotFoundError(f"No {report_type} report has been generated yet")
        return ok(report)
    except Exception as e:
        return error_response(e)
