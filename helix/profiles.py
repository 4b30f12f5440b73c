# Per-user routes: profile and hidden ideas

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from helix import database as db
from helix.auth import UserInfo, effective_tier, load_profile, require_auth
from helix.models import HiddenIdeaRequest, HiddenIdeaUpdate
from helix.responses import NotFoundError, ValidationFailed, error_response, ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["profiles"])


@router.get("/profile")
async def get_profile(user: UserInfo = Depends(require_auth)):
    """Caller's profile, created on first request, with the tier they can use today."""
    try:
        profile = await load_profile(user)
        return ok({"profile": profile, "current_tier": effective_tier(profile)})
    except Exception as e:
        return error_response(e)


@router.post("/hidden-ideas", status_code=201)
async def hide_idea(request: HiddenIdeaRequest, user: UserInfo = Depends(require_auth)):
    try:
        if await db.get_idea(request.idea_id) is None:
            raise NotFoundError(f"Idea {request.idea_id} not found")
        record = await db.hide_idea(user.uid, request.model_dump())
        return ok(record, status_code=201)
    except Exception as e:
        return error_response(e)


@router.get("/hidden-ideas")
async def list_hidden_ideas(status: Optional[str] = None, user: UserInfo = Depends(require_auth)):
    try:
        items = await db.list_hidden_ideas(user.uid, status)
        for item in items:
            item["idea"] = await db.get_idea(item["idea_id"])
        return ok({"hidden_ideas": items, "total": len(items)})
    except Exception as e:
        return error_response(e)


@router.get("/hidden-ideas/export")
async def export_hidden_ideas(user: UserInfo = Depends(require_auth)):
    try:
        items = await db.list_hidden_ideas(user.uid)
        ideas = []
        for item in items:
            idea = await db.get_idea(item["idea_id"]) or {}
            ideas.append({
                "title": idea.get("title") or "Unknown Title",
                "description": idea.get("description") or "",
                "status": item.get("status"),
                "progress_percentage": item.get("progress_percentage"),
                "priority": item.get("priority"),
                "estimated_budget": item.get("estimated_budget"),
                "target_launch_date": item.get("target_launch_date"),
                "tags": item.get("tags"),
                "notes": item.get("notes"),
                "hidden_date": item.get("created_at"),
                "last_updated": item.get("updated_at"),
            })
        return ok({
            "export_date": datetime.utcnow().isoformat(),
            "user_id": user.uid,
            "total_ideas": len(ideas),
            "ideas": ideas,
        })
    except Exception as e:
        return error_response(e)


@router.patch("/hidden-ideas/{idea_id}")
async def update_hidden_idea(idea_id: str, request: HiddenIdeaUpdate,
                             user: UserInfo = Depends(require_auth)):
    try:
        updates = request.model_dump(exclude_none=True)
        if not updates:
            raise ValidationFailed("No fields to update")
        record = await db.update_hidden_idea(user.uid, idea_id, updates)
        if record is None:
            raise NotFoundError(f"Idea {idea_id} is not hidden")
        return ok(record)
    except Exception as e:
        return error_response(e)


@router.delete("/hidden-ideas/{idea_id}")
async def unhide_idea(idea_id: str, user: UserInfo = Depends(require_auth)):
    try:
        if not await db.unhide_idea(user.uid, idea_id):
            raise NotFoundError(f"Idea {idea_id} is not hidden")
        logger.info(f"User {user.uid} unhid idea {idea_id}")
        return ok({"idea_id": idea_id, "unhidden": True})
    except Exception as e:
        return error_response(e)
