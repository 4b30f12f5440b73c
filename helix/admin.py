# Admin module for tier gifts and user monitoring
# Protected routes for administrators only

import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends

from helix import database as db
from helix.auth import UserInfo, require_admin
from helix.config import TIER_ORDER
from helix.models import GrantAccessRequest
from helix.responses import NotFoundError, ValidationFailed, error_response, ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/api/grant-access")
async def grant_access(request: GrantAccessRequest, admin: UserInfo = Depends(require_admin)):
    """Gift a tier to a user, identified by email, for a number of days."""
    try:
        if request.tier_level not in TIER_ORDER:
            raise ValidationFailed(f"Unknown tier level: {request.tier_level}")

        target = await db.find_profile_by_email(request.email)
        if target is None:
            raise NotFoundError("User not found")

        expiry = (datetime.utcnow() + timedelta(days=request.duration_days)).isoformat()
        await db.update_user_tier(target["id"], request.tier_level, expiry)

        try:
            await db.record_tier_gift(admin.uid, target["id"], request.tier_level, expiry)
        except Exception as e:
            logger.error(f"Failed to create gift record, but tier was updated: {e}")

        logger.info(f"{admin.email or admin.uid} granted {request.tier_level} to {request.email} until {expiry}")
        return ok({
            "message": (f"Successfully granted {request.tier_level} access to {request.email} "
                        f"for {request.duration_days} days"),
            "user_id": target["id"],
            "tier": request.tier_level,
            "expiry": expiry,
        })
    except Exception as e:
        return error_response(e)


@router.get("/api/users")
async def list_users(admin: UserInfo = Depends(require_admin)):
    """Get summary of all users."""
    try:
        users = await db.get_all_users_summary()
        return ok({"users": users, "total": len(users)})
    except Exception as e:
        return error_response(e)
