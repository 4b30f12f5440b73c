# Auth module for Firebase Authentication
# Provides the FastAPI dependencies for users, admins, tiers and the scheduler token

import hmac
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# Firebase Admin SDK
import firebase_admin
from firebase_admin import auth, credentials

from helix import database as db
from helix.config import ADMIN_TIER, TIER_ORDER, Settings, get_settings
from helix.models import UserProfile
from helix.responses import AuthorizationError, ForbiddenError

logger = logging.getLogger(__name__)

# Initialize Firebase Admin SDK
_firebase_app = None


def get_firebase_app():
    """Get or initialize the Firebase Admin app."""
    global _firebase_app
    if _firebase_app is None:
        # In Cloud Run, this uses Application Default Credentials
        # Locally, set GOOGLE_APPLICATION_CREDENTIALS to a service account key
        try:
            _firebase_app = firebase_admin.get_app()
        except ValueError:
            # App not initialized yet
            cred = credentials.ApplicationDefault()
            _firebase_app = firebase_admin.initialize_app(cred)
    return _firebase_app


# Security scheme for extracting Bearer tokens
security = HTTPBearer(auto_error=False)


class UserInfo:
    """Represents an authenticated caller."""
    def __init__(self, uid: str, email: Optional[str] = None,
                 display_name: Optional[str] = None, is_admin: bool = False,
                 is_service: bool = False):
        self.uid = uid
        self.email = email
        self.display_name = display_name
        self.is_admin = is_admin
        self.is_service = is_service

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "email": self.email,
            "display_name": self.display_name,
            "is_admin": self.is_admin,
            "is_service": self.is_service,
        }


SERVICE_USER = UserInfo(uid="scheduler", display_name="Scheduler", is_admin=True, is_service=True)


def verify_token(token: str, settings: Settings) -> Optional[UserInfo]:
    """Verify a Firebase ID token. Returns None when it is invalid or expired."""
    try:
        get_firebase_app()
        decoded_token = auth.verify_id_token(token)
    except Exception as e:
        logger.warning(f"Token verification failed: {e}")
        return None

    email = decoded_token.get("email")
    return UserInfo(
        uid=decoded_token.get("uid"),
        email=email,
        display_name=decoded_token.get("name"),
        is_admin=email in settings.admin_emails if email else False,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Optional[UserInfo]:
    """
    Dependency to get the current authenticated user.
    Returns None if no valid token is provided.
    """
    if credentials is None:
        return None
    return verify_token(credentials.credentials, settings)


async def require_auth(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_settings),
) -> UserInfo:
    """
    Dependency that requires authentication.
    Raises AuthorizationError (401) if not authenticated.
    """
    if credentials is None:
        raise AuthorizationError("Authorization header required")

    user = verify_token(credentials.credentials, settings)
    if user is None:
        raise AuthorizationError("Invalid authentication token")
    return user


# --- Profiles and tiers ---

def effective_tier(profile: Dict[str, Any], now: Optional[datetime] = None) -> str:
    """
    Tier a profile currently has access to.

    Priority: admin, then an unexpired gift tier, then the paid subscription,
    then free.
    """
    if profile.get("is_admin"):
        return ADMIN_TIER
    expiry = profile.get("gift_tier_expiry")
    if expiry and expiry > (now or datetime.utcnow()).isoformat():
        return profile.get("current_tier") or "free"
    return profile.get("subscription_tier") or "free"


def tier_rank(tier: str) -> int:
    return TIER_ORDER.index(tier) if tier in TIER_ORDER else 0


async def load_profile(user: UserInfo) -> Dict[str, Any]:
    """Fetch the caller's profile, creating a free one on first sight."""
    profile = await db.get_user_profile(user.uid)
    if profile is None:
        logger.info(f"Creating new user profile for {user.uid}")
        profile = await db.create_user_profile(UserProfile(id=user.uid, email=user.email))
    if user.is_admin:
        profile["is_admin"] = True
    return profile


async def require_admin(
    user: UserInfo = Depends(require_auth)
) -> UserInfo:
    """
    Dependency that requires admin privileges, from ADMIN_EMAILS or the profile flag.
    Raises ForbiddenError (403) otherwise.
    """
    if user.is_admin:
        return user
    profile = await db.get_user_profile(user.uid)
    if profile and profile.get("is_admin"):
        user.is_admin = True
        return user
    raise ForbiddenError("Admin privileges required")


def require_tier(min_tier: str):
    """Build a dependency admitting callers whose effective tier is at least min_tier."""

    async def dependency(user: UserInfo = Depends(require_auth)) -> UserInfo:
        profile = await load_profile(user)
        tier = effective_tier(profile)
        if tier_rank(tier) < tier_rank(min_tier):
            raise ForbiddenError(f"{min_tier.capitalize()} tier or higher required")
        return user

    return dependency


async def require_service(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_settings),
) -> UserInfo:
    """
    Dependency for pipeline triggers: the scheduler's service token or an admin user.
    """
    if credentials is None:
        raise AuthorizationError("Authorization header required")

    token = credentials.credentials
    if settings.service_token and hmac.compare_digest(token.encode(), settings.service_token.encode()):
        return SERVICE_USER

    user = verify_token(token, settings)
    if user is None:
        raise AuthorizationError("Invalid authentication token")
    return await require_admin(user)
