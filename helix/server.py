# server.py
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helix.admin import router as admin_router
from helix.config import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_MAX_AGE,
    Settings,
    get_settings,
)
from helix.ideas import router as ideas_router
from helix.pipeline import router as pipeline_router
from helix.profiles import router as profiles_router
from helix.responses import install_error_handlers, ok

# --- Initialize and configure FastAPI ---
app = FastAPI(title="HelixAdvisors.AI")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
    allow_credentials=False,
    max_age=CORS_MAX_AGE,
)

install_error_handlers(app)

# Include routers
app.include_router(pipeline_router)
app.include_router(ideas_router)
app.include_router(profiles_router)
app.include_router(admin_router)


# --------------------------------------------------
# Routes
# --------------------------------------------------

@app.get("/")
async def root():
    return ok({"service": "helix", "status": "running"})


@app.get("/api/env-status")
async def env_status(settings: Settings = Depends(get_settings)):
    """Report which environment variables are configured, never their values."""
    return ok({
        "variables": dict(settings.env_status),
        "all_configured": all(settings.env_status.values()),
    })
