"""
App Catalog - Main FastAPI Application
Apps and user accounts served from SQLite/SQL via short-TTL query caches
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from catalog.db import init_db
from catalog.deps import requires_auth
from catalog.email_verify import EmailVerifier
from catalog.errors import register_error_handlers
from catalog.routes import apps_router, session_router, users_router
from catalog.services.app_data import make_apps_cache
from catalog.services.user_data import make_users_cache
from config.settings import settings

logging.basicConfig(level=settings.log_level)

APP_VERSION = "v0.1.0"
APP_NAME = "App Catalog"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Composition root: one cache per entity type, one verifier."""
    init_db()
    app.state.apps_cache = make_apps_cache(settings.apps_cache_ttl_ms)
    app.state.users_cache = make_users_cache(settings.users_cache_ttl_ms)
    app.state.verifier = EmailVerifier(
        base_url=settings.public_base_url,
        ttl_seconds=settings.verification_ttl_seconds,
    )
    yield


app = FastAPI(
    title=APP_NAME,
    description="Catalog of apps with approval, privacy and platform metadata",
    version=APP_VERSION,
    lifespan=lifespan,
)

register_error_handlers(app)
app.include_router(apps_router)
app.include_router(users_router)
app.include_router(session_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/version")
def version_info():
    """Version information endpoint."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "full": f"{APP_NAME} {APP_VERSION}",
    }


@app.get("/cache/stats", dependencies=[Depends(requires_auth("admin"))])
def cache_stats():
    """Get cache statistics."""
    return {
        "apps": app.state.apps_cache.get_stats(),
        "users": app.state.users_cache.get_stats(),
    }
