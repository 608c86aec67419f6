"""
API routers.
"""
from .apps import router as apps_router
from .session import router as session_router
from .users import router as users_router

__all__ = [
    "apps_router",
    "session_router",
    "users_router",
]
