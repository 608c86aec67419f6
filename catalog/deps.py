"""
FastAPI dependencies: shared caches, the email verifier, and access checks.

Caches and the verifier are created once in the application lifespan and
stored on app.state; handlers reach them only through these functions.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from catalog import schemas
from catalog.db import get_db
from catalog.email_verify import EmailVerifier
from catalog.errors import ERROR
from catalog.security import decode_access_token
from catalog.services import user_data
from catalog.services.app_data import AppsCache
from catalog.services.user_data import UsersCache

bearer_scheme = HTTPBearer(auto_error=False)

ACCESS_LEVELS = ("loggedOut", "loggedIn", "editor", "admin")


def get_apps_cache(request: Request) -> AppsCache:
    return request.app.state.apps_cache


def get_users_cache(request: Request) -> UsersCache:
    return request.app.state.users_cache


def get_verifier(request: Request) -> EmailVerifier:
    return request.app.state.verifier


async def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[schemas.User]:
    """The logged-in user, or None for anonymous requests and bad tokens."""
    if creds is None:
        return None
    user_id = decode_access_token(creds.credentials)
    if user_id is None:
        return None
    return await user_data.get_by_id(db, user_id)


def requires_auth(level: str):
    """
    Dependency factory enforcing an access level.

    - loggedOut: no user may be logged in
    - loggedIn: any logged-in user
    - editor: editors and admins
    - admin: admins only
    """
    if level not in ACCESS_LEVELS:
        raise ValueError(f"Unknown access level: {level}")

    def _dependency(user: Optional[schemas.User] = Depends(get_current_user)) -> Optional[schemas.User]:
        if level == "loggedOut":
            if user is not None:
                raise ERROR.must_be_logged_out()
            return None
        if user is None:
            raise ERROR.not_logged_in()
        if level == "editor" and not (user.is_editor or user.is_admin):
            raise ERROR.insufficient_permissions()
        if level == "admin" and not user.is_admin:
            raise ERROR.insufficient_permissions()
        return user

    return _dependency
