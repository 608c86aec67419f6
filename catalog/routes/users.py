"""
User account endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from catalog import schemas
from catalog.db import get_db
from catalog.deps import get_users_cache, get_verifier, requires_auth
from catalog.email_verify import EmailVerifier
from catalog.errors import ERROR
from catalog.responses import data_res, success_res
from catalog.security import (
    create_access_token,
    email_domain,
    hash_password,
    is_admin_email,
    validate_email,
    validate_password_format,
)
from catalog.services import user_data
from catalog.services.user_data import UsersCache
from config.settings import settings

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", dependencies=[Depends(requires_auth("admin"))])
async def list_users(cache: UsersCache = Depends(get_users_cache)):
    """
    Return all users.

    RESPONSE:
        {id, email, isEditor, isAdmin}[]
    """
    users = await user_data.get_all(cache)
    return data_res([user.public() for user in users])


@router.get("/{user_id}", dependencies=[Depends(requires_auth("admin"))])
async def get_user(user_id: str, db: Session = Depends(get_db)):
    """Return a user by id, or null data."""
    user = await user_data.get_by_id(db, user_id)
    return data_res(user.public() if user else None)


@router.post("", dependencies=[Depends(requires_auth("loggedOut"))])
async def sign_up(
    body: schemas.SignUpRequest,
    db: Session = Depends(get_db),
    cache: UsersCache = Depends(get_users_cache),
    verifier: EmailVerifier = Depends(get_verifier),
):
    """
    Sign up.

    Admin emails get an account immediately. Everyone else must pass the
    email, password and domain checks and then follow the emailed link.
    """
    email, password = body.email, body.password

    async def create_account(session: Session):
        user = await user_data.create_user(session, cache, email, hash_password(password))
        return data_res({**user.public(), "token": create_access_token(user.id)})

    if is_admin_email(email):
        return await create_account(db)

    if not validate_email(email):
        raise ERROR.email_invalid()
    if not validate_password_format(password):
        raise ERROR.password_invalid()
    allowed = {domain.lower() for domain in settings.allowed_email_domains}
    if email_domain(email) not in allowed:
        raise ERROR.email_domain_not_allowed()
    if await user_data.get_by_email(db, email) is not None:
        raise ERROR.email_taken()

    await verifier.verify_email(email, "sign up", create_account)
    return success_res()


@router.patch("/{user_id}", dependencies=[Depends(requires_auth("admin"))])
async def patch_user(
    user_id: str,
    body: schemas.UserPatch,
    db: Session = Depends(get_db),
    cache: UsersCache = Depends(get_users_cache),
):
    """
    Modify another user.

    BODY:
        {email?, isEditor?}
    RESPONSE:
        {id, email, isEditor}
    """
    user = await user_data.patch_user(db, cache, user_id, email=body.email, is_editor=body.is_editor)
    return data_res({"id": user.id, "email": user.email, "isEditor": user.is_editor})


@router.patch("")
async def change_own_password(
    body: schemas.PasswordChange,
    user: schemas.User = Depends(requires_auth("loggedIn")),
    cache: UsersCache = Depends(get_users_cache),
    verifier: EmailVerifier = Depends(get_verifier),
):
    """
    Modify yourself. The new password applies once the emailed link is followed.

    BODY:
        {password}
    """
    if not validate_password_format(body.password):
        raise ERROR.password_invalid()
    user_id, password = user.id, body.password

    async def apply_password(session: Session):
        await user_data.set_password(session, cache, user_id, password)
        return success_res()

    await verifier.verify_email(user.email, "change your password", apply_password)
    return success_res()
