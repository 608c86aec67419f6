"""
User account data access, cached the same way as apps.
"""
import logging
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from catalog import crud, models, schemas
from catalog.cache import QueryCache
from catalog.db import get_session
from catalog.errors import ERROR
from catalog.security import hash_password, is_admin_email, verify_password

logger = logging.getLogger("catalog.users")

UsersCache = QueryCache[schemas.User]


def to_record(user: models.User) -> schemas.User:
    return schemas.User(
        id=user.id,
        email=user.email,
        is_editor=user.is_editor,
        is_admin=is_admin_email(user.email),
    )


def _load_all() -> List[schemas.User]:
    db = get_session()
    try:
        return [to_record(user) for user in crud.get_users(db)]
    finally:
        db.close()


def _load_one(user_id: str) -> Optional[schemas.User]:
    db = get_session()
    try:
        user = crud.get_user_by_id(db, user_id)
        return to_record(user) if user else None
    finally:
        db.close()


async def fetch_all_users() -> List[schemas.User]:
    return await run_in_threadpool(_load_all)


async def lookup_user(record: schemas.User) -> Optional[schemas.User]:
    return await run_in_threadpool(_load_one, record.id)


def make_users_cache(ttl_ms: int) -> UsersCache:
    return QueryCache(ttl_ms, fetch_all_users, name="users")


async def get_all(cache: UsersCache) -> List[schemas.User]:
    return await cache.get_data()


async def get_by_id(db: Session, user_id: str) -> Optional[schemas.User]:
    user = await run_in_threadpool(crud.get_user_by_id, db, user_id)
    return to_record(user) if user else None


async def get_by_email(db: Session, email: str) -> Optional[schemas.User]:
    user = await run_in_threadpool(crud.get_user_by_email, db, email)
    return to_record(user) if user else None


async def create_user(db: Session, cache: UsersCache, email: str, password_hash: str) -> schemas.User:
    """
    Raises:
        APIError: emailTaken if an account already uses this email
    """
    existing = await run_in_threadpool(crud.get_user_by_email, db, email)
    if existing is not None:
        raise ERROR.email_taken()
    user = await run_in_threadpool(crud.create_user, db, email, password_hash)
    record = to_record(user)
    cache.force_add(record)
    logger.info(f"Created user {record.id} ({record.email})")
    return record


async def patch_user(
    db: Session,
    cache: UsersCache,
    user_id: str,
    email: Optional[str] = None,
    is_editor: Optional[bool] = None,
) -> schemas.User:
    """
    Change another user's email and/or editor flag; None leaves a field alone.

    Raises:
        APIError: modifyNonexistent if there is no user with this id
        APIError: emailTaken if the new email belongs to someone else
    """
    user = await run_in_threadpool(crud.get_user_by_id, db, user_id)
    if user is None:
        raise ERROR.modify_nonexistent()

    changes = {}
    if email is not None:
        owner = await run_in_threadpool(crud.get_user_by_email, db, email)
        if owner is not None and owner.id != user_id:
            raise ERROR.email_taken()
        changes["email"] = email
    if is_editor is not None:
        changes["is_editor"] = is_editor

    user = await run_in_threadpool(crud.update_user, db, user, changes)
    await cache.refetch_one(lambda record: record.id == user_id, lookup_user)
    logger.info(f"Patched user {user_id}: {sorted(changes)}")
    return to_record(user)


async def set_password(db: Session, cache: UsersCache, user_id: str, password: str) -> None:
    """
    Raises:
        APIError: modifyNonexistent if there is no user with this id
    """
    user = await run_in_threadpool(crud.get_user_by_id, db, user_id)
    if user is None:
        raise ERROR.modify_nonexistent()
    await run_in_threadpool(crud.update_user, db, user, {"password_hash": hash_password(password)})
    await cache.refetch_one(lambda record: record.id == user_id, lookup_user)
    logger.info(f"Password changed for user {user_id}")


async def authenticate(db: Session, email: str, password: str) -> Optional[schemas.User]:
    user = await run_in_threadpool(crud.get_user_by_email, db, email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return to_record(user)
