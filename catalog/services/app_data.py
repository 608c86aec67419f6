"""
App catalog data access.

Reads go through the apps QueryCache; writes hit the database first and then
patch the cache so it stays coherent without a full refetch.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from catalog import crud, models, schemas
from catalog.cache import QueryCache
from catalog.db import get_session
from catalog.errors import ERROR

logger = logging.getLogger("catalog.apps")

AppsCache = QueryCache[schemas.App]


def to_record(app: models.App) -> schemas.App:
    return schemas.App.model_validate(app)


def _load_all() -> List[schemas.App]:
    db = get_session()
    try:
        return [to_record(app) for app in crud.get_apps(db)]
    finally:
        db.close()


def _load_one(app_id: str) -> Optional[schemas.App]:
    db = get_session()
    try:
        app = crud.get_app_by_id(db, app_id)
        return to_record(app) if app else None
    finally:
        db.close()


async def fetch_all_apps() -> List[schemas.App]:
    return await run_in_threadpool(_load_all)


async def lookup_app(record: schemas.App) -> Optional[schemas.App]:
    """Canonical version of a cached app, read by its id."""
    return await run_in_threadpool(_load_one, record.id)


def make_apps_cache(ttl_ms: int) -> AppsCache:
    return QueryCache(ttl_ms, fetch_all_apps, name="apps")


async def get_all(cache: AppsCache) -> List[Dict[str, Any]]:
    return [record.model_dump() for record in await cache.get_data()]


async def get_by_id(db: Session, app_id: str) -> Optional[Dict[str, Any]]:
    app = await run_in_threadpool(crud.get_app_by_id, db, app_id)
    if app is None:
        return None
    return to_record(app).model_dump()


async def create_app(db: Session, cache: AppsCache, data: schemas.AppCreate) -> schemas.App:
    app = await run_in_threadpool(crud.create_app, db, data.model_dump())
    record = to_record(app)
    cache.force_add(record)
    logger.info(f"Created app {record.id} ('{record.name}')")
    return record


async def bulk_create_apps(
    db: Session,
    cache: AppsCache,
    items: List[schemas.AppCreate],
) -> List[schemas.App]:
    apps = await run_in_threadpool(
        crud.bulk_create_apps, db, [data.model_dump() for data in items]
    )
    records = [to_record(app) for app in apps]
    for record in records:
        cache.force_add(record)
    logger.info(f"Bulk created {len(records)} apps")
    return records


async def patch_app(
    db: Session,
    cache: AppsCache,
    app_id: str,
    data: schemas.AppPatch,
) -> schemas.App:
    """
    Apply the non-empty fields of `data` to an existing app.

    Raises:
        APIError: modifyNonexistent if there is no app with this id
    """
    app = await run_in_threadpool(crud.get_app_by_id, db, app_id)
    if app is None:
        raise ERROR.modify_nonexistent()

    # Empty strings and empty lists count as "not provided"
    changes = {key: value for key, value in data.model_dump().items() if value}
    app = await run_in_threadpool(crud.update_app, db, app, changes)

    await cache.refetch_one(lambda record: record.id == app_id, lookup_app)
    logger.info(f"Patched app {app_id}: {sorted(changes)}")
    return to_record(app)


async def delete_app(db: Session, cache: AppsCache, app_id: str) -> None:
    """
    Raises:
        APIError: modifyNonexistent if there is no app with this id
    """
    app = await run_in_threadpool(crud.get_app_by_id, db, app_id)
    if app is None:
        raise ERROR.modify_nonexistent()
    await run_in_threadpool(crud.delete_app, db, app)
    cache.force_remove(lambda record: record.id == app_id)
    logger.info(f"Deleted app {app_id}")
