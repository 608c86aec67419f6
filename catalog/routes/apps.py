"""
App catalog endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from catalog import schemas
from catalog.db import get_db
from catalog.deps import get_apps_cache, requires_auth
from catalog.responses import data_res, success_res
from catalog.services import app_data
from catalog.services.app_data import AppsCache

router = APIRouter(prefix="/api/apps", tags=["apps"])


@router.get("")
async def list_apps(cache: AppsCache = Depends(get_apps_cache)):
    """Every app in the catalog."""
    return data_res(await app_data.get_all(cache))


@router.get("/{app_id}")
async def get_app(app_id: str, db: Session = Depends(get_db)):
    """One app, or null data if the id is unknown."""
    return data_res(await app_data.get_by_id(db, app_id))


@router.post("", dependencies=[Depends(requires_auth("editor"))])
async def create_app(
    body: schemas.AppCreate,
    db: Session = Depends(get_db),
    cache: AppsCache = Depends(get_apps_cache),
):
    record = await app_data.create_app(db, cache, body)
    return data_res(record.model_dump())


@router.post("/bulk", dependencies=[Depends(requires_auth("editor"))])
async def bulk_create_apps(
    body: List[schemas.AppCreate],
    db: Session = Depends(get_db),
    cache: AppsCache = Depends(get_apps_cache),
):
    records = await app_data.bulk_create_apps(db, cache, body)
    return data_res([record.model_dump() for record in records])


@router.patch("/{app_id}", dependencies=[Depends(requires_auth("editor"))])
async def patch_app(
    app_id: str,
    body: schemas.AppPatch,
    db: Session = Depends(get_db),
    cache: AppsCache = Depends(get_apps_cache),
):
    record = await app_data.patch_app(db, cache, app_id, body)
    return data_res(record.model_dump())


@router.delete("/{app_id}", dependencies=[Depends(requires_auth("editor"))])
async def delete_app(
    app_id: str,
    db: Session = Depends(get_db),
    cache: AppsCache = Depends(get_apps_cache),
):
    await app_data.delete_app(db, cache, app_id)
    return success_res()
