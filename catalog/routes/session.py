"""
Login, current-session lookup, and email verification links.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from catalog import schemas
from catalog.db import get_db
from catalog.deps import get_verifier, requires_auth
from catalog.email_verify import EmailVerifier
from catalog.errors import ERROR
from catalog.responses import data_res
from catalog.security import create_access_token
from catalog.services import user_data

router = APIRouter(prefix="/api", tags=["session"])


@router.post("/session", dependencies=[Depends(requires_auth("loggedOut"))])
async def login(body: schemas.LoginRequest, db: Session = Depends(get_db)):
    """
    Log in.

    RESPONSE:
        {id, email, isEditor, isAdmin, token}
    """
    user = await user_data.authenticate(db, body.email, body.password)
    if user is None:
        raise ERROR.invalid_credentials()
    return data_res({**user.public(), "token": create_access_token(user.id)})


@router.get("/session")
async def whoami(user: schemas.User = Depends(requires_auth("loggedIn"))):
    return data_res(user.public())


@router.get("/verify/{token}")
async def verify(
    token: str,
    db: Session = Depends(get_db),
    verifier: EmailVerifier = Depends(get_verifier),
):
    """Run the action waiting on this verification link."""
    return await verifier.complete(token, db)
