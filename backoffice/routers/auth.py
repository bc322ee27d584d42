"""Session login / logout. The session cookie gates every other /api route."""

from fastapi import APIRouter, Depends, Request
from backoffice.database import Store
from backoffice.dependencies import get_store, require_session
from backoffice.exceptions import UnauthenticatedError, ValidationFailedError
from backoffice.schemas.auth import AccountOut, LoginRequest
from backoffice.services.auth_service import authenticate

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=AccountOut, summary="Sign in with email and password")
def login(body: LoginRequest, request: Request, store: Store = Depends(get_store)):
    missing = [name for name in ("email", "password") if not getattr(body, name)]
    if missing:
        raise ValidationFailedError.missing(missing)
    account = authenticate(store, body.email, body.password)
    if account is None:
        raise UnauthenticatedError("Invalid email or password")
    request.session["user"] = account
    return account


@router.post("/logout", summary="Sign out")
def logout(request: Request):
    request.session.clear()
    return {"message": "Signed out"}


@router.get("/me", response_model=AccountOut, summary="Current account")
def me(user: dict = Depends(require_session)):
    return user
