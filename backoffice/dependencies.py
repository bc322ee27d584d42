# backoffice/dependencies.py
"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from backoffice.config import Settings
from backoffice.database import Store
from backoffice.exceptions import UnauthenticatedError


def get_store(request: Request) -> Store:
    """The application's store, opened on first use if startup hasn't done it yet."""
    return request.app.state.store.acquire()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_session(request: Request) -> dict:
    """Rejects the request before any store access when nobody is signed in."""
    user = request.session.get("user")
    if not user:
        raise UnauthenticatedError("Not authenticated")
    return user
