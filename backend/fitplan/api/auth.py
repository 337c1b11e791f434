from typing import Optional

from fastapi import Depends, Request, Response, status
from fastapi.security import APIKeyCookie

from fitplan.api.errors import ApiError
from fitplan.backends import Stores
from fitplan.config import COOKIE_SECURE, SESSION_COOKIE_NAME, SESSION_TTL_HOURS
from fitplan.crud.records import SessionData
from fitplan.exceptions import AuthenticationError
from fitplan.services.plan_generator import PlanGenerator
from fitplan.services.session_manager import SessionManager

session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


def get_stores(request: Request):
    with request.app.state.backend.open() as stores:
        yield stores


def get_session_manager(stores: Stores = Depends(get_stores)) -> SessionManager:
    return SessionManager(stores.sessions)


def get_plan_generator(request: Request) -> PlanGenerator:
    return request.app.state.plan_generator


def get_current_session(
    token: Optional[str] = Depends(session_cookie),
    manager: SessionManager = Depends(get_session_manager),
) -> SessionData:
    resolved = manager.resolve(token)
    if resolved.error is not None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to verify session", error=str(resolved.error))
    if resolved.value is None:
        raise AuthenticationError("Session expired. Please re-login.")
    return resolved.value


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        max_age=SESSION_TTL_HOURS * 3600,
        expires=SESSION_TTL_HOURS * 3600,
        samesite="lax",
        secure=COOKIE_SECURE,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, httponly=True, samesite="lax", secure=COOKIE_SECURE)
