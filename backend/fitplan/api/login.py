import logging

from fastapi import APIRouter, Depends, Response, status

from fitplan.api.auth import (
    clear_session_cookie,
    get_current_session,
    get_session_manager,
    get_stores,
    set_session_cookie,
)
from fitplan.api.errors import ApiError
from fitplan.backends import Stores
from fitplan.crud.records import SessionData
from fitplan.exceptions import AuthenticationError
from fitplan.schemas.account import LoginRequest, LoginResponse, MessageResponse
from fitplan.services.session_manager import SessionManager
from fitplan.utils.utils import verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["login"])


@router.post("/login", response_model=LoginResponse)
def login(
    response: Response,
    credentials: LoginRequest,
    stores: Stores = Depends(get_stores),
    manager: SessionManager = Depends(get_session_manager),
):
    """
    Check username and password, open a server-side session and hand its
    token back in the session cookie.
    """
    found = stores.accounts.find_by_username(credentials.username)
    if found.error is not None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Login failed", error=str(found.error))

    account = found.value
    if account is None or not verify_password(credentials.password, account.password_hash):
        logger.info(f"Rejected login for '{credentials.username}'")
        raise AuthenticationError("Invalid username or password")

    profile = stores.profiles.find_by_account(account.id)
    if profile.error is not None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Login failed", error=str(profile.error))

    opened = manager.open_session(account)
    if opened.error is not None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Login failed", error=str(opened.error))

    set_session_cookie(response, opened.value.token)
    return {"message": "Login successful", "hasProfile": profile.value is not None}


@router.get("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    session: SessionData = Depends(get_current_session),
    manager: SessionManager = Depends(get_session_manager),
):
    closed = manager.close_session(session.token)
    if closed.error is not None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Logout failed", error=str(closed.error))

    clear_session_cookie(response)
    logger.info(f"'{session.username}' logged out")
    return {"message": "Logged out successfully"}
