import logging

from fastapi import APIRouter, Depends, status

from fitplan.api.auth import get_stores
from fitplan.api.errors import ApiError
from fitplan.backends import Stores
from fitplan.exceptions import ConflictError
from fitplan.schemas.account import SignupRequest, SignupResponse
from fitplan.utils.utils import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])


# POST - Signup (create a new account)
@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(user: SignupRequest, stores: Stores = Depends(get_stores)):
    created = stores.accounts.create_account(
        username=user.username,
        email=user.email,
        password_hash=hash_password(user.password),
    )
    if isinstance(created.error, ConflictError):
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(created.error))
    if created.error is not None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Signup failed", error=str(created.error))

    logger.info(f"Account created for '{user.username}'")
    return {"message": "User created successfully", "userId": created.value}
