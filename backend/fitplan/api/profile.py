import logging

from fastapi import APIRouter, Depends, status

from fitplan.api.auth import get_current_session, get_plan_generator, get_stores
from fitplan.api.errors import ApiError
from fitplan.backends import Stores
from fitplan.crud.records import SessionData
from fitplan.schemas.profile import ProfileEnvelope, ProfileRequest, ProfileResponse, ProfileSaveResponse
from fitplan.services.plan_generator import PlanGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["profile"])


# POST - Create or update the profile, then attach a fresh workout plan
@router.post("/profile", response_model=ProfileSaveResponse)
def save_profile(
    profile: ProfileRequest,
    session: SessionData = Depends(get_current_session),
    stores: Stores = Depends(get_stores),
    generator: PlanGenerator = Depends(get_plan_generator),
):
    fields = profile.to_fields()

    saved = stores.profiles.upsert_profile(session.account_id, fields)
    if saved.error is not None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save profile", error=str(saved.error))

    # Never raises; a model failure comes back as the fallback text
    workout_plan = generator.generate_plan(fields)

    stored = stores.profiles.set_workout_plan(session.account_id, workout_plan)
    if stored.error is not None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save profile", error=str(stored.error))

    logger.info(f"Profile saved for '{session.username}'")
    return {"message": "Profile saved successfully", "workoutPlan": workout_plan}


# GET - Profile and workout plan for the current session
@router.get("/profile", response_model=ProfileEnvelope)
def read_profile(
    session: SessionData = Depends(get_current_session),
    stores: Stores = Depends(get_stores),
):
    found = stores.profiles.find_by_account(session.account_id)
    if found.error is not None:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get profile", error=str(found.error))
    if found.value is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Profile not found")
    return {"profile": ProfileResponse.model_validate(found.value)}
