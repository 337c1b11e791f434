import logging
from typing import Callable, Optional

from fitplan.crud.records import ProfileFields
from fitplan.services import llm_service

logger = logging.getLogger(__name__)

FALLBACK_PLAN = "Unable to generate workout plan at the moment. Please try again later."

DIETARY_LABELS = {
    "veg": "Vegetarian",
    "nonveg": "Non-vegetarian",
}


def build_prompt(fields: ProfileFields) -> str:
    """Deterministic prompt for a 7-day plan; same fields always give the same text."""
    diet = DIETARY_LABELS.get(fields.dietary_preference, fields.dietary_preference)
    return f"""Create a personalized 7-day workout plan for a person with the following details:
- Name: {fields.name}
- Age: {fields.age}
- Weight: {fields.weight:g} kg
- Dietary Preference: {diet}
- Target Body Type: {fields.target_body_type}

Include specific exercises, sets, reps, and rest periods for each day. Also include dietary suggestions based on their preference.
Format the response in an easy-to-read structure."""


class PlanGenerator:
    """
    Wraps the external text model. generate_plan never raises: any failure is
    logged and the fixed FALLBACK_PLAN is returned, so a profile save still
    succeeds when the model is down.
    """

    def __init__(self, llm_factory: Optional[Callable] = None):
        self.llm_factory = llm_factory or llm_service.get_llm

    def generate_plan(self, fields: ProfileFields) -> str:
        prompt = build_prompt(fields)
        logger.info(f"Generating workout plan with {llm_service.MODEL_NAME}")
        try:
            llm = self.llm_factory()
            return llm_service.call_llm(llm, prompt)
        except Exception as e:
            logger.error(f"Workout plan generation failed, using fallback: {e}")
            return FALLBACK_PLAN
