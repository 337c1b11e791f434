from pydantic import BaseModel, Field
from typing import Literal, Optional, Union
from datetime import datetime

from fitplan.crud.records import ProfileFields


class ProfileRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., gt=0, lt=150)
    weight: float = Field(..., gt=0, description="Current weight in kg")
    dietary_preference: Literal["veg", "nonveg"] = Field(..., alias="dietaryPreference")
    target_body_type: str = Field(..., min_length=1, max_length=200, alias="targetBodyType")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "name": "Alice",
                "age": 30,
                "weight": 65,
                "dietaryPreference": "veg",
                "targetBodyType": "lean",
            }
        }

    def to_fields(self) -> ProfileFields:
        return ProfileFields(
            name=self.name,
            age=self.age,
            weight=self.weight,
            dietary_preference=self.dietary_preference,
            target_body_type=self.target_body_type,
        )


class ProfileSaveResponse(BaseModel):
    message: str
    workoutPlan: Optional[str]


class ProfileResponse(BaseModel):
    id: Union[int, str]
    account_id: Union[int, str]

    # Input data
    name: str
    age: int
    weight: float
    dietary_preference: str
    target_body_type: str

    # Generated
    workout_plan: Optional[str]

    # Meta
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileEnvelope(BaseModel):
    profile: ProfileResponse
