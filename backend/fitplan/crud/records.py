from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

# Integer primary key (SQL) or ObjectId hex string (Mongo)
AccountId = Union[int, str]


@dataclass
class AccountRecord:
    id: AccountId
    username: str
    email: str
    password_hash: str
    created_at: datetime


@dataclass
class ProfileFields:
    """Mutable profile attributes, as submitted by the client."""
    name: str
    age: int
    weight: float
    dietary_preference: str
    target_body_type: str


@dataclass
class ProfileRecord:
    id: Union[int, str]
    account_id: AccountId
    name: str
    age: int
    weight: float
    dietary_preference: str
    target_body_type: str
    workout_plan: Optional[str]
    created_at: datetime
    updated_at: datetime

    def fields(self) -> ProfileFields:
        return ProfileFields(
            name=self.name,
            age=self.age,
            weight=self.weight,
            dietary_preference=self.dietary_preference,
            target_body_type=self.target_body_type,
        )


@dataclass
class SessionData:
    token: str
    account_id: AccountId
    username: str
    created_at: datetime
    expires_at: datetime
