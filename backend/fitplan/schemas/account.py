from pydantic import BaseModel, Field
from typing import Union

EMAIL_REGX = r"^[^@]+@[^@]+\.[^@]+$"


# Schema for signup (JSON body)
class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=EMAIL_REGX, max_length=200)
    password: str = Field(..., min_length=1)


# Schema for login (JSON body)
class LoginRequest(BaseModel):
    username: str
    password: str


class MessageResponse(BaseModel):
    message: str


class SignupResponse(MessageResponse):
    userId: Union[int, str]


class LoginResponse(MessageResponse):
    hasProfile: bool
