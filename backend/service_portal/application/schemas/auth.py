"""Pydantic DTOs for sign-in, sign-up and the current session."""

from pydantic import BaseModel, Field


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, examples=["rider@example.com"])
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    name: str = Field("", max_length=200)
    phone: str = Field("", max_length=50)


class SessionResponse(BaseModel):
    user_id: str
    email: str
    display_name: str
    role: str
    access_token: str


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    phone: str
    role: str

    model_config = {"from_attributes": True}
