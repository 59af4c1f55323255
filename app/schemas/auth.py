"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel

from app.models.role import Role


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str
    mobile: str | None = None
    state: str | None = None
    referral_code: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    password: str


class MessageResponse(BaseModel):
    message: str


class UserSummary(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    display_name: str
    role: Role
    referral_code: str | None = None
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserProfile(UserSummary):
    mobile: str | None = None
    state: str | None = None
    created_at: datetime


class UserTokenResponse(BaseModel):
    message: str
    token: str
    user: UserSummary


class TokenClaimsResponse(BaseModel):
    valid: bool
    id: int
    email: str
    role: Role
    name: str
    expires_at: datetime
