"""Pydantic schemas for admin endpoints."""

from datetime import datetime

from pydantic import BaseModel

from app.models.role import Role


class AdminSummary(BaseModel):
    id: int
    email: str
    name: str
    role: Role
    is_active: bool
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}


class AdminTokenResponse(BaseModel):
    message: str
    token: str
    admin: AdminSummary


class AdminStatusUpdate(BaseModel):
    is_active: bool


class UserListItem(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    mobile: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    users: list[UserListItem]
    total_users: int
    recent_signups: int
    current_page: int
    total_pages: int
