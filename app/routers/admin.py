"""Admin API endpoints."""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin, require_super_admin
from app.errors import NotFoundError
from app.models.admin import Admin
from app.rate_limit import limiter
from app.schemas.admin import (
    AdminStatusUpdate,
    AdminSummary,
    AdminTokenResponse,
    UserListItem,
    UserListResponse,
)
from app.schemas.auth import LoginRequest
from app.services.auth import get_auth_service
from app.services.credentials import get_credential_store
from app.services.jwt import TokenClaims
from app.services.session import get_session_service
from app.services.users import get_user_directory_service

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


@router.post("/login", response_model=AdminTokenResponse)
@limiter.limit("10/minute")
def admin_login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> AdminTokenResponse:
    """Authenticate an admin and receive a bearer token."""
    admin = get_auth_service().authenticate_admin(db, body.email, body.password)
    token = get_session_service().issue(admin)
    return AdminTokenResponse(message="Login successful", token=token, admin=AdminSummary.model_validate(admin))


@router.get("/me", response_model=AdminSummary)
def get_admin_profile(claims: TokenClaims = Depends(require_admin), db: Session = Depends(get_db)) -> AdminSummary:
    """Return the calling admin."""
    admin = get_credential_store().find_by_id(db, Admin, claims.principal_id)
    if not admin:
        raise NotFoundError("Admin not found")
    return AdminSummary.model_validate(admin)


@router.get("/users", response_model=UserListResponse)
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = None,
    claims: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserListResponse:
    """List registered users with pagination and search."""
    result = get_user_directory_service().list_users(db, page=page, limit=limit, search=search)
    return UserListResponse(
        users=[UserListItem.model_validate(u) for u in result["users"]],
        total_users=result["total_users"],
        recent_signups=result["recent_signups"],
        current_page=result["current_page"],
        total_pages=result["total_pages"],
    )


@router.patch("/admins/{admin_id}", response_model=AdminSummary)
def update_admin_status(
    admin_id: int,
    body: AdminStatusUpdate,
    claims: TokenClaims = Depends(require_super_admin),
    db: Session = Depends(get_db),
) -> AdminSummary:
    """Activate or deactivate an admin account. Super admins only."""
    admin = get_auth_service().set_admin_active(db, admin_id, body.is_active, acting_admin_id=claims.principal_id)
    return AdminSummary.model_validate(admin)
