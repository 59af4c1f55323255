"""Signed-in user API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_user
from app.errors import NotFoundError
from app.models.user import User
from app.schemas.auth import UserProfile
from app.services.credentials import get_credential_store
from app.services.jwt import TokenClaims

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me", response_model=UserProfile)
def get_profile(claims: TokenClaims = Depends(require_user), db: Session = Depends(get_db)) -> UserProfile:
    """Return the profile of the calling user."""
    user = get_credential_store().find_by_id(db, User, claims.principal_id)
    if not user:
        raise NotFoundError("User not found")
    return UserProfile.model_validate(user)
