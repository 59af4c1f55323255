"""User authentication API endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_claims
from app.rate_limit import limiter
from app.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenClaimsResponse,
    UserSummary,
    UserTokenResponse,
)
from app.services.auth import get_auth_service
from app.services.jwt import TokenClaims
from app.services.session import get_session_service

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])

FORGOT_PASSWORD_MESSAGE = (
    "If an account exists with that email, password reset instructions have been sent. "
    "Check your inbox and spam folder, or contact support if nothing arrives within a few minutes."
)


@router.post("/register", response_model=UserTokenResponse, status_code=201)
@limiter.limit("5/minute")
def register(
    request: Request,
    body: RegisterRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> UserTokenResponse:
    """Create a user account and log it in."""
    user = get_auth_service().register_user(
        db,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        mobile=body.mobile,
        state=body.state,
        referral_code=body.referral_code,
        background_tasks=background_tasks,
    )
    token = get_session_service().issue(user)
    return UserTokenResponse(message="User created successfully", token=token, user=UserSummary.model_validate(user))


@router.post("/login", response_model=UserTokenResponse)
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> UserTokenResponse:
    """Authenticate and receive a bearer token."""
    user = get_auth_service().authenticate_user(db, body.email, body.password)
    token = get_session_service().issue(user)
    return UserTokenResponse(message="Login successful", token=token, user=UserSummary.model_validate(user))


@router.get("/verify", response_model=TokenClaimsResponse)
def verify_token(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaimsResponse:
    """Verify the bearer token and return its claims."""
    return TokenClaimsResponse(valid=True, expires_at=claims.expires_at, **claims.as_dict())


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit("3/minute")
def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Email a reset link. The response is the same whether or not the account exists."""
    get_auth_service().request_password_reset(db, body.email, background_tasks)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit("5/minute")
def reset_password(request: Request, body: ResetPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    """Reset password using a valid reset token."""
    get_auth_service().reset_password(db, body.token, body.password)
    return MessageResponse(message="Password reset successfully")
