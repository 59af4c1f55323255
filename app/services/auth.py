"""Authentication service."""

import logging
import secrets
import string
from typing import Any, Callable

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from app.errors import AuthenticationError, ValidationError
from app.models.admin import Admin
from app.models.role import Role
from app.models.user import User
from app.services.credentials import (
    CredentialStore,
    Principal,
    PrincipalModel,
    get_credential_store,
)
from app.services.email import EmailService, get_email_service
from app.services.passwords import PasswordHasher, get_password_hasher
from app.services.reset_tokens import ResetTokenManager, get_reset_token_manager

logger = logging.getLogger("academy")

INVALID_CREDENTIALS = "Invalid credentials"
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72
REFERRAL_PREFIX = "DCC"
_REFERRAL_ALPHABET = string.ascii_uppercase + string.digits


class AuthService:
    """Handles sign-up, login, password reset and admin seeding."""

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        reset_tokens: ResetTokenManager,
        email_service: EmailService,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.reset_tokens = reset_tokens
        self.email_service = email_service

    def register_user(
        self,
        db: Session,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        mobile: str | None = None,
        state: str | None = None,
        referral_code: str | None = None,
        background_tasks: BackgroundTasks | None = None,
    ) -> User:
        """Create a user account and send the welcome email.

        Raises ValidationError or ConflictError. A failed welcome email never
        fails the sign-up.
        """
        if not email.strip() or not password:
            raise ValidationError("Email and password are required")
        if not first_name.strip() or not last_name.strip():
            raise ValidationError("First name and last name are required")
        self._check_password(password)

        referred_by_id = None
        if referral_code:
            referrer = db.query(User).filter(User.referral_code == referral_code.strip().upper()).first()
            if referrer is None:
                raise ValidationError("Invalid referral code")
            referred_by_id = referrer.id

        user = self.store.create_user(
            db,
            email,
            self.hasher.hash(password),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            mobile=mobile.strip() if mobile else None,
            state=state.strip() if state else None,
            referral_code=self._new_referral_code(db),
            referred_by_id=referred_by_id,
        )
        if referred_by_id:
            logger.info("User %s was referred by %s", user.id, referred_by_id)
        self._dispatch(background_tasks, self._deliver_welcome, user.id, user.email, user.display_name)
        return user

    def authenticate_user(self, db: Session, email: str, password: str) -> User:
        """Authenticate a user by email and password."""
        return self._authenticate(db, User, email, password)

    def authenticate_admin(self, db: Session, email: str, password: str) -> Admin:
        """Authenticate an admin by email and password."""
        return self._authenticate(db, Admin, email, password)

    def request_password_reset(
        self, db: Session, email: str, background_tasks: BackgroundTasks | None = None
    ) -> bool:
        """Issue a reset token for the email and mail the link.

        Returns whether a token was issued. With ``background_tasks`` the email
        goes out after the response, so known and unknown emails answer in
        comparable time. Callers must respond the same way regardless.
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")

        user = self.store.find_by_email(db, User, email)
        if user is None or not user.is_active:
            logger.info("Password reset requested for unknown or inactive email")
            return False

        token = self.reset_tokens.issue(db, user)
        reset_url = self.email_service.build_reset_url(token)
        self._dispatch(background_tasks, self._deliver_reset, user.id, user.email, user.display_name, reset_url)
        return True

    def reset_password(self, db: Session, token: str, new_password: str) -> User:
        """Set a new password using a reset token."""
        if not token or not new_password:
            raise ValidationError("Token and password are required")
        self._check_password(new_password)
        user = self.reset_tokens.validate_and_consume(db, token, self.hasher.hash(new_password))
        logger.info("Password reset completed for user %s", user.id)
        return user

    def ensure_default_admin(self, db: Session, email: str, password: str, name: str) -> tuple[Admin, bool]:
        """Create the super admin if no admin has that email. Returns (admin, created)."""
        existing = self.store.find_by_email(db, Admin, email)
        if existing is not None:
            return existing, False
        self._check_password(password)
        admin = self.store.create_admin(db, email, self.hasher.hash(password), name, Role.SUPER_ADMIN)
        logger.info("Default admin created: %s", admin.email)
        return admin, True

    def set_admin_active(self, db: Session, admin_id: int, active: bool, acting_admin_id: int) -> Admin:
        """Activate or deactivate an admin. Deactivation revokes its tokens."""
        if admin_id == acting_admin_id and not active:
            raise ValidationError("You cannot deactivate your own account")
        admin = self.store.set_active(db, Admin, admin_id, active)
        logger.info("Admin %s %s by admin %s", admin_id, "activated" if active else "deactivated", acting_admin_id)
        return admin

    def _authenticate(self, db: Session, model: PrincipalModel, email: str, password: str) -> Principal:
        if not email or not password:
            raise ValidationError("Email and password are required")

        principal = self.store.find_by_email(db, model, email)
        if principal is None:
            self.hasher.burn(password)
            logger.info("%s login rejected: no account", model.__name__)
            raise AuthenticationError(INVALID_CREDENTIALS)

        password_ok = self.hasher.verify(password, principal.password_hash)
        if not principal.is_active:
            logger.info("%s login rejected: account %s inactive", model.__name__, principal.id)
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not password_ok:
            logger.info("%s login rejected: bad password for %s", model.__name__, principal.id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        self.store.record_login(db, principal)
        return principal

    def _check_password(self, password: str) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        # bcrypt only reads the first 72 bytes
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    def _dispatch(self, background_tasks: BackgroundTasks | None, func: Callable[..., Any], *args: Any) -> None:
        if background_tasks is None:
            func(*args)
        else:
            background_tasks.add_task(func, *args)

    def _deliver_reset(self, user_id: int, email: str, name: str, reset_url: str) -> None:
        if not self.email_service.send_password_reset(email, name, reset_url):
            logger.warning("Reset email for user %s was not delivered; token remains valid", user_id)

    def _deliver_welcome(self, user_id: int, email: str, name: str) -> None:
        if not self.email_service.send_welcome(email, name):
            logger.warning("Welcome email for user %s was not delivered", user_id)

    def _new_referral_code(self, db: Session) -> str:
        while True:
            code = REFERRAL_PREFIX + "".join(secrets.choice(_REFERRAL_ALPHABET) for _ in range(6))
            if db.query(User.id).filter(User.referral_code == code).first() is None:
                return code


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(
            store=get_credential_store(),
            hasher=get_password_hasher(),
            reset_tokens=get_reset_token_manager(),
            email_service=get_email_service(),
        )
    return _auth_service
