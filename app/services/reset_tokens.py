"""Password reset token lifecycle."""

import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import ValidationError
from app.models.user import User
from app.services.credentials import CredentialStore, get_credential_store

logger = logging.getLogger("academy")

INVALID_RESET_TOKEN = "Invalid or expired reset token"


class ResetTokenManager:
    """Issues single-use, time-limited reset tokens and consumes them.

    One outstanding token per user: issuing overwrites the previous one. Tokens
    are stored as issued and matched verbatim.
    """

    def __init__(self, store: CredentialStore, expire_minutes: int = 60) -> None:
        self.store = store
        self.expire_minutes = expire_minutes

    def issue(self, db: Session, user: User) -> str:
        """Generate and persist a fresh reset token for the user. Returns the raw token."""
        token = secrets.token_hex(32)
        user.password_reset_token = token
        user.password_reset_expires_at = datetime.utcnow() + timedelta(minutes=self.expire_minutes)
        db.commit()
        return token

    def validate_and_consume(self, db: Session, token: str, new_password_hash: str) -> User:
        """Apply a new password hash if the token is current, invalidating the token.

        Wrong, missing, expired and already-consumed tokens all raise the same
        ValidationError.
        """
        if not token:
            raise ValidationError(INVALID_RESET_TOKEN)

        user = (
            db.query(User)
            .filter(
                User.password_reset_token == token,
                User.password_reset_expires_at > datetime.utcnow(),
            )
            .first()
        )
        if user is None:
            raise ValidationError(INVALID_RESET_TOKEN)

        user_id = user.id
        if not self.store.update_password_hash(db, User, user_id, new_password_hash, reset_token=token):
            # lost a race with another consumer of the same token
            logger.info("Reset token for user %s was consumed concurrently", user_id)
            raise ValidationError(INVALID_RESET_TOKEN)

        db.refresh(user)
        return user


_reset_token_manager: ResetTokenManager | None = None


def get_reset_token_manager() -> ResetTokenManager:
    """Get singleton reset token manager instance."""
    global _reset_token_manager
    if _reset_token_manager is None:
        _reset_token_manager = ResetTokenManager(
            get_credential_store(),
            expire_minutes=get_settings().RESET_TOKEN_EXPIRE_MINUTES,
        )
    return _reset_token_manager
