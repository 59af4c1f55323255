"""JWT Token Service."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import get_settings
from app.errors import AuthenticationError
from app.models.role import Role


class TokenMissingError(AuthenticationError):
    default_message = "No token provided"


class TokenInvalidError(AuthenticationError):
    default_message = "Invalid token"


class TokenExpiredError(AuthenticationError):
    default_message = "Token has expired"


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token."""

    principal_id: int
    email: str
    role: Role
    name: str
    issued_at: datetime
    expires_at: datetime

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.principal_id,
            "email": self.email,
            "role": self.role.value,
            "name": self.name,
        }


class JWTService:
    """Handles JWT token creation and validation."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 1440) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def create_token(
        self,
        principal_id: int,
        email: str,
        role: Role,
        name: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed token for the given principal."""
        now = datetime.utcnow()
        expire = now + (expires_delta if expires_delta is not None else timedelta(minutes=self.expire_minutes))
        payload = {
            "sub": str(principal_id),
            "email": email,
            "role": Role(role).value,
            "name": name,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str | None) -> TokenClaims:
        """Check signature and expiry and return the claims.

        Raises TokenMissingError, TokenInvalidError or TokenExpiredError.
        """
        if not token:
            raise TokenMissingError()
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError() from None
        except JWTError:
            raise TokenInvalidError() from None

        role = Role.parse(str(payload.get("role", "")))
        try:
            principal_id = int(payload["sub"])
            email = payload["email"]
            name = payload.get("name", "")
            issued_at = datetime.utcfromtimestamp(payload["iat"])
            expires_at = datetime.utcfromtimestamp(payload["exp"])
        except (KeyError, TypeError, ValueError):
            raise TokenInvalidError() from None
        if role is None:
            raise TokenInvalidError()

        return TokenClaims(
            principal_id=principal_id,
            email=email,
            role=role,
            name=name,
            issued_at=issued_at,
            expires_at=expires_at,
        )


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        settings = get_settings()
        _jwt_service = JWTService(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
        )
    return _jwt_service
