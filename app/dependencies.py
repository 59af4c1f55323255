"""Authentication and authorization dependencies for FastAPI routes."""

from collections.abc import Iterable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import AuthorizationError
from app.models.role import ADMIN_ROLES, Role
from app.services.jwt import TokenClaims
from app.services.session import get_session_service


def get_bearer_token(request: Request) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header, if any."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header[:7].lower() == "bearer ":
        return auth_header[7:].strip() or None
    return None


def get_current_claims(request: Request, db: Session = Depends(get_db)) -> TokenClaims:
    """Verify the bearer token of any principal. Raises 401 if missing or invalid."""
    return get_session_service().verify(db, get_bearer_token(request))


class RoleGate:
    """Dependency that admits a verified principal only if its role is in ``roles``.

    Raises 401 when the token is missing or fails verification and 403 when the
    role is not permitted. Reads only; never mutates stored state.
    """

    def __init__(self, roles: Iterable[Role]) -> None:
        self.roles = frozenset(roles)

    def __call__(self, claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if claims.role not in self.roles:
            raise AuthorizationError("Insufficient permissions")
        return claims


require_user = RoleGate({Role.USER})
require_admin = RoleGate(ADMIN_ROLES)
require_super_admin = RoleGate({Role.SUPER_ADMIN})
