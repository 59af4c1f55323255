"""Session token issuance and verification."""

from sqlalchemy.orm import Session

from app.errors import AuthenticationError
from app.models.admin import Admin
from app.services.credentials import CredentialStore, Principal, get_credential_store
from app.services.jwt import JWTService, TokenClaims, get_jwt_service


class SessionService:
    """Issues bearer tokens and verifies them.

    Admin tokens are checked against the store on every verification, so
    deactivating or deleting an admin revokes its tokens immediately. User
    tokens are trusted for their whole lifetime without a lookup.
    """

    def __init__(self, jwt_service: JWTService, store: CredentialStore) -> None:
        self.jwt_service = jwt_service
        self.store = store

    def issue(self, principal: Principal) -> str:
        return self.jwt_service.create_token(
            principal_id=principal.id,
            email=principal.email,
            role=principal.role,
            name=principal.display_name,
        )

    def verify(self, db: Session, token: str | None) -> TokenClaims:
        """Verify a bearer token. Raises an AuthenticationError subclass on failure."""
        claims = self.jwt_service.decode_token(token)
        if claims.role.is_admin:
            admin = self.store.find_by_id(db, Admin, claims.principal_id)
            if admin is None or not admin.is_active:
                raise AuthenticationError("Invalid token or admin not found")
        return claims


_session_service: SessionService | None = None


def get_session_service() -> SessionService:
    """Get singleton session service instance."""
    global _session_service
    if _session_service is None:
        _session_service = SessionService(get_jwt_service(), get_credential_store())
    return _session_service
