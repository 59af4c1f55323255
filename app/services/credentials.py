"""Credential store: principal lookup and password-hash persistence."""

from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import ConflictError, NotFoundError
from app.models.admin import Admin
from app.models.role import Role
from app.models.user import User

Principal = User | Admin
PrincipalModel = type[User] | type[Admin]


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:
    """Reads and writes principal credential records."""

    def find_by_email(self, db: Session, model: PrincipalModel, email: str) -> Principal | None:
        """Find a principal by email, case-insensitively."""
        return db.query(model).filter(model.email == normalize_email(email)).first()

    def find_by_id(self, db: Session, model: PrincipalModel, principal_id: int) -> Principal | None:
        return db.get(model, principal_id)

    def create_user(self, db: Session, email: str, password_hash: str, **fields) -> User:
        """Insert a user. Raises ConflictError if the email is taken."""
        email = normalize_email(email)
        if self.find_by_email(db, User, email):
            raise ConflictError("User already exists with this email")
        now = datetime.utcnow()
        user = User(email=email, password_hash=password_hash, is_active=True, created_at=now, updated_at=now, **fields)
        return self._insert(db, user, "User already exists with this email")

    def create_admin(self, db: Session, email: str, password_hash: str, name: str, role: Role) -> Admin:
        """Insert an admin. Raises ConflictError if the email is taken."""
        if role is Role.USER:
            raise ValueError("admins cannot carry the user role")
        email = normalize_email(email)
        if self.find_by_email(db, Admin, email):
            raise ConflictError("Admin already exists with this email")
        now = datetime.utcnow()
        admin = Admin(
            email=email,
            password_hash=password_hash,
            name=name.strip(),
            role=role,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        return self._insert(db, admin, "Admin already exists with this email")

    def update_password_hash(
        self,
        db: Session,
        model: PrincipalModel,
        principal_id: int,
        new_hash: str,
        reset_token: str | None = None,
    ) -> bool:
        """Overwrite a principal's password hash and clear any outstanding reset token.

        With ``reset_token`` the write only happens while that token is still the
        stored one and unexpired, so concurrent consumers of one token cannot
        both succeed. Returns whether a row was updated.
        """
        now = datetime.utcnow()
        criteria = [model.id == principal_id]
        values = {"password_hash": new_hash, "updated_at": now}
        if hasattr(model, "password_reset_token"):
            values["password_reset_token"] = None
            values["password_reset_expires_at"] = None
            if reset_token is not None:
                criteria.append(model.password_reset_token == reset_token)
                criteria.append(model.password_reset_expires_at > now)
        elif reset_token is not None:
            raise ValueError(f"{model.__name__} does not support reset tokens")

        stmt = update(model).where(*criteria).values(**values).execution_options(synchronize_session=False)
        result = db.execute(stmt)
        db.commit()
        return result.rowcount == 1

    def record_login(self, db: Session, principal: Principal) -> None:
        """Stamp a successful authentication."""
        principal.last_login_at = datetime.utcnow()
        db.commit()

    def set_active(self, db: Session, model: PrincipalModel, principal_id: int, active: bool) -> Principal:
        principal = self.find_by_id(db, model, principal_id)
        if principal is None:
            raise NotFoundError(f"{model.__name__} not found")
        principal.is_active = active
        principal.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(principal)
        return principal

    def _insert(self, db: Session, principal: Principal, conflict_message: str) -> Principal:
        db.add(principal)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(conflict_message) from None
        db.refresh(principal)
        return principal


_credential_store: CredentialStore | None = None


def get_credential_store() -> CredentialStore:
    """Get singleton credential store instance."""
    global _credential_store
    if _credential_store is None:
        _credential_store = CredentialStore()
    return _credential_store
