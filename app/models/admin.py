"""Admin model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String

from app.database import Base
from app.models.role import Role


class Admin(Base):
    """Back-office account. Deactivating it revokes its outstanding tokens."""

    __tablename__ = "admin"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    name = Column(String(256), nullable=False)
    role = Column(
        Enum(Role, name="admin_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.ADMIN,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    last_login_at = Column(DateTime, nullable=True)

    @property
    def display_name(self) -> str:
        return self.name
