"""User model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from app.database import Base
from app.models.role import Role


class User(Base):
    """Learner account. Role is always ``user``."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    mobile = Column(String(32), nullable=True)
    state = Column(String(128), nullable=True)
    referral_code = Column(String(16), unique=True, nullable=True, index=True)
    referred_by_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    last_login_at = Column(DateTime, nullable=True)
    password_reset_token = Column(String(256), nullable=True, index=True)
    password_reset_expires_at = Column(DateTime, nullable=True)

    @property
    def role(self) -> Role:
        return Role.USER

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
