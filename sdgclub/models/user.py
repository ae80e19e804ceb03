"""
User accounts, roles and login sessions
"""

import enum
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from sdgclub.core.db import Base
from sdgclub.models._mixins import id_column, created_at_column, updated_at_column

class AppRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"

class User(Base):
    __tablename__ = "users"

    id = id_column()
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=True)
    password_hash = Column(String(255), nullable=False)
    created_at = created_at_column()
    updated_at = updated_at_column()

    roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def role_names(self) -> list[str]:
        return sorted(r.role.value for r in self.roles)

    @property
    def is_admin(self) -> bool:
        return any(r.role == AppRole.ADMIN for r in self.roles)

class UserRole(Base):
    __tablename__ = "user_roles"

    id = id_column()
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(AppRole, values_callable=lambda e: [m.value for m in e]), nullable=False)
    created_at = created_at_column()

    user = relationship("User", back_populates="roles")

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_role"),
    )

class AuthSession(Base):
    __tablename__ = "auth_sessions"

    token = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = created_at_column()
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="sessions")
