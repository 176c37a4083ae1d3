"""User model definitions."""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, func
from modulehub.database import Base


class Role(str, enum.Enum):
    """Coarse authorization tier attached to every user."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    """Represents a registered account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    activated = Column(Boolean, nullable=False, default=False)
    activation_link = Column(String(255), unique=True, index=True)
    user_role = Column(
        Enum(Role, name="user_role", native_enum=False, length=16),
        nullable=False,
        default=Role.USER,
    )
