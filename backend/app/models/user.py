"""
User model.
Created once at signup; only the email-verified flag changes afterwards.
"""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func

from app.models.base import Base, generate_uuid


class User(Base):
    """Account with credentials. password_hash never leaves the backend."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), nullable=False, unique=True, index=True)  # Exact match, stored as given
    password_hash = Column(String(255), nullable=False)  # bcrypt digest
    name = Column(String(255), nullable=True)
    is_email_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
