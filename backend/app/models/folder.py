"""
Folder model.

Every user owns exactly one root folder (parent_id is NULL, is_root is true),
created together with the user at signup. All other folders hang below it.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.sql import func

from app.models.base import Base, generate_uuid

ROOT_FOLDER_NAME = "root"


class Folder(Base):
    """Folder owned by a single user."""

    __tablename__ = "folders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    parent_id = Column(String(36), ForeignKey("folders.id"), nullable=True)
    is_root = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        # One root folder per user
        Index(
            "uq_folders_root_per_user",
            "user_id",
            unique=True,
            postgresql_where=is_root.is_(True),
            sqlite_where=is_root.is_(True),
        ),
    )

    def __repr__(self):
        return f"<Folder(id={self.id}, user={self.user_id}, name={self.name}, root={self.is_root})>"
