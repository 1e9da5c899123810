"""
Pydantic schemas for folder endpoints.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class FolderCreate(BaseModel):
    """Schema for creating a folder. Without parent_id it goes under the root."""
    name: str = Field(..., description="Folder name")
    parent_id: Optional[UUID] = Field(None, description="Parent folder ID")


class FolderResponse(BaseModel):
    """Schema for folder response."""
    id: str
    name: str
    parent_id: Optional[str] = None
    is_root: bool
    created_at: datetime

    class Config:
        from_attributes = True
