# models/file.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class FileRecord(BaseModel):
    """A work order file as stored (internal view)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    work_order_id: str
    visible_to_client: bool = Field(False, alias="is_client_visible")

    category_id: Optional[str] = None
    category_name: Optional[str] = None

    file_name: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None

    uploaded_by: Optional[str] = None
    created_at: Optional[datetime] = None


class ClientVisibleFile(BaseModel):
    """
    What a client is allowed to see about a file.
    Upload actor and internal category id are deliberately absent.
    """

    id: str
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    category_name: Optional[str] = None
    created_at: Optional[datetime] = None


class VisibilityUpdate(BaseModel):
    visible_to_client: bool
