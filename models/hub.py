# models/hub.py

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from models.contact import Contact
from models.enums import HubAccess
from models.file import ClientVisibleFile, FileRecord

MAX_MESSAGE_LENGTH = 2000


class HubMessage(BaseModel):
    """A message in a work order's client-facing channel."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    work_order_id: str
    sender_id: str
    sender_name: Optional[str] = None
    sender_company_name: Optional[str] = None
    message: str
    file_references: List[str] = Field(default_factory=list)
    is_deleted: bool = False
    created_at: Optional[datetime] = None


class HubMessageCreate(BaseModel):
    message: str = Field(..., description=f"1 to {MAX_MESSAGE_LENGTH} characters")
    file_references: List[str] = Field(default_factory=list)


class HubSnapshot(BaseModel):
    """Unfiltered Hub data as loaded from storage. Never returned to callers."""

    files: List[FileRecord] = Field(default_factory=list)
    contacts: List[Contact] = Field(default_factory=list)
    messages: List[HubMessage] = Field(default_factory=list)


class HubPayload(BaseModel):
    """Everything a Hub view renders for one work order."""

    files: List[ClientVisibleFile] = Field(default_factory=list)
    contacts: List[Contact] = Field(default_factory=list)
    messages: List[HubMessage] = Field(default_factory=list)


class HubAccessRead(BaseModel):
    work_order_id: str
    access: HubAccess
