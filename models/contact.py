# models/contact.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Contact(BaseModel):
    """
    A client-side person (project manager on the client's side).
    user_profile_id links the contact to a portal login; None = contact only.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    client_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    user_profile_id: Optional[str] = None

    @property
    def has_portal_access(self) -> bool:
        return self.user_profile_id is not None


class ContactGrant(BaseModel):
    """An additional contact's access to one work order's Hub."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = None
    work_order_id: str
    contact_id: str = Field(..., alias="project_manager_id")
    added_by: Optional[str] = None


class ContactGrantCreate(BaseModel):
    contact_id: str = Field(..., description="Contact of the work order's client")
