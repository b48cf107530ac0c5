# models/actor.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.roles import Role, parse_role


class Actor(BaseModel):
    """
    An already-authenticated identity. Read-only to the policy core.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role = Role.unknown
    is_active: bool = True
    display_name: Optional[str] = Field(None, description="Shown on hub messages")

    @field_validator("role", mode="before")
    def normalize_role(cls, v):
        return parse_role(v)
