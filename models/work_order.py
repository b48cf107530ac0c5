# models/work_order.py

from typing import Optional, FrozenSet
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.enums import JobStatus, REASON_REQUIRED_STATUSES


def _clean_reason(value):
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    stripped = value.strip()
    return stripped or None


def _to_id_set(value):
    if not value:
        return frozenset()
    return frozenset(str(v) for v in value)


# ======================================================
# WORK ORDER SNAPSHOT
# ======================================================

class WorkOrder(BaseModel):
    """
    Immutable snapshot of a work order as the policy core sees it.

    status_reason is present iff status is On Hold or Cancelled.
    The invariant is checked on every construction, so neither a
    transition nor a round trip through JSON can break it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    status: JobStatus = Field(JobStatus.open, alias="job_status")
    status_reason: Optional[str] = Field(None, alias="job_status_reason")

    owner_id: str
    client_id: Optional[str] = None
    pm_id: Optional[str] = Field(None, description="Primary client contact")

    assigned_actor_ids: FrozenSet[str] = frozenset()
    team_actor_ids: FrozenSet[str] = frozenset()
    additional_contact_ids: FrozenSet[str] = Field(
        frozenset(),
        description="Contacts granted Hub access besides the primary contact",
    )

    # -----------------------------
    # Validators
    # -----------------------------
    @field_validator("status_reason", mode="before")
    def validate_reason(cls, v):
        return _clean_reason(v)

    @field_validator("assigned_actor_ids", "team_actor_ids", "additional_contact_ids", mode="before")
    def validate_id_sets(cls, v):
        return _to_id_set(v)

    @model_validator(mode="after")
    def check_reason_invariant(self):
        needs_reason = self.status in REASON_REQUIRED_STATUSES
        if needs_reason and self.status_reason is None:
            raise ValueError(f'status "{self.status}" requires a status_reason')
        if not needs_reason and self.status_reason is not None:
            raise ValueError(f'status "{self.status}" must not carry a status_reason')
        return self


# ======================================================
# REQUEST / RESPONSE MODELS
# ======================================================

class StatusChangeRequest(BaseModel):
    status: JobStatus
    reason: Optional[str] = Field(None, description="Required for On Hold and Cancelled")


class WorkOrderRead(BaseModel):
    id: str
    job_status: JobStatus
    job_status_reason: Optional[str] = None
    owner_id: str
    client_id: Optional[str] = None
    pm_id: Optional[str] = None

    @classmethod
    def from_work_order(cls, work_order: WorkOrder) -> "WorkOrderRead":
        return cls(
            id=work_order.id,
            job_status=work_order.status,
            job_status_reason=work_order.status_reason,
            owner_id=work_order.owner_id,
            client_id=work_order.client_id,
            pm_id=work_order.pm_id,
        )
