# core/lifecycle.py

"""
Work order lifecycle.

Any status may follow any other (work orders can always be re-opened);
the only rule enforced here is the reason invariant. Whether the actor
may request the change at all is decided by the caller.
"""

from typing import Optional, Union

from core.errors import MissingReasonError
from models.enums import JobStatus, REASON_REQUIRED_STATUSES
from models.work_order import WorkOrder


def requires_reason(status: JobStatus) -> bool:
    return status in REASON_REQUIRED_STATUSES


def parse_status(value: Union[str, JobStatus]) -> JobStatus:
    """
    Accepts the display value ("On Hold") or the member name ("on_hold").
    Raises ValueError for anything else.
    """
    if isinstance(value, JobStatus):
        return value

    try:
        return JobStatus(value)
    except ValueError:
        pass

    name = str(value).strip().lower().replace(" ", "_").replace("-", "_")
    if name in JobStatus.__members__:
        return JobStatus[name]

    raise ValueError(f"Unknown job status: {value!r}")


def transition(
    work_order: WorkOrder,
    requested: Union[str, JobStatus],
    reason: Optional[str] = None,
) -> WorkOrder:
    """
    Produce the snapshot that results from moving `work_order` to `requested`.

    Raises MissingReasonError when the target status needs a justification
    and `reason` is empty or whitespace. The stored reason is `reason` with
    leading and trailing whitespace stripped; statuses that take no reason
    discard it. Requesting the current status is a legal no-op that still
    re-validates (and may update) the reason.
    """
    target = parse_status(requested)
    cleaned = reason.strip() if isinstance(reason, str) else None

    if requires_reason(target):
        if not cleaned:
            raise MissingReasonError(target)
        new_reason = cleaned
    else:
        new_reason = None

    data = work_order.model_dump()
    data["status"] = target
    data["status_reason"] = new_reason
    return WorkOrder.model_validate(data)
