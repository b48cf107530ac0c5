# models/task.py

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class ChecklistItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    task_id: str
    content: str = ""
    is_completed: bool = False
    completed_by_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    sort_order: int = 0


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    work_order_id: str
    name: str = ""
    checklist: List[ChecklistItem] = Field(default_factory=list)


class ChecklistToggle(BaseModel):
    is_completed: bool


class TaskProgressRead(BaseModel):
    task_id: str
    completed: int
    total: int
    progress: int = Field(..., ge=0, le=100)
