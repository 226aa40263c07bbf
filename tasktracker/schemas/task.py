# tasktracker/schemas/task.py
from pydantic import BaseModel, Field, validator
from datetime import date, datetime
from typing import Optional

from tasktracker.models.task import (
    TaskStatus,
    TaskPriority,
    TITLE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
)
from tasktracker.schemas.user import EmployeeBasic

TASK_MODEL_CONFIG = {
    "from_attributes": True,
    "populate_by_name": True,
}


def _coerce_due_date(v):
    # The date input sends "" when cleared and ISO timestamps when editing
    if v is None or v == "":
        return None
    if isinstance(v, str) and len(v) > 10 and v[4] == "-":
        return v[:10]
    return v


def _strip_title(v):
    # Before the length check, so padding does not count
    return v.strip() if isinstance(v, str) else v


class TaskCreate(BaseModel):
    title: str = Field(..., max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    employee_id: Optional[int] = Field(default=None, alias="employeeId")

    model_config = TASK_MODEL_CONFIG

    @validator('title', pre=True)
    def title_must_not_be_blank(cls, v):
        v = _strip_title(v)
        if v == "":
            raise ValueError('Title is required')
        return v

    @validator('due_date', pre=True)
    def normalize_due_date(cls, v):
        return _coerce_due_date(v)


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    # Accepted only so a changed owner can be rejected explicitly
    employee_id: Optional[int] = Field(default=None, alias="employeeId")

    model_config = TASK_MODEL_CONFIG

    @validator('title', pre=True)
    def strip_title(cls, v):
        return _strip_title(v)

    @validator('due_date', pre=True)
    def normalize_due_date(cls, v):
        return _coerce_due_date(v)


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    employee_id: int = Field(..., alias="employeeId")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    # Owner projection
    employee: Optional[EmployeeBasic] = None

    model_config = TASK_MODEL_CONFIG
