# tasktracker/services/task_repository.py
"""
Task persistence.

Each call touches a single task row and commits on its own; concurrent
updates to the same task are last-writer-wins.
"""

import logging
from datetime import datetime, date
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from tasktracker.errors import ValidationError, NotFoundError, InternalError
from tasktracker.models import Task, TaskStatus, TaskPriority, User
from tasktracker.models.task import TITLE_MAX_LENGTH, DESCRIPTION_MAX_LENGTH

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"title", "description", "status", "priority", "due_date"}


def _enum_value(enum_cls, value, label: str) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label}. Must be one of: {allowed}")


def validate_task_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Check length limits and enum membership; return normalized values"""
    cleaned = dict(fields)

    if "title" in cleaned:
        title = (cleaned["title"] or "").strip()
        if not title:
            raise ValidationError("Title is required")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
        cleaned["title"] = title

    if cleaned.get("description") is not None:
        if len(cleaned["description"]) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")

    if "status" in cleaned:
        cleaned["status"] = _enum_value(TaskStatus, cleaned["status"], "status")

    if "priority" in cleaned:
        cleaned["priority"] = _enum_value(TaskPriority, cleaned["priority"], "priority")

    due_date = cleaned.get("due_date")
    if due_date is not None and not isinstance(due_date, date):
        raise ValidationError("Due date must be a calendar date")
    if isinstance(due_date, datetime):
        cleaned["due_date"] = due_date.date()

    return cleaned


class TaskRepository:
    """CRUD over Task rows"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Task).options(joinedload(Task.employee))

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error during task {action}: {e}")
            raise InternalError(f"Could not {action} task")

    def create(self, task: Dict[str, Any]) -> Task:
        employee_id = task.get("employee_id")
        if employee_id is None:
            raise ValidationError("Task must belong to an employee")
        if not self.db.query(User.id).filter(User.id == employee_id).first():
            raise ValidationError("Employee not found")

        fields = {key: value for key, value in task.items() if key in EDITABLE_FIELDS}
        fields.setdefault("title", None)
        fields.setdefault("status", TaskStatus.TODO)
        fields.setdefault("priority", TaskPriority.MEDIUM)
        fields = validate_task_fields(fields)

        db_task = Task(
            employee_id=employee_id,
            created_at=datetime.utcnow(),
            **fields,
        )
        self.db.add(db_task)
        self._commit("create")
        self.db.refresh(db_task)

        logger.info(f"Task {db_task.id} created for employee {employee_id}")
        return db_task

    def get(self, task_id: int) -> Task:
        db_task = self._query().filter(Task.id == task_id).first()
        if db_task is None:
            raise NotFoundError("Task not found")
        return db_task

    def get_by_employee(self, employee_id: int) -> List[Task]:
        return (
            self._query()
            .filter(Task.employee_id == employee_id)
            .order_by(Task.created_at.asc(), Task.id.asc())
            .all()
        )

    def get_all(self) -> List[Task]:
        """All tasks with their owner loaded, newest first"""
        return (
            self._query()
            .order_by(Task.created_at.desc(), Task.id.desc())
            .all()
        )

    def update(self, task_id: int, patch: Dict[str, Any]) -> Task:
        db_task = self.get(task_id)

        patch = dict(patch)
        new_owner: Optional[int] = patch.pop("employee_id", None)
        if new_owner is not None and new_owner != db_task.employee_id:
            raise ValidationError("Task owner cannot be changed")

        unknown = set(patch) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        for field, value in validate_task_fields(patch).items():
            setattr(db_task, field, value)

        db_task.updated_at = datetime.utcnow()
        self._commit("update")
        self.db.refresh(db_task)

        logger.info(f"Task {task_id} updated ({', '.join(sorted(patch)) or 'no fields'})")
        return db_task

    def delete(self, task_id: int) -> None:
        db_task = self.get(task_id)
        self.db.delete(db_task)
        self._commit("delete")
        logger.info(f"Task {task_id} deleted")
