# tasktracker/services/task_filters.py
"""
Task query/filter engine.

Pure, order-preserving filters over an in-memory task sequence that has
already been scoped by the authorization policy. Stages run in a fixed
order (department, quick filter, date range, search) and compose by
intersection. Tasks only need ``status``, ``priority``, ``due_date``,
``title``, ``description``, ``created_at`` and an ``employee`` with
``name`` and ``department``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional

from tasktracker.models.task import TaskStatus, TaskPriority

ALL_DEPARTMENTS = "all"


class QuickFilter(str, Enum):
    ALL = "all"
    TODO = "todo"
    IN_PROGRESS = "inprogress"
    REVIEW = "review"
    DONE = "done"
    URGENT = "urgent"
    HIGH = "high"
    OVERDUE = "overdue"


STATUS_FILTERS = {
    QuickFilter.TODO: TaskStatus.TODO,
    QuickFilter.IN_PROGRESS: TaskStatus.IN_PROGRESS,
    QuickFilter.REVIEW: TaskStatus.REVIEW,
    QuickFilter.DONE: TaskStatus.DONE,
}

PRIORITY_FILTERS = {
    QuickFilter.URGENT: TaskPriority.URGENT,
    QuickFilter.HIGH: TaskPriority.HIGH,
}


@dataclass
class TaskQuery:
    department: Optional[str] = None
    quick_filter: QuickFilter = QuickFilter.ALL
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    search: Optional[str] = None


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def _owner_attr(task, attr: str) -> str:
    employee = getattr(task, "employee", None)
    if employee is None:
        return ""
    return getattr(employee, attr, None) or ""


def filter_by_department(tasks: Iterable, department: Optional[str]) -> List:
    if not department or department == ALL_DEPARTMENTS:
        return list(tasks)
    return [task for task in tasks if _owner_attr(task, "department") == department]


def is_overdue(task, today: date) -> bool:
    due_date = _as_date(task.due_date)
    if due_date is None:
        return False
    return due_date < today and task.status != TaskStatus.DONE


def filter_by_quick_filter(tasks: Iterable, quick_filter: QuickFilter, today: date) -> List:
    quick_filter = QuickFilter(quick_filter)

    if quick_filter in STATUS_FILTERS:
        wanted = STATUS_FILTERS[quick_filter]
        return [task for task in tasks if task.status == wanted]
    if quick_filter in PRIORITY_FILTERS:
        wanted = PRIORITY_FILTERS[quick_filter]
        return [task for task in tasks if task.priority == wanted]
    if quick_filter == QuickFilter.OVERDUE:
        return [task for task in tasks if is_overdue(task, today)]
    return list(tasks)


def filter_by_date_range(tasks: Iterable, start_date: Optional[date], end_date: Optional[date]) -> List:
    if start_date is None and end_date is None:
        return list(tasks)

    result = []
    for task in tasks:
        due_date = _as_date(task.due_date)
        # Undated tasks never match an active range
        if due_date is None:
            continue
        if start_date is not None and due_date < start_date:
            continue
        if end_date is not None and due_date > end_date:
            continue
        result.append(task)
    return result


def filter_by_search(tasks: Iterable, search: Optional[str]) -> List:
    term = (search or "").strip().lower()
    if not term:
        return list(tasks)
    return [
        task for task in tasks
        if term in (task.title or "").lower()
        or term in (task.description or "").lower()
        or term in _owner_attr(task, "name").lower()
    ]


def apply_filters(tasks: Iterable, query: TaskQuery, today: Optional[date] = None) -> List:
    """Run every stage of ``query`` over ``tasks``, preserving input order"""
    today = today or date.today()
    result = filter_by_department(tasks, query.department)
    result = filter_by_quick_filter(result, query.quick_filter, today)
    result = filter_by_date_range(result, query.start_date, query.end_date)
    return filter_by_search(result, query.search)


def sort_newest_first(tasks: Iterable) -> List:
    return sorted(tasks, key=lambda task: task.created_at, reverse=True)
