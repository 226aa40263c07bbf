# tasktracker/routers/task.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from tasktracker.database import get_db
from tasktracker.errors import ValidationError
from tasktracker.schemas.task import TaskCreate, TaskUpdate, TaskOut
from tasktracker.services.export_service import content_disposition, export_tasks, parse_export_format
from tasktracker.services.task_filters import QuickFilter, TaskQuery, apply_filters, sort_newest_first
from tasktracker.services.task_repository import TaskRepository
from tasktracker.utils.auth import get_current_identity
from tasktracker.utils.policy import Action, authorize
from tasktracker.utils.security import Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _check_date_range(start_date: Optional[date], end_date: Optional[date]):
    if start_date and end_date and start_date > end_date:
        raise ValidationError("startDate must not be after endDate")


def get_task_query(
    department: Optional[str] = Query(None, description="Owner department, or 'all'"),
    quick_filter: QuickFilter = Query(QuickFilter.ALL, alias="filter"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = Query(None, description="Matches title, description or owner name"),
) -> TaskQuery:
    _check_date_range(start_date, end_date)
    return TaskQuery(
        department=department,
        quick_filter=quick_filter,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )


@router.get("/export")
def export(
    department: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    format: str = Query("spreadsheet", description="spreadsheet (xlsx) or document (pdf)"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Export tasks as a spreadsheet or PDF - admin only"""
    authorize(identity, Action.EXPORT_TASKS)
    export_format = parse_export_format(format)
    _check_date_range(start_date, end_date)

    query = TaskQuery(department=department, start_date=start_date, end_date=end_date)
    tasks = apply_filters(TaskRepository(db).get_all(), query)

    artifact = export_tasks(
        sort_newest_first(tasks),
        export_format,
        department=department,
        start_date=start_date,
        end_date=end_date,
    )
    return Response(
        content=artifact.content,
        media_type=artifact.content_type,
        headers={"Content-Disposition": content_disposition(artifact.filename)},
    )


@router.get("", response_model=List[TaskOut])
def get_all_tasks(
    query: TaskQuery = Depends(get_task_query),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """All tasks with owner info, newest first - admin only"""
    authorize(identity, Action.LIST_ALL_TASKS)
    tasks = TaskRepository(db).get_all()
    return sort_newest_first(apply_filters(tasks, query))


@router.get("/employee/{employee_id}", response_model=List[TaskOut])
def get_employee_tasks(
    employee_id: int,
    query: TaskQuery = Depends(get_task_query),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Tasks owned by one employee - the employee themself or an admin"""
    authorize(identity, Action.LIST_EMPLOYEE_TASKS, employee_id)
    tasks = TaskRepository(db).get_by_employee(employee_id)
    return apply_filters(tasks, query)


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    db_task = TaskRepository(db).get(task_id)
    authorize(identity, Action.READ_TASK, db_task)
    return db_task


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Create a task. employeeId defaults to the caller; only admins may set someone else."""
    owner_id = task.employee_id if task.employee_id is not None else identity.id
    authorize(identity, Action.CREATE_TASK, owner_id)

    data = task.model_dump(exclude={"employee_id"})
    data["employee_id"] = owner_id
    return TaskRepository(db).create(data)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    repository = TaskRepository(db)
    db_task = repository.get(task_id)
    authorize(identity, Action.UPDATE_TASK, db_task)
    return repository.update(task_id, task_update.model_dump(exclude_unset=True))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    repository = TaskRepository(db)
    db_task = repository.get(task_id)
    authorize(identity, Action.DELETE_TASK, db_task)
    repository.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
