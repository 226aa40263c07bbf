# tasktracker/routers/department.py
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List
import logging

from tasktracker.database import get_db
from tasktracker.errors import DuplicateError, NotFoundError, ValidationError
from tasktracker.models import Department
from tasktracker.schemas.department import DepartmentCreate, DepartmentUpdate, DepartmentOut
from tasktracker.utils.auth import get_current_identity
from tasktracker.utils.policy import Action, authorize
from tasktracker.utils.security import Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/departments", tags=["departments"])


def _get_department(db: Session, department_id: int) -> Department:
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        raise NotFoundError("Department not found")
    return department


def _ensure_name_free(db: Session, name: str, exclude_id: int = None):
    if not name:
        raise ValidationError("Department name is required")
    query = db.query(Department).filter(Department.name == name)
    if exclude_id is not None:
        query = query.filter(Department.id != exclude_id)
    if query.first():
        raise DuplicateError(f"Department '{name}' already exists")


def _commit(db: Session, name: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Department '{name}' already exists")


@router.get("", response_model=List[DepartmentOut])
def list_departments(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    authorize(identity, Action.LIST_DEPARTMENTS)
    return db.query(Department).order_by(Department.name).all()


@router.get("/public", response_model=List[str])
def list_department_names(db: Session = Depends(get_db)):
    """Department names for the registration form, no login required"""
    return [name for (name,) in db.query(Department.name).order_by(Department.name).all()]


@router.post("", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED)
def create_department(
    department: DepartmentCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    authorize(identity, Action.MANAGE_DEPARTMENTS)
    name = department.name.strip()
    _ensure_name_free(db, name)

    db_department = Department(name=name, description=department.description)
    db.add(db_department)
    _commit(db, name)
    db.refresh(db_department)

    logger.info(f"Department {db_department.id} '{name}' created by user {identity.id}")
    return db_department


@router.put("/{department_id}", response_model=DepartmentOut)
def update_department(
    department_id: int,
    department_update: DepartmentUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Rename or re-describe a department. Users keep their old label."""
    authorize(identity, Action.MANAGE_DEPARTMENTS)
    db_department = _get_department(db, department_id)

    update_data = department_update.model_dump(exclude_unset=True)
    if update_data.get("name") is not None:
        update_data["name"] = update_data["name"].strip()
        _ensure_name_free(db, update_data["name"], exclude_id=department_id)
    else:
        update_data.pop("name", None)

    for field, value in update_data.items():
        setattr(db_department, field, value)

    _commit(db, db_department.name)
    db.refresh(db_department)
    return db_department


@router.delete("/{department_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_department(
    department_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    authorize(identity, Action.MANAGE_DEPARTMENTS)
    db_department = _get_department(db, department_id)
    db.delete(db_department)
    db.commit()

    logger.info(f"Department {department_id} deleted by user {identity.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
