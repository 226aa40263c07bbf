from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from tasktracker.models.user import UserRole


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str
    department: str
    role: UserRole = UserRole.EMPLOYEE


class UserLogin(BaseModel):
    # Plain str so a malformed address gets the same answer as a wrong password
    email: str
    password: str


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    department: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
    }


class EmployeeBasic(BaseModel):
    """Minimal owner projection embedded in task payloads"""
    id: int
    name: str
    department: str

    model_config = {
        "from_attributes": True
    }
