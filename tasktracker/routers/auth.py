from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasktracker.database import get_db
from tasktracker.schemas.user import UserCreate, UserLogin
from tasktracker.schemas.tokens import SessionOut
from tasktracker.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    return AuthService(db).register(
        name=user.name,
        email=user.email,
        password=user.password,
        department=user.department,
        role=user.role,
    )


@router.post("/login", response_model=SessionOut)
def login(user: UserLogin, db: Session = Depends(get_db)):
    return AuthService(db).login(user.email, user.password)
