# tasktracker/utils/auth.py
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from tasktracker.database import get_db
from tasktracker.models.user import User
from tasktracker.services.auth_service import AuthService, verify_token
from tasktracker.utils.security import Identity

# auto_error=False so a missing header goes through the same Unauthorized path
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_identity(token: Optional[str] = Depends(oauth2_scheme)) -> Identity:
    return verify_token(token)


def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    return AuthService(db).get_user(identity.id)
