# tasktracker/services/auth_service.py
"""
Authenticator: registration, login and session-token verification
"""

import logging
from typing import Optional, Union

from email_validator import validate_email, EmailNotValidError
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tasktracker.config.settings import settings
from tasktracker.errors import ValidationError, DuplicateError, InvalidCredentials, Unauthorized
from tasktracker.models import User, UserRole, Department
from tasktracker.schemas.tokens import SessionOut
from tasktracker.utils.security import (
    Identity,
    hash_password,
    verify_password,
    pwd_context,
    create_access_token,
    decode_access_token,
)

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Validate the address syntax and return it in its stored (lower-case) form"""
    try:
        result = validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Email address is not valid")
    return result.normalized.lower()


def issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role})


def build_session(user: User, token: str) -> SessionOut:
    return SessionOut(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        department=user.department,
        created_at=user.created_at,
        token=token,
    )


def verify_token(token: Optional[str]) -> Identity:
    """Turn a bearer token into an Identity, or raise Unauthorized"""
    if not token:
        raise Unauthorized("Not authenticated")
    try:
        payload = decode_access_token(token)
    except JWTError:
        raise Unauthorized()

    try:
        user_id = int(payload["sub"])
        role = UserRole(payload["role"])
    except (KeyError, TypeError, ValueError):
        raise Unauthorized()

    return Identity(id=user_id, role=role)


class AuthService:
    """Credential checks against the users table"""

    def __init__(self, db: Session):
        self.db = db

    def register(
        self,
        name: str,
        email: str,
        password: str,
        department: str,
        role: Union[UserRole, str] = UserRole.EMPLOYEE,
    ) -> SessionOut:
        missing = [
            field for field, value in (
                ("name", name),
                ("email", email),
                ("password", password),
                ("department", department),
            )
            if value is None or not str(value).strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
            )

        try:
            role = UserRole(role)
        except ValueError:
            raise ValidationError(f"Invalid role. Must be one of: {', '.join(r.value for r in UserRole)}")

        if role == UserRole.ADMIN and not settings.ALLOW_ADMIN_SIGNUP:
            raise ValidationError("Self-registration as admin is disabled")

        email = normalize_email(email)
        department = department.strip()

        if not self.db.query(Department).filter(Department.name == department).first():
            raise ValidationError(f"Unknown department: {department}")

        if self.db.query(User).filter(User.email == email).first():
            raise DuplicateError("Email already registered")

        new_user = User(
            name=name.strip(),
            email=email,
            hashed_password=hash_password(password),
            department=department,
            role=role.value,
        )
        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise DuplicateError("Email already registered")
        self.db.refresh(new_user)

        logger.info(f"Registered user {new_user.id} ({new_user.role}) in {new_user.department}")
        return build_session(new_user, issue_token(new_user))

    def login(self, email: str, password: str) -> SessionOut:
        email = (email or "").strip().lower()
        user = self.db.query(User).filter(User.email == email).first()

        if user is None:
            # Spend the same hashing time as a real check
            pwd_context.dummy_verify()
            logger.info(f"Failed login for {email}")
            raise InvalidCredentials()

        if not verify_password(password or "", user.hashed_password):
            logger.info(f"Failed login for {email}")
            raise InvalidCredentials()

        logger.info(f"User {user.id} logged in")
        return build_session(user, issue_token(user))

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            # Token outlived its user record
            raise Unauthorized()
        return user
