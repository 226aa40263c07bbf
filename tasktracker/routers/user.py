# tasktracker/routers/user.py
from fastapi import APIRouter, Depends

from tasktracker.models.user import User
from tasktracker.schemas.user import UserOut
from tasktracker.utils.auth import get_current_user

router = APIRouter()


@router.get("/me", response_model=UserOut)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return current_user
