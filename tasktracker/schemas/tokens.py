# tasktracker/schemas/tokens.py
from pydantic import Field
from tasktracker.schemas.user import UserOut


class SessionOut(UserOut):
    """Public user fields plus the bearer token issued for them"""
    token: str
    token_type: str = Field(default="bearer", alias="tokenType")
