import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    The caller behind a bearer token, resolved against the users table.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: uuid.UUID = Field(..., alias="sub")
    email: str
    name: str = ""
    is_admin: bool = False
    is_verified: bool = False
