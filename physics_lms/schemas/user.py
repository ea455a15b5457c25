"""User request/response schemas."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CurrentUser(BaseModel):
    """Authenticated user as resolved from the session token and user record."""
    model_config = ConfigDict(from_attributes=True, extra="allow")

    id: str
    email: str = ""
    full_name: str = "User"
    avatar_url: Optional[str] = None
    roles: List[str] = Field(default_factory=list)


class UpdateUserNameRequest(BaseModel):
    """Body of the user name update endpoint."""
    userId: Optional[str] = None
    newName: Optional[str] = None
