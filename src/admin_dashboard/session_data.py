# src/admin_dashboard/session_data.py

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """The dashboard operator as returned by the auth endpoints."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Union[int, str]
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = Field(default=None, alias="telefon")


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    loggedinuser: User


class VerifyResponse(BaseModel):
    user: User
    transactions: Optional[Any] = None
    # Only present when the server rotated the access token
    new_acces_token: Optional[str] = None


class SessionState(BaseModel):
    """
    Snapshot of the in-memory session exposed to the dashboard views.
    Tokens are deliberately not part of it.
    """
    user: Optional[User] = None
    transactions: Optional[Any] = None
    is_authenticated: bool = False
    is_loading: bool = False
    notice: Optional[str] = None
