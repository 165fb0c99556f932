"""Admin authentication schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Username/password exchange. Missing fields are rejected by the route with 400."""

    username: str = ""
    password: str = ""


class AdminUser(BaseModel):
    """Identity carried inside the bearer token."""

    id: str
    username: str
    name: str


class LoginResponse(BaseModel):
    """Bearer token and the authenticated user."""

    token: str = Field(description="Signed bearer token")
    user: AdminUser
