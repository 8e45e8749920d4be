"""Auth Schemas — register/login request and response bodies.

Invariants:
    - username and password must be JSON strings; length rules enforced by AuthService
"""

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Body of both /register and /login."""
    model_config = ConfigDict(strict=True)

    username: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=1, max_length=200)


class RegisterResponse(BaseModel):
    message: str
    username: str


class LoginResponse(BaseModel):
    token: str
    username: str
