"""Auth Routes — registration and login.

Invariants:
    - Both endpoints are public (no bearer token)
    - Login failures never reveal whether the username exists
"""

from fastapi import APIRouter, Depends, status

from loantracker.api.dependencies import get_auth_service
from loantracker.schemas.auth import Credentials, LoginResponse, RegisterResponse
from loantracker.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register", response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: Credentials, auth: AuthService = Depends(get_auth_service),
):
    user = await auth.register(body.username, body.password)
    return RegisterResponse(
        message="User registered successfully", username=user.username,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    body: Credentials, auth: AuthService = Depends(get_auth_service),
):
    token, identity = await auth.login(body.username, body.password)
    return LoginResponse(token=token, username=identity.username)
