"""API Dependencies — auth gate and per-request service wiring.

Invariants:
    - No Authorization header (or a non-Bearer one) -> UnauthenticatedError without
      touching the TokenService
    - Every token verification failure -> UnauthenticatedError (401); the specific
      reason is logged, never returned to the client
    - On success the verified Identity is returned and stored on request.state.identity
      and its user_id is bound to the request log context
    - Long-lived collaborators (token service, hasher) come from app.state, set in lifespan

Design Decisions:
    - FastAPI dependency over Starlette middleware: applies per route, composes with
      Depends(get_db), shows up in OpenAPI security schemes
"""

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from loantracker.config import get_settings
from loantracker.core.domain_types import Identity
from loantracker.core.errors import UnauthenticatedError
from loantracker.core.token_service import TokenService, TokenVerificationError
from loantracker.infrastructure.database import get_db
from loantracker.infrastructure.observability import bind_user
from loantracker.infrastructure.password_hasher import PasswordHasher
from loantracker.services.auth_service import AuthService
from loantracker.services.credential_store import SqlUserRepository
from loantracker.services.payment_guard import PaymentGuard
from loantracker.services.payment_repository import SqlPaymentRepository

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


async def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """Auth gate for protected routes."""
    if credentials is None:
        logger.info(
            "Access token missing", extra={"path": request.url.path},
        )
        raise UnauthenticatedError("Access token is required")
    try:
        identity = tokens.verify(credentials.credentials)
    except TokenVerificationError as e:
        logger.info(
            f"Access token rejected: {e}",
            extra={"path": request.url.path, "reason": e.reason},
        )
        raise UnauthenticatedError("Invalid or expired token")
    request.state.identity = identity
    bind_user(identity.user_id)
    return identity


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(
        SqlUserRepository(db), hasher, tokens,
        password_min_length=get_settings().password_min_length,
    )


def get_payment_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlPaymentRepository:
    return SqlPaymentRepository(db)


def get_payment_guard(
    repository: SqlPaymentRepository = Depends(get_payment_repository),
) -> PaymentGuard:
    return PaymentGuard(repository)
