"""Auth API — registration, login, current user.

Learn: Routes for user authentication:
- POST /register → create a new user account
- POST /login → username/password → JWT
- GET /me → current user info (requires Bearer token)

Routes translate HTTP to service calls. Failures are domain errors
(ConflictError, AuthenticationError) turned into responses by the
handlers in bookshelf.errors.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.auth.dependencies import CurrentIdentity, get_current_user, get_token_codec
from bookshelf.auth.jwt import TokenCodec
from bookshelf.auth.password import PasswordHasher
from bookshelf.db.engine import get_db
from bookshelf.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserRead,
)
from bookshelf.services.user_service import UserService

router = APIRouter()


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def _svc(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(db, hasher)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(body: RegisterRequest, svc: UserService = Depends(_svc)):
    """Create a new user account."""
    user = await svc.register(body.username, body.password)
    return RegisterResponse(user_id=user.id, username=user.username)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    svc: UserService = Depends(_svc),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Login with username and password → JWT."""
    user = await svc.authenticate(body.username, body.password)
    return LoginResponse(
        token=codec.issue(user.id),
        user_id=user.id,
        username=user.username,
    )


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Get the current authenticated user's info."""
    return await svc.get_user(identity.user_id)
