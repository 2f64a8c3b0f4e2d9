"""Auth API — registration, login, current user.

Learn: Routes for user authentication:
- POST /api/auth/register → create a new user account
- POST /api/auth/login → username/password → JWT session token
- GET /api/auth/me → current user info (requires bearer token)
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.credentials import CredentialManager
from inkwell.auth.dependencies import CurrentIdentity, get_current_identity
from inkwell.db.engine import get_db
from inkwell.db.repository import SqlCredentialStore
from inkwell.errors import NotFound
from inkwell.schemas.auth import (
    LoginRequest,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)

router = APIRouter(prefix="/api/auth")


def _credentials(
    request: Request, db: AsyncSession = Depends(get_db)
) -> CredentialManager:
    return CredentialManager(
        store=SqlCredentialStore(db),
        tokens=request.app.state.tokens,
        bcrypt_rounds=request.app.state.settings.bcrypt_rounds,
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    body: RegisterRequest, creds: CredentialManager = Depends(_credentials)
):
    """Create a new user account."""
    user = await creds.register(
        username=body.username, password=body.password, email=body.email
    )
    return RegisterResponse(user_id=user.id, username=user.username, email=user.email)


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, creds: CredentialManager = Depends(_credentials)):
    """Login with username and password → JWT session token."""
    issued = await creds.login(username=body.username, password=body.password)
    return TokenResponse(token=issued.token, expires_at=issued.expires_at)


@router.get("/me", response_model=MeResponse)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info."""
    user = await SqlCredentialStore(db).get_user(identity.user_id)
    if user is None:
        raise NotFound("User not found")
    return MeResponse(user_id=user.id, username=user.username, email=user.email)
