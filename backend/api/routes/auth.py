"""
Authentication API routes.
"""

import logging

from fastapi import APIRouter, status

from api.dependencies import BackendDep, CurrentUser, StoreDep
from api.schemas.auth import (
    PasswordResetRequest,
    PasswordStrengthRequest,
    SignInRequest,
    SignUpRequest,
)
from core.security import validate_password_strength
from services import auth

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/sign-in")
async def sign_in(body: SignInRequest, client: BackendDep, store: StoreDep):
    """Sign in and load the user's profile into the console state."""
    await auth.sign_in(client, body.email, body.password)
    user = await store.refresh_current_user()
    logger.info("Console signed in as %s", user.id if user else body.email)
    return user


@router.post("/sign-up", status_code=status.HTTP_201_CREATED)
async def sign_up(body: SignUpRequest, client: BackendDep):
    auth_data = await auth.sign_up(client, body.email, body.password, body.full_name)
    user = auth_data.get("user") or {}
    return {
        "user_id": user.get("id"),
        "email": user.get("email", body.email),
        "confirmation_required": auth_data.get("session") is None,
    }


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(client: BackendDep, store: StoreDep):
    await auth.sign_out(client)
    store.clear()


@router.post("/reset-password", status_code=status.HTTP_202_ACCEPTED)
async def reset_password(body: PasswordResetRequest, client: BackendDep):
    await auth.reset_password(client, body.email)
    return {"message": "Password reset instructions sent"}


@router.get("/me")
async def me(current_user: CurrentUser):
    return current_user


@router.post("/password-strength")
async def password_strength(body: PasswordStrengthRequest):
    """Score a candidate password without storing it."""
    return validate_password_strength(body.password)
