"""
Authentication endpoints for MongoDB.
"""
from fastapi import APIRouter, Depends, Request, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from pinboard.core.security import get_current_user
from pinboard.db.mongodb import get_database
from pinboard.schemas.base import MessageResponse
from pinboard.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserMe
from pinboard.services import users as user_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
)
async def register(
    user_data: RegisterRequest,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Register a new user and return a token for them."""
    user = await user_service.register_user(db, user_data)
    return user_service.auth_payload(user)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="User login",
)
async def login(
    login_data: LoginRequest,
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Exchange email and password for a token."""
    user = await user_service.login_user(
        db,
        login_data.email,
        login_data.password,
        user_agent=request.headers.get("user-agent"),
    )
    return user_service.auth_payload(user)


@router.get(
    "/me",
    response_model=UserMe,
    summary="Get current user",
)
async def get_me(current_user: dict = Depends(get_current_user)):
    """Get the current authenticated user's profile."""
    return current_user


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="User logout",
)
async def logout(current_user: dict = Depends(get_current_user)):
    """Logout endpoint (client should discard the token)."""
    return MessageResponse(message="Successfully logged out")
