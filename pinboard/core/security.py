"""
Security Utilities for MongoDB.

Provides authentication and security functions:
- Password hashing and verification (bcrypt)
- JWT token generation and verification
- Authentication dependencies for FastAPI

Clients present the token either as ``Authorization: Bearer <token>`` or
in the ``x-auth-token`` header; both are accepted and the bearer header
wins when both are sent.
"""
from datetime import datetime, timedelta
from typing import Any, Optional

from bson import ObjectId
from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from motor.motor_asyncio import AsyncIOMotorDatabase
from passlib.context import CryptContext

from pinboard.config import settings
from pinboard.core.exceptions import (
    APIException,
    TokenExpiredException,
    UnauthorizedException,
)
from pinboard.db.mongodb import get_database


# =============================================================================
# Password Hashing
# =============================================================================
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


# =============================================================================
# JWT Token Management
# =============================================================================
def create_access_token(
    user: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT access token carrying the user's id, email and username."""
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user["_id"]),
        "email": user["email"],
        "username": user["username"],
        "exp": expire,
        "iat": datetime.utcnow(),
        "type": "access"
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT token."""
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except JWTError:
        raise UnauthorizedException("Invalid token")


async def authenticate(db: AsyncIOMotorDatabase, token: Optional[str]) -> dict:
    """Resolve a token to its user document or raise 401."""
    if not token:
        raise UnauthorizedException("No token, authorization denied")

    payload = decode_token(token)
    user_id = payload.get("sub")

    if payload.get("type", "access") != "access":
        raise UnauthorizedException("Invalid token type")

    if not user_id or not ObjectId.is_valid(user_id):
        raise UnauthorizedException("Invalid token payload")

    user = await db.users.find_one({"_id": ObjectId(user_id)})
    if not user:
        raise UnauthorizedException("User not found")

    return user


# =============================================================================
# Authentication Dependencies
# =============================================================================
bearer_scheme = HTTPBearer(auto_error=False)
token_header_scheme = APIKeyHeader(name=settings.AUTH_TOKEN_HEADER, auto_error=False)


def extract_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    header_token: Optional[str],
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return header_token or None


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    header_token: Optional[str] = Depends(token_header_scheme),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> dict:
    """
    Get current authenticated user.

    Raises 401 if not authenticated.
    """
    user = await authenticate(db, extract_token(credentials, header_token))
    request.state.user_id = str(user["_id"])
    return user


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    header_token: Optional[str] = Depends(token_header_scheme),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> Optional[dict]:
    """Get current user if authenticated, None otherwise."""
    token = extract_token(credentials, header_token)
    if not token:
        return None

    try:
        user = await authenticate(db, token)
    except APIException:
        return None

    request.state.user_id = str(user["_id"])
    return user
