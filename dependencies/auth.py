from fastapi import Depends, HTTPException, status, Request
from jose import JWTError
from core.database import get_supabase
from core.security import decode_access_token
from models import UserRole
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def _extract_token(request: Request) -> Optional[str]:
    """HttpOnly cookie first, then Authorization header (for API clients)"""
    token = request.cookies.get("access_token")
    if not token:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header.split(" ")[1]
    return token


def _load_user(token: str) -> Optional[dict]:
    try:
        payload = decode_access_token(token)
    except JWTError:
        return None
    user_id = payload.get("sub")
    if user_id is None:
        return None

    supabase = get_supabase()
    if not supabase:
        raise HTTPException(status_code=500, detail="Database error")

    result = supabase.table("users").select("*").eq("id", user_id).execute()
    if not result.data:
        return None
    user = result.data[0]
    if not user.get("is_active", True):
        return None
    return user


async def get_current_user(request: Request) -> dict:
    """Authenticated user, 401 otherwise"""
    token = _extract_token(request)
    user = _load_user(token) if token else None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return user


async def get_optional_user(request: Request) -> Optional[dict]:
    """Authenticated user when a valid token is present; anonymous callers get None"""
    token = _extract_token(request)
    if not token:
        return None
    try:
        return _load_user(token)
    except HTTPException:
        logger.warning("⚠️ Could not resolve user for optional auth, treating as anonymous")
        return None


async def get_admin_user(current_user: dict = Depends(get_current_user)) -> dict:
    if current_user.get("role") != UserRole.ADMIN.value:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user
