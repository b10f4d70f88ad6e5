"""Auth router - registration, login and profile endpoints"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import AdminLoginRequest, AuthResponse, LoginRequest, RegisterRequest, UserResponse
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

login_rate_limit = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")
register_rate_limit = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="register")


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@router.post("/register", response_model=AuthResponse)
async def register(
    data: RegisterRequest,
    service: UserService = Depends(get_user_service),
    _: None = Depends(register_rate_limit),
):
    return service.register(data)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    service: UserService = Depends(get_user_service),
    _: None = Depends(login_rate_limit),
):
    """Log in with phone number or email"""
    return service.login(data)


@router.post("/admin/login", response_model=AuthResponse)
async def admin_login(
    data: AdminLoginRequest,
    service: UserService = Depends(get_user_service),
    _: None = Depends(login_rate_limit),
):
    return service.admin_login(data)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the current user's profile"""
    return UserResponse.from_user(current_user)
