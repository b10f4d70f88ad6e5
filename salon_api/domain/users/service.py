"""User service - registration and login"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...errors import ConstraintViolation
from ...models import User, UserRole
from ...security_utils import create_access_token, hash_password, verify_password
from ...shared.validators import validate_phone
from .repository import UserRepository
from .schemas import AdminLoginRequest, AuthResponse, LoginRequest, RegisterRequest, UserResponse

logger = logging.getLogger(__name__)


def issue_auth_response(user: User) -> AuthResponse:
    token = create_access_token(user.id, user.email, user.role)
    return AuthResponse(user=UserResponse.from_user(user), token=token)


class UserService:
    """Service layer for account business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def register(self, data: RegisterRequest) -> AuthResponse:
        logger.info(f"📥 Registration request: {data.email}")

        existing = self.repo.get_by_email(self.db, data.email) or self.repo.get_by_phone(
            self.db, data.phone
        )
        if existing:
            logger.warning(f"❌ User already exists: {data.email}")
            raise HTTPException(
                status_code=400, detail="A user with this email or phone already exists"
            )

        try:
            user = self.repo.create_user(
                self.db,
                name=data.name,
                surname=data.surname,
                phone=data.phone,
                email=data.email,
                password_hash=hash_password(data.password),
                role=UserRole.CLIENT.value,
            )
        except ConstraintViolation as e:
            # Lost a race with a concurrent registration
            raise HTTPException(
                status_code=400, detail="A user with this email or phone already exists"
            ) from e

        logger.info(f"✅ User registered successfully: {user.id}")
        return issue_auth_response(user)

    def login(self, data: LoginRequest) -> AuthResponse:
        identifier = data.phoneOrEmail.strip()
        user = None
        if "@" not in identifier:
            # Phones are stored normalized, so match the same form
            try:
                identifier = validate_phone(identifier)
            except ValueError:
                identifier = None
        if identifier:
            user = self.repo.get_by_phone_or_email(self.db, identifier)
        if not user:
            logger.warning(f"❌ User not found: {data.phoneOrEmail}")
            raise HTTPException(status_code=401, detail="User not found")

        if not verify_password(data.password, user.password_hash):
            logger.warning(f"❌ Invalid password for user: {user.id}")
            raise HTTPException(status_code=401, detail="Invalid password")

        logger.info(f"✅ User logged in successfully: {user.id}")
        return issue_auth_response(user)

    def admin_login(self, data: AdminLoginRequest) -> AuthResponse:
        user = self.repo.get_by_email(self.db, data.email.strip().lower())
        if not user or not user.is_admin:
            logger.warning(f"❌ Admin access denied for: {data.email}")
            raise HTTPException(status_code=401, detail="Access denied")

        if not verify_password(data.password, user.password_hash):
            logger.warning(f"❌ Invalid admin password for: {data.email}")
            raise HTTPException(status_code=401, detail="Invalid password")

        logger.info(f"✅ Admin logged in successfully: {user.id}")
        return issue_auth_response(user)
