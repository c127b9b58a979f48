"""
Authentication routes
Handles user login, registration, and user information retrieval
"""
from fastapi import APIRouter
from flashdeck.api.auth import (
    Token, LoginRequest, UserResponse, login_for_access_token,
    register_user, RegisterRequest
)
from flashdeck.api.dependencies import CurrentUser, DBSession

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", response_model=Token)
async def login(login_data: LoginRequest, db: DBSession):
    """Login endpoint"""
    return login_for_access_token(db, login_data)


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(register_data: RegisterRequest, db: DBSession):
    """Register a new user on the free plan"""
    user = register_user(db, register_data.email, register_data.password, register_data.full_name)
    return UserResponse.from_user(user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser):
    """Get current user information"""
    return UserResponse.from_user(current_user)
