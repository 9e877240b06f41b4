from fastapi import Depends, APIRouter
from sqlmodel import Session

from feedback_portal.auth.auth_handler import (
    create_access_token,
    create_refresh_token,
    get_current_user,
    refresh_access_token,
)
from feedback_portal.configs.database import get_db
from feedback_portal.models import User
from feedback_portal.schemas.token import LoginRequest, LoginResponse, RefreshRequest, Token
from feedback_portal.schemas.user_schema import UserResponse
from feedback_portal.services import user_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, session: Session = Depends(get_db)):
    user = user_service.authenticate(session, credentials.email, credentials.password)
    return LoginResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        access_token=create_access_token(user),
        refresh_token=create_refresh_token(user),
    )


@router.post("/refresh", response_model=Token)
def refresh_token(body: RefreshRequest, session: Session = Depends(get_db)):
    return Token(
        access_token=refresh_access_token(body.refresh_token, session),
        refresh_token=body.refresh_token,
    )


@router.get("/me", response_model=UserResponse)
def read_me(current_user: User = Depends(get_current_user)):
    return UserResponse.from_user(current_user)
