from pydantic import BaseModel

from feedback_portal.models import UserRole


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class LoginResponse(Token):
    id: int
    email: str
    role: UserRole
    message: str = "Login successful"
