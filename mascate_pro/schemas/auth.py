from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal
from datetime import datetime

RoleName = Literal["user", "admin", "superadmin"]

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

class UserResponse(BaseModel):
    id: str
    email: str
    display_name: str
    avatar_id: Optional[str]
    role: str
    active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

class LoginResponse(BaseModel):
    success: bool = True
    user: UserResponse
    access_token: str
    token_type: str = "bearer"

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    display_name: str = Field(min_length=2, max_length=100)
    avatar_id: Optional[str] = Field(default=None, max_length=50)
    role: RoleName = "user"

class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    display_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    avatar_id: Optional[str] = Field(default=None, max_length=50)
    role: Optional[RoleName] = None
    active: Optional[bool] = None

class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6, max_length=72)

class PasswordResetResponse(BaseModel):
    user_id: str
    email: str
    temporary_password: str
