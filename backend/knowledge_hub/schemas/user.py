from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

MIN_PASSWORD_LENGTH = 6


class User(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    created_at: datetime
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str


class AccountDelete(BaseModel):
    password: str = Field(min_length=1)


class ProfileResponse(BaseModel):
    user: User


class ProfileUpdateResponse(BaseModel):
    message: str
    user: User
