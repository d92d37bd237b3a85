"""Pydantic models for registration, login and profile payloads."""

from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.utils.validation import ApiModel, reject_null

UserRole = Literal["user", "admin"]


class UserCreate(ApiModel):
    username: str = Field(..., min_length=3, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    fullName: str = Field(..., min_length=2, max_length=200)
    bio: Optional[str] = None
    avatarUrl: Optional[str] = Field(None, max_length=500)


class UserUpdate(ApiModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    fullName: Optional[str] = Field(None, min_length=2, max_length=200)
    bio: Optional[str] = None
    avatarUrl: Optional[str] = Field(None, max_length=500)

    @field_validator("email", "password", "fullName")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RoleUpdate(BaseModel):
    role: UserRole


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    fullName: str
    bio: Optional[str]
    avatarUrl: Optional[str]
    role: str
    createdAt: str
    updatedAt: str
