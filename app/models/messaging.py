"""Pydantic models for contact messages, activity entries and stats."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.utils.validation import ApiModel


class ContactMessageCreate(ApiModel):
    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    subject: Optional[str] = Field(None, max_length=200)
    message: str = Field(..., min_length=10, max_length=5000)


class ContactMessageOut(BaseModel):
    id: int
    name: str
    email: str
    subject: Optional[str]
    message: str
    read: bool
    readAt: Optional[str]
    createdAt: str


class ActivityCreate(ApiModel):
    action: str = Field(..., min_length=1, max_length=64)
    description: str = Field(..., min_length=1)
    userId: Optional[int] = None
    courseId: Optional[int] = None


class ActivityOut(BaseModel):
    id: int
    userId: Optional[int]
    action: str
    description: str
    courseId: Optional[int]
    timestamp: str


class StatsOut(BaseModel):
    id: int
    totalCourses: int
    totalEnrollments: int
    completedEnrollments: int
    courseViews: int
    lastUpdated: str
