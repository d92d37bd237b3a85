"""SQLAlchemy ORM models for append-only logs and the aggregate stats row."""
from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, iso, utcnow

STATS_ROW_ID = 1


class ActivityRecord(Base):
    """Append-only audit entry. Never updated after insert."""

    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    action: Mapped[str] = mapped_column(String(64))
    description: Mapped[str] = mapped_column(Text)
    course_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("courses.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, index=True
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "action": self.action,
            "description": self.description,
            "courseId": self.course_id,
            "timestamp": iso(self.created_at),
        }


class ContactMessageRecord(Base):
    __tablename__ = "contact_messages"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(255))
    subject: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    message: Mapped[str] = mapped_column(Text)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, index=True
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "read": self.is_read,
            "readAt": iso(self.read_at),
            "createdAt": iso(self.created_at),
        }


class StatsRecord(Base):
    """Single aggregate row (id = STATS_ROW_ID) maintained incrementally."""

    __tablename__ = "platform_stats"

    id: Mapped[int] = mapped_column(primary_key=True)
    total_courses: Mapped[int] = mapped_column(Integer, default=0)
    total_enrollments: Mapped[int] = mapped_column(Integer, default=0)
    completed_enrollments: Mapped[int] = mapped_column(Integer, default=0)
    course_views: Mapped[int] = mapped_column(Integer, default=0)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "totalCourses": self.total_courses,
            "totalEnrollments": self.total_enrollments,
            "completedEnrollments": self.completed_enrollments,
            "courseViews": self.course_views,
            "lastUpdated": iso(self.last_updated),
        }
