"""SQLAlchemy ORM models for courses and their ordered content.

Separate from the Pydantic models in course.py which describe request
validation. This layer manages persistence concerns only.
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, iso, utcnow


class CourseRecord(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    description: Mapped[str] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True
    )
    level: Mapped[str] = mapped_column(String(32), default="beginner")
    category: Mapped[str] = mapped_column(String(64), index=True)
    duration: Mapped[int] = mapped_column(Integer, default=0)
    instructor: Mapped[Optional[str]] = mapped_column(
        String(200), nullable=True
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    enrolled_students: Mapped[int] = mapped_column(Integer, default=0)
    views: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "imageUrl": self.image_url,
            "level": self.level,
            "category": self.category,
            "duration": self.duration,
            "instructor": self.instructor,
            "isFeatured": self.is_featured,
            "enrolledStudents": self.enrolled_students,
            "views": self.views,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


class SectionRecord(Base):
    """Ordered block of lessons inside a course.

    ``position`` establishes the sequence; reads always sort by it and the
    reorder operation rewrites it to a zero-based contiguous range.
    """

    __tablename__ = "course_sections"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "courseId": self.course_id,
            "title": self.title,
            "description": self.description,
            "order": self.position,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


class LessonRecord(Base):
    __tablename__ = "course_lessons"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    section_id: Mapped[int] = mapped_column(
        ForeignKey("course_sections.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    video_url: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True
    )
    duration: Mapped[int] = mapped_column(Integer, default=0)
    position: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sectionId": self.section_id,
            "title": self.title,
            "content": self.content,
            "videoUrl": self.video_url,
            "duration": self.duration,
            "order": self.position,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


class EnrollmentRecord(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), index=True
    )
    status: Mapped[str] = mapped_column(String(32), default="enrolled")
    progress: Mapped[int] = mapped_column(Integer, default=0)
    enrolled_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "courseId": self.course_id,
            "status": self.status,
            "progress": self.progress,
            "enrolledAt": iso(self.enrolled_at),
            "completedAt": iso(self.completed_at),
            "updatedAt": iso(self.updated_at),
        }


class LessonProgressRecord(Base):
    __tablename__ = "lesson_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_progress_user_lesson"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    lesson_id: Mapped[int] = mapped_column(
        ForeignKey("course_lessons.id", ondelete="CASCADE"), index=True
    )
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )
    last_accessed_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "lessonId": self.lesson_id,
            "isCompleted": self.is_completed,
            "completedAt": iso(self.completed_at),
            "lastAccessedAt": iso(self.last_accessed_at),
        }
