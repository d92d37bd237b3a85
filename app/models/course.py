"""
Pydantic models for course content and enrollment payloads.

Each entity has a ``*Create`` model (the creatable subset: system fields such
as ids, counters and timestamps are absent), an ``*Update`` model (same fields,
all optional) and an ``*Out`` model describing the response body.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.utils.validation import ApiModel, reject_null

CourseLevel = Literal["beginner", "intermediate", "advanced"]
CourseCategory = Literal[
    "penetration_testing",
    "network_security",
    "web_security",
    "cryptography",
    "malware_analysis",
    "digital_forensics",
    "incident_response",
    "cloud_security",
    "general",
]
EnrollmentStatus = Literal["enrolled", "in_progress", "completed", "dropped"]

# Status whose presence is counted in the completed-enrollments aggregate
COMPLETED_STATUS = "completed"

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


# Courses ------------------------------------------------------------------

class CourseCreate(ApiModel):
    title: str = Field(..., min_length=3, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=10)
    imageUrl: Optional[str] = Field(None, max_length=500)
    level: CourseLevel = "beginner"
    category: CourseCategory
    duration: int = Field(0, ge=0, description="Length in minutes")
    instructor: Optional[str] = Field(None, max_length=200)
    isFeatured: bool = False


class CourseUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    slug: Optional[str] = Field(
        None, min_length=1, max_length=200, pattern=SLUG_PATTERN
    )
    description: Optional[str] = Field(None, min_length=10)
    imageUrl: Optional[str] = Field(None, max_length=500)
    level: Optional[CourseLevel] = None
    category: Optional[CourseCategory] = None
    duration: Optional[int] = Field(None, ge=0)
    instructor: Optional[str] = Field(None, max_length=200)
    isFeatured: Optional[bool] = None

    @field_validator(
        "title", "slug", "description", "level", "category", "duration",
        "isFeatured",
    )
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class CourseOut(BaseModel):
    id: int
    title: str
    slug: str
    description: str
    imageUrl: Optional[str]
    level: str
    category: str
    duration: int
    instructor: Optional[str]
    isFeatured: bool
    enrolledStudents: int
    views: int
    createdAt: str
    updatedAt: str


# Sections & lessons -------------------------------------------------------

class SectionCreate(ApiModel):
    column_aliases = {"order": "position"}

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    order: Optional[int] = Field(
        None, ge=0, description="Position in course (appended if omitted)"
    )


class SectionUpdate(ApiModel):
    column_aliases = {"order": "position"}

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    order: Optional[int] = Field(None, ge=0)

    @field_validator("title", "order")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class SectionOut(BaseModel):
    id: int
    courseId: int
    title: str
    description: Optional[str]
    order: int
    createdAt: str
    updatedAt: str


class ReorderRequest(BaseModel):
    orderedIds: List[int] = Field(..., min_length=1)


class LessonCreate(ApiModel):
    column_aliases = {"order": "position"}

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    videoUrl: Optional[str] = Field(None, max_length=500)
    duration: int = Field(0, ge=0)
    order: Optional[int] = Field(None, ge=0)


class LessonUpdate(ApiModel):
    column_aliases = {"order": "position"}

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    videoUrl: Optional[str] = Field(None, max_length=500)
    duration: Optional[int] = Field(None, ge=0)
    order: Optional[int] = Field(None, ge=0)

    @field_validator("title", "content", "duration", "order")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class LessonOut(BaseModel):
    id: int
    sectionId: int
    title: str
    content: str
    videoUrl: Optional[str]
    duration: int
    order: int
    createdAt: str
    updatedAt: str


# Enrollment & progress ----------------------------------------------------

class EnrollmentCreate(ApiModel):
    userId: int = Field(..., ge=1)
    courseId: int = Field(..., ge=1)
    status: EnrollmentStatus = "enrolled"
    progress: int = Field(0, ge=0, le=100)


class EnrollmentUpdate(ApiModel):
    status: Optional[EnrollmentStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)

    @field_validator("status", "progress")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class EnrollmentOut(BaseModel):
    id: int
    userId: int
    courseId: int
    status: str
    progress: int
    enrolledAt: str
    completedAt: Optional[str]
    updatedAt: str


class ProgressUpdate(ApiModel):
    isCompleted: bool


class ProgressOut(BaseModel):
    id: int
    userId: int
    lessonId: int
    isCompleted: bool
    completedAt: Optional[str]
    lastAccessedAt: str
