"""Request models for the AI content-assist endpoints."""

from typing import List, Literal

from pydantic import BaseModel, Field


class ContentSuggestionRequest(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    contentType: Literal["course", "lesson", "exercise"] = "course"


class ExerciseEnhancementRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    difficulty: Literal["beginner", "intermediate", "advanced"] = "beginner"


class SectionOutline(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""


class CourseStructureRequest(BaseModel):
    title: str = Field(..., min_length=1)
    sections: List[SectionOutline] = Field(..., min_length=1)


class AccuracyCheckRequest(BaseModel):
    content: str = Field(..., min_length=1)
    contentType: Literal[
        "networking", "cryptography", "pentest", "malware", "general"
    ] = "general"
