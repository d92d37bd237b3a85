"""AI-assisted authoring endpoints (administrators only).

Each route forwards a small payload to ``AIAssistant`` and returns the
provider's JSON object verbatim. Missing or invalid fields are rejected with
400 before the provider is contacted.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from app.core.auth import require_admin
from app.models.ai import (
    AccuracyCheckRequest,
    ContentSuggestionRequest,
    CourseStructureRequest,
    ExerciseEnhancementRequest,
)
from app.services.ai_assistant import AIAssistant
from app.utils.feature_flags import require_feature

router = APIRouter(
    prefix="/ai",
    tags=["AI"],
    dependencies=[Depends(require_admin), Depends(require_feature("ai_assistant"))],
)


def _get_assistant(request: Request) -> AIAssistant:
    return request.app.state.ai_assistant


@router.post("/content-suggestions")
async def content_suggestions(
    payload: ContentSuggestionRequest,
    assistant: AIAssistant = Depends(_get_assistant),
):
    return await assistant.content_suggestions(
        payload.title, payload.content, payload.contentType
    )


@router.post("/enhance-exercise")
async def enhance_exercise(
    payload: ExerciseEnhancementRequest,
    assistant: AIAssistant = Depends(_get_assistant),
):
    return await assistant.enhance_exercise(
        payload.title, payload.description, payload.difficulty
    )


@router.post("/analyze-course-structure")
async def analyze_course_structure(
    payload: CourseStructureRequest,
    assistant: AIAssistant = Depends(_get_assistant),
):
    return await assistant.analyze_course_structure(
        payload.title, [s.model_dump() for s in payload.sections]
    )


@router.post("/verify-accuracy")
async def verify_accuracy(
    payload: AccuracyCheckRequest,
    assistant: AIAssistant = Depends(_get_assistant),
):
    return await assistant.verify_accuracy(payload.content, payload.contentType)
