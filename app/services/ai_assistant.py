"""
AI content assistant

Wraps the OpenAI chat-completions API for the four authoring helpers exposed
under ``/api/ai``. Every call asks for a JSON object, is bounded by
``AI_TIMEOUT_SECONDS`` and returns the parsed object unchanged. Provider
failures never leak as raw SDK exceptions: they become
``UpstreamProviderError`` (502) or ``UpstreamTimeoutError`` (504).
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import openai
from openai import AsyncOpenAI

from app import settings
from app.core.exceptions import UpstreamProviderError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

PLATFORM_NAME = "Cyber Iraq"

# Factual checks run cooler than open-ended suggestions
CREATIVE_TEMPERATURE = 0.7
FACTUAL_TEMPERATURE = 0.3

CONTENT_SUGGESTIONS_PROMPT = """\
You are an expert cybersecurity educator helping improve educational content for a platform called {platform}.
Analyze the following {content_type} content and provide specific suggestions for enhancement.

Title: {title}
Content: {content}

Cover technical accuracy and current relevance, clarity of learning objectives,
engagement, structure and alignment with security best practices.

Respond with a JSON object of this shape:
{{
  "suggestions": [{{"category": "...", "issue": "...", "recommendation": "..."}}],
  "strengths": ["..."],
  "overallRecommendation": "two or three sentence summary of the most important improvements"
}}
"""

EXERCISE_PROMPT = """\
You are a cybersecurity challenges expert helping improve exercise content for a platform called {platform}.
Enhance the following exercise so it is more educational and engaging.

Exercise Title: {title}
Current Description: {description}
Difficulty Level: {difficulty}

Respond with a JSON object of this shape:
{{
  "enhancedDescription": "...",
  "learningObjectives": ["..."],
  "hints": [{{"level": 1, "hint": "..."}}],
  "additionalResources": [{{"title": "...", "description": "..."}}],
  "securityConcepts": ["..."],
  "realWorldApplication": "..."
}}
Keep the content technically accurate and appropriate for the {difficulty} level.
"""

COURSE_STRUCTURE_PROMPT = """\
You are a curriculum design expert helping improve a cybersecurity course for a platform called {platform}.
Analyze the following course structure and suggest improvements.

Course Title: {title}
Current Sections:
{sections}

Respond with a JSON object of this shape:
{{
  "structuralSuggestions": [{{"issue": "...", "recommendation": "..."}}],
  "gapAnalysis": [{{"missingTopic": "...", "importance": "high|medium|low", "recommendation": "..."}}],
  "sequencingSuggestions": [{{"currentOrder": "...", "suggestedOrder": "...", "justification": "..."}}],
  "redundancyIssues": [{{"sections": ["..."], "issue": "...", "recommendation": "..."}}],
  "suggestedNewSections": [{{"title": "...", "description": "...", "rationale": "..."}}]
}}
"""

ACCURACY_PROMPT = """\
You are a cybersecurity technical expert verifying the accuracy of educational content for {platform}.
Check the following {content_type} content for technical accuracy only, not style.

Content to verify: {content}

Respond with a JSON object of this shape:
{{
  "accuracyScore": 0,
  "inaccuracies": [{{"statement": "...", "issue": "...", "correction": "..."}}],
  "outdatedInformation": [{{"statement": "...", "currentStatus": "...", "reference": "..."}}],
  "missingCriticalInfo": [{{"topic": "...", "missingElement": "...", "suggestion": "..."}}],
  "technicalErrors": [{{"error": "...", "impact": "...", "correction": "..."}}],
  "overallAssessment": "two or three sentence assessment"
}}
accuracyScore is an integer from 0 to 10 where 10 is perfectly accurate.
"""


class AIAssistant:
    """Thin async facade over the text-generation provider.

    ``client`` may be any object exposing ``chat.completions.create`` as a
    coroutine; when omitted an ``AsyncOpenAI`` client is created lazily on
    first use so an unset API key only fails the AI routes.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        model: str = settings.OPENAI_MODEL,
        timeout: float = settings.AI_TIMEOUT_SECONDS,
        api_key: Optional[str] = None,
    ):
        self._client = client
        self.model = model
        self.timeout = timeout
        self._api_key = api_key if api_key is not None else settings.OPENAI_API_KEY

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(self._api_key)

    def _get_client(self):
        if self._client is None:
            if not self._api_key:
                raise UpstreamProviderError(
                    "AI provider is not configured",
                    details="OPENAI_API_KEY is not set",
                )
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self.timeout)
        return self._client

    async def complete_json(
        self, prompt: str, temperature: float, feature: str
    ) -> Dict[str, Any]:
        """Send ``prompt`` and return the provider's JSON object."""
        client = self._get_client()
        failure = f"Failed to {feature}"
        try:
            response = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    response_format={"type": "json_object"},
                    temperature=temperature,
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, openai.APITimeoutError) as exc:
            logger.warning("AI request timed out after %ss (%s)", self.timeout, feature)
            raise UpstreamTimeoutError(
                failure, details=f"No response within {self.timeout:g} seconds"
            ) from exc
        except openai.OpenAIError as exc:
            logger.error("AI provider error during %s: %s", feature, exc, exc_info=True)
            raise UpstreamProviderError(failure, details=str(exc)) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise UpstreamProviderError(failure, details="No content returned from provider")
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.error("AI provider returned malformed JSON for %s", feature)
            raise UpstreamProviderError(
                failure, details=f"Malformed JSON from provider: {exc.msg}"
            ) from exc
        if not isinstance(data, dict):
            raise UpstreamProviderError(failure, details="Provider response is not a JSON object")
        return data

    # Features ---------------------------------------------------------------

    async def content_suggestions(
        self, title: str, content: str, content_type: str
    ) -> Dict[str, Any]:
        prompt = CONTENT_SUGGESTIONS_PROMPT.format(
            platform=PLATFORM_NAME, content_type=content_type, title=title, content=content
        )
        return await self.complete_json(
            prompt, CREATIVE_TEMPERATURE, "generate content suggestions"
        )

    async def enhance_exercise(
        self, title: str, description: str, difficulty: str
    ) -> Dict[str, Any]:
        prompt = EXERCISE_PROMPT.format(
            platform=PLATFORM_NAME, title=title, description=description, difficulty=difficulty
        )
        return await self.complete_json(
            prompt, CREATIVE_TEMPERATURE, "enhance exercise challenge"
        )

    async def analyze_course_structure(
        self, title: str, sections: List[Mapping[str, str]]
    ) -> Dict[str, Any]:
        outline = "\n".join(
            f"- {s['title']}: {s.get('description', '')}" for s in sections
        )
        prompt = COURSE_STRUCTURE_PROMPT.format(
            platform=PLATFORM_NAME, title=title, sections=outline
        )
        return await self.complete_json(
            prompt, CREATIVE_TEMPERATURE, "analyze course structure"
        )

    async def verify_accuracy(self, content: str, content_type: str) -> Dict[str, Any]:
        prompt = ACCURACY_PROMPT.format(
            platform=PLATFORM_NAME, content_type=content_type, content=content
        )
        return await self.complete_json(
            prompt, FACTUAL_TEMPERATURE, "verify technical accuracy"
        )
