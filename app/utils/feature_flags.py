"""
Feature Flags System for Backend
Environment-based feature control for the learning platform API
"""

import os
from typing import Dict, List, Optional
from dataclasses import dataclass
from enum import Enum

from fastapi import HTTPException


class Environment(Enum):
    DEVELOPMENT = "development"
    TEST = "test"
    STAGING = "staging"
    PRODUCTION = "production"


ALL_ENVIRONMENTS = list(Environment)


@dataclass
class FeatureFlag:
    name: str
    enabled: bool
    description: str
    environments: List[Environment]


class FeatureFlagService:
    """Resolves flags once, from ENVIRONMENT and FEATURE_<NAME> overrides"""

    def __init__(self, environment: Optional[str] = None):
        self.current_environment = self._get_current_environment(environment)
        self.flags = self._initialize_flags()

    def _get_current_environment(self, name: Optional[str]) -> Environment:
        env_name = (name or os.getenv('ENVIRONMENT', 'development')).lower()
        try:
            return Environment(env_name)
        except ValueError:
            return Environment.DEVELOPMENT

    def _initialize_flags(self) -> Dict[str, FeatureFlag]:
        flags = {
            'ai_assistant': FeatureFlag(
                name='ai_assistant',
                enabled=True,
                description='AI-assisted authoring endpoints under /api/ai',
                environments=ALL_ENVIRONMENTS,
            ),
            'contact_notifications': FeatureFlag(
                name='contact_notifications',
                enabled=True,
                description='Email the administrator when a contact message arrives',
                environments=ALL_ENVIRONMENTS,
            ),
            'registration': FeatureFlag(
                name='registration',
                enabled=True,
                description='Allow self-service account registration',
                environments=ALL_ENVIRONMENTS,
            ),
        }

        self._apply_environment_overrides(flags)
        return flags

    def _apply_environment_overrides(self, flags: Dict[str, FeatureFlag]) -> None:
        for flag in flags.values():
            flag.enabled = self.current_environment in flag.environments

            # Environment variable overrides win
            env_override = os.getenv(f"FEATURE_{flag.name.upper()}")
            if env_override is not None:
                flag.enabled = env_override.lower() in ('true', '1', 'yes', 'on')

    def is_enabled(self, flag_name: str) -> bool:
        flag = self.flags.get(flag_name)
        return flag.enabled if flag is not None else False

    def get_environment_info(self) -> Dict:
        return {
            'current_environment': self.current_environment.value,
            'flag_summary': {name: flag.enabled for name, flag in self.flags.items()},
        }


# Global feature flag service instance
feature_flags = FeatureFlagService()


def is_feature_enabled(flag_name: str) -> bool:
    return feature_flags.is_enabled(flag_name)


def require_feature(flag_name: str):
    """Build a FastAPI dependency that 404s when ``flag_name`` is off."""
    async def dependency() -> bool:
        if not is_feature_enabled(flag_name):
            raise HTTPException(
                status_code=404,
                detail=f"Feature '{flag_name}' is not available"
            )
        return True
    return dependency
