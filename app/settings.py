"""Runtime configuration read from environment variables.

Database settings live in ``app.db.config``; everything else the application
needs at startup is collected here so routers and services do not call
``os.getenv`` on every request.
"""
from __future__ import annotations
import os

APP_NAME = "Cyber Iraq Learning Platform API"
VERSION = os.getenv("APP_VERSION", "1.0.0")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173"
).split(",")

# Sessions (signed cookie)
SESSION_SECRET = os.getenv("SESSION_SECRET", "cyberiraq-dev-session-secret")
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "cyberiraq_session")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24 * 7)))

# Text generation provider
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))

# Outbound email
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() in {"1", "true", "yes"}
EMAIL_FROM = os.getenv("EMAIL_FROM", "noreply@cyberiraq.local")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")

AUTO_MIGRATE = os.getenv("AUTO_MIGRATE", "false").lower() in {"1", "true", "yes"}


def is_production() -> bool:
    return ENVIRONMENT.lower() == "production"
