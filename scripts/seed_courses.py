"""
Course Seeding Script

Creates demo courses (with sections and lessons) and an administrator
account for local development. Every record goes through the same
validation and repositories as the API, so counters and stats stay
consistent. Safe to re-run: existing slugs and usernames are skipped.

    python -m scripts.seed_courses
"""
import asyncio
import os

from app.core.exceptions import NotFoundError
from app.db.config import build_engine, build_session_factory, init_db
from app.models.account import UserCreate
from app.models.course import CourseCreate, LessonCreate, SectionCreate
from app.repositories.course_repo import CourseRepository
from app.repositories.lesson_repo import LessonRepository
from app.repositories.section_repo import SectionRepository
from app.repositories.stats_repo import StatsRepository
from app.repositories.user_repo import UserRepository
from app.utils.validation import validate_for_create

ADMIN = {
    "username": os.getenv("SEED_ADMIN_USERNAME", "admin"),
    "email": os.getenv("SEED_ADMIN_EMAIL", "admin@cyberiraq.local"),
    "password": os.getenv("SEED_ADMIN_PASSWORD", "change-me-now"),
    "fullName": "Platform Administrator",
}

SEED_COURSES = [
    {
        "course": {
            "title": "Network Security Fundamentals",
            "slug": "network-security-fundamentals",
            "description": "Firewalls, segmentation and traffic analysis for defenders.",
            "level": "beginner",
            "category": "network_security",
            "duration": 240,
            "instructor": "Cyber Iraq Team",
            "isFeatured": True,
        },
        "sections": [
            {
                "title": "Networking refresher",
                "description": "OSI model, TCP/IP and common protocols",
                "lessons": [
                    {"title": "The OSI model", "content": "Seven layers and where attacks happen.", "duration": 15},
                    {"title": "TCP handshakes", "content": "SYN, SYN-ACK, ACK and why it matters.", "duration": 20},
                ],
            },
            {
                "title": "Perimeter defence",
                "description": "Firewalls and network segmentation",
                "lessons": [
                    {"title": "Stateful firewalls", "content": "Connection tracking and rule design.", "duration": 25},
                ],
            },
        ],
    },
    {
        "course": {
            "title": "Web Application Penetration Testing",
            "slug": "web-application-pentesting",
            "description": "Finding and exploiting the OWASP Top 10 in a lab environment.",
            "level": "intermediate",
            "category": "web_security",
            "duration": 360,
            "instructor": "Cyber Iraq Team",
            "isFeatured": True,
        },
        "sections": [
            {
                "title": "Reconnaissance",
                "description": "Mapping the attack surface",
                "lessons": [
                    {"title": "Crawling and spidering", "content": "Enumerate endpoints before testing them.", "duration": 20},
                ],
            },
            {
                "title": "Injection",
                "description": "SQL, command and template injection",
                "lessons": [
                    {"title": "SQL injection basics", "content": "Union-based and blind techniques.", "duration": 30},
                    {"title": "Parameterised queries", "content": "The fix, and how to verify it.", "duration": 15},
                ],
            },
        ],
    },
    {
        "course": {
            "title": "Applied Cryptography",
            "slug": "applied-cryptography",
            "description": "Symmetric and public-key primitives and how they fail in practice.",
            "level": "advanced",
            "category": "cryptography",
            "duration": 300,
            "instructor": "Cyber Iraq Team",
        },
        "sections": [],
    },
]


async def _seed_admin(session_factory) -> None:
    async with session_factory() as session:
        repo = UserRepository(session)
        if await repo.get_by_username(ADMIN["username"]):
            print(f"Admin '{ADMIN['username']}' already exists")
            return
        fields = validate_for_create(UserCreate, ADMIN)
        await repo.create(**fields, role="admin")
        print(f"Created admin '{ADMIN['username']}'")


async def _seed_course(session_factory, entry: dict) -> None:
    async with session_factory() as session:
        courses = CourseRepository(session)
        slug = entry["course"]["slug"]
        try:
            await courses.get_by_slug(slug)
            print(f"Course '{slug}' already exists")
            return
        except NotFoundError:
            pass

        course = await courses.create(**validate_for_create(CourseCreate, entry["course"]))
        sections = SectionRepository(session)
        lessons = LessonRepository(session)
        for section_data in entry["sections"]:
            section_fields = validate_for_create(
                SectionCreate,
                {k: v for k, v in section_data.items() if k != "lessons"},
            )
            section = await sections.create(course_id=course.id, **section_fields)
            for lesson_data in section_data["lessons"]:
                await lessons.create(
                    section_id=section.id,
                    **validate_for_create(LessonCreate, lesson_data),
                )
        print(f"Seeded course '{slug}' with {len(entry['sections'])} sections")


async def seed_courses():
    """Seed the database with demo courses and an administrator."""
    engine = build_engine()
    session_factory = build_session_factory(engine)

    # Create tables if they don't exist
    await init_db(engine)
    async with session_factory() as session:
        await StatsRepository(session).ensure_row()

    await _seed_admin(session_factory)
    for entry in SEED_COURSES:
        await _seed_course(session_factory, entry)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_courses())
