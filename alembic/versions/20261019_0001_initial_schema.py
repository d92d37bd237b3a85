"""initial learning platform schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261019_0001'
down_revision = None
branch_labels = None
depends_on = None

NOW = sa.text('CURRENT_TIMESTAMP')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column(
            'role', sa.String(length=16), nullable=False,
            server_default='user'
        ),
        sa.Column('created_at', sa.DateTime(), server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), server_default=NOW),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'courses',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column(
            'level', sa.String(length=32), nullable=False,
            server_default='beginner'
        ),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('duration', sa.Integer, nullable=False, server_default='0'),
        sa.Column('instructor', sa.String(length=200), nullable=True),
        sa.Column(
            'is_featured', sa.Boolean(), nullable=False,
            server_default=sa.false()
        ),
        sa.Column(
            'enrolled_students', sa.Integer, nullable=False,
            server_default='0'
        ),
        sa.Column('views', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), server_default=NOW),
    )
    op.create_index('ix_courses_slug', 'courses', ['slug'], unique=True)
    op.create_index('ix_courses_category', 'courses', ['category'])

    op.create_table(
        'course_sections',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column(
            'course_id', sa.Integer,
            sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('position', sa.Integer, nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), server_default=NOW),
    )
    op.create_index(
        'ix_course_sections_course_id', 'course_sections', ['course_id']
    )

    op.create_table(
        'course_lessons',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column(
            'section_id', sa.Integer,
            sa.ForeignKey('course_sections.id', ondelete='CASCADE'),
            nullable=False
        ),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('video_url', sa.String(length=500), nullable=True),
        sa.Column('duration', sa.Integer, nullable=False, server_default='0'),
        sa.Column('position', sa.Integer, nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), server_default=NOW),
    )
    op.create_index(
        'ix_course_lessons_section_id', 'course_lessons', ['section_id']
    )

    op.create_table(
        'enrollments',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column(
            'user_id', sa.Integer,
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column(
            'course_id', sa.Integer,
            sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column(
            'status', sa.String(length=32), nullable=False,
            server_default='enrolled'
        ),
        sa.Column('progress', sa.Integer, nullable=False, server_default='0'),
        sa.Column('enrolled_at', sa.DateTime(), server_default=NOW),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=NOW),
        sa.UniqueConstraint(
            'user_id', 'course_id', name='uq_enrollment_user_course'
        ),
    )
    op.create_index('ix_enrollments_user_id', 'enrollments', ['user_id'])
    op.create_index('ix_enrollments_course_id', 'enrollments', ['course_id'])

    op.create_table(
        'lesson_progress',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column(
            'user_id', sa.Integer,
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column(
            'lesson_id', sa.Integer,
            sa.ForeignKey('course_lessons.id', ondelete='CASCADE'),
            nullable=False
        ),
        sa.Column(
            'is_completed', sa.Boolean(), nullable=False,
            server_default=sa.false()
        ),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('last_accessed_at', sa.DateTime(), server_default=NOW),
        sa.UniqueConstraint(
            'user_id', 'lesson_id', name='uq_progress_user_lesson'
        ),
    )
    op.create_index('ix_lesson_progress_user_id', 'lesson_progress', ['user_id'])
    op.create_index(
        'ix_lesson_progress_lesson_id', 'lesson_progress', ['lesson_id']
    )

    op.create_table(
        'activities',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column(
            'user_id', sa.Integer,
            sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True
        ),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column(
            'course_id', sa.Integer,
            sa.ForeignKey('courses.id', ondelete='SET NULL'), nullable=True
        ),
        sa.Column('created_at', sa.DateTime(), server_default=NOW),
    )
    op.create_index('ix_activities_user_id', 'activities', ['user_id'])
    op.create_index('ix_activities_created_at', 'activities', ['created_at'])

    op.create_table(
        'contact_messages',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=200), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column(
            'is_read', sa.Boolean(), nullable=False,
            server_default=sa.false()
        ),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=NOW),
    )
    op.create_index(
        'ix_contact_messages_created_at', 'contact_messages', ['created_at']
    )

    stats = op.create_table(
        'platform_stats',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('total_courses', sa.Integer, nullable=False, server_default='0'),
        sa.Column(
            'total_enrollments', sa.Integer, nullable=False,
            server_default='0'
        ),
        sa.Column(
            'completed_enrollments', sa.Integer, nullable=False,
            server_default='0'
        ),
        sa.Column('course_views', sa.Integer, nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(), server_default=NOW),
    )
    # Single aggregate row
    op.bulk_insert(stats, [{'id': 1}])


def downgrade() -> None:
    op.drop_table('platform_stats')
    op.drop_index('ix_contact_messages_created_at', table_name='contact_messages')
    op.drop_table('contact_messages')
    op.drop_index('ix_activities_created_at', table_name='activities')
    op.drop_index('ix_activities_user_id', table_name='activities')
    op.drop_table('activities')
    op.drop_index('ix_lesson_progress_lesson_id', table_name='lesson_progress')
    op.drop_index('ix_lesson_progress_user_id', table_name='lesson_progress')
    op.drop_table('lesson_progress')
    op.drop_index('ix_enrollments_course_id', table_name='enrollments')
    op.drop_index('ix_enrollments_user_id', table_name='enrollments')
    op.drop_table('enrollments')
    op.drop_index('ix_course_lessons_section_id', table_name='course_lessons')
    op.drop_table('course_lessons')
    op.drop_index('ix_course_sections_course_id', table_name='course_sections')
    op.drop_table('course_sections')
    op.drop_index('ix_courses_category', table_name='courses')
    op.drop_index('ix_courses_slug', table_name='courses')
    op.drop_table('courses')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
