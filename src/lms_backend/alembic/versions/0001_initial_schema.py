"""Initial course platform schema

Revision ID: 0001_initial_schema
Revises: 
Create Date: 2026-02-06

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

app_role = sa.Enum('admin', 'student', name='app_role')


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255)),
        sa.Column('avatar_url', sa.String(2048)),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )

    op.create_table(
        'user_roles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('role', app_role, nullable=False),
        sa.UniqueConstraint('user_id', 'role', name='user_roles_user_id_role_key'),
    )
    op.create_index('ix_user_roles_user_id', 'user_roles', ['user_id'])

    op.create_table(
        'courses',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False, unique=True),
        sa.Column('description', sa.Text()),
        sa.Column('short_description', sa.String(1024)),
        sa.Column('thumbnail_url', sa.String(2048)),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default=sa.text('0')),
        sa.Column('original_price', sa.Numeric(10, 2)),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_by', sa.Uuid()),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )

    op.create_table(
        'course_modules',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('course_id', sa.Uuid(), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default=sa.text('0')),
        _timestamp('created_at'),
    )
    op.create_index('ix_course_modules_course_id', 'course_modules', ['course_id'])

    op.create_table(
        'lessons',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('module_id', sa.Uuid(), sa.ForeignKey('course_modules.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('video_url', sa.String(2048)),
        sa.Column('duration_minutes', sa.Integer()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('is_preview', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        _timestamp('created_at'),
    )
    op.create_index('ix_lessons_module_id', 'lessons', ['module_id'])

    op.create_table(
        'enrollments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(32), nullable=False, server_default=sa.text("'active'")),
        _timestamp('enrolled_at'),
        sa.CheckConstraint("status IN ('active', 'expired', 'refunded')", name='enrollments_status_check'),
        sa.UniqueConstraint('user_id', 'course_id', name='enrollments_user_id_course_id_key'),
    )
    op.create_index('ix_enrollments_user_id', 'enrollments', ['user_id'])

    op.create_table(
        'course_reviews',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('review_text', sa.Text()),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        _timestamp('created_at'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='course_reviews_rating_check'),
        sa.UniqueConstraint('user_id', 'course_id', name='course_reviews_user_id_course_id_key'),
    )
    op.create_index('ix_course_reviews_course_id', 'course_reviews', ['course_id'])

    # Rows updated outside the ORM still get a fresh updated_at
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER
        LANGUAGE plpgsql
        AS $function$
        BEGIN
            NEW.updated_at = now();
            RETURN NEW;
        END;
        $function$;
    """)
    op.execute("CREATE TRIGGER update_profiles_updated_at BEFORE UPDATE ON profiles FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();")
    op.execute("CREATE TRIGGER update_courses_updated_at BEFORE UPDATE ON courses FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();")


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS update_courses_updated_at ON courses;")
    op.execute("DROP TRIGGER IF EXISTS update_profiles_updated_at ON profiles;")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column CASCADE;")

    op.drop_table('course_reviews')
    op.drop_table('enrollments')
    op.drop_table('lessons')
    op.drop_table('course_modules')
    op.drop_table('courses')
    op.drop_table('user_roles')
    op.drop_table('profiles')

    app_role.drop(op.get_bind(), checkfirst=True)
