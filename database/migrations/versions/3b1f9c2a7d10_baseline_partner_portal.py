"""baseline partner portal

Revision ID: 3b1f9c2a7d10
Revises:
Create Date: 2026-10-19 10:12:31.418220
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = '3b1f9c2a7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade():
    # 1) users
    op.create_table(
        "users",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("first_name", sa.Text(), nullable=True),
        sa.Column("last_name", sa.Text(), nullable=True),
        sa.Column("profile_image_url", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("email", name=op.f("uq_users_email")),
    )

    # 2) partners
    op.create_table(
        "partners",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("company", sa.Text(), nullable=False),
        sa.Column("classification", sa.Text(), server_default=sa.text("'bronze'"), nullable=False),
        sa.Column("utm_tag", sa.Text(), nullable=False),
        sa.Column("total_score", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("completed_courses", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("courses_in_progress", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("completion_rate", sa.Numeric(5, 2), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "classification IN ('bronze','silver','gold')",
            name=op.f("ck_partners_chk_partners_classification"),
        ),
        sa.CheckConstraint(
            "completion_rate >= 0 AND completion_rate <= 100",
            name=op.f("ck_partners_chk_partners_completion_rate"),
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_partners_user_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_partners")),
        sa.UniqueConstraint("utm_tag", name="uq_partners_utm_tag"),
        sa.UniqueConstraint("user_id", name="uq_partners_user_id"),
    )
    op.create_index("idx_partners_classification", "partners", ["classification"])

    # 3) courses / course_documents
    op.create_table(
        "courses",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("instructors", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("requirements", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("level", sa.Text(), server_default=sa.text("'beginner'"), nullable=False),
        sa.Column("rating", sa.Numeric(3, 2), server_default=sa.text("0"), nullable=False),
        sa.Column("enrolled_students", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "level IN ('beginner','intermediate','advanced')",
            name=op.f("ck_courses_chk_courses_level"),
        ),
        sa.CheckConstraint("duration > 0", name=op.f("ck_courses_chk_courses_duration")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_courses")),
    )
    op.create_index("idx_courses_active_name", "courses", ["is_active", "name"])

    op.create_table(
        "course_documents",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("is_required", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "type IN ('material','assignment','certificate')",
            name=op.f("ck_course_documents_chk_course_documents_type"),
        ),
        sa.ForeignKeyConstraint(
            ["course_id"], ["courses.id"],
            name=op.f("fk_course_documents_course_id_courses"), ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_course_documents")),
    )
    op.create_index("idx_course_documents_course", "course_documents", ["course_id"])

    # 4) students / enrollments
    op.create_table(
        "students",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("partner_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("cpf", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["partner_id"], ["partners.id"],
            name=op.f("fk_students_partner_id_partners"), ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_students")),
    )
    op.create_index("idx_students_partner_created", "students", ["partner_id", "created_at"])
    op.create_index("idx_students_partner_email", "students", ["partner_id", "email"])

    op.create_table(
        "enrollments",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.BigInteger(), nullable=False),
        sa.Column("course_id", sa.BigInteger(), nullable=False),
        sa.Column("partner_id", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.Text(), server_default=sa.text("'enrolled'"), nullable=False),
        sa.Column("progress", sa.Numeric(5, 2), server_default=sa.text("0"), nullable=False),
        sa.Column("grade", sa.Numeric(5, 2), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completion_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("certificate_requested", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("certificate_issued", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('enrolled','in_progress','completed','dropped')",
            name=op.f("ck_enrollments_chk_enrollments_status"),
        ),
        sa.CheckConstraint(
            "(status = 'completed' AND completion_date IS NOT NULL)"
            " OR (status <> 'completed' AND completion_date IS NULL)",
            name=op.f("ck_enrollments_chk_enrollments_completion"),
        ),
        sa.CheckConstraint(
            "NOT certificate_issued OR certificate_requested",
            name=op.f("ck_enrollments_chk_enrollments_certificate"),
        ),
        sa.CheckConstraint(
            "progress >= 0 AND progress <= 100",
            name=op.f("ck_enrollments_chk_enrollments_progress"),
        ),
        sa.CheckConstraint(
            "grade IS NULL OR (grade >= 0 AND grade <= 10)",
            name=op.f("ck_enrollments_chk_enrollments_grade"),
        ),
        sa.ForeignKeyConstraint(
            ["student_id"], ["students.id"],
            name=op.f("fk_enrollments_student_id_students"), ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], name=op.f("fk_enrollments_course_id_courses")),
        sa.ForeignKeyConstraint(
            ["partner_id"], ["partners.id"],
            name=op.f("fk_enrollments_partner_id_partners"), ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_enrollments")),
    )
    op.create_index("idx_enrollments_partner_created", "enrollments", ["partner_id", "created_at"])
    op.create_index("idx_enrollments_course_created", "enrollments", ["course_id", "created_at"])
    op.create_index("idx_enrollments_student", "enrollments", ["student_id"])
    op.create_index("idx_enrollments_status", "enrollments", ["status"])

    # 5) partner_documents
    op.create_table(
        "partner_documents",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("partner_id", sa.BigInteger(), nullable=False),
        sa.Column("enrollment_id", sa.BigInteger(), nullable=False),
        sa.Column("document_name", sa.Text(), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), server_default=sa.text("'pending'"), nullable=False),
        sa.Column("upload_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending','approved','rejected')",
            name=op.f("ck_partner_documents_chk_partner_documents_status"),
        ),
        sa.ForeignKeyConstraint(
            ["partner_id"], ["partners.id"],
            name=op.f("fk_partner_documents_partner_id_partners"), ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["enrollment_id"], ["enrollments.id"],
            name=op.f("fk_partner_documents_enrollment_id_enrollments"), ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_partner_documents")),
    )
    op.create_index("idx_partner_documents_partner", "partner_documents", ["partner_id", "upload_date"])

    # 6) events / event_registrations
    op.create_table(
        "events",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("is_online", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("registered_participants", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "type IN ('workshop','webinar','conference')",
            name=op.f("ck_events_chk_events_type"),
        ),
        sa.CheckConstraint(
            "max_participants IS NULL OR registered_participants <= max_participants",
            name=op.f("ck_events_chk_events_capacity"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_events")),
    )
    op.create_index("idx_events_active_date", "events", ["is_active", "event_date"])

    op.create_table(
        "event_registrations",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("partner_id", sa.BigInteger(), nullable=False),
        sa.Column("event_id", sa.BigInteger(), nullable=False),
        sa.Column("registration_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("attended", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.ForeignKeyConstraint(
            ["partner_id"], ["partners.id"],
            name=op.f("fk_event_registrations_partner_id_partners"), ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["event_id"], ["events.id"],
            name=op.f("fk_event_registrations_event_id_events"), ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_event_registrations")),
        sa.UniqueConstraint("partner_id", "event_id", name="uq_event_registrations_partner_event"),
    )
    op.create_index(
        "idx_event_registrations_partner", "event_registrations", ["partner_id", "registration_date"]
    )


def downgrade():
    op.drop_index("idx_event_registrations_partner", table_name="event_registrations")
    op.drop_table("event_registrations")
    op.drop_index("idx_events_active_date", table_name="events")
    op.drop_table("events")
    op.drop_index("idx_partner_documents_partner", table_name="partner_documents")
    op.drop_table("partner_documents")
    for name in (
        "idx_enrollments_status",
        "idx_enrollments_student",
        "idx_enrollments_course_created",
        "idx_enrollments_partner_created",
    ):
        op.drop_index(name, table_name="enrollments")
    op.drop_table("enrollments")
    op.drop_index("idx_students_partner_email", table_name="students")
    op.drop_index("idx_students_partner_created", table_name="students")
    op.drop_table("students")
    op.drop_index("idx_course_documents_course", table_name="course_documents")
    op.drop_table("course_documents")
    op.drop_index("idx_courses_active_name", table_name="courses")
    op.drop_table("courses")
    op.drop_index("idx_partners_classification", table_name="partners")
    op.drop_table("partners")
    op.drop_table("users")
