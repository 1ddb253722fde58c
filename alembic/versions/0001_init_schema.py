"""init schema

Revision ID: 0001_init_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0001_init_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "staff",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("login", sa.String(length=128), nullable=False),
        sa.Column("display_name", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=512), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_staff_login", "staff", ["login"], unique=True)

    op.create_table(
        "classrooms",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("grade_level", sa.String(length=32), nullable=False),
        sa.Column("class_code", sa.String(length=16), nullable=False),
        sa.Column("teacher_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["staff.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_classrooms_class_code", "classrooms", ["class_code"], unique=True)

    op.create_table(
        "students",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("first_name", sa.String(length=64), nullable=False),
        sa.Column("last_name", sa.String(length=64), nullable=False),
        sa.Column("class_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["class_id"], ["classrooms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_students_class_id", "students", ["class_id"], unique=False)

    op.create_table(
        "point_records",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=False),
        sa.Column("class_id", sa.String(length=36), nullable=False),
        sa.Column("behavior_id", sa.String(length=64), nullable=False),
        sa.Column("behavior_name", sa.String(length=128), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("note", sa.String(length=512), nullable=True),
        sa.Column("awarded_by", sa.String(length=36), nullable=False),
        sa.Column("awarded_by_name", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("points <> 0", name="ck_point_records_points_nonzero"),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["class_id"], ["classrooms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["awarded_by"], ["staff.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_point_records_student_class", "point_records", ["student_id", "class_id"], unique=False)
    op.create_index("ix_point_records_class_created", "point_records", ["class_id", "created_at"], unique=False)

    op.create_table(
        "devices",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("fcm_token", sa.String(length=1024), nullable=False),
        sa.Column("platform", sa.String(length=32), nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_devices_fcm_token", "devices", ["fcm_token"], unique=True)
    op.create_index("ix_devices_student_id", "devices", ["student_id"], unique=False)

    op.create_table(
        "parent_profiles",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("parent_name", sa.String(length=128), nullable=False),
        sa.Column("parent_email", sa.String(length=255), nullable=True),
        sa.Column("class_id", sa.String(length=36), nullable=False),
        sa.Column("positive_messages", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("neutral_messages", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("negative_messages", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_flagged", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("flagged_by_staff_id", sa.String(length=36), nullable=True),
        sa.Column("flag_reason", sa.String(length=512), nullable=True),
        sa.Column("flagged_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_cc_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("admin_cc_enabled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["class_id"], ["classrooms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["flagged_by_staff_id"], ["staff.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_parent_profiles_class_id", "parent_profiles", ["class_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_parent_profiles_class_id", table_name="parent_profiles")
    op.drop_table("parent_profiles")

    op.drop_index("ix_devices_student_id", table_name="devices")
    op.drop_index("ix_devices_fcm_token", table_name="devices")
    op.drop_table("devices")

    op.drop_index("ix_point_records_class_created", table_name="point_records")
    op.drop_index("ix_point_records_student_class", table_name="point_records")
    op.drop_table("point_records")

    op.drop_index("ix_students_class_id", table_name="students")
    op.drop_table("students")

    op.drop_index("ix_classrooms_class_code", table_name="classrooms")
    op.drop_table("classrooms")

    op.drop_index("ix_staff_login", table_name="staff")
    op.drop_table("staff")
