"""Initial weekly planning schema."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20240605_000001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "grades",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.UniqueConstraint("name", name="uq_grades_name"),
    )

    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False, server_default="standard"),
        sa.UniqueConstraint("name", name="uq_subjects_name"),
    )

    op.create_table(
        "teacher_grades",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("teacher_id", sa.Integer(), nullable=False),
        sa.Column("grade_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["grade_id"], ["grades.id"]),
        sa.UniqueConstraint("teacher_id", "grade_id", name="uq_teacher_grades_teacher_grade"),
    )
    op.create_index(op.f("ix_teacher_grades_teacher_id"), "teacher_grades", ["teacher_id"])
    op.create_index(op.f("ix_teacher_grades_grade_id"), "teacher_grades", ["grade_id"])

    op.create_table(
        "teacher_subjects",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("teacher_id", sa.Integer(), nullable=False),
        sa.Column("grade_id", sa.Integer(), nullable=False),
        sa.Column("subject_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["grade_id"], ["grades.id"]),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"]),
        sa.UniqueConstraint(
            "teacher_id",
            "grade_id",
            "subject_id",
            name="uq_teacher_subjects_teacher_grade_subject",
        ),
    )
    op.create_index(op.f("ix_teacher_subjects_teacher_id"), "teacher_subjects", ["teacher_id"])
    op.create_index(op.f("ix_teacher_subjects_grade_id"), "teacher_subjects", ["grade_id"])
    op.create_index(op.f("ix_teacher_subjects_subject_id"), "teacher_subjects", ["subject_id"])

    op.create_table(
        "planning_weeks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        "weekly_plans",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("teacher_id", sa.Integer(), nullable=False),
        sa.Column("grade_id", sa.Integer(), nullable=False),
        sa.Column("subject_id", sa.Integer(), nullable=False),
        sa.Column("week_id", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["grade_id"], ["grades.id"]),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"]),
        sa.ForeignKeyConstraint(["week_id"], ["planning_weeks.id"]),
        sa.UniqueConstraint(
            "teacher_id",
            "subject_id",
            "grade_id",
            "week_id",
            name="uq_weekly_plans_teacher_subject_grade_week",
        ),
    )
    for column in ("teacher_id", "grade_id", "subject_id", "week_id"):
        op.create_index(op.f(f"ix_weekly_plans_{column}"), "weekly_plans", [column])

    op.create_table(
        "daily_plans",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("weekly_plan_id", sa.Integer(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("topic", sa.Text(), nullable=True),
        sa.Column("books_and_pages", sa.Text(), nullable=True),
        sa.Column("homework", sa.Text(), nullable=True),
        sa.Column("homework_due_date", sa.Date(), nullable=True),
        sa.Column("assignments", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("required_items", sa.Text(), nullable=True),
        sa.Column("skill", sa.Text(), nullable=True),
        sa.Column("activity", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["weekly_plan_id"], ["weekly_plans.id"]),
        sa.UniqueConstraint("weekly_plan_id", "day_of_week", name="uq_daily_plans_plan_day"),
    )
    op.create_index(op.f("ix_daily_plans_weekly_plan_id"), "daily_plans", ["weekly_plan_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_daily_plans_weekly_plan_id"), table_name="daily_plans")
    op.drop_table("daily_plans")
    for column in ("teacher_id", "grade_id", "subject_id", "week_id"):
        op.drop_index(op.f(f"ix_weekly_plans_{column}"), table_name="weekly_plans")
    op.drop_table("weekly_plans")
    op.drop_table("planning_weeks")
    op.drop_index(op.f("ix_teacher_subjects_subject_id"), table_name="teacher_subjects")
    op.drop_index(op.f("ix_teacher_subjects_grade_id"), table_name="teacher_subjects")
    op.drop_index(op.f("ix_teacher_subjects_teacher_id"), table_name="teacher_subjects")
    op.drop_table("teacher_subjects")
    op.drop_index(op.f("ix_teacher_grades_grade_id"), table_name="teacher_grades")
    op.drop_index(op.f("ix_teacher_grades_teacher_id"), table_name="teacher_grades")
    op.drop_table("teacher_grades")
    op.drop_table("subjects")
    op.drop_table("grades")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")
