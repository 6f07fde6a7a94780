"""Tests for weekly plan CSV/PDF exports."""
from __future__ import annotations

import csv
import io
from datetime import date, datetime

from weekly_planner.db.models import DailyPlan, Grade, PlanningWeek, Subject, User, WeeklyPlan
from weekly_planner.services import exports
from weekly_planner.services.storage import WeeklyPlanComplete

GENERATED = datetime(2024, 4, 18, 9, 30)


def _complete(subject_type: str = "standard", notes: str | None = "Focus on fractions") -> WeeklyPlanComplete:
    week = PlanningWeek(
        id=2, week_number=16, year=2024, start_date=date(2024, 4, 17), end_date=date(2024, 4, 23)
    )
    return WeeklyPlanComplete(
        plan=WeeklyPlan(id=1, teacher_id=1, grade_id=1, subject_id=1, week_id=2, notes=notes),
        teacher=User(id=1, username="math_teacher", password="x", full_name="Michael Johnson"),
        grade=Grade(id=1, name="Grade 3"),
        subject=Subject(id=1, name="Mathematics", type=subject_type),
        week=week,
        daily_plans=[
            DailyPlan(
                id=11,
                weekly_plan_id=1,
                day_of_week=2,
                topic="Adding Fractions",
                homework="Worksheet 2",
                homework_due_date=date(2024, 4, 19),
                skill="Passing",
            ),
            DailyPlan(id=10, weekly_plan_id=1, day_of_week=1, topic="Intro", skill="Catching"),
        ],
    )


def test_csv_has_preamble_then_sorted_rows() -> None:
    rows = list(csv.reader(io.StringIO(exports.build_plan_csv(_complete(), GENERATED))))

    assert rows[0] == ["Royal American School - Weekly Plan"]
    assert rows[1] == ["Grade: Grade 3"]
    assert rows[2] == ["Subject: Mathematics"]
    assert rows[3] == ["Teacher: Michael Johnson"]
    assert rows[4] == ["Week: 16 (Apr 17, 2024 - Apr 23, 2024)"]
    assert rows[5] == ["Generated: 2024-04-18"]
    assert rows[6] == ["Notes: Focus on fractions"]
    assert rows[7] == []
    assert rows[8] == [
        "Day",
        "Lessons/Topics",
        "Books and Pages",
        "Homework",
        "Homework Due Date",
        "Assessments",
        "Notes",
    ]
    assert rows[9][:2] == ["Monday", "Intro"]
    assert rows[10] == ["Tuesday", "Adding Fractions", "", "Worksheet 2", "2024-04-19", "", ""]


def test_csv_columns_follow_pe_subject() -> None:
    rows = list(csv.reader(io.StringIO(exports.build_plan_csv(_complete("pe", None), GENERATED))))

    header_index = rows.index(["Day", "Skill", "Activity", "Notes"])
    assert rows[header_index + 1] == ["Monday", "Catching", "", ""]
    assert not any(row and row[0].startswith("Notes:") for row in rows)


def test_pdf_document_is_well_formed() -> None:
    pdf = exports.build_plan_pdf(_complete("art"), GENERATED)

    assert pdf.startswith(b"%PDF-1.4")
    assert pdf.rstrip().endswith(b"%%EOF")
    assert b"Day | Lessons/Topics | Required Items | Notes" in pdf
    assert b"Monday | Intro | - | -" in pdf
    assert b"Teacher: Michael Johnson" in pdf


def test_pdf_uses_short_due_date_header() -> None:
    pdf = exports.build_plan_pdf(_complete(), GENERATED)

    assert b"HW Due Date" in pdf


def test_pdf_escapes_parentheses() -> None:
    pdf = exports.build_plan_pdf(_complete(notes="Bring (optional) ruler"), GENERATED)

    assert b"Bring \\(optional\\) ruler" in pdf


def test_export_filename() -> None:
    assert exports.export_filename(_complete(), "pdf") == "Grade_3_Mathematics_Week16_2024.pdf"


def test_unknown_day_numbers_get_a_generic_name() -> None:
    assert exports.day_name(3) == "Wednesday"
    assert exports.day_name(7) == "Day 7"
