"""CSV and PDF renderings of a complete weekly plan."""
from __future__ import annotations

import csv
import io
import re
from datetime import date, datetime, timezone
from typing import Any, Sequence

from weekly_planner.config import SCHOOL_NAME
from weekly_planner.services.storage import WeeklyPlanComplete
from weekly_planner.services.subject_fields import columns_for, content_from_row

DAY_NAMES: dict[int, str] = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
}

# The PDF table is narrower than the spreadsheet, so a few headers are shortened.
_PDF_LABELS: dict[str, str] = {"homework_due_date": "HW Due Date"}


def day_name(day_of_week: int) -> str:
    return DAY_NAMES.get(day_of_week, f"Day {day_of_week}")


def _format_date(value: date) -> str:
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def _cell(value: Any, empty: str = "") -> str:
    if value is None or value == "":
        return empty
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _header_lines(complete: WeeklyPlanComplete, generated_at: datetime) -> list[str]:
    week = complete.week
    lines = [
        f"{SCHOOL_NAME} - Weekly Plan",
        f"Grade: {complete.grade.name}",
        f"Subject: {complete.subject.name}",
        f"Teacher: {complete.teacher.full_name}",
        f"Week: {week.week_number} ({_format_date(week.start_date)} - {_format_date(week.end_date)})",
        f"Generated: {generated_at.strftime('%Y-%m-%d')}",
    ]
    if complete.plan.notes:
        lines.append(f"Notes: {complete.plan.notes}")
    return lines


def _table(
    complete: WeeklyPlanComplete, empty: str = "", labels: dict[str, str] | None = None
) -> tuple[list[str], list[list[str]]]:
    subject_type = complete.subject.type
    columns = columns_for(subject_type)
    overrides = labels or {}
    headers = ["Day", *(overrides.get(name, label) for name, label in columns)]
    rows = []
    for daily in sorted(complete.daily_plans, key=lambda daily: daily.day_of_week):
        content = content_from_row(subject_type, daily)
        cells = [_cell(getattr(content, name), empty) for name, _ in columns]
        rows.append([day_name(daily.day_of_week), *cells])
    return headers, rows


def build_plan_csv(complete: WeeklyPlanComplete, generated_at: datetime | None = None) -> str:
    """Preamble lines, a blank line, then one row per weekday."""
    generated_at = generated_at or datetime.now(timezone.utc)
    headers, rows = _table(complete)

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    for line in _header_lines(complete, generated_at):
        writer.writerow([line])
    writer.writerow([])
    writer.writerow(headers)
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def _pdf_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _pdf_text_stream(title: str, lines: Sequence[str]) -> str:
    stream_lines = [
        "BT",
        "/F1 16 Tf",
        "18 TL",
        "40 550 Td",
        f"({_pdf_escape(title)}) Tj",
        "/F1 10 Tf",
        "13 TL",
        "0 -24 Td",
    ]
    for line in lines:
        stream_lines.append(f"({_pdf_escape(line)}) Tj")
        stream_lines.append("T*")
    stream_lines.append("ET")
    return "\n".join(stream_lines)


def _build_pdf_document(title: str, lines: Sequence[str]) -> bytes:
    stream = _pdf_text_stream(title, lines)
    stream_bytes = stream.encode("latin-1", errors="replace")

    objects = [
        "<< /Type /Catalog /Pages 2 0 R >>",
        "<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        # A4 landscape
        "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 842 595] /Contents 4 0 R "
        "/Resources << /Font << /F1 5 0 R >> >> >>",
        f"<< /Length {len(stream_bytes)} >>\nstream\n",
        "<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    pdf = bytearray(b"%PDF-1.4\n")
    offsets: list[int] = []
    for index, obj in enumerate(objects, start=1):
        offsets.append(len(pdf))
        pdf.extend(f"{index} 0 obj\n{obj}".encode("latin-1", errors="replace"))
        if index == 4:
            pdf.extend(stream_bytes)
            pdf.extend(b"\nendstream")
        pdf.extend(b"\nendobj\n")

    xref_offset = len(pdf)
    pdf.extend(f"xref\n0 {len(objects) + 1}\n".encode("latin-1"))
    pdf.extend(b"0000000000 65535 f \n")
    for offset in offsets:
        pdf.extend(f"{offset:010d} 00000 n \n".encode("latin-1"))
    pdf.extend(
        (
            "trailer\n"
            f"<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
            "startxref\n"
            f"{xref_offset}\n"
            "%%EOF"
        ).encode("latin-1")
    )
    return bytes(pdf)


def build_plan_pdf(complete: WeeklyPlanComplete, generated_at: datetime | None = None) -> bytes:
    generated_at = generated_at or datetime.now(timezone.utc)
    headers, rows = _table(complete, empty="-", labels=_PDF_LABELS)
    header_line = " | ".join(headers)
    lines = [
        *_header_lines(complete, generated_at)[1:],
        "",
        header_line,
        "-" * len(header_line),
        *(" | ".join(row) for row in rows),
    ]
    return _build_pdf_document(f"{SCHOOL_NAME} - Weekly Plan", lines)


def _slug(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9-]+", "_", value).strip("_")


def export_filename(complete: WeeklyPlanComplete, extension: str) -> str:
    """``<grade>_<subject>_Week<N>_<year>.<extension>``"""
    week = complete.week
    return (
        f"{_slug(complete.grade.name)}_{_slug(complete.subject.name)}"
        f"_Week{week.week_number}_{week.year}.{extension}"
    )


__all__ = [
    "DAY_NAMES",
    "build_plan_csv",
    "build_plan_pdf",
    "day_name",
    "export_filename",
]
