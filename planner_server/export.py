# -*- coding: utf-8 -*-
"""
Spreadsheet exports of the weekly schedule and of the exam list.

Exports build rows from a read-only snapshot, write them to an ``.xlsx``
workbook with openpyxl and hand the file to a share callable. Any failure
along the way is reported as a single ``ExportError``.
"""
from __future__ import annotations

import logging
import typing as t
from datetime import date
from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .calendar_utils import format_date, weekday_label
from .errors import ExportError
from .models import Exam
from .resolver import WeekSnapshot, sorted_exams

logger = logging.getLogger(__name__)

Row = list[str]
ShareCallback = t.Callable[[Path], None]

SCHEDULE_SHEET = "Thời Khóa Biểu"
EXAMS_SHEET = "Lich_Thi"
SCHEDULE_COLUMN_WIDTHS = (25, 40, 15, 20, 30)
EXAM_COLUMN_WIDTHS = (30, 15, 12, 12)


def build_schedule_rows(snapshot: WeekSnapshot) -> list[Row]:
    """Lays out a week: title, then per weekday its classes and notes."""
    rows: list[Row] = [["Thời Khóa Biểu", f"Tuần từ {format_date(snapshot.monday)}"], []]
    for day in snapshot.days:
        rows.append([weekday_label(day.weekday), format_date(day.date)])

        rows.append(["Môn học", "Giáo viên", "Phòng", "Thời gian", "Ghi chú"])
        if not day.classes:
            rows.append(["Không có lớp học", "", "", "", ""])
        for cls in day.classes:
            rows.append([cls.name, cls.teacher, cls.room, f"{cls.start_time} - {cls.end_time}", cls.notes or ""])
        rows.append([])

        rows.append(["Ghi chú", "Nội dung", "Ngày cụ thể"])
        if not day.notes:
            rows.append(["Không có ghi chú", "", ""])
        for note in day.notes:
            rows.append([note.title, note.content or "", note.date or ""])
        rows.append([])
    return rows


def build_exam_rows(exams: t.Iterable[Exam]) -> list[Row]:
    """One table of all exams sorted by date, then time."""
    rows: list[Row] = [["Lịch Thi"], [], ["Môn thi", "Ngày", "Thời gian", "Phòng"]]
    ordered = sorted_exams(exams)
    if not ordered:
        rows.append(["Chưa có lịch thi", "", "", ""])
    for exam in ordered:
        rows.append([exam.subject, exam.date, exam.time, exam.room])
    return rows


def write_workbook(rows: list[Row], sheet_title: str, column_widths: t.Sequence[int], path: Path) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    for row in rows:
        ws.append(row)
    for index, width in enumerate(column_widths, 1):
        ws.column_dimensions[get_column_letter(index)].width = width
    wb.save(path)
    return path


def schedule_file_name(monday: date) -> str:
    return f"Thoi_khoa_bieu_{format_date(monday).replace('/', '-')}.xlsx"


def exams_file_name(today: date) -> str:
    return f"Lich_thi_{format_date(today).replace('/', '-')}.xlsx"


class ExportGateway:
    """Writes exports into ``export_dir`` and passes them to ``share``."""

    def __init__(self, export_dir: Path, share: t.Optional[ShareCallback] = None) -> None:
        self.export_dir = Path(export_dir)
        self.share = share

    def _export(self, rows: list[Row], sheet_title: str, widths: t.Sequence[int], file_name: str) -> Path:
        path = self.export_dir / file_name
        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            write_workbook(rows, sheet_title, widths, path)
            if self.share is not None:
                self.share(path)
            return path
        except Exception as e:
            logger.error("Export of %s failed", file_name, exc_info=True)
            path.unlink(missing_ok=True)
            raise ExportError(str(e)) from e

    def export_schedule(self, snapshot: WeekSnapshot) -> Path:
        """Exports the week in ``snapshot``.

        :raises ExportError: If the workbook cannot be written or shared.
        """
        return self._export(
            build_schedule_rows(snapshot),
            SCHEDULE_SHEET,
            SCHEDULE_COLUMN_WIDTHS,
            schedule_file_name(snapshot.monday),
        )

    def export_exams(self, exams: t.Iterable[Exam], today: t.Optional[date] = None) -> Path:
        """Exports all exams; the file is named after ``today``."""
        return self._export(
            build_exam_rows(exams),
            EXAMS_SHEET,
            EXAM_COLUMN_WIDTHS,
            exams_file_name(today or date.today()),
        )
