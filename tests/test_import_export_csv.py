"""Tests for CSV ingestion and the per-habit summary export."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

from factories import make_habit, make_log
from haseeb.models import HabitCategory, HabitKind, HabitSchedule, LogStatus
from haseeb.services import export_csv, import_csv

HABITS_CSV = """id,name,kind,daily_target,scoring_eligible,start_date,category,schedule
quran,Quran,BINARY,,true,2024-01-01,quran,
fajr,Fajr,PRAYER,,yes,,prayer,
adhkar,Morning & evening adhkar,counter,2,no,,dhikr,
fast,Monday fast,REGULAR,,,,fasting,mondays
,Nameless,BINARY,,,,,
broken,Broken,UNKNOWN,,,,,
"""

LOGS_CSV = """habit_id,date,value,status,reason,recorded_at
quran,2024-01-01,1,done,,
quran,2024-01-02,0,FAIL, Work ,2024-01-02T21:00:00
fajr,2024-01-01,3,,,
,2024-01-01,1,DONE,,
quran,not-a-date,1,DONE,,
fajr,2024-01-02,2,MAYBE,,
"""


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


class TestImport:
    def test_habit_rows_are_parsed_and_bad_rows_skipped(self, tmp_path):
        habits = import_csv.load_habits_csv(_write(tmp_path / "habits.csv", HABITS_CSV))

        by_id = {habit.id: habit for habit in habits}
        assert set(by_id) == {"quran", "fajr", "adhkar", "fast"}
        assert by_id["quran"].start_date == date(2024, 1, 1)
        assert by_id["quran"].category == HabitCategory.QURAN
        assert by_id["fajr"].kind == HabitKind.GRADED
        assert by_id["fajr"].scoring_eligible is True
        assert by_id["adhkar"].is_compound
        assert by_id["adhkar"].scoring_eligible is False
        assert by_id["fast"].kind == HabitKind.BINARY
        assert by_id["fast"].schedule == HabitSchedule.MONDAYS

    def test_log_rows_are_parsed_and_bad_rows_skipped(self, tmp_path):
        logs = import_csv.load_logs_csv(_write(tmp_path / "logs.csv", LOGS_CSV))

        assert [(log.habit_id, log.log_date) for log in logs] == [
            ("quran", date(2024, 1, 1)),
            ("quran", date(2024, 1, 2)),
            ("fajr", date(2024, 1, 1)),
        ]
        assert logs[0].status == LogStatus.DONE
        assert logs[1].reason == "Work"
        assert logs[1].recorded_at.hour == 21
        assert logs[2].status == LogStatus.DONE
        assert logs[2].value == 3

    def test_log_date_column_alias(self, tmp_path):
        path = _write(tmp_path / "logs.csv", "habit_id,log_date,value\nquran,2024-02-01,1\n")

        logs = import_csv.load_logs_csv(path)

        assert logs[0].log_date == date(2024, 2, 1)

    def test_column_names_are_normalized(self, tmp_path):
        path = _write(tmp_path / "habits.csv", " ID , Name ,KIND\nquran,Quran,binary\n")

        habits = import_csv.load_habits_csv(path)

        assert [habit.id for habit in habits] == ["quran"]

    def test_load_snapshot_csv(self, tmp_path):
        habits, logs = import_csv.load_snapshot_csv(
            habits_path=_write(tmp_path / "habits.csv", HABITS_CSV),
            logs_path=_write(tmp_path / "logs.csv", LOGS_CSV),
        )

        assert len(habits) == 4
        assert len(logs) == 3


class TestExport:
    def test_summary_rows(self):
        habits = [make_habit("quran"), make_habit("walk", scoring_eligible=False)]
        logs = [
            make_log("quran", date(2024, 1, 1)),
            make_log("quran", date(2024, 1, 2), value=0, status=LogStatus.FAIL),
        ]

        rows = export_csv.build_summary_rows(habits, logs, today=date(2024, 1, 2))

        quran = rows[0]
        assert quran["habit_id"] == "quran"
        assert quran["current_streak"] == 0
        assert quran["best_streak"] == 1
        assert quran["worst_fail_streak"] == 1
        assert quran["growth_week"] is None
        assert rows[1]["habit_id"] == "walk"
        assert rows[1]["best_streak"] == 0

    def test_export_summary_csv_creates_file(self, tmp_path):
        habits = [make_habit("quran")]
        logs = [make_log("quran", date(2024, 1, day)) for day in range(1, 4)]
        output_path = tmp_path / "reports" / "summary.csv"

        written = export_csv.export_summary_csv(
            habits=habits, logs=logs, today=date(2024, 1, 3), output_path=output_path
        )

        assert written == output_path
        assert output_path.exists(), "summary export should create a CSV file"
        with output_path.open(newline="", encoding="utf-8") as fh:
            reader = csv.DictReader(fh)
            rows = list(reader)
        assert reader.fieldnames == export_csv.SUMMARY_HEADERS
        assert rows[0]["kind"] == "REGULAR"
        assert rows[0]["current_streak"] == "3"
        assert rows[0]["scoring_eligible"] == "True"
        assert rows[0]["growth_month"] == ""
