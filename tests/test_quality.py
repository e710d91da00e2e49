"""Tests for log classification and habit applicability."""

from __future__ import annotations

from datetime import date

import pytest
from hijridate import Hijri

from factories import make_habit, make_log
from haseeb.models import HabitKind, HabitSchedule, LogStatus, PrayerQuality
from haseeb.services.quality import (
    CompoundValue,
    LogOutcome,
    SessionState,
    classify,
    decode_compound,
    encode_compound,
    is_applicable,
    is_hijri_white_day,
    is_win,
    resolve_schedule,
)


def _hijri_to_date(year: int, month: int, day: int) -> date:
    gregorian = Hijri(year, month, day).to_gregorian()
    return date(gregorian.year, gregorian.month, gregorian.day)


class TestCompoundValue:
    """Twice-daily counters pack the morning and evening state in one integer."""

    def test_both_sessions_done_is_a_win(self):
        compound = decode_compound(11)
        assert compound == CompoundValue(am=SessionState.DONE, pm=SessionState.DONE)
        assert compound.is_complete
        assert compound.is_win

    @pytest.mark.parametrize("value", [12, 21, 22, 2])
    def test_any_failed_session_is_a_loss(self, value):
        compound = decode_compound(value)
        assert compound.is_complete
        assert not compound.is_win

    def test_evening_pending_is_incomplete(self):
        compound = decode_compound(10)
        assert compound.am is SessionState.DONE
        assert compound.pm is SessionState.PENDING
        assert not compound.is_complete

    def test_morning_pending_with_evening_done_closes_the_day(self):
        compound = decode_compound(1)
        assert compound.is_complete
        assert not compound.is_win

    @pytest.mark.parametrize("value", [-1, 23, 30, 99])
    def test_malformed_values_raise(self, value):
        with pytest.raises(ValueError):
            decode_compound(value)

    def test_encode_matches_storage_format(self):
        assert encode_compound(SessionState.DONE, SessionState.FAIL) == 12
        assert encode_compound(2, 0) == 20
        assert decode_compound(21).encode() == 21


class TestClassify:
    """Per-kind success rules."""

    def test_binary_done_and_fail(self):
        habit = make_habit("quran")
        assert classify(habit, make_log("quran", date(2024, 1, 1))) is LogOutcome.WIN
        assert (
            classify(habit, make_log("quran", date(2024, 1, 1), value=0, status=LogStatus.FAIL))
            is LogOutcome.LOSS
        )

    def test_excused_and_skip_statuses_win_over_value(self):
        habit = make_habit("quran")
        excused = make_log("quran", date(2024, 1, 1), value=1, status=LogStatus.EXCUSED)
        skipped = make_log("quran", date(2024, 1, 1), value=1, status=LogStatus.SKIP)

        assert classify(habit, excused) is LogOutcome.EXCUSED
        assert classify(habit, skipped) is LogOutcome.IGNORED
        assert not LogOutcome.EXCUSED.is_terminal
        assert not LogOutcome.IGNORED.is_terminal

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (PrayerQuality.TAKBIRAH, LogOutcome.WIN),
            (PrayerQuality.JAMAA, LogOutcome.LOSS),
            (PrayerQuality.ON_TIME, LogOutcome.LOSS),
            (PrayerQuality.MISSED, LogOutcome.LOSS),
        ],
    )
    def test_graded_only_top_level_wins(self, value, expected):
        habit = make_habit("fajr", kind=HabitKind.GRADED)
        log = make_log("fajr", date(2024, 1, 1), value=int(value))
        assert classify(habit, log) is expected

    def test_simple_counter_compares_against_target(self):
        habit = make_habit("dhikr", kind=HabitKind.COUNTER, daily_target=33)

        reached = make_log("dhikr", date(2024, 1, 1), value=33, status=LogStatus.FAIL)
        short = make_log("dhikr", date(2024, 1, 2), value=10, status=LogStatus.FAIL)

        assert classify(habit, reached) is LogOutcome.WIN
        assert classify(habit, short) is LogOutcome.LOSS

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (11, LogOutcome.WIN),
            (12, LogOutcome.LOSS),
            (21, LogOutcome.LOSS),
            (22, LogOutcome.LOSS),
            (10, LogOutcome.PENDING),
            (0, LogOutcome.PENDING),
            (57, LogOutcome.PENDING),
        ],
    )
    def test_twice_daily_counter(self, value, expected):
        habit = make_habit("adhkar", kind=HabitKind.COUNTER, daily_target=2)
        assert habit.is_compound
        log = make_log("adhkar", date(2024, 1, 1), value=value)
        assert classify(habit, log) is expected

    def test_is_win_helper(self):
        habit = make_habit("fajr", kind=HabitKind.GRADED)
        assert is_win(habit, make_log("fajr", date(2024, 1, 1), value=3))
        assert not is_win(habit, make_log("fajr", date(2024, 1, 1), value=2))


class TestApplicability:
    """Which calendar days a habit is due on."""

    def test_days_before_start_date_are_not_applicable(self):
        habit = make_habit("quran", start_date=date(2024, 1, 10))
        assert not is_applicable(habit, date(2024, 1, 9))
        assert is_applicable(habit, date(2024, 1, 10))
        assert is_applicable(habit, date(2024, 2, 1))

    def test_daily_habit_without_start_date(self):
        assert is_applicable(make_habit("quran"), date(1999, 12, 31))

    def test_monday_and_thursday_schedules(self):
        monday_fast = make_habit("fast_mon", schedule=HabitSchedule.MONDAYS)
        thursday_fast = make_habit("fast_thu", schedule=HabitSchedule.THURSDAYS)

        # 2024-01-01 was a Monday.
        assert is_applicable(monday_fast, date(2024, 1, 1))
        assert not is_applicable(monday_fast, date(2024, 1, 2))
        assert is_applicable(thursday_fast, date(2024, 1, 4))
        assert not is_applicable(thursday_fast, date(2024, 1, 1))

    def test_legacy_preset_ids_imply_a_schedule(self):
        by_preset = make_habit("my_fast", preset_id="fasting_monday")
        by_id = make_habit("fasting_thursday")

        assert resolve_schedule(by_preset) is HabitSchedule.MONDAYS
        assert resolve_schedule(by_id) is HabitSchedule.THURSDAYS
        assert not is_applicable(by_preset, date(2024, 1, 4))
        assert is_applicable(by_id, date(2024, 1, 4))

    def test_explicit_schedule_beats_legacy_preset(self):
        habit = make_habit(
            "fasting_monday", schedule=HabitSchedule.THURSDAYS, preset_id="fasting_monday"
        )
        assert resolve_schedule(habit) is HabitSchedule.THURSDAYS

    def test_white_days_follow_the_hijri_calendar(self):
        habit = make_habit("fast_white", schedule=HabitSchedule.WHITE_DAYS)

        for hijri_day in (13, 14, 15):
            day = _hijri_to_date(1445, 9, hijri_day)
            assert is_hijri_white_day(day)
            assert is_applicable(habit, day)

        assert not is_applicable(habit, _hijri_to_date(1445, 9, 12))
        assert not is_applicable(habit, _hijri_to_date(1445, 9, 16))

    def test_dates_outside_the_hijri_table_are_not_white_days(self):
        assert not is_hijri_white_day(date(1800, 1, 1))
