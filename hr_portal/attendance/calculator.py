# hr_portal/attendance/calculator.py

import logging
from dataclasses import dataclass, fields
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from hr_portal.utils import as_date, to_wall_clock

logger = logging.getLogger(__name__)

# --- NIGHT DIFFERENTIAL WINDOW ---
# 10PM (22) to 6AM (6), wrapping across midnight
NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 6

# --- STANDARD SHIFT ---
STANDARD_SHIFT_MINUTES = 480


class HolidayType(str, Enum):
    """Holiday category of a calendar date."""

    NONE = 'none'
    REGULAR = 'regular'
    SPECIAL = 'special'

    @classmethod
    def parse(cls, value):
        """Maps a stored holiday type ('regular', 'special_non_working', ...) to a category."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.NONE
        value = str(value).strip().lower()
        if value == 'regular':
            return cls.REGULAR
        if value.startswith('special'):
            return cls.SPECIAL
        return cls.NONE


@dataclass(frozen=True)
class ClockSession:
    """In-memory attendance session, shaped like the ``attendance`` table row."""
    time_in: datetime
    time_out: Optional[datetime] = None
    total_break_minutes: int = 0
    work_date: Optional[object] = None
    id: Optional[int] = None

    @classmethod
    def from_record(cls, record):
        """Detached copy of an ``AttendanceRecord`` row."""
        return cls(time_in=record.time_in, time_out=record.time_out,
                   total_break_minutes=record.total_break_minutes or 0,
                   work_date=record.work_date, id=record.id)


@dataclass(frozen=True)
class ClassifiedHours:
    """Minutes of one or more attendance sessions, split into pay buckets.

    Every bucket except ``night_diff_minutes`` is exclusive; night
    differential overlays the others.
    """
    regular_minutes: int = 0
    overtime_minutes: int = 0
    night_diff_minutes: int = 0
    regular_holiday_minutes: int = 0
    regular_holiday_ot_minutes: int = 0
    special_holiday_minutes: int = 0
    special_holiday_ot_minutes: int = 0

    def __add__(self, other):
        if not isinstance(other, ClassifiedHours):
            return NotImplemented
        return ClassifiedHours(**{
            f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)
        })

    @property
    def worked_minutes(self):
        return (self.regular_minutes + self.overtime_minutes
                + self.regular_holiday_minutes + self.regular_holiday_ot_minutes
                + self.special_holiday_minutes + self.special_holiday_ot_minutes)

    @property
    def night_diff_hours(self):
        return self.night_diff_minutes // 60

    def as_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _log_anomaly(record, message):
    logger.warning('Attendance anomaly (%r): %s', getattr(record, 'id', record), message)


# --- NIGHT DIFFERENTIAL ---
def night_differential_hours(time_in, time_out, tz=None):
    """Counts whole clock hours between ``time_in`` and ``time_out`` that start
    inside the night window.

    The walk starts at the first hour boundary at or after ``time_in``; an hour
    is counted only when it ends on or before ``time_out``.
    """
    if time_in is None or time_out is None:
        return 0
    start = to_wall_clock(time_in, tz)
    end = to_wall_clock(time_out, tz)
    if end <= start:
        return 0

    current = start.replace(minute=0, second=0, microsecond=0)
    if current < start:
        current += timedelta(hours=1)

    nd_hours = 0
    while current + timedelta(hours=1) <= end:
        h = current.hour
        if h >= NIGHT_START_HOUR or h < NIGHT_END_HOUR:
            nd_hours += 1
        current += timedelta(hours=1)
    return nd_hours


# --- HOLIDAY RESOLUTION ---
def holiday_category(day, holidays):
    """Returns the HolidayType of ``day``; the first holiday on that date wins."""
    key = as_date(day)
    for holiday in holidays:
        if as_date(holiday.date) == key:
            return HolidayType.parse(holiday.type)
    return HolidayType.NONE


# --- WORKED MINUTES ---
def total_break_minutes(breaks):
    """Sums closed breaks; open breaks (no end yet) are ignored."""
    total = 0
    for brk in breaks:
        if brk.break_end is None:
            continue
        if brk.break_minutes is not None:
            total += max(0, int(brk.break_minutes))
        else:
            total += max(0, int((brk.break_end - brk.break_start).total_seconds() // 60))
    return total


def worked_minutes(record, report=None):
    """(time out - time in) - break minutes, not below 0."""
    report = report or _log_anomaly
    if record.time_out is None:
        report(record, 'session has no time out; counted as 0 worked minutes')
        return 0

    elapsed = int((record.time_out - record.time_in).total_seconds() // 60)
    if elapsed <= 0:
        report(record, f'time out {record.time_out} is not after time in {record.time_in}')
        return 0

    break_minutes = int(record.total_break_minutes or 0)
    if break_minutes < 0:
        report(record, f'negative break minutes ({break_minutes}) treated as 0')
        break_minutes = 0
    if break_minutes > elapsed:
        report(record, f'break minutes ({break_minutes}) exceed session length ({elapsed})')

    return max(0, elapsed - break_minutes)


# --- CORE LOGIC: SHIFT CLASSIFICATION ---
def classify(record, category=HolidayType.NONE, shift_minutes=STANDARD_SHIFT_MINUTES, tz=None, report=None):
    """Splits one attendance session into ClassifiedHours.

    Args:
        record: anything with ``time_in``, ``time_out`` and ``total_break_minutes``.
        category (HolidayType): holiday category of the record's date.
        shift_minutes (int): standard shift length; the excess is overtime.
        tz: zone whose wall clock decides night hours (name or tzinfo).
        report: ``report(record, message)`` callable for clamped anomalies.
    """
    category = HolidayType.parse(category)
    worked = worked_minutes(record, report)

    regular = min(worked, shift_minutes)
    overtime = max(0, worked - shift_minutes)
    night = night_differential_hours(record.time_in, record.time_out, tz) * 60

    if category == HolidayType.REGULAR:
        return ClassifiedHours(night_diff_minutes=night,
                               regular_holiday_minutes=regular,
                               regular_holiday_ot_minutes=overtime)
    if category == HolidayType.SPECIAL:
        return ClassifiedHours(night_diff_minutes=night,
                               special_holiday_minutes=regular,
                               special_holiday_ot_minutes=overtime)
    return ClassifiedHours(regular_minutes=regular,
                           overtime_minutes=overtime,
                           night_diff_minutes=night)
