# hr_portal/payroll/periods.py

import calendar
from dataclasses import dataclass, field
from datetime import date

from hr_portal.utils import as_date

FIRST_HALF_END_DAY = 15


@dataclass(frozen=True, order=True)
class PayPeriod:
    """A semi-monthly pay period: days 1-15 (period 1) or 16-end of month (period 2)."""
    year: int
    month: int
    period: int
    start_day: int = field(init=False, compare=False)
    end_day: int = field(init=False, compare=False)

    def __post_init__(self):
        if self.period not in (1, 2):
            raise ValueError(f'Pay period number must be 1 or 2, got {self.period}')
        if not 1 <= self.month <= 12:
            raise ValueError(f'Month must be between 1 and 12, got {self.month}')
        if self.period == 1:
            start_day, end_day = 1, FIRST_HALF_END_DAY
        else:
            start_day = FIRST_HALF_END_DAY + 1
            end_day = calendar.monthrange(self.year, self.month)[1]
        object.__setattr__(self, 'start_day', start_day)
        object.__setattr__(self, 'end_day', end_day)

    @property
    def start_date(self):
        return date(self.year, self.month, self.start_day)

    @property
    def end_date(self):
        return date(self.year, self.month, self.end_day)

    def previous(self):
        if self.period == 2:
            return PayPeriod(self.year, self.month, 1)
        if self.month == 1:
            return PayPeriod(self.year - 1, 12, 2)
        return PayPeriod(self.year, self.month - 1, 2)

    @property
    def label(self):
        return f'{self.start_date:%b} {self.start_day}-{self.end_day}, {self.year}'

    def as_dict(self):
        return {
            'year': self.year,
            'month': self.month,
            'period': self.period,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
        }


def period_for_date(day):
    """Returns the pay period containing ``day``."""
    day = as_date(day)
    return PayPeriod(day.year, day.month, 1 if day.day <= FIRST_HALF_END_DAY else 2)


def periods_back(reference_date, count):
    """``count`` consecutive pay periods in chronological order, the last one
    being the period that contains ``reference_date``."""
    periods = []
    if count <= 0:
        return periods
    current = period_for_date(reference_date)
    for _ in range(count):
        periods.append(current)
        current = current.previous()
    periods.reverse()
    return periods
