# hr_portal/payroll/calculator.py

from collections import namedtuple
from dataclasses import dataclass, field, fields
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional

from hr_portal.attendance.calculator import (
    ClassifiedHours, STANDARD_SHIFT_MINUTES, classify, holiday_category
)
from hr_portal.payroll.contributions import (
    calculate_sss, calculate_philhealth, calculate_pagibig, calculate_withholding_tax
)

Allowance = namedtuple('Allowance', ['name', 'amount'])  # amount in centavos

CENTAVOS_PER_PESO = Decimal('100')
MINUTES_PER_HOUR = Decimal('60')


def to_centavos(amount):
    """Rounds a Decimal centavo amount to a whole centavo, half up."""
    return int(Decimal(amount).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PayPolicy:
    """Rate multipliers, allowances and shift rules applied to a payroll run."""
    overtime: Decimal = Decimal('1.25')
    night_differential: Decimal = Decimal('1.1')
    regular_holiday: Decimal = Decimal('2.0')
    regular_holiday_overtime: Decimal = Decimal('2.5')
    special_holiday: Decimal = Decimal('1.3')
    special_holiday_overtime: Decimal = Decimal('1.63')
    allowances: tuple = (Allowance('Rice Subsidy', 100000),)
    shift_minutes: int = STANDARD_SHIFT_MINUTES
    # Wall-clock zone for naive UTC instants; None takes times as given
    timezone: Optional[str] = None
    tax_policy: Optional[Callable] = None

    @property
    def fixed_allowance(self):
        return sum(allowance.amount for allowance in self.allowances)

    @classmethod
    def from_config(cls, cfg):
        """Builds a policy from the PAYROLL_* keys of a Flask config mapping."""
        defaults = cls()
        allowances = cfg.get('PAYROLL_ALLOWANCES')
        return cls(
            overtime=Decimal(str(cfg.get('PAYROLL_OVERTIME_MULTIPLIER', defaults.overtime))),
            night_differential=Decimal(str(cfg.get('PAYROLL_NIGHT_DIFF_MULTIPLIER', defaults.night_differential))),
            regular_holiday=Decimal(str(cfg.get('PAYROLL_REGULAR_HOLIDAY_MULTIPLIER', defaults.regular_holiday))),
            regular_holiday_overtime=Decimal(str(cfg.get('PAYROLL_REGULAR_HOLIDAY_OT_MULTIPLIER',
                                                         defaults.regular_holiday_overtime))),
            special_holiday=Decimal(str(cfg.get('PAYROLL_SPECIAL_HOLIDAY_MULTIPLIER', defaults.special_holiday))),
            special_holiday_overtime=Decimal(str(cfg.get('PAYROLL_SPECIAL_HOLIDAY_OT_MULTIPLIER',
                                                         defaults.special_holiday_overtime))),
            allowances=defaults.allowances if allowances is None
            else tuple(Allowance(name, int(amount)) for name, amount in allowances),
            shift_minutes=int(cfg.get('PAYROLL_STANDARD_SHIFT_MINUTES', defaults.shift_minutes)),
            timezone=cfg.get('PAYROLL_TIMEZONE', defaults.timezone),
            tax_policy=calculate_withholding_tax if cfg.get('PAYROLL_WITHHOLDING_TAX') else None,
        )


@dataclass(frozen=True)
class PayslipResult:
    """One employee's payslip for one pay period. Currency fields are centavos."""
    basic_pay: int = 0
    overtime_pay: int = 0
    night_diff_pay: int = 0
    holiday_pay: int = 0
    allowances: int = 0
    gross_pay: int = 0
    sss_contribution: int = 0
    philhealth_contribution: int = 0
    pagibig_contribution: int = 0
    withholding_tax: int = 0
    total_deductions: int = 0
    net_pay: int = 0
    hours: ClassifiedHours = field(default_factory=ClassifiedHours)
    allowance_items: tuple = ()

    def as_dict(self):
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != 'hours'}
        data['allowance_items'] = [{'name': item.name, 'amount': item.amount} for item in self.allowance_items]
        data.update(self.hours.as_dict())
        return data


def _pay(minutes, rate, multiplier=Decimal('1')):
    # hours * rate * multiplier, with the division by 60 done last
    return Decimal(minutes) * Decimal(rate) * multiplier / MINUTES_PER_HOUR


# --- MAIN CALCULATOR FUNCTION ---
def aggregate(rate, records, policy=None, report=None):
    """
    Reduces a pay period's attendance into a payslip.

    Args:
        rate (int): hourly rate in centavos.
        records: iterable of (attendance record, HolidayType) pairs.
        policy (PayPolicy): multipliers and allowances; defaults to PayPolicy().
        report: ``report(record, message)`` callable for attendance anomalies.

    Returns:
        PayslipResult. No records yields an all-zero payslip.
    """
    policy = policy or PayPolicy()
    records = list(records)
    if not records:
        return PayslipResult()

    # --- 1. Classify and accumulate ---
    hours = ClassifiedHours()
    for record, category in records:
        hours += classify(record, category, shift_minutes=policy.shift_minutes,
                          tz=policy.timezone, report=report)

    # --- 2. Earnings (unrounded centavos) ---
    basic_pay = _pay(hours.regular_minutes, rate)
    overtime_pay = _pay(hours.overtime_minutes, rate, policy.overtime)
    night_diff_pay = _pay(hours.night_diff_minutes, rate, policy.night_differential)
    holiday_pay = (_pay(hours.regular_holiday_minutes, rate, policy.regular_holiday)
                   + _pay(hours.regular_holiday_ot_minutes, rate, policy.regular_holiday_overtime)
                   + _pay(hours.special_holiday_minutes, rate, policy.special_holiday)
                   + _pay(hours.special_holiday_ot_minutes, rate, policy.special_holiday_overtime))
    allowances = Decimal(policy.fixed_allowance)

    gross_pay = basic_pay + overtime_pay + night_diff_pay + holiday_pay + allowances

    # --- 3. Statutory deductions, looked up on gross pay ---
    gross_pesos = gross_pay / CENTAVOS_PER_PESO
    sss = calculate_sss(gross_pesos)
    philhealth = calculate_philhealth(gross_pesos)
    pagibig = calculate_pagibig(gross_pesos)

    withholding_tax = Decimal('0')
    if policy.tax_policy is not None:
        withholding_tax = policy.tax_policy(gross_pesos - (sss + philhealth + pagibig))

    # --- 4. Finalize in centavos ---
    # Deduction lines are final figures, so the payslip balances:
    # gross - total deductions = net (floored at zero)
    deductions = {
        'sss_contribution': to_centavos(sss * CENTAVOS_PER_PESO),
        'philhealth_contribution': to_centavos(philhealth * CENTAVOS_PER_PESO),
        'pagibig_contribution': to_centavos(pagibig * CENTAVOS_PER_PESO),
        'withholding_tax': to_centavos(withholding_tax * CENTAVOS_PER_PESO),
    }
    gross_centavos = to_centavos(gross_pay)
    total_deductions = sum(deductions.values())

    return PayslipResult(
        basic_pay=to_centavos(basic_pay),
        overtime_pay=to_centavos(overtime_pay),
        night_diff_pay=to_centavos(night_diff_pay),
        holiday_pay=to_centavos(holiday_pay),
        allowances=to_centavos(allowances),
        gross_pay=gross_centavos,
        total_deductions=total_deductions,
        net_pay=max(0, gross_centavos - total_deductions),
        hours=hours,
        allowance_items=tuple(policy.allowances),
        **deductions
    )


def compute_payslip(rate, records, holidays, policy=None, report=None):
    """Resolves each record's holiday category from its work date, then aggregates."""
    holidays = list(holidays)
    pairs = [(record, holiday_category(record.work_date, holidays)) for record in records]
    return aggregate(rate, pairs, policy=policy, report=report)
