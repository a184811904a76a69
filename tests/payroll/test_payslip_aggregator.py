from collections import namedtuple
from datetime import date, datetime
from decimal import Decimal

from hr_portal.attendance.calculator import ClockSession, HolidayType
from hr_portal.payroll.calculator import (
    Allowance, PayPolicy, PayslipResult, aggregate, compute_payslip, to_centavos
)
from hr_portal.payroll.contributions import calculate_withholding_tax

HolidayEntry = namedtuple('HolidayEntry', ['date', 'type'])

RATE = 5875  # 58.75 per hour
NO_ALLOWANCE = PayPolicy(allowances=(), timezone=None)


def _shift(day, start_hour, end, break_minutes=0):
    start = datetime(day.year, day.month, day.day, start_hour, 0)
    return ClockSession(time_in=start, time_out=end, total_break_minutes=break_minutes, work_date=day)


def test_to_centavos_rounds_half_up():
    assert to_centavos(Decimal('7343.75')) == 7344
    assert to_centavos(Decimal('108687.5')) == 108688
    assert to_centavos(Decimal('70676.25')) == 70676


def test_empty_period_gives_zero_payslip():
    result = aggregate(RATE, [])
    assert result == PayslipResult()
    assert result.gross_pay == 0
    assert result.net_pay == 0
    assert result.total_deductions == 0
    assert result.allowances == 0
    assert result.hours.worked_minutes == 0


def test_nine_hour_shift_with_rice_subsidy():
    day = date(2025, 1, 6)
    record = _shift(day, 8, datetime(2025, 1, 6, 17, 0))
    result = aggregate(RATE, [(record, HolidayType.NONE)], PayPolicy(timezone=None))

    assert result.hours.regular_minutes == 480
    assert result.hours.overtime_minutes == 60
    assert result.basic_pay == 47000
    assert result.overtime_pay == 7344
    assert result.night_diff_pay == 0
    assert result.holiday_pay == 0
    assert result.allowances == 100000
    assert result.gross_pay == 154344
    # Gross 1,543.4375: lowest SSS bracket, PhilHealth floor, Pag-IBIG 2%
    assert result.sss_contribution == 25000
    assert result.philhealth_contribution == 25000
    assert result.pagibig_contribution == 3087
    assert result.withholding_tax == 0
    assert result.total_deductions == 53087
    assert result.net_pay == 101257


def test_deductions_use_gross_pay():
    day = date(2025, 1, 6)
    record = _shift(day, 8, datetime(2025, 1, 6, 17, 0))
    result = aggregate(RATE, [(record, HolidayType.NONE)], NO_ALLOWANCE)

    assert result.gross_pay == 54344
    # 543.4375 is under the Pag-IBIG threshold, so the 1% rate applies
    assert result.pagibig_contribution == 543
    assert result.total_deductions == 50543
    assert result.net_pay == 3801


def test_net_pay_never_negative():
    day = date(2025, 1, 6)
    record = _shift(day, 8, datetime(2025, 1, 6, 9, 0))
    result = aggregate(100, [(record, HolidayType.NONE)], NO_ALLOWANCE)

    assert result.gross_pay == 100
    assert result.total_deductions == 50001
    assert result.net_pay == 0


def test_regular_holiday_pay():
    day = date(2025, 1, 1)
    record = _shift(day, 8, datetime(2025, 1, 1, 17, 0))
    result = aggregate(RATE, [(record, HolidayType.REGULAR)], NO_ALLOWANCE)

    assert result.basic_pay == 0
    assert result.overtime_pay == 0
    # 8h x 2.0 + 1h x 2.5
    assert result.holiday_pay == 108688
    assert result.gross_pay == 108688


def test_special_holiday_pay():
    day = date(2025, 8, 21)
    record = _shift(day, 8, datetime(2025, 8, 21, 17, 0))
    result = aggregate(RATE, [(record, HolidayType.SPECIAL)], NO_ALLOWANCE)

    # 8h x 1.3 + 1h x 1.63
    assert result.holiday_pay == 70676


def test_night_differential_pay():
    day = date(2025, 1, 6)
    record = _shift(day, 22, datetime(2025, 1, 7, 7, 0), break_minutes=60)
    result = aggregate(RATE, [(record, HolidayType.NONE)], NO_ALLOWANCE)

    assert result.hours.night_diff_minutes == 480
    assert result.basic_pay == 47000
    assert result.night_diff_pay == 51700
    assert result.gross_pay == 98700


def test_tax_policy_is_applied_to_income_after_contributions():
    seen = []

    def flat_tax(taxable):
        seen.append(taxable)
        return Decimal('100')

    day = date(2025, 1, 6)
    record = _shift(day, 8, datetime(2025, 1, 6, 17, 0))
    result = aggregate(RATE, [(record, HolidayType.NONE)], PayPolicy(timezone=None, tax_policy=flat_tax))

    assert result.withholding_tax == 10000
    assert result.total_deductions == 63087
    assert result.net_pay == 91257
    assert seen == [Decimal('1543.4375') - Decimal('530.86875')]


def test_period_hours_add_up_to_worked_minutes():
    records = [
        (_shift(date(2025, 1, 1), 8, datetime(2025, 1, 1, 18, 0), 30), HolidayType.REGULAR),
        (_shift(date(2025, 1, 2), 22, datetime(2025, 1, 3, 7, 15), 60), HolidayType.NONE),
        (_shift(date(2025, 1, 3), 9, datetime(2025, 1, 3, 14, 0)), HolidayType.SPECIAL),
    ]
    result = aggregate(RATE, records, NO_ALLOWANCE)

    assert result.hours.worked_minutes == 570 + 495 + 300
    assert result.hours.regular_minutes == 480
    assert result.hours.overtime_minutes == 15
    assert result.hours.regular_holiday_minutes == 480
    assert result.hours.regular_holiday_ot_minutes == 90
    assert result.hours.special_holiday_minutes == 300


def test_compute_payslip_resolves_holidays_by_work_date():
    holidays = [HolidayEntry(date(2025, 1, 1), 'regular')]
    records = [
        _shift(date(2025, 1, 1), 8, datetime(2025, 1, 1, 16, 0)),
        _shift(date(2025, 1, 2), 8, datetime(2025, 1, 2, 16, 0)),
    ]
    result = compute_payslip(RATE, records, holidays, NO_ALLOWANCE)

    assert result.hours.regular_holiday_minutes == 480
    assert result.hours.regular_minutes == 480
    assert result.basic_pay == 47000
    assert result.holiday_pay == 94000


def test_anomalies_are_reported_not_raised():
    messages = []
    bad = ClockSession(time_in=datetime(2025, 1, 6, 17, 0), time_out=datetime(2025, 1, 6, 8, 0),
                       work_date=date(2025, 1, 6))
    result = aggregate(RATE, [(bad, HolidayType.NONE)], NO_ALLOWANCE,
                       report=lambda record, message: messages.append(message))

    assert len(messages) == 1
    assert result.basic_pay == 0


def test_policy_from_config():
    policy = PayPolicy.from_config({
        'PAYROLL_OVERTIME_MULTIPLIER': '1.5',
        'PAYROLL_ALLOWANCES': [('Rice Subsidy', 100000), ('Laundry', 30000)],
        'PAYROLL_STANDARD_SHIFT_MINUTES': 420,
        'PAYROLL_TIMEZONE': 'Asia/Manila',
        'PAYROLL_WITHHOLDING_TAX': True,
    })
    assert policy.overtime == Decimal('1.5')
    assert policy.night_differential == Decimal('1.1')
    assert policy.allowances == (Allowance('Rice Subsidy', 100000), Allowance('Laundry', 30000))
    assert policy.fixed_allowance == 130000
    assert policy.shift_minutes == 420
    assert policy.tax_policy is calculate_withholding_tax
    assert PayPolicy.from_config({}).tax_policy is None


def test_default_policy_reads_times_as_wall_clock():
    day = date(2025, 1, 6)
    record = _shift(day, 22, datetime(2025, 1, 7, 6, 0))
    result = aggregate(RATE, [(record, HolidayType.NONE)])

    assert result.hours.night_diff_minutes == 480
    assert result.night_diff_pay == 51700


def test_allowances_are_itemized():
    policy = PayPolicy(allowances=(Allowance('Rice Subsidy', 100000), Allowance('Laundry', 30000)))
    record = _shift(date(2025, 1, 6), 8, datetime(2025, 1, 6, 16, 0))
    result = aggregate(RATE, [(record, HolidayType.NONE)], policy)

    assert result.allowances == 130000
    assert result.as_dict()['allowance_items'] == [
        {'name': 'Rice Subsidy', 'amount': 100000},
        {'name': 'Laundry', 'amount': 30000},
    ]
    assert aggregate(RATE, [], policy).allowance_items == ()
