# hr_portal/payroll/contributions.py

from collections import namedtuple
from decimal import Decimal

# All amounts here are Decimal pesos. Nothing is quantized; the payslip
# aggregator rounds each figure once when it converts to centavos.

# --- SSS CONTRIBUTION TABLE (2025) ---
# (min, max, monthly salary credit, employee share)
SSSBracket = namedtuple('SSSBracket', ['min', 'max', 'msc', 'employee_share'])


def _build_sss_table():
    brackets = [SSSBracket(Decimal('0'), Decimal('5249.99'), Decimal('5000'), Decimal('250'))]
    lower = Decimal('5250')
    msc = Decimal('5500')
    share = Decimal('275')
    while lower < Decimal('19750'):
        brackets.append(SSSBracket(lower, lower + Decimal('499.99'), msc, share))
        lower += 500
        msc += 500
        share += 25
    # Top bracket is wide: everything from 19,750 up to 34,749.99 pays the same share
    brackets.append(SSSBracket(Decimal('19750'), Decimal('34749.99'), Decimal('20000'), Decimal('1000')))
    return tuple(brackets)


SSS_TABLE = _build_sss_table()


def calculate_sss(gross_pay, table=SSS_TABLE):
    """Employee's SSS share: first bracket with min <= gross <= max.

    Income outside every bracket pays the table's maximum employee share.
    """
    for bracket in table:
        if bracket.min <= gross_pay <= bracket.max:
            return bracket.employee_share
    return max(bracket.employee_share for bracket in table)


# --- PHILHEALTH CONTRIBUTION ---
# 5% premium rate, 50/50 split (Employee/Employer)
# Income Floor: 10,000, Ceiling: 100,000
PHILHEALTH_RATE = Decimal('0.05')
PHILHEALTH_FLOOR = Decimal('10000.00')
PHILHEALTH_CEILING = Decimal('100000.00')


def calculate_philhealth(income, rate=PHILHEALTH_RATE, floor=PHILHEALTH_FLOOR, ceiling=PHILHEALTH_CEILING):
    """Calculates the employee's share of the PhilHealth premium."""
    income = min(max(income, floor), ceiling)
    return income * rate / 2


# --- PAG-IBIG (HDMF) CONTRIBUTION ---
PAGIBIG_THRESHOLD = Decimal('1500.00')
PAGIBIG_LOW_RATE = Decimal('0.01')
PAGIBIG_HIGH_RATE = Decimal('0.02')
# Maximum contribution is 200, i.e. a maximum income base of 10,000
PAGIBIG_CAP = Decimal('10000.00')


def calculate_pagibig(income, threshold=PAGIBIG_THRESHOLD, low_rate=PAGIBIG_LOW_RATE,
                      high_rate=PAGIBIG_HIGH_RATE, cap=PAGIBIG_CAP):
    """Calculates the employee's share of Pag-IBIG contribution."""
    rate = low_rate if income <= threshold else high_rate
    return min(income, cap) * rate


# --- WITHHOLDING TAX (BIR semi-monthly table, 2023 onwards) ---
# (bracket_max, excess_over, base_tax, tax_rate_percent); None = no upper bound
SEMI_MONTHLY_TAX_TABLE = (
    (Decimal('10417.00'), Decimal('0.00'), Decimal('0.00'), 0),
    (Decimal('16666.00'), Decimal('10417.00'), Decimal('0.00'), 15),
    (Decimal('33332.00'), Decimal('16667.00'), Decimal('937.50'), 20),
    (Decimal('83332.00'), Decimal('33333.00'), Decimal('4270.70'), 25),
    (Decimal('333332.00'), Decimal('83333.00'), Decimal('16770.70'), 30),
    (None, Decimal('333333.00'), Decimal('91770.70'), 35),
)


def calculate_withholding_tax(taxable_income, table=SEMI_MONTHLY_TAX_TABLE):
    """Calculates withholding tax on taxable income for one pay period."""
    if taxable_income <= 0:
        return Decimal('0.00')

    for max_bracket, excess_over, base_tax, tax_rate_percent in table:
        if max_bracket is None or taxable_income <= max_bracket:
            excess = max(Decimal('0.00'), taxable_income - excess_over)
            return base_tax + (excess * Decimal(tax_rate_percent) / 100)

    # Table without an open-ended bracket: tax the excess at the last bracket's rate
    _, excess_over, base_tax, tax_rate_percent = table[-1]
    return base_tax + ((taxable_income - excess_over) * Decimal(tax_rate_percent) / 100)
