# hr_portal/payroll/commands.py

import click
from flask import current_app

from hr_portal.payroll import bp
from hr_portal.utils import to_wall_clock, utcnow
from .calculator import PayPolicy
from .periods import periods_back
from .service import generate_payslips


@bp.cli.command('backfill')
@click.option('--periods', 'count', default=24, show_default=True, type=int,
              help='Number of semi-monthly periods to process, ending with the current one.')
@click.option('--reference', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
              help='Date inside the last period to process (defaults to today).')
def backfill(count, reference):
    """Generates missing payslips for past pay periods."""
    if reference:
        reference_date = reference.date()
    else:
        reference_date = to_wall_clock(utcnow(), current_app.config['PAYROLL_TIMEZONE']).date()

    policy = PayPolicy.from_config(current_app.config)
    for pay_period in periods_back(reference_date, count):
        summary = generate_payslips(pay_period, policy, actor='cli')
        click.echo(f'{pay_period.label}: {len(summary.created)} created, {len(summary.skipped)} skipped')
