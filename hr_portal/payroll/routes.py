# hr_portal/payroll/routes.py

from datetime import datetime

from flask import current_app, jsonify, request

from hr_portal import db
from hr_portal.exceptions import NotFoundError, PortalError
from hr_portal.models.payroll import Payslip
from hr_portal.payroll import bp
from hr_portal.utils import require_valid, to_wall_clock, utcnow
from .calculator import PayPolicy
from .forms import RunPayrollForm
from .periods import period_for_date, periods_back
from .service import generate_payslips

MAX_PERIODS = 240


def _parse_date(value):
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise PortalError(f'Invalid date: {value!r} (expected YYYY-MM-DD).') from None


@bp.route('/run', methods=['POST'])
def run_payroll():
    form = require_valid(RunPayrollForm())

    pay_period = period_for_date(form.reference_date.data)
    policy = PayPolicy.from_config(current_app.config)
    summary = generate_payslips(pay_period, policy, actor=form.actor.data or None)

    return jsonify(summary.to_dict()), 201


@bp.route('/payslips')
def list_payslips():
    query = Payslip.query
    employee_id = request.args.get('employee_id', type=int)
    year = request.args.get('year', type=int)
    month = request.args.get('month', type=int)
    if employee_id:
        query = query.filter_by(employee_id=employee_id)
    if year:
        query = query.filter_by(year=year)
    if month:
        query = query.filter_by(month=month)

    payslips = query.order_by(Payslip.year.desc(), Payslip.month.desc(), Payslip.period.desc()).all()
    return jsonify([payslip.to_dict() for payslip in payslips])


@bp.route('/payslips/<int:slip_id>')
def get_payslip(slip_id):
    payslip = db.session.get(Payslip, slip_id)
    if not payslip:
        raise NotFoundError('Payslip not found.')
    return jsonify(payslip.to_dict())


@bp.route('/periods')
def list_periods():
    reference = request.args.get('reference_date')
    if reference:
        reference_date = _parse_date(reference)
    else:
        reference_date = to_wall_clock(utcnow(), current_app.config['PAYROLL_TIMEZONE']).date()
    count = min(request.args.get('count', 2, type=int), MAX_PERIODS)
    return jsonify([p.as_dict() for p in periods_back(reference_date, count)])
