# hr_portal/holidays/routes.py

from flask import current_app, jsonify, request
from sqlalchemy import extract
from sqlalchemy.exc import SQLAlchemyError

from hr_portal import db
from hr_portal.exceptions import PortalError
from hr_portal.holidays import bp
from hr_portal.models.payroll import Holiday, log_admin_action
from hr_portal.utils import require_valid
from .forms import HolidayForm

DEFAULT_PAY_RATE = {'regular': 200, 'special': 130}


@bp.route('', methods=['GET'])
def list_holidays():
    query = Holiday.query
    year = request.args.get('year', type=int)
    if year:
        query = query.filter(extract('year', Holiday.date) == year)
    holidays = query.order_by(Holiday.date.asc(), Holiday.id.asc()).all()
    return jsonify([holiday.to_dict() for holiday in holidays])


@bp.route('', methods=['POST'])
def add_holiday():
    form = require_valid(HolidayForm())

    if Holiday.query.filter_by(date=form.date.data).first():
        raise PortalError(f'A holiday already exists on {form.date.data.isoformat()}.', status_code=409)

    holiday = Holiday(
        date=form.date.data,
        name=form.name.data,
        type=form.type.data,
        pay_rate_multiplier=form.pay_rate_multiplier.data or DEFAULT_PAY_RATE[form.type.data],
        description=form.description.data
    )
    try:
        db.session.add(holiday)
        log_admin_action(
            action='CREATE_HOLIDAY',
            details=f"{holiday.name} on {holiday.date} ({holiday.type}, {holiday.pay_rate_multiplier}%)."
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Failed to save holiday %s', holiday.name)
        raise

    return jsonify(holiday.to_dict()), 201
