# hr_portal/attendance/routes.py

from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from hr_portal import db
from hr_portal.attendance import bp
from hr_portal.attendance.calculator import total_break_minutes, worked_minutes
from hr_portal.exceptions import AttendanceStateError, NotFoundError, PortalError
from hr_portal.models.payroll import AttendanceRecord, BreakInterval, Employee
from hr_portal.utils import require_valid, to_wall_clock, utcnow
from .forms import BreakStartForm, ClockEventForm

MAX_RECORDS = 500


def _get_employee(employee_id):
    employee = db.session.get(Employee, employee_id)
    if not employee:
        raise NotFoundError('Employee not found.')
    return employee


def _open_session(employee_id):
    return AttendanceRecord.query.filter(
        AttendanceRecord.employee_id == employee_id,
        AttendanceRecord.time_out.is_(None)
    ).order_by(AttendanceRecord.time_in.desc()).first()


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Failed to %s', action)
        raise


# --- Clock In / Out ---

@bp.route('/clock-in', methods=['POST'])
def clock_in():
    form = require_valid(ClockEventForm())
    employee = _get_employee(form.employee_id.data)

    if _open_session(employee.id):
        raise AttendanceStateError('Already clocked in.')

    now = form.timestamp.data or utcnow()
    local_now = to_wall_clock(now, current_app.config['PAYROLL_TIMEZONE'])
    record = AttendanceRecord(
        employee_id=employee.id,
        work_date=local_now.date(),
        time_in=now,
        status='clocked_in',
        total_break_minutes=0,
        notes=form.notes.data
    )
    db.session.add(record)
    _commit('clock in')

    current_app.logger.info('Employee %s clocked in at %s', employee.employee_id_number, now)
    return jsonify(record.to_dict()), 201


@bp.route('/clock-out', methods=['POST'])
def clock_out():
    form = require_valid(ClockEventForm())
    employee = _get_employee(form.employee_id.data)

    record = _open_session(employee.id)
    if not record:
        raise AttendanceStateError('Not clocked in.')
    if record.active_break:
        raise AttendanceStateError('Please end your break before clocking out.')

    now = form.timestamp.data or utcnow()
    if now <= record.time_in:
        raise AttendanceStateError('Clock-out time must be after clock-in time.')

    def report(rec, message):
        current_app.logger.warning('Attendance #%s: %s', rec.id, message)

    record.time_out = now
    record.total_break_minutes = total_break_minutes(record.breaks)
    record.total_work_minutes = worked_minutes(record, report=report)
    record.overtime_minutes = max(0, record.total_work_minutes - current_app.config['PAYROLL_STANDARD_SHIFT_MINUTES'])
    record.status = 'clocked_out'
    if form.notes.data:
        record.notes = form.notes.data
    _commit('clock out')

    current_app.logger.info('Employee %s clocked out at %s (%s minutes worked)',
                            employee.employee_id_number, now, record.total_work_minutes)
    return jsonify(record.to_dict())


# --- Breaks ---

@bp.route('/break-start', methods=['POST'])
def break_start():
    form = require_valid(BreakStartForm())
    employee = _get_employee(form.employee_id.data)

    record = _open_session(employee.id)
    if not record:
        raise AttendanceStateError('Must be clocked in to take a break.')
    if record.active_break:
        raise AttendanceStateError('Already on break.')

    now = form.timestamp.data or utcnow()
    if now < record.time_in:
        raise AttendanceStateError('Break cannot start before clock-in.')

    brk = BreakInterval(break_start=now, break_type=form.break_type.data, notes=form.notes.data)
    record.breaks.append(brk)
    record.status = 'on_break'
    _commit('start break')

    return jsonify(record.to_dict()), 201


@bp.route('/break-end', methods=['POST'])
def break_end():
    form = require_valid(ClockEventForm())
    employee = _get_employee(form.employee_id.data)

    record = _open_session(employee.id)
    brk = record.active_break if record else None
    if not brk:
        raise AttendanceStateError('No active break found.')

    now = form.timestamp.data or utcnow()
    if now < brk.break_start:
        raise AttendanceStateError('Break cannot end before it starts.')

    brk.break_end = now
    brk.break_minutes = int((now - brk.break_start).total_seconds() // 60)
    record.total_break_minutes = (record.total_break_minutes or 0) + brk.break_minutes
    record.status = 'clocked_in'
    _commit('end break')

    return jsonify(record.to_dict())


# --- History ---

@bp.route('/records')
def list_records():
    employee_id = request.args.get('employee_id', type=int)
    if employee_id is None:
        raise PortalError('employee_id is required.')
    _get_employee(employee_id)

    records = AttendanceRecord.query.filter_by(employee_id=employee_id)\
        .order_by(AttendanceRecord.time_in.desc())\
        .limit(min(request.args.get('limit', 50, type=int), MAX_RECORDS))\
        .all()
    return jsonify([record.to_dict() for record in records])
