# hr_portal/payroll/service.py

from dataclasses import dataclass, field

from flask import current_app

from hr_portal import db
from hr_portal.attendance.calculator import ClockSession
from hr_portal.models.payroll import AttendanceRecord, Employee, Holiday, Payslip, log_admin_action
from .calculator import compute_payslip


@dataclass
class RunSummary:
    pay_period: object
    created: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
    anomalies: list = field(default_factory=list)

    def to_dict(self):
        return {
            'period': self.pay_period.as_dict(),
            'created': [payslip.to_dict() for payslip in self.created],
            'skipped': [{'employee_id': emp_id, 'reason': reason} for emp_id, reason in self.skipped],
            'anomalies': self.anomalies,
        }


def load_holidays(pay_period):
    """Snapshot of the period's holidays in insertion order (first match wins on duplicates)."""
    return Holiday.query.filter(
        Holiday.date >= pay_period.start_date,
        Holiday.date <= pay_period.end_date
    ).order_by(Holiday.id.asc()).all()


def load_attendance(employee, pay_period):
    """Closed attendance sessions whose work date falls in the period, as ClockSession snapshots."""
    records = AttendanceRecord.query.filter(
        AttendanceRecord.employee_id == employee.id,
        AttendanceRecord.work_date >= pay_period.start_date,
        AttendanceRecord.work_date <= pay_period.end_date,
        AttendanceRecord.time_out.isnot(None)
    ).order_by(AttendanceRecord.time_in.asc()).all()
    return [ClockSession.from_record(record) for record in records]


def generate_payslips(pay_period, policy, actor=None):
    """Creates one payslip per active employee for the period.

    Employees that already have a payslip for the period, or have no valid
    hourly rate, are skipped. The run is a single transaction.
    """
    summary = RunSummary(pay_period)

    def report(record, message):
        summary.anomalies.append(f'Attendance #{record.id} ({record.work_date}): {message}')

    holidays = load_holidays(pay_period)
    active_employees = Employee.query.filter_by(status='Active').order_by(Employee.id).all()

    try:
        for emp in active_employees:
            if not emp.hourly_rate or emp.hourly_rate <= 0:
                summary.skipped.append((emp.id, 'invalid hourly rate'))
                continue

            existing = Payslip.query.filter_by(
                employee_id=emp.id, year=pay_period.year,
                month=pay_period.month, period=pay_period.period
            ).first()
            if existing:
                summary.skipped.append((emp.id, 'payslip already exists'))
                continue

            records = load_attendance(emp, pay_period)
            result = compute_payslip(emp.hourly_rate, records, holidays, policy=policy, report=report)

            payslip = Payslip.from_result(emp.id, pay_period, result)
            db.session.add(payslip)
            summary.created.append(payslip)

        log_admin_action(
            action='GENERATE_PAYSLIPS',
            details=f"Period {pay_period.label}: {len(summary.created)} created, "
                    f"{len(summary.skipped)} skipped, {len(summary.anomalies)} attendance anomalies.",
            actor=actor
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Payroll run failed for %s', pay_period.label)
        raise

    for message in summary.anomalies:
        current_app.logger.warning(message)
    current_app.logger.info('Payroll run %s: %d payslips created, %d skipped',
                            pay_period.label, len(summary.created), len(summary.skipped))
    return summary
