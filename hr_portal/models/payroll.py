# hr_portal/models/payroll.py

from hr_portal import db
from hr_portal.utils import utcnow


class Employee(db.Model):
    __tablename__ = 'employee'
    id = db.Column(db.Integer, primary_key=True)
    employee_id_number = db.Column(db.String(20), index=True, unique=True)
    first_name = db.Column(db.String(64), nullable=False)
    last_name = db.Column(db.String(64), nullable=False)
    position = db.Column(db.String(64))
    hourly_rate = db.Column(db.Integer, nullable=False, default=0)  # centavos per hour
    status = db.Column(db.String(20), default='Active')

    attendance_records = db.relationship('AttendanceRecord', back_populates='employee', lazy='dynamic')
    payslips = db.relationship('Payslip', back_populates='employee', lazy='dynamic')

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'

    def __repr__(self):
        return f'<Employee {self.employee_id_number}>'


class AttendanceRecord(db.Model):
    __tablename__ = 'attendance'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employee.id'), nullable=False, index=True)
    work_date = db.Column(db.Date, nullable=False, index=True)
    time_in = db.Column(db.DateTime, nullable=False)
    time_out = db.Column(db.DateTime)
    status = db.Column(db.String(20), nullable=False, default='clocked_in')  # clocked_in, on_break, clocked_out

    total_break_minutes = db.Column(db.Integer, nullable=False, default=0)
    total_work_minutes = db.Column(db.Integer)
    overtime_minutes = db.Column(db.Integer, default=0)
    notes = db.Column(db.Text)

    employee = db.relationship('Employee', back_populates='attendance_records')
    breaks = db.relationship('BreakInterval', back_populates='attendance', lazy='select',
                             cascade='all, delete-orphan', order_by='BreakInterval.break_start')

    @property
    def active_break(self):
        for brk in self.breaks:
            if brk.break_end is None:
                return brk
        return None

    def to_dict(self):
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'work_date': self.work_date.isoformat(),
            'time_in': self.time_in.isoformat(),
            'time_out': self.time_out.isoformat() if self.time_out else None,
            'status': self.status,
            'total_break_minutes': self.total_break_minutes,
            'total_work_minutes': self.total_work_minutes,
            'overtime_minutes': self.overtime_minutes,
            'breaks': [brk.to_dict() for brk in self.breaks],
        }

    def __repr__(self):
        return f'<Attendance {self.work_date} for employee {self.employee_id}>'


class BreakInterval(db.Model):
    __tablename__ = 'attendance_break'

    id = db.Column(db.Integer, primary_key=True)
    attendance_id = db.Column(db.Integer, db.ForeignKey('attendance.id'), nullable=False, index=True)
    break_start = db.Column(db.DateTime, nullable=False)
    break_end = db.Column(db.DateTime)
    break_minutes = db.Column(db.Integer)
    break_type = db.Column(db.String(20), default='regular')
    notes = db.Column(db.Text)

    attendance = db.relationship('AttendanceRecord', back_populates='breaks')

    def to_dict(self):
        return {
            'id': self.id,
            'break_start': self.break_start.isoformat(),
            'break_end': self.break_end.isoformat() if self.break_end else None,
            'break_minutes': self.break_minutes,
            'break_type': self.break_type,
        }

    def __repr__(self):
        return f'<Break {self.break_type} at {self.break_start}>'


class Holiday(db.Model):
    __tablename__ = 'holiday'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    type = db.Column(db.String(20), nullable=False, default='regular')  # regular, special
    pay_rate_multiplier = db.Column(db.Integer, default=100)  # percent
    description = db.Column(db.Text)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'date': self.date.isoformat(),
            'type': self.type,
            'pay_rate_multiplier': self.pay_rate_multiplier,
            'description': self.description,
        }

    def __repr__(self):
        return f'<Holiday {self.name} on {self.date}>'


class Payslip(db.Model):
    __tablename__ = 'payslip'
    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employee.id'), nullable=False)
    employee = db.relationship('Employee', back_populates='payslips')

    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.Integer, nullable=False)
    period = db.Column(db.Integer, nullable=False, default=1)  # 1 (1st-15th) or 2 (16th-End)

    # T&A Metrics (minutes)
    regular_minutes = db.Column(db.Integer, default=0)
    overtime_minutes = db.Column(db.Integer, default=0)
    night_diff_minutes = db.Column(db.Integer, default=0)
    regular_holiday_minutes = db.Column(db.Integer, default=0)
    regular_holiday_ot_minutes = db.Column(db.Integer, default=0)
    special_holiday_minutes = db.Column(db.Integer, default=0)
    special_holiday_ot_minutes = db.Column(db.Integer, default=0)

    # Earnings (centavos)
    basic_pay = db.Column(db.Integer, nullable=False)
    overtime_pay = db.Column(db.Integer, default=0)
    night_diff_pay = db.Column(db.Integer, default=0)
    holiday_pay = db.Column(db.Integer, default=0)
    allowances = db.Column(db.Integer, default=0)
    allowance_items = db.Column(db.JSON, default=list)  # [{name, amount}]

    # Deductions (centavos)
    sss_contribution = db.Column(db.Integer, default=0)
    philhealth_contribution = db.Column(db.Integer, default=0)
    pagibig_contribution = db.Column(db.Integer, default=0)
    withholding_tax = db.Column(db.Integer, default=0)

    gross_pay = db.Column(db.Integer, nullable=False)
    total_deductions = db.Column(db.Integer, nullable=False)
    net_pay = db.Column(db.Integer, nullable=False)

    payment_status = db.Column(db.String(20), default='draft')  # draft, finalized, paid
    generated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (db.UniqueConstraint('employee_id', 'year', 'month', 'period', name='_employee_pay_period_uc'),)

    @classmethod
    def from_result(cls, employee_id, pay_period, result):
        """Builds a row from a PayslipResult."""
        return cls(employee_id=employee_id, year=pay_period.year, month=pay_period.month,
                   period=pay_period.period, **result.as_dict())

    def to_dict(self):
        data = {column.name: getattr(self, column.name) for column in self.__table__.columns}
        data['generated_at'] = self.generated_at.isoformat() if self.generated_at else None
        return data

    def __repr__(self):
        return f'<Payslip {self.year}-{self.month:02d}/{self.period} for Employee ID {self.employee_id}>'


class AuditLog(db.Model):
    __tablename__ = 'audit_log'

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, default=utcnow, nullable=False)
    actor = db.Column(db.String(64), nullable=True)
    action = db.Column(db.String(100), nullable=False)
    details = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f"<AuditLog {self.action} by {self.actor} on {self.timestamp}>"


def log_admin_action(action, details, actor=None):
    """Records a critical administrative action in the AuditLog."""
    log = AuditLog(actor=actor, action=action, details=details)
    db.session.add(log)
    # Note: Commit is handled by the caller
