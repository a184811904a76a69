# run.py

import os
from hr_portal import create_app, db
from hr_portal.models.payroll import Employee, AttendanceRecord, BreakInterval, Holiday, Payslip, AuditLog


app = create_app(os.environ.get('FLASK_ENV', 'default'))


@app.shell_context_processor
def make_shell_context():
    """Adds database instance and models to the Flask shell."""
    return dict(db=db, Employee=Employee, AttendanceRecord=AttendanceRecord, BreakInterval=BreakInterval,
                Holiday=Holiday, Payslip=Payslip, AuditLog=AuditLog)


if __name__ == '__main__':
    app.run()
