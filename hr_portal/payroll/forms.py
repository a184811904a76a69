# hr_portal/payroll/forms.py

from flask_wtf import FlaskForm
from wtforms import DateField, StringField
from wtforms.validators import DataRequired, Optional, Length


class RunPayrollForm(FlaskForm):
    """Payroll run request: the pay period containing reference_date is processed."""
    reference_date = DateField('Reference Date', format='%Y-%m-%d', validators=[DataRequired()])
    actor = StringField('Requested By', validators=[Optional(), Length(max=64)])
