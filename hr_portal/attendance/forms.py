# hr_portal/attendance/forms.py

from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, DateTimeField, IntegerField
from wtforms.validators import DataRequired, Optional, Length, NumberRange

BREAK_TYPES = [
    ('regular', 'Regular Break'),
    ('meal', 'Meal Break'),
    ('lunch', 'Lunch'),
]


class ClockEventForm(FlaskForm):
    """Clock-in / clock-out / break-end request body."""
    employee_id = IntegerField('Employee', validators=[DataRequired(), NumberRange(min=1)])
    # Omitted for live clock events; HR sets it for manual entries (UTC)
    timestamp = DateTimeField('Date and Time', format='%Y-%m-%d %H:%M:%S', validators=[Optional()])
    notes = StringField('Notes', validators=[Optional(), Length(max=500)])


class BreakStartForm(ClockEventForm):
    """Break-start request body."""
    break_type = SelectField('Break Type', choices=BREAK_TYPES, default='regular')
