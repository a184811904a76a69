# hr_portal/holidays/forms.py

from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, DateField, IntegerField
from wtforms.validators import DataRequired, Optional, Length, NumberRange


class HolidayForm(FlaskForm):
    """Form for adding a date to the holiday calendar."""
    date = DateField('Date', format='%Y-%m-%d', validators=[DataRequired()])
    name = StringField('Holiday Name', validators=[DataRequired(), Length(max=64)])
    type = SelectField('Holiday Type', choices=[
        ('regular', 'Regular Holiday'),
        ('special', 'Special (Non-Working) Holiday')
    ], default='regular')
    # Percent of the daily rate; defaults by type when omitted
    pay_rate_multiplier = IntegerField('Pay Rate (%)', validators=[Optional(), NumberRange(min=100, max=500)])
    description = StringField('Description', validators=[Optional(), Length(max=500)])
