# hr_portal/utils.py

from datetime import datetime, date, timezone
import pytz


def utcnow():
    """Current UTC time as a naive datetime (the storage convention).

    Wrapped so tests can patch the clock.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def resolve_timezone(tz):
    if tz is None or hasattr(tz, 'utcoffset'):
        return tz
    if tz == 'UTC':
        return pytz.UTC
    return pytz.timezone(tz)


def to_wall_clock(dt, tz=None):
    """Returns the naive wall-clock time of ``dt`` in ``tz``.

    Naive datetimes are assumed to be UTC when a zone is requested. Without a
    zone the datetime's own wall clock is kept.
    """
    if tz is None:
        return dt.replace(tzinfo=None)
    local_tz = resolve_timezone(tz)
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt.astimezone(local_tz).replace(tzinfo=None)


def as_date(value):
    """Drops the time of day from a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f'Expected a date or datetime, got {type(value).__name__}')


def require_valid(form):
    """Validates a submitted form, raising ValidationError with the field errors."""
    from hr_portal.exceptions import ValidationError

    if not form.validate_on_submit():
        raise ValidationError(form.errors)
    return form
