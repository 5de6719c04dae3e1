"""
Calendar helpers shared by the protocol resolver and the slot generator.

All arithmetic works on year/month/day components through pendulum's
``Date``, never on raw timestamps, so results are immune to DST shifts.
"""

from datetime import date, datetime
from typing import Optional, Union

import pendulum
from pendulum import Date

from .exceptions import InvalidDateError
from .models import WEEKDAY_NAMES

DateLike = Union[str, date, datetime]

FRENCH_WEEKDAYS = ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche")
FRENCH_MONTHS = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)


def to_date(value: DateLike) -> Date:
    """
    Normalize a date-like value to a ``pendulum.Date``.

    Strings must use the ``YYYY-MM-DD`` format.

    Raises:
        InvalidDateError: If the value cannot be read as a calendar date
    """
    # datetime is a date subclass; the time component is dropped
    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc
    raise InvalidDateError(f"Unsupported date value: {value!r}")


def to_date_string(value: DateLike) -> str:
    """Return the ISO ``YYYY-MM-DD`` form of a date-like value."""
    return to_date(value).to_date_string()


def add_days(value: DateLike, days: int) -> Date:
    """Add calendar days (negative values move backwards)."""
    return to_date(value).add(days=days)


def weekday_name(value: DateLike) -> str:
    """Lowercase English weekday name, e.g. ``"monday"``."""
    return WEEKDAY_NAMES[to_date(value).weekday()]


def time_to_minutes(value: Optional[str]) -> Optional[int]:
    """
    Convert an ``HH:MM`` string to minutes since midnight.

    Returns None for missing or malformed values.
    """
    if not value:
        return None

    parts = value.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        return None

    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None

    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded ``HH:MM`` string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_date_for_display(value: DateLike) -> str:
    """Long French form, e.g. ``lundi 1 janvier 2024``."""
    d = to_date(value)
    return f"{FRENCH_WEEKDAYS[d.weekday()]} {d.day} {FRENCH_MONTHS[d.month - 1]} {d.year}"


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count <= 1 else plural}"


def calculate_age(birth_date: Optional[DateLike], today: Optional[DateLike] = None) -> str:
    """
    Display age of an animal, in French.

    Animals younger than a month are shown in days, younger than a year in
    months, otherwise in years and remaining months.
    """
    if not birth_date:
        return "Âge inconnu"

    try:
        birth = to_date(birth_date)
    except InvalidDateError:
        return "Date invalide"

    reference = to_date(today) if today is not None else pendulum.today().date()
    if birth > reference:
        return "Date invalide"

    age = birth.diff(reference)
    years, months = age.years, age.months

    if years == 0:
        if months == 0:
            days = age.in_days()
            return _plural(days, "jour", "jours")
        return f"{months} mois"

    if months == 0:
        return _plural(years, "an", "ans")

    return f"{_plural(years, 'an', 'ans')} et {months} mois"


def calculate_age_in_years(birth_date: Optional[DateLike], today: Optional[DateLike] = None) -> int:
    """Whole years since birth; 0 for missing, invalid or future dates."""
    if not birth_date:
        return 0

    try:
        birth = to_date(birth_date)
    except InvalidDateError:
        return 0

    reference = to_date(today) if today is not None else pendulum.today().date()
    if birth > reference:
        return 0
    return birth.diff(reference).in_years()
