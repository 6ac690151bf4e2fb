"""Conversions for date, datetime, time and timestamp columns."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

from dateutil import parser as date_parser

from ..exceptions import FieldError
from .core import is_numeric, to_int, to_text

TIME_PATTERN = r"([0-2][0-9]):([0-5][0-9]):([0-5][0-9])"
DATE_PATTERN = r"([1-9][0-9]{3})-([0-1][0-9])-([0-3][0-9])"

_TIME_RE = re.compile(TIME_PATTERN)
_DATE_RE = re.compile(DATE_PATTERN)
_DATETIME_RE = re.compile(DATE_PATTERN + " " + TIME_PATTERN)

# Signed 32-bit epoch range
TIMESTAMP_MIN = 0
TIMESTAMP_MAX = 2147483647


def _first_of_month(year: int, month: int) -> date:
    # Months outside 1-12 roll into neighbouring years (00 -> December before)
    years, month_index = divmod(month - 1, 12)
    return date(year + years, month_index + 1, 1)


def _format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def _format_datetime(value: datetime) -> str:
    return (
        f"{_format_date(value)} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )


def convert_date(value: Any) -> str:
    """
    Validate a ``YYYY-MM-DD`` string and normalise calendar overflow.

    Examples
    --------
        >>> convert_date("2000-02-31")
        '2000-03-02'
    """
    match = _DATE_RE.fullmatch(to_text(value))
    if match is None:
        raise FieldError("Invalid date value")

    year, month, day = (int(part) for part in match.groups())
    try:
        normalized = _first_of_month(year, month) + timedelta(days=day - 1)
    except (ValueError, OverflowError) as e:
        raise FieldError("Invalid date value") from e

    return _format_date(normalized)


def convert_datetime(value: Any) -> str:
    """
    Validate a ``YYYY-MM-DD HH:MM:SS`` string and normalise overflow.

    Hours from 24 to 29 pass the pattern and roll into the next day.
    """
    match = _DATETIME_RE.fullmatch(to_text(value))
    if match is None:
        raise FieldError("Invalid datetime value")

    year, month, day, hour, minute, second = (int(part) for part in match.groups())
    try:
        first = _first_of_month(year, month)
        normalized = datetime(first.year, first.month, 1) + timedelta(
            days=day - 1, hours=hour, minutes=minute, seconds=second
        )
    except (ValueError, OverflowError) as e:
        raise FieldError("Invalid datetime value") from e

    return _format_datetime(normalized)


def convert_time(value: Any) -> str:
    """Validate a ``HH:MM:SS`` string with an hour between 00 and 23."""
    text = to_text(value)
    match = _TIME_RE.fullmatch(text)
    if match is None:
        raise FieldError("Invalid time value")

    if int(match.group(1)) > 23:
        raise FieldError("Invalid time value")

    return text


def convert_timestamp(value: Any) -> str:
    """
    Render epoch seconds or a free-form date string as a UTC timestamp.

    Numeric input is read as seconds since the epoch. Anything else goes
    through `dateutil.parser.parse`; naive results are taken as UTC. The
    instant must fit the signed 32-bit epoch range.

    Examples
    --------
        >>> convert_timestamp("10")
        '1970-01-01 00:00:10'
        >>> convert_timestamp("2000-01-01")
        '2000-01-01 00:00:00'
    """
    if is_numeric(value):
        seconds = to_int(value)
    else:
        try:
            parsed = date_parser.parse(to_text(value))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            seconds = int(parsed.timestamp())
        except (ValueError, OverflowError) as e:
            raise FieldError("Invalid timestamp value") from e

    if seconds < TIMESTAMP_MIN or seconds > TIMESTAMP_MAX:
        raise FieldError("Invalid timestamp value")

    return _format_datetime(datetime.fromtimestamp(seconds, tz=timezone.utc))
