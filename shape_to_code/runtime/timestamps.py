"""
Timestamp wire formats.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from email.utils import format_datetime, parsedate_to_datetime
from enum import Enum

from .errors import DeserializationError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROS = 1_000_000


class TimestampFormat(str, Enum):
    """Closed set of timestamp encodings."""

    EPOCH_SECONDS = "epoch-seconds"
    DATE_TIME = "date-time"
    HTTP_DATE = "http-date"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_epoch_seconds(value: datetime) -> str:
    """
    Render a datetime as a JSON number of seconds since the epoch.

    The conversion goes through integer microseconds so that no precision
    is lost to binary floating point.
    """
    delta = _as_utc(value) - EPOCH
    micros = (delta.days * 86400 + delta.seconds) * _MICROS + delta.microseconds
    sign = "-" if micros < 0 else ""
    seconds, fraction = divmod(abs(micros), _MICROS)
    if fraction == 0:
        return f"{sign}{seconds}"
    return f"{sign}{seconds}.{fraction:06d}".rstrip("0")


def to_date_time(value: datetime) -> str:
    """Render a datetime as an RFC 3339 UTC string."""
    value = _as_utc(value)
    text = f"{value.year:04d}-{value.month:02d}-{value.day:02d}T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    if value.microsecond:
        text += f".{value.microsecond:06d}"
    return text + "Z"


def to_http_date(value: datetime) -> str:
    """Render a datetime as an IMF-fixdate (sub-second precision is dropped)."""
    return format_datetime(_as_utc(value).replace(microsecond=0), usegmt=True)


def format_timestamp(value: datetime, fmt: TimestampFormat | str) -> str:
    fmt = TimestampFormat(fmt)
    if fmt is TimestampFormat.EPOCH_SECONDS:
        return to_epoch_seconds(value)
    if fmt is TimestampFormat.DATE_TIME:
        return to_date_time(value)
    return to_http_date(value)


def parse_timestamp(value: object, fmt: TimestampFormat | str, path: str = "$") -> datetime:
    """
    Parse a wire timestamp.

    Args:
        value: A number (epoch seconds) or a string (date-time / http-date)
        fmt: The format the value is expected in
        path: JSON path used in error messages

    Returns:
        An aware UTC datetime

    Raises:
        DeserializationError: If the value does not match the format
    """
    fmt = TimestampFormat(fmt)
    if fmt is TimestampFormat.EPOCH_SECONDS:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise DeserializationError.unexpected_type("epoch seconds number", value, path)
        try:
            micros = int((Decimal(value) * _MICROS).to_integral_value())
            return EPOCH + timedelta(microseconds=micros)
        except (InvalidOperation, OverflowError, ValueError) as err:
            raise DeserializationError(f"Invalid epoch seconds value {value}", path) from err

    if not isinstance(value, str):
        raise DeserializationError.unexpected_type(f"{fmt.value} string", value, path)
    try:
        if fmt is TimestampFormat.DATE_TIME:
            parsed = datetime.fromisoformat(value)
        else:
            parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError) as err:
        raise DeserializationError(f"Invalid {fmt.value} timestamp {value!r}", path) from err
    return _as_utc(parsed)
