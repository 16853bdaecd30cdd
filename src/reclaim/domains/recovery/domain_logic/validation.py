"""Input validation and coercion for the recovery metrics engine.

Every helper raises ``ValidationError`` naming the offending field instead of
letting a malformed value turn into a silent zero or NaN downstream.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Mapping

from reclaim.domains.recovery.domain_logic.recovery_models import (
    SubstanceProfile,
    SubstanceType,
)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ValidationError(ValueError):
    """Raised when an engine input violates its contract."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def as_dict(self) -> dict[str, str]:
        return {"status": "error", "field": self.field, "message": self.message}


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def finite_number(value: Any, field: str) -> float:
    """Coerce to a finite float."""
    if isinstance(value, bool):
        raise ValidationError(field, f"expected a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field, f"expected a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValidationError(field, f"must be finite, got {value!r}")
    return number


def non_negative_number(value: Any, field: str) -> float:
    number = finite_number(value, field)
    if number < 0:
        raise ValidationError(field, f"must be >= 0, got {value!r}")
    return number


def positive_number(value: Any, field: str) -> float:
    number = finite_number(value, field)
    if number <= 0:
        raise ValidationError(field, f"must be > 0, got {value!r}")
    return number


def whole_number(value: Any, field: str) -> int:
    """Coerce to an int, rejecting fractional values."""
    number = finite_number(value, field)
    if not number.is_integer():
        raise ValidationError(field, f"expected a whole number, got {value!r}")
    return int(number)


def bounded_int(value: Any, field: str, lo: int, hi: int) -> int:
    number = whole_number(value, field)
    if not lo <= number <= hi:
        raise ValidationError(field, f"must be between {lo} and {hi}, got {value!r}")
    return number


def round_half_away(value: float, places: int = 2) -> float:
    """Round to ``places`` decimals, halves away from zero.

    Uses the shortest repr of the float so that e.g. 2.675 rounds to 2.68.
    Magnitudes beyond the default 28-digit context keep full precision.
    """
    if not math.isfinite(value):
        return value
    exact = Decimal(repr(value))
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = max(28, exact.adjusted() + places + 2)
        rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


# ---------------------------------------------------------------------------
# Dates and time
# ---------------------------------------------------------------------------

def parse_calendar_date(value: date | str, field: str) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a ``date`` through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise ValidationError(field, f"expected a YYYY-MM-DD date, got {value!r}")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(field, f"not a valid calendar date: {value!r}") from None


def coerce_now(value: datetime | date | str, field: str = "now") -> datetime:
    """Normalize a caller-supplied current time to an aware UTC datetime.

    Naive datetimes are taken as UTC; bare dates mean midnight UTC.
    """
    if isinstance(value, str):
        text = value.strip()
        try:
            if _DATE_RE.match(text):
                value = date.fromisoformat(text)
            else:
                value = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(field, f"expected an ISO 8601 timestamp, got {value!r}") from None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise ValidationError(field, f"expected a datetime, date or ISO string, got {value!r}")


def elapsed_days(reference: date, now: datetime) -> int:
    """Whole days from midnight UTC of ``reference`` to ``now``, floored.

    Negative when ``reference`` lies after ``now``.
    """
    start = datetime.combine(reference, time.min, tzinfo=timezone.utc)
    return (now - start) // timedelta(days=1)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

def parse_substance_type(value: SubstanceType | str, field: str = "substance_type") -> SubstanceType:
    if isinstance(value, SubstanceType):
        return value
    text = str(value).strip().lower()
    for member in SubstanceType:
        if text in (member.value, member.name.lower()):
            return member
    allowed = ", ".join(m.value for m in SubstanceType)
    raise ValidationError(field, f"expected one of {allowed}, got {value!r}")


# ---------------------------------------------------------------------------
# Profile records
# ---------------------------------------------------------------------------

_RECORD_KEYS = {
    "substance_type": ("substance_type", "substanceType"),
    "unit": ("unit",),
    "unit_price": ("unit_price", "unitPrice"),
    "currency": ("currency",),
    "abstinence_start_date": ("abstinence_start_date", "abstinenceStartDate"),
    "prior_daily_consumption": ("prior_daily_consumption", "priorDailyConsumption"),
    "conversion_factor": ("conversion_factor", "conversionFactor"),
}


def _lookup(record: Mapping[str, Any], field: str) -> Any:
    for key in _RECORD_KEYS[field]:
        if key in record and record[key] is not None:
            return record[key]
    return None


def _required_text(record: Mapping[str, Any], field: str, max_length: int | None = None) -> str:
    value = _lookup(record, field)
    if value is None or not str(value).strip():
        raise ValidationError(field, "is required")
    text = str(value).strip()
    if max_length is not None and len(text) > max_length:
        raise ValidationError(field, f"must be at most {max_length} characters, got {text!r}")
    return text


def _decimal_field(value: Any, field: str) -> float:
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation:
            raise ValidationError(field, f"expected a decimal string, got {value!r}") from None
    return non_negative_number(value, field)


def profile_from_record(record: Mapping[str, Any]) -> SubstanceProfile:
    """Validate a configuration record and build a ``SubstanceProfile``."""
    substance_raw = _lookup(record, "substance_type")
    if substance_raw is None:
        raise ValidationError("substance_type", "is required")

    price_raw = _lookup(record, "unit_price")
    if price_raw is None or (isinstance(price_raw, str) and not price_raw.strip()):
        raise ValidationError("unit_price", "is required")

    start_raw = _lookup(record, "abstinence_start_date")
    if start_raw is None:
        raise ValidationError("abstinence_start_date", "is required")

    consumption_raw = _lookup(record, "prior_daily_consumption")
    factor_raw = _lookup(record, "conversion_factor")

    return SubstanceProfile(
        substance_type=parse_substance_type(substance_raw),
        unit=_required_text(record, "unit"),
        unit_price=_decimal_field(price_raw, "unit_price"),
        currency=_required_text(record, "currency", max_length=3),
        abstinence_start_date=parse_calendar_date(start_raw, "abstinence_start_date"),
        prior_daily_consumption=(
            1.0 if consumption_raw is None
            else _decimal_field(consumption_raw, "prior_daily_consumption")
        ),
        conversion_factor=(
            1.0 if factor_raw is None
            else positive_number(factor_raw, "conversion_factor")
        ),
    )
