"""
Billing status calculator: company access blocking.

A company is blocked until it pays at least once. After that:
    permanent → never blocked again
    monthly   → blocked from the start of (last payment + 1 month)
    yearly    → blocked from the start of (last payment + 1 year)

All day boundaries are computed in the company's own timezone (resolved
from its country code), never in the server's local time.

Usage:
    from core.billing import compute_billing_status

    status = compute_billing_status("monthly", date(2024, 1, 31), "AR", now)
    status.next_payment_date   # date(2024, 2, 29)
    status.is_blocked
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Union
from zoneinfo import ZoneInfo

from core.timezones import get_zone


class BillingFrequency(str, Enum):
    """How often a company has to pay to keep access."""
    monthly = "monthly"
    yearly = "yearly"
    permanent = "permanent"


# Months added per billing cycle
_PERIOD_MONTHS = {
    BillingFrequency.monthly: 1,
    BillingFrequency.yearly: 12,
}


class InvalidPaymentDateError(ValueError):
    """Raised when a payment date is not a valid calendar date."""


@dataclass(frozen=True)
class BillingStatus:
    """Derived billing state of a company. Never persisted."""

    last_payment_date: Optional[date]
    next_payment_date: Optional[date]
    is_blocked: bool

    def to_dict(self) -> dict:
        return {
            "last_payment_date": self.last_payment_date.isoformat() if self.last_payment_date else None,
            "next_payment_date": self.next_payment_date.isoformat() if self.next_payment_date else None,
            "is_blocked": self.is_blocked,
        }


# ==================== CALENDAR HELPERS ====================

def parse_payment_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    """
    Normalize a payment date to a plain `date`.

    Accepts date, datetime (time part dropped), or a full ISO date or
    datetime string. Trailing characters are never ignored.
    Raises InvalidPaymentDateError on anything that is not a real calendar date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError as e:
            raise InvalidPaymentDateError(f"Invalid payment date: {value!r}") from e
    raise InvalidPaymentDateError(f"Invalid payment date type: {type(value).__name__}")


def add_months(d: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def add_billing_period(d: date, frequency: BillingFrequency) -> date:
    return add_months(d, _PERIOD_MONTHS[frequency])


def start_of_local_day(d: date, zone: ZoneInfo) -> datetime:
    """
    First instant of calendar day `d` in `zone`, as an aware UTC datetime.

    Uses the zone's real offset on that date. When midnight falls inside a
    DST gap, fold=0 maps it onto the first existing local instant.
    """
    local_midnight = datetime(d.year, d.month, d.day, tzinfo=zone)
    return local_midnight.astimezone(timezone.utc)


def _as_utc(now: datetime) -> datetime:
    # Naive "now" is taken as UTC
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_today(country_code: Optional[str], now: Optional[datetime] = None) -> date:
    """Today's date as seen in the company's timezone."""
    now = _as_utc(now or utc_now())
    return now.astimezone(get_zone(country_code)).date()


def _coerce_frequency(frequency) -> Optional[BillingFrequency]:
    if isinstance(frequency, BillingFrequency):
        return frequency
    try:
        return BillingFrequency(frequency)
    except ValueError:
        return None


# ==================== CALCULATOR ====================

def compute_billing_status(
    frequency: Union[BillingFrequency, str, None],
    last_payment_date: Union[date, datetime, str, None],
    country_code: Optional[str],
    now: datetime,
) -> BillingStatus:
    """
    Compute a company's billing status at instant `now`.

    Pure function: no I/O, no caching. The result only depends on the four
    arguments, so it must be recomputed on every read.
    """
    last = parse_payment_date(last_payment_date)

    # Never paid → blocked, whatever the frequency
    if last is None:
        return BillingStatus(last_payment_date=None, next_payment_date=None, is_blocked=True)

    freq = _coerce_frequency(frequency)

    if freq is BillingFrequency.permanent:
        return BillingStatus(last_payment_date=last, next_payment_date=None, is_blocked=False)

    if freq not in _PERIOD_MONTHS:
        # Unknown frequency: fail towards blocking
        return BillingStatus(last_payment_date=last, next_payment_date=None, is_blocked=True)

    zone = get_zone(country_code)
    next_date = add_billing_period(last, freq)

    blocking_instant = start_of_local_day(next_date, zone)

    return BillingStatus(
        last_payment_date=last,
        next_payment_date=next_date,
        is_blocked=_as_utc(now) >= blocking_instant,
    )


def days_until_due(
    status: BillingStatus,
    country_code: Optional[str],
    now: datetime,
) -> Optional[int]:
    """
    Company-local days left until next_payment_date.
    0 = due today, negative = overdue, None = nothing due.
    """
    if status.next_payment_date is None:
        return None
    return (status.next_payment_date - local_today(country_code, now)).days
