# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
"""
Payment period types and the extra-payment compatibility matrix.

A PeriodType carries two facts: the calendar increment between consecutive
due-dates and the number of payments made per year. Only five of the nine
types are valid mortgage frequencies; the YEARLY* and ONETIME types exist to
describe how often an extra principal payment recurs.

    Type                 Increment    Payments/year   Mortgage?
    -------------------  -----------  -------------   ---------
    WEEKLY               1 week       52              yes
    RAPID_WEEKLY         1 week       52              yes
    BIWEEKLY             2 weeks      26              yes
    RAPID_BIWEEKLY       2 weeks      26              yes
    MONTHLY              1 month      12              yes
    YEARLY               1 year       1               no
    YEARLY_FOR_WEEKLY    52 weeks     1               no
    YEARLY_FOR_BIWEEKLY  26 weeks     1               no
    ONETIME              none         0               no

YEARLY_FOR_BIWEEKLY steps 26 weeks, not 52, so a biweekly extra payment
recurs on a biweekly due-date. The value is kept as published.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum

from dateutil.relativedelta import relativedelta

__version__ = "0.1.0"


# =============================================================================
# ENUMS
# =============================================================================

class PeriodType(Enum):
    """Payment frequency or extra-payment recurrence."""
    WEEKLY = "WEEKLY"
    RAPID_WEEKLY = "RAPID_WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    RAPID_BIWEEKLY = "RAPID_BIWEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    YEARLY_FOR_WEEKLY = "YEARLY_FOR_WEEKLY"
    YEARLY_FOR_BIWEEKLY = "YEARLY_FOR_BIWEEKLY"
    ONETIME = "ONETIME"

    @property
    def increment(self) -> relativedelta | None:
        """Calendar distance between due-dates, or None for ONETIME."""
        return _INCREMENTS[self]

    @property
    def payments_per_year(self) -> int:
        """Number of payments in a year (0 for ONETIME)."""
        return _PAYMENTS_PER_YEAR[self]

    @property
    def is_mortgage_period(self) -> bool:
        """True if this type is a valid mortgage payment frequency."""
        return self in MORTGAGE_PERIODS


_INCREMENTS: dict[PeriodType, relativedelta | None] = {
    PeriodType.WEEKLY: relativedelta(weeks=1),
    PeriodType.RAPID_WEEKLY: relativedelta(weeks=1),
    PeriodType.BIWEEKLY: relativedelta(weeks=2),
    PeriodType.RAPID_BIWEEKLY: relativedelta(weeks=2),
    PeriodType.MONTHLY: relativedelta(months=1),
    PeriodType.YEARLY: relativedelta(years=1),
    PeriodType.YEARLY_FOR_WEEKLY: relativedelta(weeks=52),
    PeriodType.YEARLY_FOR_BIWEEKLY: relativedelta(weeks=26),
    PeriodType.ONETIME: None,
}

_PAYMENTS_PER_YEAR: dict[PeriodType, int] = {
    PeriodType.WEEKLY: 52,
    PeriodType.RAPID_WEEKLY: 52,
    PeriodType.BIWEEKLY: 26,
    PeriodType.RAPID_BIWEEKLY: 26,
    PeriodType.MONTHLY: 12,
    PeriodType.YEARLY: 1,
    PeriodType.YEARLY_FOR_WEEKLY: 1,
    PeriodType.YEARLY_FOR_BIWEEKLY: 1,
    PeriodType.ONETIME: 0,
}

MORTGAGE_PERIODS: frozenset[PeriodType] = frozenset({
    PeriodType.WEEKLY,
    PeriodType.RAPID_WEEKLY,
    PeriodType.BIWEEKLY,
    PeriodType.RAPID_BIWEEKLY,
    PeriodType.MONTHLY,
})


# =============================================================================
# Extra-Payment Compatibility Matrix
# =============================================================================

_MONTHLY_EXTRAS = frozenset({PeriodType.MONTHLY, PeriodType.YEARLY, PeriodType.ONETIME})
_BIWEEKLY_EXTRAS = frozenset({
    PeriodType.BIWEEKLY,
    PeriodType.RAPID_BIWEEKLY,
    PeriodType.YEARLY_FOR_BIWEEKLY,
    PeriodType.ONETIME,
})
_WEEKLY_EXTRAS = frozenset({
    PeriodType.WEEKLY,
    PeriodType.RAPID_WEEKLY,
    PeriodType.YEARLY_FOR_WEEKLY,
    PeriodType.ONETIME,
})

EXTRA_PERIOD_COMPATIBILITY: dict[PeriodType, frozenset[PeriodType]] = {
    PeriodType.MONTHLY: _MONTHLY_EXTRAS,
    PeriodType.BIWEEKLY: _BIWEEKLY_EXTRAS,
    PeriodType.RAPID_BIWEEKLY: _BIWEEKLY_EXTRAS,
    PeriodType.WEEKLY: _WEEKLY_EXTRAS,
    PeriodType.RAPID_WEEKLY: _WEEKLY_EXTRAS,
}


def allowed_extra_periods(mortgage_period: PeriodType) -> frozenset[PeriodType]:
    """Extra-payment period types allowed for a mortgage period (empty if none)."""
    return EXTRA_PERIOD_COMPATIBILITY.get(mortgage_period, frozenset())


def is_compatible_extra_period(mortgage_period: PeriodType, extra_period: PeriodType) -> bool:
    """True if an extra payment recurring every extra_period fits the mortgage."""
    return extra_period in allowed_extra_periods(mortgage_period)


# =============================================================================
# Date Arithmetic
# =============================================================================

def add_periods(day: dt.date, period_type: PeriodType, n: int = 1) -> dt.date:
    """
    Advance a date by n increments of a period type.

    Month and year steps clamp to the last day of the target month
    (Jan 31 + 1 month = Feb 28, or Feb 29 in a leap year). ONETIME has no
    increment and returns the date unchanged.

    Args:
        day: Starting date
        period_type: Period whose increment is applied
        n: Number of increments (may be zero or negative)

    Returns:
        Shifted date
    """
    increment = period_type.increment
    if increment is None or n == 0:
        return day
    return day + increment * n
