# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import datetime as dt
from collections.abc import Iterator
from dataclasses import dataclass, field

from fixed_rate_amortization.errors import InvalidParameterError
from fixed_rate_amortization.periods import PeriodType, add_periods

__version__ = "0.1.0"


# =============================================================================
# Period Calendar
# =============================================================================
#
# A calendar is the materialised sequence of due-dates for a period type:
#
#     date[0] = first_date
#     date[i] = date[i-1] + increment(period_type)
#
# Each date is derived from the previous one, not from first_date, so a
# monthly calendar starting Jan 31 runs Jan 31, Feb 28, Mar 28, ...
# =============================================================================

@dataclass(frozen=True)
class PeriodCalendar:
    """
    Immutable, ordered sequence of payment due-dates.

    Fields:
        period_type: Spacing between consecutive dates
        first_date: First due-date (date[0])
        count: Number of dates; must be 1 for ONETIME

    Derived:
        dates: Tuple of ``count`` dates in chronological order

    Two calendars are equal iff period_type, first_date, count and dates
    all match.
    """
    period_type: PeriodType
    first_date: dt.date
    count: int = 1
    dates: tuple[dt.date, ...] = field(init=False, repr=False)
    _positions: dict[dt.date, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate inputs and materialise the due-dates."""
        if self.period_type is None:
            raise InvalidParameterError("period_type must not be None")
        if not isinstance(self.period_type, PeriodType):
            raise InvalidParameterError(f"period_type must be a PeriodType, got {self.period_type!r}")
        if self.first_date is None:
            raise InvalidParameterError("first_date must not be None")
        if not isinstance(self.first_date, dt.date):
            raise InvalidParameterError(f"first_date must be a date, got {self.first_date!r}")
        if isinstance(self.first_date, dt.datetime):
            object.__setattr__(self, "first_date", self.first_date.date())
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise InvalidParameterError(f"count must be an integer, got {self.count!r}")
        if self.count <= 0:
            raise InvalidParameterError(f"count must be positive, got {self.count}")
        if self.period_type is PeriodType.ONETIME and self.count != 1:
            raise InvalidParameterError(f"count must be 1 for a ONETIME calendar, got {self.count}")

        dates = [self.first_date]
        for _ in range(self.count - 1):
            dates.append(add_periods(dates[-1], self.period_type))
        object.__setattr__(self, "dates", tuple(dates))
        object.__setattr__(self, "_positions", {d: i for i, d in enumerate(dates)})

    @classmethod
    def create(cls, period_type: PeriodType, first_date: dt.date, count: int = 1) -> PeriodCalendar:
        """Build a calendar of ``count`` dates starting at ``first_date``."""
        return cls(period_type, first_date, count)

    @classmethod
    def for_years(cls, period_type: PeriodType, first_date: dt.date, years: int) -> PeriodCalendar:
        """Build a calendar covering ``years`` years of ``period_type`` payments."""
        return cls(period_type, first_date, count_from_years(period_type, years))

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def last_date(self) -> dt.date:
        """Final due-date."""
        return self.dates[-1]

    def index(self, day: dt.date) -> int:
        """Zero-based position of a due-date; raises KeyError if absent."""
        return self._positions[day]

    def __contains__(self, day: object) -> bool:
        return day in self._positions

    def __iter__(self) -> Iterator[dt.date]:
        return iter(self.dates)

    def __len__(self) -> int:
        return self.count

    def __getitem__(self, position: int) -> dt.date:
        return self.dates[position]

    # -------------------------------------------------------------------------
    # Copy-on-write transformations
    # -------------------------------------------------------------------------

    def with_period(self, period_type: PeriodType) -> PeriodCalendar:
        """New calendar with a different period type."""
        return PeriodCalendar(period_type, self.first_date, self.count)

    def with_first_date(self, first_date: dt.date) -> PeriodCalendar:
        """New calendar starting on a different date."""
        return PeriodCalendar(self.period_type, first_date, self.count)

    def with_count(self, count: int) -> PeriodCalendar:
        """New calendar with a different number of dates."""
        return PeriodCalendar(self.period_type, self.first_date, count)


# =============================================================================
# Calendar Helpers
# =============================================================================

def first_due_date(period_type: PeriodType, start_date: dt.date) -> dt.date:
    """
    First payment due-date for a mortgage that starts on ``start_date``.

    The first payment falls one period after the start date; a ONETIME
    period has no increment and returns the start date.

    Raises:
        InvalidParameterError: If period_type or start_date is None
    """
    if period_type is None:
        raise InvalidParameterError("period_type must not be None")
    if start_date is None:
        raise InvalidParameterError("start_date must not be None")
    return add_periods(start_date, period_type)


def count_from_years(period_type: PeriodType, years: int) -> int:
    """
    Number of due-dates in ``years`` years of a period type.

        YEARLY                   years * 1
        MONTHLY                  years * 12
        WEEKLY, RAPID_WEEKLY     years * 52
        BIWEEKLY, RAPID_BIWEEKLY years * 26
        anything else            1

    Raises:
        InvalidParameterError: If period_type is None or years is not positive
    """
    if period_type is None:
        raise InvalidParameterError("period_type must not be None")
    if years <= 0:
        raise InvalidParameterError(f"years must be positive, got {years}")
    if period_type in (
        PeriodType.YEARLY,
        PeriodType.MONTHLY,
        PeriodType.WEEKLY,
        PeriodType.RAPID_WEEKLY,
        PeriodType.BIWEEKLY,
        PeriodType.RAPID_BIWEEKLY,
    ):
        return years * period_type.payments_per_year
    return 1


def mortgage_calendar(period_type: PeriodType, start_date: dt.date, years: int) -> PeriodCalendar:
    """
    Due-date calendar for a mortgage starting on ``start_date``.

    The first due-date is one period after the start date and the calendar
    holds ``count_from_years(period_type, years)`` dates.
    """
    return PeriodCalendar.for_years(period_type, first_due_date(period_type, start_date), years)
