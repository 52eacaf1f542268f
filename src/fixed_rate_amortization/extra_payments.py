# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import datetime as dt
import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace

from fixed_rate_amortization.errors import (
    EmptyOperationError,
    IncompatiblePeriodError,
    InvalidParameterError,
    UnknownDateError,
)
from fixed_rate_amortization.logging import get_logger
from fixed_rate_amortization.payment_calendar import PeriodCalendar
from fixed_rate_amortization.periods import allowed_extra_periods

__version__ = "0.1.0"

logger = get_logger(__name__)


# =============================================================================
# Extra Principal Payments
# =============================================================================
#
# An ExtraPaymentSet is bound to the mortgage calendar it was validated
# against. Every date it holds is a due-date of that calendar and every
# amount is strictly positive, so get() returning 0.0 always means "no extra
# payment on that date".
#
# Every operation validates the whole batch before building the new set.
# A failure leaves no partially updated set behind.
# =============================================================================

@dataclass(frozen=True)
class ExtraPaymentSet(Mapping[dt.date, float]):
    """
    Immutable mapping of mortgage due-date to extra principal amount.

    Fields:
        mortgage_calendar: Calendar the dates are validated against
        entries: (date, amount) pairs in chronological order

    Behaves as a read-only Mapping[date, float]; iteration is chronological.
    """
    mortgage_calendar: PeriodCalendar
    entries: tuple[tuple[dt.date, float], ...] = ()
    _amounts: dict[dt.date, float] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate every entry against the mortgage calendar."""
        if not isinstance(self.mortgage_calendar, PeriodCalendar):
            raise InvalidParameterError(
                f"mortgage_calendar must be a PeriodCalendar, got {self.mortgage_calendar!r}"
            )
        if not self.mortgage_calendar.period_type.is_mortgage_period:
            raise InvalidParameterError(
                f"{self.mortgage_calendar.period_type.name} is not a mortgage payment period"
            )
        amounts: dict[dt.date, float] = {}
        for day, amount in self.entries:
            day = _as_date(day)
            if day in amounts:
                raise InvalidParameterError(f"duplicate extra payment date {day.isoformat()}")
            amounts[day] = _validate_amount(amount)
        self._check_dates(amounts)
        ordered = tuple(sorted(amounts.items()))
        object.__setattr__(self, "entries", ordered)
        object.__setattr__(self, "_amounts", dict(ordered))

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls, mortgage_calendar: PeriodCalendar) -> ExtraPaymentSet:
        """Set with no extra payments."""
        return cls(mortgage_calendar)

    @classmethod
    def from_definition(
            cls,
            extra_calendar: PeriodCalendar,
            amount: float,
            mortgage_calendar: PeriodCalendar
    ) -> ExtraPaymentSet:
        """
        Expand a recurring (or one-time) extra payment into a set.

        Every date of ``extra_calendar`` receives ``amount``. The extra
        calendar's period type must be allowed for the mortgage's period type:

            MONTHLY                   MONTHLY, YEARLY, ONETIME
            BIWEEKLY, RAPID_BIWEEKLY  BIWEEKLY, RAPID_BIWEEKLY, YEARLY_FOR_BIWEEKLY, ONETIME
            WEEKLY, RAPID_WEEKLY      WEEKLY, RAPID_WEEKLY, YEARLY_FOR_WEEKLY, ONETIME

        Args:
            extra_calendar: Dates on which the extra payment is made
            amount: Extra principal per date (> 0)
            mortgage_calendar: Due-dates of the mortgage

        Returns:
            New ExtraPaymentSet bound to mortgage_calendar

        Raises:
            IncompatiblePeriodError: If the extra period is not allowed for the mortgage period
            UnknownDateError: If any extra date is not a mortgage due-date
            InvalidParameterError: If amount is not a positive finite number

        Example:
            >>> mortgage = PeriodCalendar(PeriodType.MONTHLY, dt.date(2020, 2, 1), 240)
            >>> extras = PeriodCalendar(PeriodType.MONTHLY, dt.date(2020, 2, 1), 240)
            >>> len(ExtraPaymentSet.from_definition(extras, 500.0, mortgage))
            240
        """
        if not isinstance(extra_calendar, PeriodCalendar):
            raise InvalidParameterError(f"extra_calendar must be a PeriodCalendar, got {extra_calendar!r}")
        if not isinstance(mortgage_calendar, PeriodCalendar):
            raise InvalidParameterError(
                f"mortgage_calendar must be a PeriodCalendar, got {mortgage_calendar!r}"
            )
        mortgage_period = mortgage_calendar.period_type
        extra_period = extra_calendar.period_type
        if extra_period not in allowed_extra_periods(mortgage_period):
            raise IncompatiblePeriodError(
                f"extra payment period {extra_period.name} is not allowed "
                f"for a {mortgage_period.name} mortgage"
            )
        amount = _validate_amount(amount)
        logger.debug(
            "Expanding %d %s extra payments of %.2f",
            extra_calendar.count, extra_period.name, amount
        )
        return cls(mortgage_calendar, tuple((day, amount) for day in extra_calendar))

    # -------------------------------------------------------------------------
    # Mapping protocol
    # -------------------------------------------------------------------------

    def __getitem__(self, day: dt.date) -> float:
        return self._amounts[day]

    def __iter__(self) -> Iterator[dt.date]:
        return iter(self._amounts)

    def __len__(self) -> int:
        return len(self._amounts)

    def get(self, day: dt.date, default: float = 0.0) -> float:
        """Extra amount on ``day``, or 0.0 when no extra payment is recorded."""
        return self._amounts.get(day, default)

    @property
    def total(self) -> float:
        """Sum of all extra amounts."""
        return math.fsum(self._amounts.values())

    # -------------------------------------------------------------------------
    # Copy-on-write updates
    # -------------------------------------------------------------------------

    def set(self, entries: Mapping[dt.date, float]) -> ExtraPaymentSet:
        """
        Overwrite: each entry replaces any amount already recorded on its date.

        Raises:
            UnknownDateError: If any date is not a mortgage due-date
            InvalidParameterError: If any amount is not a positive finite number
        """
        incoming = self._validated(entries)
        merged = dict(self._amounts)
        merged.update(incoming)
        return self._rebuild(merged)

    def add(self, entries: Mapping[dt.date, float]) -> ExtraPaymentSet:
        """
        Accumulate: each amount is added to the amount already on its date (0 if none).

        Raises:
            UnknownDateError: If any date is not a mortgage due-date
            InvalidParameterError: If any amount is not a positive finite number
        """
        incoming = self._validated(entries)
        merged = dict(self._amounts)
        for day, amount in incoming.items():
            merged[day] = merged.get(day, 0.0) + amount
        return self._rebuild(merged)

    def set_payment(self, day: dt.date, amount: float) -> ExtraPaymentSet:
        """Overwrite the extra amount on a single date."""
        return self.set({day: amount})

    def add_payment(self, day: dt.date, amount: float) -> ExtraPaymentSet:
        """Add to the extra amount on a single date."""
        return self.add({day: amount})

    def remove(self, dates: Iterable[dt.date] | dt.date) -> ExtraPaymentSet:
        """
        Drop the extra payments on the given dates.

        Args:
            dates: A date or an iterable of dates

        Raises:
            EmptyOperationError: If the set holds no extra payments
            UnknownDateError: If any date has no extra payment (nothing is removed)
        """
        if not self._amounts:
            raise EmptyOperationError("cannot remove from an empty extra payment set")
        days = [dates] if isinstance(dates, dt.date) else list(dates)
        days = [_as_date(day) for day in days]
        missing = sorted({day for day in days if day not in self._amounts})
        if missing:
            raise UnknownDateError(
                "no extra payment recorded on " + ", ".join(d.isoformat() for d in missing)
            )
        drop = set(days)
        return self._rebuild({d: a for d, a in self._amounts.items() if d not in drop})

    def clear(self) -> ExtraPaymentSet:
        """
        Remove every extra payment.

        Raises:
            EmptyOperationError: If the set is already empty
        """
        if not self._amounts:
            raise EmptyOperationError("extra payment set is already empty")
        return ExtraPaymentSet.empty(self.mortgage_calendar)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _validated(self, entries: Mapping[dt.date, float]) -> dict[dt.date, float]:
        """Normalise and validate a batch of entries without applying it."""
        if not isinstance(entries, Mapping):
            raise InvalidParameterError(f"entries must be a mapping of date to amount, got {entries!r}")
        batch = {_as_date(day): _validate_amount(amount) for day, amount in entries.items()}
        self._check_dates(batch)
        return batch

    def _check_dates(self, amounts: Mapping[dt.date, float]) -> None:
        unknown = sorted(day for day in amounts if day not in self.mortgage_calendar)
        if unknown:
            raise UnknownDateError(
                "not a mortgage due-date: " + ", ".join(d.isoformat() for d in unknown)
            )

    def _rebuild(self, amounts: dict[dt.date, float]) -> ExtraPaymentSet:
        return replace(self, entries=tuple(amounts.items()))


def _as_date(value: object) -> dt.date:
    """Normalise a date key; datetimes are truncated to their date."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    raise InvalidParameterError(f"extra payment date must be a date, got {value!r}")


def _validate_amount(amount: object) -> float:
    """Extra amounts are strictly positive finite numbers."""
    if amount is None or isinstance(amount, bool):
        raise InvalidParameterError(f"extra payment amount must be a number, got {amount!r}")
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"extra payment amount must be a number, got {amount!r}") from None
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidParameterError(f"extra payment amount must be positive and finite, got {amount!r}")
    return value
