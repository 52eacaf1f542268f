# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import datetime as dt
import math
import warnings
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace

import numpy as np

from fixed_rate_amortization.config import get_config
from fixed_rate_amortization.errors import (
    IncompleteAmortizationError,
    InvalidParameterError,
    UnknownDateError,
)
from fixed_rate_amortization.extra_payments import ExtraPaymentSet
from fixed_rate_amortization.logging import get_logger
from fixed_rate_amortization.payment_calculators import PaymentCalculator
from fixed_rate_amortization.payment_calendar import PeriodCalendar
from fixed_rate_amortization.rounding import round_currency

__version__ = "0.1.0"

logger = get_logger(__name__)


# =============================================================================
# Ledger Containers
# =============================================================================

@dataclass(frozen=True)
class PaymentRecord:
    """
    One ledger entry.

    Unrounded fields are the values carried through the amortization fold.
    The ``*_rounded`` fields are the same values rounded half-to-even to cents,
    each rounded independently for presentation.

        total                 Amount paid this period (scheduled + extra, clamped)
        principal             Principal retired this period (includes extra)
        extra_principal       Extra principal requested for this date
        interest              Interest charged this period
        cumulative_interest   Interest paid to date
        balance               Principal owed after this payment
    """
    date: dt.date
    period: int
    total: float
    principal: float
    extra_principal: float
    interest: float
    cumulative_interest: float
    balance: float
    total_rounded: float = field(init=False)
    principal_rounded: float = field(init=False)
    extra_principal_rounded: float = field(init=False)
    interest_rounded: float = field(init=False)
    cumulative_interest_rounded: float = field(init=False)
    balance_rounded: float = field(init=False)

    def __post_init__(self) -> None:
        for name in _RECORD_FIELDS:
            object.__setattr__(self, f"{name}_rounded", round_currency(getattr(self, name)))

    def rounded_stats(self) -> tuple[float, float, float, float, float, float]:
        """(total, principal, extra_principal, interest, cumulative_interest, balance), rounded."""
        return (
            self.total_rounded,
            self.principal_rounded,
            self.extra_principal_rounded,
            self.interest_rounded,
            self.cumulative_interest_rounded,
            self.balance_rounded,
        )


_RECORD_FIELDS = (
    "total",
    "principal",
    "extra_principal",
    "interest",
    "cumulative_interest",
    "balance",
)


@dataclass
class LedgerArrays:
    """
    Column view of a ledger, one numpy array per field.

    ``date`` is datetime64[D]; ``period`` is 1-based. Amounts are unrounded;
    apply rounding.round_currency_array for presentation.
    """
    date: np.ndarray
    period: np.ndarray
    total: np.ndarray
    principal: np.ndarray
    extra_principal: np.ndarray
    interest: np.ndarray
    cumulative_interest: np.ndarray
    balance: np.ndarray


@dataclass(frozen=True)
class AmortizationLedger(Mapping[dt.date, PaymentRecord]):
    """
    Immutable, chronologically ordered mapping of due-date to PaymentRecord.

    Fields:
        loan_amount: Principal at the start of the schedule
        records: Payment records in date order

    A ledger whose calendar ran out before the balance reached 0.00 is
    "short": is_paid_off is False and residual_balance is the amount still owed.
    """
    loan_amount: float
    records: tuple[PaymentRecord, ...]
    _index: dict[dt.date, PaymentRecord] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {record.date: record for record in self.records})

    def __getitem__(self, day: dt.date) -> PaymentRecord:
        return self._index[day]

    def __iter__(self) -> Iterator[dt.date]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self.records)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def dates(self) -> tuple[dt.date, ...]:
        return tuple(record.date for record in self.records)

    @property
    def first(self) -> PaymentRecord | None:
        return self.records[0] if self.records else None

    @property
    def last(self) -> PaymentRecord | None:
        return self.records[-1] if self.records else None

    @property
    def residual_balance(self) -> float:
        """Unrounded principal still owed after the last record."""
        return self.records[-1].balance if self.records else self.loan_amount

    @property
    def is_paid_off(self) -> bool:
        return round_currency(self.residual_balance) == 0.0

    @property
    def payoff_date(self) -> dt.date | None:
        """Date of the payment that cleared the balance, or None for a short ledger."""
        if not self.is_paid_off or not self.records:
            return None
        return self.records[-1].date

    @property
    def total_interest(self) -> float:
        return self.records[-1].cumulative_interest if self.records else 0.0

    @property
    def total_paid(self) -> float:
        return math.fsum(record.total for record in self.records)

    @property
    def total_extra_principal(self) -> float:
        return math.fsum(record.extra_principal for record in self.records)

    @property
    def total_cost(self) -> float:
        """Loan amount plus rounded cumulative interest."""
        return self.loan_amount + round_currency(self.total_interest)

    def to_arrays(self) -> LedgerArrays:
        """Column view of the ledger as numpy arrays."""
        n = len(self.records)
        columns = {
            name: np.fromiter((getattr(r, name) for r in self.records), dtype=float, count=n)
            for name in _RECORD_FIELDS
        }
        return LedgerArrays(
            date=np.array([r.date for r in self.records], dtype="datetime64[D]"),
            period=np.fromiter((r.period for r in self.records), dtype=int, count=n),
            **columns,
        )


# =============================================================================
# Amortization Engine
# =============================================================================

def build_ledger(
        calculator: PaymentCalculator,
        calendar: PeriodCalendar,
        extra_payments: Mapping[dt.date, float] | None = None,
        *,
        strict: bool | None = None
) -> AmortizationLedger:
    """
    Fold a payment calculator, a due-date calendar and extra payments into a ledger.

    For each due-date, while the balance rounded to cents is above zero:

        I_t      = B_{t-1} × r
        E_t      = extra_payments.get(date, 0)
        T_t      = min(P + E_t, B_{t-1} + I_t)
        Prin_t   = T_t - I_t
        B_t      = B_{t-1} - Prin_t
        CumI_t   = CumI_{t-1} + I_t

    Where:
        B_0 = Loan amount
        r   = calculator.period_rate
        P   = calculator.pmt_unrounded (never the rounded payment)

    The min() clamp makes the final payment exactly clear the balance instead
    of overshooting it. Unrounded values are carried from period to period;
    each record's rounded fields are derived from its own unrounded values.

    Args:
        calculator: USPaymentCalculator or CanadianPaymentCalculator
        calendar: Mortgage due-dates
        extra_payments: ExtraPaymentSet or any mapping of due-date to extra amount
        strict: Raise if the calendar ends before payoff. None uses the
            configured AMORTIZATION_STRICT_PAYOFF default.

    Returns:
        AmortizationLedger in date order

    Raises:
        InvalidParameterError: If calculator or calendar is missing or not a mortgage period,
            or an extra payment key is not a date or its amount is not positive and finite
        UnknownDateError: If an extra payment date is not in the calendar
        IncompleteAmortizationError: If strict and the calendar ends with a balance owed

    Warns:
        UserWarning: If the calendar and calculator use different payments per year
        UserWarning: If the calendar ends with a balance owed (non-strict)

    Example:
        >>> calc = USPaymentCalculator(150000.0, 4.25, PeriodType.MONTHLY, 240)
        >>> cal = PeriodCalendar(PeriodType.MONTHLY, dt.date(2020, 2, 1), 240)
        >>> build_ledger(calc, cal).first.balance_rounded
        149602.4
    """
    if not isinstance(calculator, PaymentCalculator):
        raise InvalidParameterError(f"calculator must be a PaymentCalculator, got {calculator!r}")
    if not isinstance(calendar, PeriodCalendar):
        raise InvalidParameterError(f"calendar must be a PeriodCalendar, got {calendar!r}")
    if not calendar.period_type.is_mortgage_period:
        raise InvalidParameterError(f"{calendar.period_type.name} is not a mortgage payment period")
    if calendar.period_type.payments_per_year != calculator.period_type.payments_per_year:
        warnings.warn(
            f"calendar period {calendar.period_type.name} differs from calculator period "
            f"{calculator.period_type.name}; the per-period rate assumes "
            f"{calculator.period_type.payments_per_year} payments per year"
        )

    extras = _resolve_extra_payments(extra_payments, calendar)
    if strict is None:
        strict = get_config().strict_payoff

    logger.debug(
        "Building ledger: loan=%.2f rate=%s period=%s pmt=%.2f dates=%d extras=%d",
        calculator.loan_amount, calculator.rate, calculator.period_type.name,
        calculator.pmt, calendar.count, len(extras)
    )

    ledger = AmortizationLedger(
        calculator.loan_amount,
        tuple(_amortize(calculator.loan_amount, calculator.period_rate,
                        calculator.pmt_unrounded, calendar, extras))
    )

    if not ledger.is_paid_off:
        message = (
            f"calendar ended after {len(ledger)} payments with "
            f"{round_currency(ledger.residual_balance):.2f} still owed"
        )
        if strict:
            raise IncompleteAmortizationError(message)
        logger.warning(message)
        warnings.warn(message)
    else:
        logger.debug("Paid off on %s after %d payments", ledger.payoff_date, len(ledger))
    return ledger


def _amortize(
        loan_amount: float,
        period_rate: float,
        payment: float,
        dates: Iterable[dt.date],
        extras: Mapping[dt.date, float]
) -> Iterator[PaymentRecord]:
    """Sequential balance-reduction fold; yields one record per period paid."""
    principal_owed = loan_amount
    cumulative_interest = 0.0
    for period, day in enumerate(dates, start=1):
        if round_currency(principal_owed) <= 0.0:
            break
        interest = principal_owed * period_rate
        extra = extras.get(day, 0.0)
        total = min(payment + extra, principal_owed + interest)
        principal = total - interest
        principal_owed -= principal
        cumulative_interest += interest
        yield PaymentRecord(
            date=day,
            period=period,
            total=total,
            principal=principal,
            extra_principal=extra,
            interest=interest,
            cumulative_interest=cumulative_interest,
            balance=principal_owed,
        )


def _resolve_extra_payments(
        extra_payments: Mapping[dt.date, float] | None,
        calendar: PeriodCalendar
) -> ExtraPaymentSet:
    """Validate extra payments against the calendar as an ExtraPaymentSet."""
    if extra_payments is None:
        return ExtraPaymentSet.empty(calendar)
    if isinstance(extra_payments, ExtraPaymentSet) and extra_payments.mortgage_calendar == calendar:
        return extra_payments
    if not isinstance(extra_payments, Mapping):
        raise InvalidParameterError(
            f"extra_payments must be a mapping of date to amount, got {extra_payments!r}"
        )
    return ExtraPaymentSet(calendar, tuple(extra_payments.items()))


def compare_total_cost(a: AmortizationLedger, b: AmortizationLedger) -> int:
    """Order two ledgers by total cost: -1 if a is cheaper, 1 if b is cheaper, else 0."""
    cost_a, cost_b = a.total_cost, b.total_cost
    return (cost_a > cost_b) - (cost_a < cost_b)


# =============================================================================
# Fixed-Rate Amortization
# =============================================================================

@dataclass(frozen=True)
class FixedAmortization:
    """
    A loan, its due-dates and its extra payments, with the ledger built eagerly.

    Every update returns a new FixedAmortization with a freshly built ledger.
    Changing the calendar drops the extra payments, which were validated
    against the old due-dates; changing the calculator keeps them.
    """
    calculator: PaymentCalculator
    calendar: PeriodCalendar
    extra_payments: ExtraPaymentSet | None = None
    table: AmortizationLedger = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        extras = self.extra_payments
        if extras is None:
            extras = ExtraPaymentSet.empty(self.calendar)
        elif not isinstance(extras, ExtraPaymentSet):
            raise InvalidParameterError(f"extra_payments must be an ExtraPaymentSet, got {extras!r}")
        elif extras.mortgage_calendar != self.calendar:
            extras = ExtraPaymentSet(self.calendar, extras.entries)
        object.__setattr__(self, "extra_payments", extras)
        object.__setattr__(self, "table", build_ledger(self.calculator, self.calendar, extras))

    @property
    def pmt(self) -> float:
        """Scheduled payment quoted to the borrower."""
        return self.calculator.pmt

    def extra_payment(self, day: dt.date) -> float:
        """Extra amount scheduled on ``day`` (0.0 if none)."""
        return self.extra_payments.get(day)

    def with_calculator(self, calculator: PaymentCalculator) -> FixedAmortization:
        return replace(self, calculator=calculator)

    def with_calendar(self, calendar: PeriodCalendar) -> FixedAmortization:
        return replace(self, calendar=calendar, extra_payments=None)

    def set_extra_payments(self, entries: Mapping[dt.date, float]) -> FixedAmortization:
        return replace(self, extra_payments=self.extra_payments.set(entries))

    def add_extra_payments(self, entries: Mapping[dt.date, float]) -> FixedAmortization:
        return replace(self, extra_payments=self.extra_payments.add(entries))

    def remove_extra_payments(self, dates: Iterable[dt.date] | dt.date) -> FixedAmortization:
        return replace(self, extra_payments=self.extra_payments.remove(dates))

    def clear_extra_payments(self) -> FixedAmortization:
        return replace(self, extra_payments=self.extra_payments.clear())
