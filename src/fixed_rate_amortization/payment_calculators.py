# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar

from fixed_rate_amortization.errors import InvalidParameterError
from fixed_rate_amortization.periods import PeriodType
from fixed_rate_amortization.rounding import round_currency

__version__ = "0.1.0"

_INVALID_PERIOD_MESSAGE = (
    "Valid period_type values are BIWEEKLY, MONTHLY, RAPID_BIWEEKLY, RAPID_WEEKLY, or WEEKLY"
)


class CompoundingConvention(Enum):
    """Interest compounding convention used to size the payment."""
    US = "US"
    CANADIAN = "CANADIAN"


# =============================================================================
# Periodic Rates
# =============================================================================

def us_period_rate(rate: float, period_type: PeriodType) -> float:
    """
    Per-period interest rate under the US (nominal, simple division) convention.

    Formula:
        r = (rate / N) / 100

    Where:
        rate = Nominal annual rate as percentage (e.g. 4.25 for 4.25%)
        N    = Payments per year of period_type

    Args:
        rate: Nominal annual rate as percentage
        period_type: Mortgage payment frequency

    Returns:
        Periodic rate as decimal (e.g. 0.00354167 for 4.25% monthly)
    """
    return (rate / period_type.payments_per_year) / 100


def canadian_period_rate(rate: float, period_type: PeriodType) -> float:
    """
    Per-period interest rate under the Canadian semi-annual compounding convention.

    Canadian fixed-rate mortgages quote a nominal rate compounded twice a
    year. The equivalent rate for N payments per year is:

    Formula:
        r = (1 + (rate / 100) / 2) ^ (2 / N) - 1

    Where:
        rate = Nominal annual rate as percentage
        N    = Payments per year of period_type

    Author's Note:
    --------------
    Two semi-annual periods compound to the same effective annual rate as N
    periods at r:

        (1 + rate/200)^2 = (1 + r)^N

    Args:
        rate: Nominal annual rate as percentage
        period_type: Mortgage payment frequency

    Returns:
        Periodic rate as decimal
    """
    return (1 + (rate / 100) / 2) ** (2 / period_type.payments_per_year) - 1


# =============================================================================
# Monthly-Equivalent Payments
# =============================================================================
#
# Both conventions size a MONTHLY annuity first, then convert it to the
# configured frequency with adjust_payment_for_period(). ``term`` is always
# the annuity length in months.
# =============================================================================

def us_monthly_payment(loan_amount: float, rate: float, term: int) -> float:
    """
    Level monthly payment for a US fixed-rate loan.

    Formula:
        P = L × m / (1 - (1 + m)^-M)

    Where:
        L = Loan amount
        m = Monthly rate (rate / 1200)
        M = Term in months

    Args:
        loan_amount: Principal borrowed
        rate: Nominal annual rate as percentage
        term: Term in months

    Returns:
        Unrounded monthly payment

    Warns:
        UserWarning: If rate is zero (straight-line payment L / M returned)

    Example:
        >>> round(us_monthly_payment(200000.0, 4.5, 360), 2)
        1013.37
    """
    monthly_rate = rate / 1200
    if monthly_rate == 0.0:
        warnings.warn("rate is zero, returning straight-line payment")
        return loan_amount / term
    return loan_amount * (monthly_rate / (1 - (1 + monthly_rate) ** -term))


def canadian_monthly_payment(loan_amount: float, rate: float, term: int) -> float:
    """
    Level monthly payment for a Canadian fixed-rate loan (semi-annual compounding).

    Formula:
        P = L × m / (1 - ((1 + d)^(1/6))^-M)

    Where:
        L = Loan amount
        d = Semi-annual rate (rate / 200)
        m = Monthly-equivalent rate ((1 + d)^(1/6) - 1)
        M = Term in months

    Raising (1 + d) to 1/6 converts a semi-annual factor into a monthly one,
    so the denominator is the usual annuity term at the monthly-equivalent
    rate m.

    Args:
        loan_amount: Principal borrowed
        rate: Nominal annual rate as percentage
        term: Term in months

    Returns:
        Unrounded monthly payment

    Warns:
        UserWarning: If rate is zero (straight-line payment L / M returned)

    Example:
        >>> round(canadian_monthly_payment(200000.0, 4.5, 360), 2)
        1008.43
    """
    monthly_exponent = 1 / 6
    div_interest = rate / 200
    monthly_rate = (1 + (rate / 100) / 2) ** (2 / 12) - 1
    if monthly_rate == 0.0:
        warnings.warn("rate is zero, returning straight-line payment")
        return loan_amount / term
    return loan_amount * (monthly_rate / (1 - ((1 + div_interest) ** monthly_exponent) ** -term))


def adjust_payment_for_period(monthly_payment: float, period_type: PeriodType) -> float:
    """
    Convert a monthly-equivalent payment to the configured payment frequency.

        WEEKLY, BIWEEKLY   P × 12 / N     (same yearly total, spread over N payments)
        RAPID_BIWEEKLY     P / 2          (26 half-payments = 13 monthly payments a year)
        RAPID_WEEKLY       P / 4          (52 quarter-payments = 13 monthly payments a year)
        MONTHLY            P

    Args:
        monthly_payment: Monthly-equivalent payment
        period_type: Mortgage payment frequency

    Returns:
        Payment per period

    Raises:
        InvalidParameterError: If period_type is not a mortgage frequency
    """
    match period_type:
        case PeriodType.WEEKLY | PeriodType.BIWEEKLY:
            return (monthly_payment * 12) / period_type.payments_per_year
        case PeriodType.RAPID_BIWEEKLY:
            return monthly_payment / 2
        case PeriodType.RAPID_WEEKLY:
            return monthly_payment / 4
        case PeriodType.MONTHLY:
            return monthly_payment
        case _:
            raise InvalidParameterError(_INVALID_PERIOD_MESSAGE)


# =============================================================================
# Payment Calculators
# =============================================================================

@dataclass(frozen=True)
class PaymentCalculator(ABC):
    """
    Fixed periodic payment for a loan.

    Shared by the two conventions: validation, derived fields and the
    copy-on-write setters. Subclasses supply only the periodic rate and the
    monthly-equivalent payment.

    Fields:
        loan_amount: Principal borrowed (> 0)
        rate: Nominal annual rate as percentage (0 to 100)
        period_type: Mortgage payment frequency
        term: Annuity length in months (> 0)

    Derived:
        period_rate: Interest rate applied once per payment period
        pmt_unrounded: Full-precision payment (used by the amortization fold)
        pmt: Payment rounded half-to-even to cents on its exact binary value
             (quoted to the borrower)
    """
    loan_amount: float
    rate: float
    period_type: PeriodType
    term: int
    period_rate: float = field(init=False)
    pmt_unrounded: float = field(init=False)
    pmt: float = field(init=False)

    convention: ClassVar[CompoundingConvention]

    def __post_init__(self) -> None:
        """Validate inputs and compute the derived rate and payment."""
        if self.period_type is None:
            raise InvalidParameterError("period_type must not be None")
        if not isinstance(self.period_type, PeriodType) or not self.period_type.is_mortgage_period:
            raise InvalidParameterError(_INVALID_PERIOD_MESSAGE)
        loan_amount = _as_float(self.loan_amount, "loan_amount")
        rate = _as_float(self.rate, "rate")
        if not loan_amount > 0.0:
            raise InvalidParameterError(f"loan_amount must be greater than 0, got {loan_amount}")
        if not 0.0 <= rate <= 100.0:
            raise InvalidParameterError(f"rate must be between 0 and 100, got {rate}")
        if isinstance(self.term, bool) or not isinstance(self.term, int):
            raise InvalidParameterError(f"term must be an integer, got {self.term!r}")
        if self.term <= 0:
            raise InvalidParameterError(f"term must be greater than 0, got {self.term}")

        object.__setattr__(self, "loan_amount", loan_amount)
        object.__setattr__(self, "rate", rate)
        object.__setattr__(self, "period_rate", self._period_rate())
        pmt_unrounded = adjust_payment_for_period(self._monthly_payment(), self.period_type)
        object.__setattr__(self, "pmt_unrounded", pmt_unrounded)
        object.__setattr__(self, "pmt", round_currency(pmt_unrounded, exact=True))

    @classmethod
    def for_years(
            cls,
            loan_amount: float,
            rate: float,
            period_type: PeriodType,
            years: int
    ) -> PaymentCalculator:
        """Build a calculator for a term given in years (``years * 12`` months)."""
        if isinstance(years, bool) or not isinstance(years, int) or years <= 0:
            raise InvalidParameterError(f"years must be a positive integer, got {years!r}")
        return cls(loan_amount, rate, period_type, years * 12)

    @abstractmethod
    def _period_rate(self) -> float:
        """Per-period rate handed to the amortization engine."""

    @abstractmethod
    def _monthly_payment(self) -> float:
        """Unrounded monthly-equivalent payment before frequency adjustment."""

    # -------------------------------------------------------------------------
    # Copy-on-write setters
    # -------------------------------------------------------------------------

    def with_loan_amount(self, loan_amount: float) -> PaymentCalculator:
        """New calculator of the same convention with a different loan amount."""
        return replace(self, loan_amount=loan_amount)

    def with_rate(self, rate: float) -> PaymentCalculator:
        """New calculator of the same convention with a different rate."""
        return replace(self, rate=rate)

    def with_term(self, term: int) -> PaymentCalculator:
        """New calculator of the same convention with a different term."""
        return replace(self, term=term)

    def with_period(self, period_type: PeriodType) -> PaymentCalculator:
        """New calculator of the same convention with a different payment frequency."""
        return replace(self, period_type=period_type)


class USPaymentCalculator(PaymentCalculator):
    """Payment calculator for US mortgages (monthly nominal compounding)."""
    convention = CompoundingConvention.US

    def _period_rate(self) -> float:
        return us_period_rate(self.rate, self.period_type)

    def _monthly_payment(self) -> float:
        return us_monthly_payment(self.loan_amount, self.rate, self.term)


class CanadianPaymentCalculator(PaymentCalculator):
    """Payment calculator for Canadian mortgages (semi-annual compounding)."""
    convention = CompoundingConvention.CANADIAN

    def _period_rate(self) -> float:
        return canadian_period_rate(self.rate, self.period_type)

    def _monthly_payment(self) -> float:
        return canadian_monthly_payment(self.loan_amount, self.rate, self.term)


_CALCULATORS: dict[CompoundingConvention, type[PaymentCalculator]] = {
    CompoundingConvention.US: USPaymentCalculator,
    CompoundingConvention.CANADIAN: CanadianPaymentCalculator,
}


def payment_calculator(
        convention: CompoundingConvention,
        loan_amount: float,
        rate: float,
        period_type: PeriodType,
        term: int
) -> PaymentCalculator:
    """
    Build the payment calculator for a compounding convention.

    Args:
        convention: CompoundingConvention.US or CompoundingConvention.CANADIAN
        loan_amount: Principal borrowed
        rate: Nominal annual rate as percentage
        period_type: Mortgage payment frequency
        term: Annuity length in months

    Returns:
        USPaymentCalculator or CanadianPaymentCalculator

    Raises:
        InvalidParameterError: If convention is unknown or any loan parameter is invalid
    """
    try:
        calculator_cls = _CALCULATORS[convention]
    except KeyError:
        raise InvalidParameterError(f"unknown compounding convention {convention!r}") from None
    return calculator_cls(loan_amount, rate, period_type, term)


def _as_float(value: object, name: str) -> float:
    """Coerce a numeric argument to a finite float."""
    if value is None or isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(result):
        raise InvalidParameterError(f"{name} must be finite, got {value!r}")
    return result
