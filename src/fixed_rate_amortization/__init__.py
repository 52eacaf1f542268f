# Requires Python 3.12+
"""
Fixed-rate amortization: payment calculators, due-date calendars, extra
principal payments, and period-by-period amortization ledgers.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from fixed_rate_amortization.errors import (
    AmortizationError,
    InvalidParameterError,
    IncompatiblePeriodError,
    UnknownDateError,
    EmptyOperationError,
    IncompleteAmortizationError,
)

# Periods and calendars
from fixed_rate_amortization.periods import (
    PeriodType,
    MORTGAGE_PERIODS,
    EXTRA_PERIOD_COMPATIBILITY,
    allowed_extra_periods,
    is_compatible_extra_period,
    add_periods,
)
from fixed_rate_amortization.payment_calendar import (
    PeriodCalendar,
    first_due_date,
    count_from_years,
    mortgage_calendar,
)

# Payment calculators
from fixed_rate_amortization.payment_calculators import (
    CompoundingConvention,
    PaymentCalculator,
    USPaymentCalculator,
    CanadianPaymentCalculator,
    payment_calculator,
    us_period_rate,
    canadian_period_rate,
    us_monthly_payment,
    canadian_monthly_payment,
    adjust_payment_for_period,
)

# Extra payments and amortization
from fixed_rate_amortization.extra_payments import ExtraPaymentSet
from fixed_rate_amortization.amortization import (
    PaymentRecord,
    LedgerArrays,
    AmortizationLedger,
    FixedAmortization,
    build_ledger,
    compare_total_cost,
)

# Rounding, config, logging
from fixed_rate_amortization.rounding import (
    CURRENCY_PLACES,
    round_half_even,
    round_currency,
    round_currency_array,
)
from fixed_rate_amortization.config import (
    AmortizationConfig,
    get_config,
    set_config,
)
from fixed_rate_amortization.logging import setup_logging, get_logger

__all__ = [
    "__version__",
    # Errors
    "AmortizationError",
    "InvalidParameterError",
    "IncompatiblePeriodError",
    "UnknownDateError",
    "EmptyOperationError",
    "IncompleteAmortizationError",
    # Periods and calendars
    "PeriodType",
    "MORTGAGE_PERIODS",
    "EXTRA_PERIOD_COMPATIBILITY",
    "allowed_extra_periods",
    "is_compatible_extra_period",
    "add_periods",
    "PeriodCalendar",
    "first_due_date",
    "count_from_years",
    "mortgage_calendar",
    # Payment calculators
    "CompoundingConvention",
    "PaymentCalculator",
    "USPaymentCalculator",
    "CanadianPaymentCalculator",
    "payment_calculator",
    "us_period_rate",
    "canadian_period_rate",
    "us_monthly_payment",
    "canadian_monthly_payment",
    "adjust_payment_for_period",
    # Extra payments and amortization
    "ExtraPaymentSet",
    "PaymentRecord",
    "LedgerArrays",
    "AmortizationLedger",
    "FixedAmortization",
    "build_ledger",
    "compare_total_cost",
    # Rounding, config, logging
    "CURRENCY_PLACES",
    "round_half_even",
    "round_currency",
    "round_currency_array",
    "AmortizationConfig",
    "get_config",
    "set_config",
    "setup_logging",
    "get_logger",
]
