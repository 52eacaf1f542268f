# Requires Python 3.12+
"""Exception hierarchy for fixed-rate amortization.

Every error derives from ``ValueError`` so callers that already guard numeric
input with ``except ValueError`` keep working.
"""

from __future__ import annotations


class AmortizationError(ValueError):
    """Base exception for all fixed-rate amortization errors."""


class InvalidParameterError(AmortizationError):
    """Raised when a constructor argument is missing or out of range."""


class IncompatiblePeriodError(AmortizationError):
    """Raised when an extra-payment period is not allowed for the mortgage period."""


class UnknownDateError(AmortizationError):
    """Raised when a date is not a due-date of the mortgage calendar or extra-payment set."""


class EmptyOperationError(AmortizationError):
    """Raised when removing or clearing extra payments from an empty set."""


class IncompleteAmortizationError(AmortizationError):
    """Raised in strict mode when the calendar runs out before the balance reaches zero."""
