# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal, ROUND_HALF_EVEN

import numpy as np

__version__ = "0.1.0"


# =============================================================================
# Banker's Rounding for Currency Presentation
# =============================================================================
#
# All unrounded amounts are carried as IEEE doubles. Rounding happens only
# when a value is presented (payment quotes, ledger fields), never inside the
# amortization fold.
# =============================================================================

CURRENCY_PLACES: int = 2


def round_half_even(value: float, places: int = CURRENCY_PLACES, *, exact: bool = False) -> float:
    """
    Round a float to a fixed number of decimal places using round-half-to-even.

    By default the float is first converted to its shortest decimal
    representation (``repr``), so a value printed as ``2.675`` is treated as
    exactly ``2.675`` and rounds to ``2.68``. Ledger fields are rounded this way.

    With ``exact=True`` the exact binary value is rounded instead. ``2.675``
    is stored as 2.67499999999999982236431605997495353221893310546875 and
    rounds to ``2.67``. Quoted payments (``PaymentCalculator.pmt``) are
    rounded this way.

    Args:
        value: Value to round
        places: Number of decimal places to keep (default 2)
        exact: Round the exact binary value rather than its shortest repr

    Returns:
        Rounded value as float

    Raises:
        ValueError: If places is negative
        ValueError: If value is not finite

    Example:
        >>> round_half_even(0.125)
        0.12
        >>> round_half_even(0.135)
        0.14
        >>> round_half_even(2.675, exact=True)
        2.67
    """
    if places < 0:
        raise ValueError(f"places must be non-negative, got {places}")
    if not np.isfinite(value):
        raise ValueError(f"value must be finite, got {value}")
    quantum = Decimal(1).scaleb(-places)
    decimal_value = Decimal(float(value)) if exact else Decimal(repr(float(value)))
    return float(decimal_value.quantize(quantum, rounding=ROUND_HALF_EVEN))


def round_currency(value: float, *, exact: bool = False) -> float:
    """Round a currency amount to cents using round-half-to-even."""
    return round_half_even(value, CURRENCY_PLACES, exact=exact)


def round_currency_array(values: Iterable[float] | np.ndarray) -> np.ndarray:
    """Apply round_currency element-wise and return a float64 array."""
    arr = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=float)
    rounded = np.fromiter((round_currency(v) for v in arr.ravel()), dtype=float, count=arr.size)
    return rounded.reshape(arr.shape)
