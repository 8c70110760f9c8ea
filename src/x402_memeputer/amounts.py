"""
Amount normalization for quoted prices.

Servers quote ``maxAmountRequired`` either in atomic units ("10000") or in
decimal USDC ("0.01"), as a string or as a JSON number. This module is the one
place that decides which reading applies.

Rules, in order:

* absent                      -> DEFAULT_ATOMIC_AMOUNT
* string containing "."       -> decimal USDC, scaled by 10^6 and floored
* string without "."          -> atomic integer
* number < 1                  -> decimal USDC, scaled by 10^6 and floored
* number >= 1                 -> atomic (floored)
* anything else               -> DEFAULT_ATOMIC_AMOUNT, tagged INVALID
"""

import logging
import math
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any

from x402_memeputer.types import AmountFormat, NormalizedAmount

logger = logging.getLogger(__name__)

USDC_DECIMALS = 6
DEFAULT_ATOMIC_AMOUNT = 10000


def _scale(decimals: int) -> Decimal:
    return Decimal(10) ** decimals


def _floor(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def to_decimal(atomic: int, decimals: int = USDC_DECIMALS) -> Decimal:
    """Convert atomic units to a decimal token amount"""
    return Decimal(atomic) / _scale(decimals)


def to_atomic(amount: Decimal | str | int | float, decimals: int = USDC_DECIMALS) -> int:
    """Convert a decimal token amount to atomic units (floored)"""
    return _floor(Decimal(str(amount)) * _scale(decimals))


def _amount(atomic: int, fmt: AmountFormat, decimals: int) -> NormalizedAmount:
    return NormalizedAmount(atomic=atomic, decimal=to_decimal(atomic, decimals), format=fmt)


def _invalid(raw: Any, decimals: int) -> NormalizedAmount:
    logger.warning(
        f"Unparsable quoted amount {raw!r}, falling back to {DEFAULT_ATOMIC_AMOUNT} atomic units"
    )
    return _amount(DEFAULT_ATOMIC_AMOUNT, AmountFormat.INVALID, decimals)


def normalize_amount(raw: Any, decimals: int = USDC_DECIMALS) -> NormalizedAmount:
    """Interpret a quoted amount.

    Args:
        raw: ``maxAmountRequired`` as received (str, int, float or None)
        decimals: Token decimals (USDC: 6)

    Returns:
        NormalizedAmount tagged with the format that was recognised
    """
    if raw is None:
        return _amount(DEFAULT_ATOMIC_AMOUNT, AmountFormat.ABSENT, decimals)

    # bool is an int subclass; True is not a price
    if isinstance(raw, bool):
        return _invalid(raw, decimals)

    if isinstance(raw, str):
        text = raw.strip()
        try:
            if "." in text:
                value = Decimal(text)
                if not value.is_finite():
                    return _invalid(raw, decimals)
                return _amount(
                    _floor(value * _scale(decimals)), AmountFormat.DECIMAL_STRING, decimals
                )
            return _amount(int(text, 10), AmountFormat.ATOMIC_STRING, decimals)
        except (InvalidOperation, ValueError):
            return _invalid(raw, decimals)

    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and not math.isfinite(raw):
            return _invalid(raw, decimals)
        # str() keeps 0.03 as 0.03 instead of its binary expansion
        value = Decimal(str(raw))
        if value < 1:
            return _amount(
                _floor(value * _scale(decimals)), AmountFormat.DECIMAL_NUMBER, decimals
            )
        return _amount(_floor(value), AmountFormat.ATOMIC_NUMBER, decimals)

    return _invalid(raw, decimals)
