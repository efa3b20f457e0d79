"""Numeric utilities for consistent Decimal handling."""

from decimal import Decimal, ROUND_HALF_UP, getcontext

# Enough precision for compounding 48+ multiplicative steps
getcontext().prec = 28

PRICE_QUANTUM = Decimal("0.01")


def D(x) -> Decimal:
    """
    Robust Decimal conversion for ints/floats/strings/Decimals.
    
    Single source of truth for numeric conversions between the float-based
    simulator math and the Decimal-based bar models.
    Floats are converted through their shortest repr, so ordering between
    two floats is preserved after conversion.
    
    Args:
        x: Value to convert (int, float, str, or Decimal)
    
    Returns:
        Decimal: Converted value
    
    Raises:
        TypeError: If type is not supported
    """
    if isinstance(x, Decimal):
        return x
    if isinstance(x, bool):
        raise TypeError("Unsupported numeric type: bool")
    if isinstance(x, int):
        return Decimal(x)
    if isinstance(x, str):
        return Decimal(x)
    if isinstance(x, float):
        return Decimal(str(x))
    raise TypeError(f"Unsupported numeric type: {type(x)}")


def round_price(x) -> Decimal:
    """Round a price to two decimals for display (chart scale labels)."""
    return D(x).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)
