"""Amount cleaning and formatting helpers shared by the calculators."""

import logging
import math

logger = logging.getLogger(__name__)


def clean_amount(value: float, name: str = "amount") -> float:
    """Return value as float, with NaN and +/-inf replaced by 0.

    Calculators never raise on bad amounts; a non-finite input yields the
    same zero result as an empty one. Negative values pass through and each
    calculator decides how to clamp them.
    """
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        logger.warning(f"{name} is not a finite number ({value!r}), using 0")
        return 0.0
    return value


def round_cents(amount: float) -> float:
    """Round to 2 decimal places for display and JSON output."""
    return round(amount, 2)


def format_mxn(amount: float | None, decimals: int = 2) -> str:
    """Format a peso amount, e.g. 214090.75 -> $214,090.75."""
    if amount is None:
        return "-"
    return f"${amount:,.{decimals}f}"


def format_pct(value: float | None, decimals: int = 1) -> str:
    """Format a percentage value (already scaled to 0-100)."""
    if value is None:
        return "0%"
    return f"{value:.{decimals}f}%"
