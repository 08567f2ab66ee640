"""Integer arithmetic utilities for base-unit amounts.

All stakes, fees, balances and payouts are int base units (1 token = 1_000_000
base units). No float, no Decimal.
"""

BASE_UNITS_PER_TOKEN = 1_000_000


def validate_amount(amount: int) -> None:
    """Validate that an amount is a strictly positive integer."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValueError(f"Amount must be a positive integer, got {amount!r}")


def amount_to_display(amount: int) -> str:
    """Convert base units to display string: 1_900_000 -> '1.900000', -500 -> '-0.000500'."""
    if amount < 0:
        return "-" + amount_to_display(-amount)
    whole, frac = divmod(amount, BASE_UNITS_PER_TOKEN)
    return f"{whole:,}.{frac:06d}"
