"""Stake fee calculation: truncating rational fee rate."""

from config.settings import settings


def calc_fee(
    amount: int,
    numerator: int = settings.FEE_RATE_NUMERATOR,
    denominator: int = settings.FEE_RATE_DENOMINATOR,
) -> int:
    """Truncating fee: amount x numerator // denominator.

    No rounding adjustment: the fraction lost to truncation stays with the staker.
    """
    if denominator <= 0:
        raise ValueError(f"Fee denominator must be positive, got {denominator}")
    return amount * numerator // denominator


def calc_net_amount(
    amount: int,
    numerator: int = settings.FEE_RATE_NUMERATOR,
    denominator: int = settings.FEE_RATE_DENOMINATOR,
) -> int:
    """Amount that actually backs a side's pool after the fee."""
    return amount - calc_fee(amount, numerator, denominator)


def split_stake(
    amount: int,
    numerator: int = settings.FEE_RATE_NUMERATOR,
    denominator: int = settings.FEE_RATE_DENOMINATOR,
) -> tuple[int, int]:
    """Return (fee, net); fee + net == amount always."""
    fee = calc_fee(amount, numerator, denominator)
    return fee, amount - fee
