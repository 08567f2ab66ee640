"""Logical clock: block height derived from UTC wall time.

Height 0 starts at GENESIS_AT; every BLOCK_INTERVAL_SECONDS adds one block.
Wall time only moves forward on a healthy host, so the height is
monotonically non-decreasing. Heights before genesis clamp to 0.
"""

from datetime import datetime, timezone

from config.settings import settings


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def block_height_at(moment: datetime, genesis: datetime, interval_seconds: int) -> int:
    """Return the number of whole block intervals between genesis and moment."""
    if interval_seconds <= 0:
        raise ValueError(f"Block interval must be positive, got {interval_seconds}")
    elapsed = (moment - genesis).total_seconds()
    if elapsed <= 0:
        return 0
    return int(elapsed // interval_seconds)


def current_block_height() -> int:
    """FastAPI dependency: the host's current logical clock value."""
    return block_height_at(utc_now(), settings.GENESIS_AT, settings.BLOCK_INTERVAL_SECONDS)
