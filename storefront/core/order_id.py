"""Short, human-readable order identifiers."""

import time

ORDER_ID_PREFIX = "BOT"


def generate_order_id(now_ms: int | None = None) -> str:
    """Build an order id such as `BOT-4821`.

    The suffix is the last four digits of the millisecond clock: visually
    distinct per order in casual use, not globally unique.

    Args:
        now_ms: Clock reading in milliseconds (defaults to the current time)
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{ORDER_ID_PREFIX}-{str(now_ms)[-4:].zfill(4)}"


def display_order_id(order_id: str) -> str:
    """Order id as shown to people (`#BOT-4821`)."""
    return order_id if order_id.startswith("#") else f"#{order_id}"
