"""Currency and number formatting for INR amounts"""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round half away from zero for positives (0.125 -> 0.13), unlike round()

    Non-finite values, and values too large to scale, are returned unchanged.
    """
    factor = 10 ** ndigits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor


def _group_indian(digits: str) -> str:
    """Group an integer digit string as 12,34,56,789 (lakh/crore convention)"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_inr(amount: float) -> str:
    """
    Format an amount with a ₹ prefix and Indian digit grouping.

    Whole amounts render without decimals; fractional amounts keep up to two.

    Example:
        2500000 -> "₹25,00,000"
        -50000  -> "-₹50,000"
    """
    sign = "-" if amount < 0 else ""
    value = round_half_up(abs(amount), 2)
    whole = int(value)
    fraction = round((value - whole) * 100)
    text = _group_indian(str(whole))
    if fraction:
        text += f".{fraction:02d}".rstrip("0")
    return f"{sign}₹{text}"


def format_lakh_crore(amount: float) -> str:
    """Compact INR label: crore at 1,00,00,000 and above, lakh at 1,00,000 and above"""
    if amount >= 10_000_000:
        return f"₹{round_half_up(amount / 10_000_000, 1):.1f} Cr"
    if amount >= 100_000:
        return f"₹{round_half_up(amount / 100_000, 1):.1f} L"
    return format_inr(amount)
