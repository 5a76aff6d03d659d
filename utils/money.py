from decimal import Decimal, ROUND_HALF_UP


def calculate_commission(total_amount: int, percentage: int | Decimal) -> int:
    """
    Commission in the smallest currency unit.

    Rounds half up: 12_345 at 10% -> 1_235 (1234.5 rounds away from zero).
    Uses Decimal so that no float truncation happens on large invoices.
    """
    if total_amount < 0:
        raise ValueError("total_amount must not be negative")
    raw = Decimal(total_amount) * Decimal(percentage) / Decimal(100)
    return int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_amount(amount: int) -> str:
    # 1500000 -> "1.500.000"
    return f"{amount:,}".replace(",", ".")
