"""Integer arithmetic utilities for cents-based amounts.

All deposits, withdrawals, incentives, expenses and bank balances are int
cents. No float, no Decimal, on the way in or the way out.
"""


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def ratio_percent(numerator: int, denominator: int) -> float:
    """Percentage of numerator over denominator, one decimal place.

    Non-positive numerators report 0.0; a zero denominator counts as 1.
    """
    if numerator <= 0:
        return 0.0
    return round(numerator * 100 / (denominator or 1), 1)


def amount_texts(cents: int) -> tuple[str, str]:
    """Searchable renderings of an amount: '1500.00' and '$1,500.00'."""
    sign = "-" if cents < 0 else ""
    abs_cents = abs(cents)
    return f"{sign}{abs_cents // 100}.{abs_cents % 100:02d}", cents_to_display(cents)
