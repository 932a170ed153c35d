"""
Display formatting for catalog values.

Amounts are shown the Spanish way: whole euros, dot thousands separator
(only from five digits up), and the euro sign after the number.
"""

from typing import Optional, Union

from song_catalog.domain.catalog.models import round_half_up

MISSING = "—"

Number = Union[int, float]


def _group_thousands(digits: str) -> str:
    # es-ES leaves four-digit numbers ungrouped: 1234, but 12.345
    if len(digits) <= 4:
        return digits
    groups = []
    while digits:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    return ".".join(groups)


def format_currency(amount: Optional[Number]) -> str:
    """
    Format an amount as whole euros.

    Examples:
        1234 -> '1234 €'
        12345.6 -> '12.346 €'
        None -> '—'
    """
    if amount is None:
        return MISSING
    rounded = round_half_up(abs(amount))
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}{_group_thousands(str(rounded))} €"


def format_percentage(value: Optional[Number]) -> str:
    if value is None:
        return MISSING
    if float(value).is_integer():
        return f"{int(value)}%"
    return f"{value:g}%".replace(".", ",")


def format_bool(value: bool) -> str:
    return "Sí" if value else "No"


def format_text(value: Optional[str]) -> str:
    return value if value else MISSING
