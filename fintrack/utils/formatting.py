"""Display formatting helpers."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from fintrack.config import settings

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def format_currency(amount: Union[float, int, Decimal, None], currency: Optional[str] = None) -> str:
    """Format an amount like ``$1,234.50`` (negative: ``-$1,234.50``)."""
    currency = currency or settings.currency
    value = Decimal(str(amount or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    symbol = _CURRENCY_SYMBOLS.get(currency)
    sign = "-" if value < 0 else ""
    body = f"{abs(value):,.2f}"
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{body} {currency}"
