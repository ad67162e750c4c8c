"""Currency tokens recognised in page text."""
from __future__ import annotations

from enum import StrEnum


class CurrencyToken(StrEnum):
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"
    DKK = "DKK"


# Symbol → token. Keys are matched case-insensitively.
CURRENCY_SYMBOLS: dict[str, CurrencyToken] = {
    "€": CurrencyToken.EUR,
    "$": CurrencyToken.USD,
    "£": CurrencyToken.GBP,
    "kr": CurrencyToken.DKK,
}


def token_for_code(code: str) -> CurrencyToken:
    """Resolve an ISO code in any letter case to its token."""
    return CurrencyToken(code.upper())


def token_for_symbol(symbol: str) -> CurrencyToken:
    """Resolve a symbol in any letter case to its token."""
    try:
        return CURRENCY_SYMBOLS[symbol]
    except KeyError:
        return CURRENCY_SYMBOLS[symbol.lower()]
