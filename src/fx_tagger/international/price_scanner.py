"""Locate currency amounts in free text.

Three forms are recognised, tried in this order at every position:

- ``CODE <amount>``   e.g. ``USD 45.00``
- ``<amount> CODE``   e.g. ``1,250.50 EUR``
- ``SYMBOL <amount>`` e.g. ``€89.99``

Codes win over symbols when both could start at the same position. The
amount grammar accepts ``1,234.56``, ``1 234,56`` and ``1.234,56`` alike;
which separator is the decimal point is left to ``normalize_amount``.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from fx_tagger.models.currency import CURRENCY_SYMBOLS, CurrencyToken, token_for_code, token_for_symbol
from fx_tagger.models.matches import CodePrefix, CodeSuffix, MatchForm, RawMatch, SymbolPrefix

# Optional minus, 1-3 digits, groups of 3 with an optional separator, optional decimal tail
AMOUNT_PATTERN = r"-?[0-9]{1,3}(?:[.,\s]?[0-9]{3})*(?:[.,][0-9]+)?"


def _alternation(tokens: Iterable[str]) -> str:
    # Longest first so multi-character symbols are not shadowed by shorter ones
    return "|".join(re.escape(t) for t in sorted(tokens, key=len, reverse=True))


def build_price_pattern(
    codes: Iterable[str],
    symbols: Iterable[str] = (),
) -> re.Pattern[str]:
    """Compile the combined code/symbol price pattern."""
    codes = list(codes)
    symbols = list(symbols)
    if not codes and not symbols:
        raise ValueError("At least one currency code or symbol is required")

    branches = []
    if codes:
        code_alt = _alternation(codes)
        branches.append(rf"(?:(?P<code_prefix>{code_alt})\s*(?P<num_prefix>{AMOUNT_PATTERN}))")
        branches.append(rf"(?:(?P<num_suffix>{AMOUNT_PATTERN})\s*(?P<code_suffix>{code_alt}))")
    if symbols:
        branches.append(rf"(?:(?P<symbol>{_alternation(symbols)})\s*(?P<num_symbol>{AMOUNT_PATTERN}))")

    return re.compile("|".join(branches), re.IGNORECASE)


class PriceScanner:
    """Scans text for prices in a fixed set of currencies."""

    def __init__(self, currencies: Iterable[CurrencyToken] | None = None):
        enabled = set(currencies) if currencies is not None else set(CurrencyToken)
        self.currencies = frozenset(enabled)
        self.symbols = {sym: token for sym, token in CURRENCY_SYMBOLS.items() if token in enabled}
        self.pattern = build_price_pattern(
            (token.value for token in enabled),
            self.symbols.keys(),
        )

    def contains_price(self, text: str) -> bool:
        """Cheap existence test used to pre-filter text nodes."""
        return self.pattern.search(text) is not None

    def scan(self, text: str) -> Iterator[RawMatch]:
        """Yield non-overlapping matches left to right."""
        for m in self.pattern.finditer(text):
            yield RawMatch(text=m.group(0), start=m.start(), end=m.end(), form=self._form(m))

    @staticmethod
    def _form(m: re.Match[str]) -> MatchForm:
        groups = m.groupdict()
        if groups.get("code_prefix") is not None:
            return CodePrefix(currency=token_for_code(groups["code_prefix"]), raw_number=groups["num_prefix"])
        if groups.get("code_suffix") is not None:
            return CodeSuffix(currency=token_for_code(groups["code_suffix"]), raw_number=groups["num_suffix"])
        return SymbolPrefix(
            currency=token_for_symbol(groups["symbol"]),
            raw_number=groups["num_symbol"],
            symbol=groups["symbol"],
        )
