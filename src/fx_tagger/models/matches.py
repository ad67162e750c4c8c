"""Scanner output and retagging segment models.

A ``RawMatch`` carries exactly one ``MatchForm`` variant describing how the
currency was written next to the amount. ``retag`` turns text into an ordered
list of ``Segment`` values that the DOM engine materialises.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from fx_tagger.models.currency import CurrencyToken


# ---------------------------------------------------------------------------
# Match forms
# ---------------------------------------------------------------------------


class CodePrefix(BaseModel):
    """``USD 45.00``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["code_prefix"] = "code_prefix"
    currency: CurrencyToken
    raw_number: str


class CodeSuffix(BaseModel):
    """``199 GBP``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["code_suffix"] = "code_suffix"
    currency: CurrencyToken
    raw_number: str


class SymbolPrefix(BaseModel):
    """``€89.99``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["symbol_prefix"] = "symbol_prefix"
    currency: CurrencyToken
    raw_number: str
    symbol: str


MatchForm = Union[CodePrefix, CodeSuffix, SymbolPrefix]


class RawMatch(BaseModel):
    """One scanner hit: the matched span and how it was written."""

    model_config = ConfigDict(frozen=True)

    text: str
    start: int
    end: int
    form: MatchForm = Field(discriminator="kind")

    @property
    def currency(self) -> CurrencyToken:
        return self.form.currency

    @property
    def raw_number(self) -> str:
        return self.form.raw_number


# ---------------------------------------------------------------------------
# Retag segments
# ---------------------------------------------------------------------------


class LiteralSegment(BaseModel):
    """Text kept verbatim between price matches."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    text: str


class TaggedSegment(BaseModel):
    """A price match with its normalized amount."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["tagged"] = "tagged"
    match: RawMatch
    amount: float

    @property
    def text(self) -> str:
        return self.match.text

    @property
    def currency(self) -> CurrencyToken:
        return self.match.currency


Segment = Union[LiteralSegment, TaggedSegment]
