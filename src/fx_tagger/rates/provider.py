"""Rate-lookup collaborator used at tagging time."""
from __future__ import annotations

import math
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping

import structlog

from fx_tagger.models.currency import CurrencyToken

logger = structlog.get_logger(__name__)


class RateProvider(ABC):
    """Abstract base class for rate sources.

    A rate is the amount of target currency per one unit of the source currency.
    """

    @abstractmethod
    def rate(self, currency: CurrencyToken) -> float | None:
        """Return the current rate for ``currency`` or None when unknown."""
        ...

    def is_stale(self, max_age: float) -> bool:
        """True when the rates are older than ``max_age`` seconds."""
        return False


class InMemoryRateProvider(RateProvider):
    """Rate table owned by the caller and refreshed out of band."""

    def __init__(
        self,
        rates: Mapping[str, float] | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self._clock = clock
        self._rates: dict[CurrencyToken, float] = {}
        self._updated_at: float | None = None
        if rates:
            self.update(rates)

    def update(self, rates: Mapping[str, float]) -> None:
        """Replace the whole table. Unknown codes and non-positive rates are dropped."""
        table: dict[CurrencyToken, float] = {}
        for code, value in rates.items():
            try:
                token = CurrencyToken(str(code).upper())
                value = float(value)
            except (ValueError, TypeError):
                logger.warning("rate_rejected", currency=str(code), value=repr(value))
                continue
            if not math.isfinite(value) or value <= 0:
                logger.warning("rate_rejected", currency=token.value, value=value)
                continue
            table[token] = value
        self._rates = table
        self._updated_at = self._clock()
        logger.info("rates_updated", currencies=sorted(t.value for t in table))

    def rate(self, currency: CurrencyToken) -> float | None:
        return self._rates.get(currency)

    def snapshot(self) -> dict[CurrencyToken, float]:
        return dict(self._rates)

    @property
    def updated_at(self) -> float | None:
        return self._updated_at

    def is_stale(self, max_age: float) -> bool:
        """True when the table was never filled or is older than ``max_age`` seconds."""
        if self._updated_at is None:
            return True
        return self._clock() - self._updated_at >= max_age
