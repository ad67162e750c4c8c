"""Split text into literal and tagged price segments.

Pure text-in, segments-out; the DOM engine materialises the result.
"""
from __future__ import annotations

import structlog

from fx_tagger.international.number_parsing import normalize_amount
from fx_tagger.international.price_scanner import PriceScanner
from fx_tagger.models.matches import LiteralSegment, Segment, TaggedSegment

logger = structlog.get_logger(__name__)


def retag(text: str, scanner: PriceScanner) -> list[Segment]:
    """Return ``text`` as alternating literal and tagged segments.

    Joining every segment's text reproduces ``text`` exactly. Matches whose
    amount cannot be normalized stay in the surrounding literal.
    """
    segments: list[Segment] = []
    pending = ""
    last_end = 0

    for match in scanner.scan(text):
        pending += text[last_end:match.start]
        last_end = match.end
        try:
            amount = normalize_amount(match.raw_number)
        except ValueError as e:
            logger.warning("amount_unparseable", raw=match.raw_number, error=str(e))
            pending += match.text
            continue
        if pending:
            segments.append(LiteralSegment(text=pending))
            pending = ""
        segments.append(TaggedSegment(match=match, amount=amount))

    pending += text[last_end:]
    if pending:
        segments.append(LiteralSegment(text=pending))
    return segments


def has_tags(segments: list[Segment]) -> bool:
    return any(isinstance(seg, TaggedSegment) for seg in segments)
