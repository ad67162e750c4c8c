"""Tag prices in a live document and keep the tags current.

A scan pass walks every visible text node under the root, replaces price
substrings with marker elements and leaves everything else untouched.
Text already inside a marker is compared against what a fresh scan would
produce: unchanged markers are kept as they are, changed ones are unwrapped
back to plain text before being tagged again. Running a pass twice over an
unchanged tree therefore writes nothing the second time.
"""

from __future__ import annotations

import asyncio

from bs4 import NavigableString, PageElement, Tag
from bs4.element import PreformattedString
from pydantic import BaseModel
import structlog

from fx_tagger.config import Settings
from fx_tagger.dom.document import LiveDocument, MutationObserver
from fx_tagger.dom.scheduler import ScanScheduler
from fx_tagger.international.price_scanner import PriceScanner
from fx_tagger.international.retag import has_tags, retag
from fx_tagger.models.currency import CurrencyToken
from fx_tagger.models.matches import LiteralSegment, Segment, TaggedSegment
from fx_tagger.rates.provider import RateProvider

logger = structlog.get_logger(__name__)

CURRENCY_ATTR = "data-fx-currency"
AMOUNT_ATTR = "data-fx-amount"
RATE_ATTR = "data-fx-rate"


class ScanReport(BaseModel):
    """Counters for one scan pass."""

    root_found: bool = True
    rates_stale: bool = False
    nodes_visited: int = 0
    nodes_retagged: int = 0
    nodes_unwrapped: int = 0
    nodes_skipped: int = 0
    tags_created: int = 0


class TaggedPrice(BaseModel):
    """What presentation code can read back from a marker element."""

    text: str
    currency: CurrencyToken
    amount: float
    rate: float | None = None

    @property
    def converted(self) -> float | None:
        if self.rate is None:
            return None
        return self.amount * self.rate


def _format_number(value: float) -> str:
    return repr(float(value))


class RetaggingEngine:
    """Keeps price markers in ``document`` in step with its text."""

    def __init__(
        self,
        document: LiveDocument,
        rates: RateProvider,
        settings: Settings | None = None,
        scanner: PriceScanner | None = None,
        root: Tag | None = None,
    ):
        self.document = document
        self._root = root
        self.rates = rates
        self.settings = settings or Settings()
        self.scanner = scanner or PriceScanner(self.settings.currencies)
        self._excluded = frozenset(t.lower() for t in self.settings.excluded_tags)
        self.scheduler = ScanScheduler(
            self.guarded_pass,
            self.settings.coalesce_interval,
            restart_timer_on_mutation=self.settings.restart_timer_on_mutation,
        )
        self._observer = MutationObserver(self.scheduler.notify)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def start(self) -> ScanReport:
        """Tag the current page, then follow its mutations.

        Timers go on the event loop running here, if any.
        """
        try:
            self.scheduler.bind_loop(asyncio.get_running_loop())
        except RuntimeError:
            self.scheduler.bind_loop(None)
        report = self.guarded_pass()
        self._observer.observe(self.document)
        return report

    def stop(self) -> None:
        self._observer.disconnect()
        self.scheduler.cancel()

    @property
    def observing(self) -> bool:
        return self._observer.observing

    def guarded_pass(self) -> ScanReport:
        """Run a scan pass with observation suspended around it."""
        was_observing = self._observer.observing
        self._observer.disconnect()
        try:
            return self.scan_pass()
        finally:
            if was_observing:
                self._observer.observe(self.document)

    # ── Scan pass ─────────────────────────────────────────────────────────

    def root(self) -> Tag | None:
        """The configured container, or the document's ``<body>``.

        A configured container that has been removed from the page counts as missing.
        """
        if self._root is None:
            return self.document.root()
        for parent in self._root.parents:
            if parent is self.document.soup:
                return self._root
        return None

    def scan_pass(self) -> ScanReport:
        report = ScanReport()
        root = self.root()
        if root is None:
            logger.info("scan_root_missing")
            report.root_found = False
            return report

        if self.rates.is_stale(self.settings.rate_cache_max_age):
            logger.warning("rates_stale", max_age=self.settings.rate_cache_max_age)
            report.rates_stale = True

        for node in self._candidate_nodes(root):
            report.nodes_visited += 1
            self._process_node(node, report)

        logger.info("scan_pass_complete", **report.model_dump())
        return report

    def _candidate_nodes(self, root: Tag) -> list[NavigableString]:
        """Visible text nodes that hold a price or sit inside a marker, in document order."""
        candidates = []
        for node in root.descendants:
            if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
                continue
            if self._is_excluded(node):
                continue
            if self.is_marker(node.parent) or self.scanner.contains_price(str(node)):
                candidates.append(node)
        return candidates

    def _is_excluded(self, node: PageElement) -> bool:
        return any(parent.name in self._excluded for parent in node.parents)

    def _process_node(self, node: NavigableString, report: ScanReport) -> None:
        parent = node.parent
        if parent is None:
            logger.warning("node_detached", text=str(node)[:80])
            report.nodes_skipped += 1
            return

        segments = retag(str(node), self.scanner)

        if self.is_marker(parent):
            if self._marker_is_current(parent, node, segments):
                return
            try:
                self.document.unwrap(parent)
            except ValueError as e:
                logger.warning("unwrap_failed", text=str(node)[:80], error=str(e))
                report.nodes_skipped += 1
                return
            report.nodes_unwrapped += 1

        if not has_tags(segments):
            return

        replacements = [self._materialize(seg) for seg in segments]
        self.document.replace_node(node, replacements)
        report.nodes_retagged += 1
        report.tags_created += sum(1 for seg in segments if isinstance(seg, TaggedSegment))

    def _marker_is_current(self, marker: Tag, node: NavigableString, segments: list[Segment]) -> bool:
        if len(marker.contents) != 1 or marker.contents[0] is not node:
            return False
        if len(segments) != 1 or not isinstance(segments[0], TaggedSegment):
            return False
        seg = segments[0]
        return (
            marker.get(CURRENCY_ATTR) == seg.currency.value
            and marker.get(AMOUNT_ATTR) == _format_number(seg.amount)
        )

    # ── Materialization ───────────────────────────────────────────────────

    def _materialize(self, segment: Segment) -> PageElement:
        if isinstance(segment, LiteralSegment):
            return self.document.new_string(segment.text)

        attrs = {
            "class": [self.settings.marker_class],
            CURRENCY_ATTR: segment.currency.value,
            AMOUNT_ATTR: _format_number(segment.amount),
        }
        rate = self.rates.rate(segment.currency)
        if rate is None:
            logger.debug("rate_missing", currency=segment.currency.value)
        else:
            attrs[RATE_ATTR] = _format_number(rate)
        return self.document.new_tag(self.settings.marker_tag, attrs, segment.text)

    # ── Presentation access ───────────────────────────────────────────────

    def is_marker(self, element: PageElement | None) -> bool:
        if not isinstance(element, Tag) or element.name != self.settings.marker_tag:
            return False
        return self.settings.marker_class in element.get_attribute_list("class")

    def read_tag(self, element: Tag) -> TaggedPrice | None:
        """Read a marker back; None if ``element`` is not a well-formed marker."""
        if not self.is_marker(element):
            return None
        try:
            currency = CurrencyToken(element.get(CURRENCY_ATTR))
            amount = float(element.get(AMOUNT_ATTR))
            rate = float(element[RATE_ATTR]) if element.has_attr(RATE_ATTR) else None
        except (TypeError, ValueError):
            return None
        return TaggedPrice(text=element.get_text(), currency=currency, amount=amount, rate=rate)

    def converted_value(self, element: Tag) -> float | None:
        """Amount times the rate captured when the element was tagged."""
        tagged = self.read_tag(element)
        return tagged.converted if tagged else None

    def tagged_elements(self) -> list[Tag]:
        root = self.root()
        if root is None:
            return []
        return [el for el in root.find_all(self.settings.marker_tag) if self.is_marker(el)]
