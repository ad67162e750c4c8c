"""Live HTML document with mutation notifications.

``LiveDocument`` wraps a BeautifulSoup tree. Every structural or text change
made through its helpers is reported as a batch of ``MutationRecord`` values
to the attached ``MutationObserver`` instances, mirroring the browser's
observe/disconnect contract: a disconnected observer never sees records for
changes made while it was disconnected.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Literal

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

MutationType = Literal["childList", "characterData"]


@dataclass
class MutationRecord:
    """One change descriptor in a mutation batch."""

    type: MutationType
    target: PageElement
    added: list[PageElement] = field(default_factory=list)
    removed: list[PageElement] = field(default_factory=list)


MutationCallback = Callable[[list[MutationRecord]], None]


class MutationObserver:
    """Receives mutation batches from the documents it observes."""

    def __init__(self, callback: MutationCallback):
        self._callback = callback
        self._documents: list[LiveDocument] = []

    def observe(self, document: LiveDocument) -> None:
        if document not in self._documents:
            document._observers.append(self)
            self._documents.append(document)

    def disconnect(self) -> None:
        for document in self._documents:
            document._observers.remove(self)
        self._documents.clear()

    @property
    def observing(self) -> bool:
        return bool(self._documents)

    def _deliver(self, records: list[MutationRecord]) -> None:
        self._callback(records)


class LiveDocument:
    """A parsed page whose mutations can be observed."""

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup
        self._observers: list[MutationObserver] = []

    @classmethod
    def from_html(cls, html: str, parser: str = "html.parser") -> LiveDocument:
        return cls(BeautifulSoup(html, parser))

    def root(self) -> Tag | None:
        """The scan root, i.e. ``<body>``, or None when the page has none."""
        return self.soup.body

    def render(self) -> str:
        return str(self.soup)

    # ── Node construction ─────────────────────────────────────────────────

    def new_tag(self, name: str, attrs: dict | None = None, string: str | None = None) -> Tag:
        tag = self.soup.new_tag(name, attrs=attrs or {})
        if string is not None:
            tag.string = string
        return tag

    def new_string(self, text: str) -> NavigableString:
        return self.soup.new_string(text)

    # ── Mutations ─────────────────────────────────────────────────────────

    def replace_node(self, node: PageElement, replacements: Iterable[PageElement]) -> None:
        """Swap ``node`` for ``replacements`` in a single tree operation."""
        parent = node.parent
        replacements = list(replacements)
        node.replace_with(*replacements)
        self.notify([MutationRecord("childList", parent, added=replacements, removed=[node])])

    def unwrap(self, tag: Tag) -> None:
        """Replace ``tag`` with its children. Raises ValueError if detached."""
        parent = tag.parent
        children = list(tag.contents)
        tag.unwrap()
        self.notify([MutationRecord("childList", parent, added=children, removed=[tag])])

    def append_html(self, parent: Tag, html: str) -> list[PageElement]:
        """Parse ``html`` and append its nodes under ``parent``."""
        fragment = BeautifulSoup(html, "html.parser")
        added = list(fragment.contents)
        for node in added:
            parent.append(node.extract())
        self.notify([MutationRecord("childList", parent, added=added)])
        return added

    def set_text(self, node: NavigableString, text: str) -> NavigableString:
        """Replace the content of a text node; returns the new node."""
        replacement = self.new_string(text)
        node.replace_with(replacement)
        self.notify([MutationRecord("characterData", replacement)])
        return replacement

    def remove(self, node: PageElement) -> None:
        parent = node.parent
        node.extract()
        self.notify([MutationRecord("childList", parent, removed=[node])])

    def notify(self, records: list[MutationRecord]) -> None:
        for observer in list(self._observers):
            observer._deliver(records)
