"""Ordered fallback selectors for brittle third-party markup.

Each field of a scraped record is described by a tuple of strategies that
are tried in order; the first non-blank result wins. Selector tables live
next to the adapters as plain data so they can be tuned when a site
changes its markup.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Union

from bs4 import BeautifulSoup, Tag

Node = Union[BeautifulSoup, Tag]


class Strategy(Protocol):
    def extract(self, node: Node) -> Optional[str]:
        ...


@dataclass(frozen=True)
class Text:
    """Stripped text of the first element matching ``css``."""

    css: str

    def extract(self, node: Node) -> Optional[str]:
        elem = node.select_one(self.css)
        if elem is None:
            return None
        return elem.get_text(strip=True)


@dataclass(frozen=True)
class Attr:
    """Attribute value of the first element matching ``css``.

    An empty ``css`` reads the attribute from the node itself.
    """

    css: str
    attribute: str

    def extract(self, node: Node) -> Optional[str]:
        elem = node.select_one(self.css) if self.css else node
        if elem is None:
            return None
        value = elem.get(self.attribute)
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip() if value else None


def first_non_empty(
    node: Node,
    strategies: Iterable[Strategy],
    default: Optional[str] = None,
) -> Optional[str]:
    """Evaluate strategies in order and return the first non-blank value.

    Later strategies are not evaluated once one succeeds.
    """
    for strategy in strategies:
        value = strategy.extract(node)
        if value:
            return value
    return default
