"""Document parsing: turns a :class:`RawDocument` into a :class:`ParsedTree`.

The tree is built eagerly with BeautifulSoup's ``html.parser`` backend, which
recovers from unclosed tags and stray end tags the way browsers do.  Queries
(see :mod:`harvest.scraper.query`) are evaluated by a single pre-order walk,
so every result list comes back in document order.
"""

from __future__ import annotations

import codecs
import logging
from typing import Dict, Iterator, List, Optional, Union

from bs4 import BeautifulSoup, Tag
from bs4.element import (
    CData,
    NavigableString,
    RubyParenthesisString,
    RubyTextString,
    Script,
    Stylesheet,
    TemplateString,
)

from harvest.scraper.errors import ParseError
from harvest.scraper.models import RawDocument
from harvest.scraper.query import Query, as_query, compile_selector, is_element

logger = logging.getLogger(__name__)

# How much of the payload is inspected for NUL bytes before parsing.
_SNIFF_BYTES = 1024

_WIDE_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE, codecs.BOM_UTF32_LE, codecs.BOM_UTF32_BE)

# Codecs whose ASCII text legitimately contains NUL bytes.
_WIDE_CODECS = ("utf-16", "utf-32")

# Every string type that carries document text; comments, doctypes,
# declarations and processing instructions are left out.
_TEXT_TYPES = (
    NavigableString,
    CData,
    Script,
    Stylesheet,
    TemplateString,
    RubyTextString,
    RubyParenthesisString,
)


class NodeRef:
    """A reference to one element of a :class:`ParsedTree`.

    Only valid while its tree is alive.  Equality is identity of the
    underlying element, so two structurally identical ``<a>`` tags are still
    different nodes.
    """

    __slots__ = ("tree", "_tag")

    def __init__(self, tree: ParsedTree, tag: Tag) -> None:
        self.tree = tree
        self._tag = tag

    @property
    def tag(self) -> Tag:
        """The underlying BeautifulSoup element."""
        return self._tag

    @property
    def tag_name(self) -> str:
        return self._tag.name.lower()

    @property
    def attrs(self) -> Dict[str, str]:
        """Attributes in source order; multi-valued ones are space-joined."""
        return {name: self.attr(name) for name in self._tag.attrs}

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return value

    def text(self, strip: bool = False) -> str:
        """All descendant text nodes concatenated in document order."""
        text = self._tag.get_text(types=_TEXT_TYPES)
        return text.strip() if strip else text

    def children(self) -> List[NodeRef]:
        return [NodeRef(self.tree, child) for child in self._tag.children if is_element(child)]

    def parent(self) -> Optional[NodeRef]:
        parent = self._tag.parent
        if not is_element(parent):
            return None
        return NodeRef(self.tree, parent)

    def find(self, query: Union[Query, str]) -> List[NodeRef]:
        """Descendants of this node (not the node itself) matching *query*."""
        return match(self, query)

    def first(self, query: Union[Query, str]) -> Optional[NodeRef]:
        return _first(self.tree, self._tag, as_query(query))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeRef):
            return NotImplemented
        return self._tag is other._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        attrs = " ".join(f'{k}="{v}"' for k, v in self.attrs.items())
        return f"<NodeRef {self.tag_name}{' ' + attrs if attrs else ''}>"


class ParsedTree:
    """An in-memory element tree built once from a document; read-only afterwards."""

    def __init__(self, soup: BeautifulSoup, url: str = "") -> None:
        self._soup = soup
        self.url = url

    @property
    def root(self) -> BeautifulSoup:
        return self._soup

    @property
    def title(self) -> str:
        """Text of the first ``<title>`` element, or an empty string."""
        title = self._soup.find("title")
        if title is None:
            return ""
        return title.get_text().strip()

    def elements(self) -> Iterator[NodeRef]:
        """Every element in document (pre-order) order."""
        for tag in _iter_elements(self._soup):
            yield NodeRef(self, tag)

    def is_empty(self) -> bool:
        return next(_iter_elements(self._soup), None) is None

    def find(self, query: Union[Query, str]) -> List[NodeRef]:
        return match(self, query)

    def first(self, query: Union[Query, str]) -> Optional[NodeRef]:
        return _first(self, self._soup, as_query(query))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _iter_elements(scope: Tag) -> Iterator[Tag]:
    for node in scope.descendants:
        if isinstance(node, Tag):
            yield node


def _first(tree: ParsedTree, scope: Tag, query: Query) -> Optional[NodeRef]:
    for tag in _iter_elements(scope):
        if query.matches(tag):
            return NodeRef(tree, tag)
    return None


def _is_markup_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    if not media_type:
        return True
    return media_type.startswith("text/") or "html" in media_type or "xml" in media_type


def _check_markup(
    content: Union[str, bytes], content_type: str = "", encoding: Optional[str] = None
) -> None:
    """Raise :class:`ParseError` for payloads that are clearly not markup."""
    if content_type and not _is_markup_type(content_type):
        raise ParseError(f"content type {content_type!r} is not text markup")

    head = content[:_SNIFF_BYTES]
    if isinstance(head, bytes):
        if head.startswith(_WIDE_BOMS) or (encoding or "").startswith(_WIDE_CODECS):
            return
        if b"\x00" in head:
            raise ParseError("payload contains NUL bytes; looks like binary data")
    elif "\x00" in head:
        raise ParseError("payload contains NUL characters; looks like binary data")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse(document: Union[RawDocument, str, bytes]) -> ParsedTree:
    """Parse *document* into a :class:`ParsedTree`.

    Malformed markup is repaired on a best-effort basis; an empty payload
    yields an empty tree.

    Raises:
        ParseError: If the payload is binary rather than text markup.
    """
    if isinstance(document, RawDocument):
        encoding = document.declared_encoding
        _check_markup(document.content, document.content_type, encoding)
        url = document.url
        if document.content:
            soup = BeautifulSoup(
                document.content, "html.parser", from_encoding=encoding
            )
        else:
            soup = BeautifulSoup("", "html.parser")
    elif isinstance(document, (str, bytes)):
        _check_markup(document)
        url = ""
        soup = BeautifulSoup(document, "html.parser")
    else:
        raise TypeError(
            f"Expected RawDocument, str or bytes, got {type(document).__name__}"
        )

    tree = ParsedTree(soup, url=url)
    logger.debug("Parsed %s", url or "<inline document>")
    return tree


def match(scope: Union[ParsedTree, NodeRef], query: Union[Query, str]) -> List[NodeRef]:
    """Evaluate *query* below *scope* and return the matches in document order.

    A string query is compiled as a CSS selector.  Ancestor tests
    (``Descendant``, CSS combinators) look at the whole tree, not only the
    part below *scope*.
    """
    query = as_query(query)
    if isinstance(scope, ParsedTree):
        tree, root = scope, scope.root
    elif isinstance(scope, NodeRef):
        tree, root = scope.tree, scope.tag
    else:
        raise TypeError(f"Expected ParsedTree or NodeRef, got {type(scope).__name__}")
    return [NodeRef(tree, tag) for tag in _iter_elements(root) if query.matches(tag)]


def match_predicate(tree: ParsedTree, predicate: Query) -> List[NodeRef]:
    """Structural matching: every element of *tree* satisfying *predicate*."""
    if not isinstance(predicate, Query):
        raise TypeError(f"Expected a Query, got {type(predicate).__name__}")
    return match(tree, predicate)


def match_selector(tree: ParsedTree, selector: str) -> List[NodeRef]:
    """CSS-selector matching over *tree*.

    Raises:
        SelectorError: If *selector* cannot be compiled.
    """
    return match(tree, compile_selector(selector))
