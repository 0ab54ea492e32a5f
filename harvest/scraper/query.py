"""Query variants evaluated against parsed trees.

A query is a stateless description of which elements to match.  Structural
predicates (``TagName``, ``ClassMembership``, ``Descendant`` …) and compiled
CSS selectors share the same ``matches(tag)`` contract, so the parser walks
the tree once in document order and asks the query about each element.

Predicates compose the way the structural queries read::

    ClassMembership("title").descendant(TagName("a"))
    TagName("a") & HasAttr("href")
    ~ClassMembership("hidden")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

import soupsieve
from bs4 import BeautifulSoup, Tag

from harvest.scraper.errors import SelectorError


def is_element(node: Any) -> bool:
    """True for real elements; the BeautifulSoup document object is excluded."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def _attr_value(tag: Tag, name: str) -> Optional[str]:
    value = tag.get(name)
    if value is None:
        return None
    # Multi-valued attributes (class, rel, …) come back as lists.
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return value


class Query:
    """Base class for everything the parser can match against."""

    def matches(self, tag: Tag) -> bool:
        raise NotImplementedError

    def descendant(self, child: Query) -> Descendant:
        """Match *child* elements that sit anywhere below an element matching ``self``."""
        return Descendant(self, child)

    def __and__(self, other: Query) -> AllOf:
        return AllOf(self, other)

    def __or__(self, other: Query) -> AnyOf:
        return AnyOf(self, other)

    def __invert__(self) -> Not:
        return Not(self)


# ---------------------------------------------------------------------------
# Structural predicates
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnyElement(Query):
    def matches(self, tag: Tag) -> bool:
        return is_element(tag)


@dataclass(frozen=True)
class TagName(Query):
    """Tag name equality, case-insensitive."""

    name: str

    def matches(self, tag: Tag) -> bool:
        return is_element(tag) and tag.name.lower() == self.name.lower()


@dataclass(frozen=True)
class ClassMembership(Query):
    """The element's class list contains ``name``."""

    name: str

    def matches(self, tag: Tag) -> bool:
        if not is_element(tag):
            return False
        classes = tag.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        return self.name in classes


@dataclass(frozen=True)
class HasAttr(Query):
    """The element carries attribute ``name`` (optionally with an exact ``value``)."""

    name: str
    value: Optional[str] = None

    def matches(self, tag: Tag) -> bool:
        if not is_element(tag):
            return False
        actual = _attr_value(tag, self.name)
        if actual is None:
            return False
        return self.value is None or actual == self.value


@dataclass(frozen=True)
class Descendant(Query):
    """Elements matching ``child`` with at least one proper ancestor matching ``ancestor``."""

    ancestor: Query
    child: Query

    def matches(self, tag: Tag) -> bool:
        if not self.child.matches(tag):
            return False
        return any(
            self.ancestor.matches(parent)
            for parent in tag.parents
            if is_element(parent)
        )


@dataclass(frozen=True)
class AllOf(Query):
    left: Query
    right: Query

    def matches(self, tag: Tag) -> bool:
        return self.left.matches(tag) and self.right.matches(tag)


@dataclass(frozen=True)
class AnyOf(Query):
    left: Query
    right: Query

    def matches(self, tag: Tag) -> bool:
        return self.left.matches(tag) or self.right.matches(tag)


@dataclass(frozen=True)
class Not(Query):
    inner: Query

    def matches(self, tag: Tag) -> bool:
        return is_element(tag) and not self.inner.matches(tag)


# ---------------------------------------------------------------------------
# CSS selectors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CompiledSelector(Query):
    """A CSS selector compiled once by soupsieve.

    Build instances with :func:`compile_selector`, which turns syntax errors
    into :class:`~harvest.scraper.errors.SelectorError`.
    """

    source: str
    pattern: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.pattern is None:
            object.__setattr__(self, "pattern", _compile(self.source))

    def matches(self, tag: Tag) -> bool:
        return is_element(tag) and self.pattern.match(tag)


def _compile(source: str) -> Any:
    if not isinstance(source, str):
        raise SelectorError(repr(source), "selector must be a string")
    if not source.strip():
        raise SelectorError(source, "selector is empty")
    try:
        return soupsieve.compile(source)
    except soupsieve.SelectorSyntaxError as exc:
        raise SelectorError(source, str(exc).splitlines()[0]) from exc


def compile_selector(source: str) -> CompiledSelector:
    """Compile a CSS selector string into a reusable query."""
    return CompiledSelector(source)


def as_query(query: Union[Query, str]) -> Query:
    """Accept either a query object or a CSS selector string."""
    if isinstance(query, Query):
        return query
    if isinstance(query, str):
        return compile_selector(query)
    raise TypeError(f"Expected a Query or CSS selector string, got {type(query).__name__}")
