"""Data models for the scraper pipeline."""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Union

if TYPE_CHECKING:
    from harvest.scraper.errors import ExtractionError, HarvestError
    from harvest.scraper.parser import NodeRef
    from harvest.scraper.query import Query


#: One extracted result: field name -> extracted string.
Record = Dict[str, str]


def known_encoding(name: Optional[str]) -> Optional[str]:
    """Canonical codec name for *name*, or ``None`` if Python does not know it."""
    if not name:
        return None
    try:
        codec = codecs.lookup(name.strip()).name
        # Rejects bytes-to-bytes codecs such as base64.
        b"".decode(codec)
    except LookupError:
        return None
    return codec


def charset_from_content_type(content_type: str) -> Optional[str]:
    """The ``charset=`` parameter of a Content-Type header, if any."""
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            return value.strip().strip("\"'") or None
    return None


@dataclass
class RawDocument:
    """The unparsed payload of a single successful fetch."""

    url: str
    content: bytes
    status_code: int = 200
    content_type: str = ""
    encoding: Optional[str] = None

    @classmethod
    def from_text(cls, text: str, url: str = "", content_type: str = "text/html") -> RawDocument:
        """Wrap an in-memory markup string (fixtures, cached pages, stdin)."""
        return cls(
            url=url,
            content=text.encode("utf-8"),
            content_type=content_type,
            encoding="utf-8",
        )

    @property
    def declared_encoding(self) -> Optional[str]:
        """The usable codec from ``encoding`` or the Content-Type charset.

        Unknown charset names are ignored.
        """
        return known_encoding(self.encoding) or known_encoding(
            charset_from_content_type(self.content_type)
        )

    @property
    def text(self) -> str:
        """The payload decoded with the declared charset (UTF-8 when absent or unknown)."""
        return self.content.decode(self.declared_encoding or "utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Field specs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextField:
    """Text content of the record's node, or of its first descendant matching *query*."""

    query: Union[Query, str, None] = None
    strip: bool = False


@dataclass(frozen=True)
class AttrField:
    """Attribute *name* of the record's node, or of its first descendant matching *query*."""

    name: str
    query: Union[Query, str, None] = None


Field = Union[TextField, AttrField]
FieldSpec = Mapping[str, Field]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class ExtractionFailure:
    """A matched node whose record could not be extracted."""

    index: int
    node: NodeRef
    error: ExtractionError


@dataclass
class ExtractionResult:
    """Records in document order plus the per-node failures met along the way."""

    records: List[Record] = field(default_factory=list)
    failures: List[ExtractionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class RunResult:
    """Outcome of one fetch → parse → extract run.

    ``error`` and ``failed_stage`` are set when a terminal stage failed; in
    that case ``records`` and ``failures`` are empty.
    """

    url: str
    records: List[Record] = field(default_factory=list)
    failures: List[ExtractionFailure] = field(default_factory=list)
    error: Optional[HarvestError] = None
    failed_stage: Optional[str] = None
    #: URL of the fetched document after redirects; ``None`` if nothing was fetched.
    final_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failures
