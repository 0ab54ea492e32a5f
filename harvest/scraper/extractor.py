"""Record extraction: turns matched nodes into records of named strings."""

from __future__ import annotations

import logging
from typing import Iterable, List

from harvest.scraper.errors import ExtractionError, MissingAttribute, NoMatch
from harvest.scraper.models import (
    AttrField,
    ExtractionFailure,
    ExtractionResult,
    FieldSpec,
    Record,
    TextField,
)
from harvest.scraper.parser import NodeRef
from harvest.scraper.query import as_query

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _target(node: NodeRef, spec) -> NodeRef:
    if spec.query is None:
        return node
    target = node.first(spec.query)
    if target is None:
        raise NoMatch(spec.query)
    return target


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compile_fields(fields: FieldSpec) -> FieldSpec:
    """Resolve CSS-string sub-queries once so a bad selector fails before any work.

    Raises:
        SelectorError: If a sub-query is an invalid CSS selector.
        TypeError: If a field is neither a :class:`TextField` nor an :class:`AttrField`.
    """
    compiled = {}
    for name, spec in fields.items():
        if isinstance(spec, TextField):
            query = None if spec.query is None else as_query(spec.query)
            compiled[name] = TextField(query=query, strip=spec.strip)
        elif isinstance(spec, AttrField):
            query = None if spec.query is None else as_query(spec.query)
            compiled[name] = AttrField(name=spec.name, query=query)
        else:
            raise TypeError(
                f"Field {name!r} must be a TextField or AttrField, got {type(spec).__name__}"
            )
    return compiled


def extract(node: NodeRef, fields: FieldSpec) -> Record:
    """Extract one record from *node*.

    Raises:
        NoMatch: If a field's sub-query matches nothing below *node*.
        MissingAttribute: If the element selected for an attribute field
            does not carry that attribute.
    """
    record: Record = {}
    for name, spec in compile_fields(fields).items():
        target = _target(node, spec)
        if isinstance(spec, TextField):
            record[name] = target.text(strip=spec.strip)
        else:
            value = target.attr(spec.name)
            if value is None:
                raise MissingAttribute(spec.name)
            record[name] = value
    return record


def extract_all(nodes: Iterable[NodeRef], fields: FieldSpec) -> ExtractionResult:
    """Extract a record from every node, collecting failures instead of stopping.

    Records keep the order of *nodes*; each failure remembers the index of the
    node it came from.
    """
    fields = compile_fields(fields)
    records: List[Record] = []
    failures: List[ExtractionFailure] = []
    for index, node in enumerate(nodes):
        try:
            records.append(extract(node, fields))
        except ExtractionError as exc:
            logger.warning("Record %d (%r): %s", index, node, exc)
            failures.append(ExtractionFailure(index=index, node=node, error=exc))
    return ExtractionResult(records=records, failures=failures)
