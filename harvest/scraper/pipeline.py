"""Single-page pipeline: fetch → parse → match → extract.

Fetch, parse and selector failures end the run and are reported on the
:class:`RunResult` together with the stage that failed.  Extraction failures
only affect their own record.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, Union

import httpx

from harvest.scraper.errors import HarvestError, SelectorError
from harvest.scraper.extractor import compile_fields, extract_all
from harvest.scraper.fetcher import fetch
from harvest.scraper.models import ExtractionResult, FieldSpec, RawDocument, RunResult
from harvest.scraper.parser import ParsedTree, match, parse
from harvest.scraper.query import Query, as_query
from harvest.scraper.recipes import Recipe

logger = logging.getLogger(__name__)


def scrape(
    document: Union[RawDocument, str, bytes],
    query: Union[Query, str],
    fields: FieldSpec,
) -> ExtractionResult:
    """Parse an already-fetched *document* and extract one record per match.

    Raises:
        ParseError: If *document* is not text markup.
        SelectorError: If *query* or a field sub-query is an invalid CSS selector.
    """
    tree = parse(document)
    return extract_all(match(tree, query), fields)


def _run(
    url: str,
    apply: Callable[[ParsedTree], ExtractionResult],
    timeout: Optional[float],
    client: Optional[httpx.Client],
) -> RunResult:
    try:
        raw = fetch(url, timeout=timeout, client=client)
        tree = parse(raw)
        result = apply(tree)
    except HarvestError as exc:
        return _failed(url, exc)

    logger.info(
        "Run for %s: %d records, %d failures",
        url,
        len(result.records),
        len(result.failures),
    )
    return RunResult(
        url=url, records=result.records, failures=result.failures, final_url=raw.url
    )


def _failed(url: str, exc: HarvestError) -> RunResult:
    logger.error("Run for %s failed at %s stage: %s", url, exc.stage, exc)
    return RunResult(url=url, error=exc, failed_stage=exc.stage)


def run(
    url: str,
    query: Union[Query, str],
    fields: FieldSpec,
    *,
    timeout: Optional[float] = None,
    client: Optional[httpx.Client] = None,
) -> RunResult:
    """Fetch *url*, match *query* and extract *fields* from every match.

    Selectors are compiled before the request is sent, so an invalid one
    fails the run at the query stage without touching the network.
    """
    try:
        query = as_query(query)
        fields = compile_fields(fields)
    except SelectorError as exc:
        return _failed(url, exc)

    return _run(
        url,
        lambda tree: extract_all(match(tree, query), fields),
        timeout,
        client,
    )


def run_recipe(
    recipe: Recipe,
    url: str,
    *,
    timeout: Optional[float] = None,
    client: Optional[httpx.Client] = None,
) -> RunResult:
    """Fetch *url* and apply *recipe* to it."""
    try:
        recipe = replace(
            recipe, query=as_query(recipe.query), fields=compile_fields(recipe.fields)
        )
    except SelectorError as exc:
        return _failed(url, exc)

    return _run(url, recipe.apply, timeout, client)
