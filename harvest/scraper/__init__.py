"""Scraper package: fetch, parse, query and record extraction."""

from harvest.scraper.errors import (
    ExtractionError,
    FetchError,
    HarvestError,
    InvalidLocator,
    MissingAttribute,
    NetworkError,
    NoMatch,
    ParseError,
    SelectorError,
    UnsuccessfulStatus,
)
from harvest.scraper.extractor import compile_fields, extract, extract_all
from harvest.scraper.fetcher import fetch
from harvest.scraper.models import (
    AttrField,
    ExtractionFailure,
    ExtractionResult,
    RawDocument,
    Record,
    RunResult,
    TextField,
)
from harvest.scraper.parser import NodeRef, ParsedTree, match, match_predicate, match_selector, parse
from harvest.scraper.pipeline import run, run_recipe, scrape
from harvest.scraper.query import (
    AllOf,
    AnyElement,
    AnyOf,
    ClassMembership,
    CompiledSelector,
    Descendant,
    HasAttr,
    Not,
    Query,
    TagName,
    compile_selector,
)
from harvest.scraper.recipes import RECIPES, Recipe, get_recipe

__all__ = [
    "fetch",
    "parse",
    "match",
    "match_predicate",
    "match_selector",
    "extract",
    "extract_all",
    "compile_fields",
    "run",
    "run_recipe",
    "scrape",
    "RawDocument",
    "ParsedTree",
    "NodeRef",
    "Record",
    "TextField",
    "AttrField",
    "ExtractionFailure",
    "ExtractionResult",
    "RunResult",
    "Query",
    "TagName",
    "ClassMembership",
    "Descendant",
    "HasAttr",
    "AllOf",
    "AnyOf",
    "Not",
    "AnyElement",
    "CompiledSelector",
    "compile_selector",
    "Recipe",
    "RECIPES",
    "get_recipe",
    "HarvestError",
    "FetchError",
    "InvalidLocator",
    "NetworkError",
    "UnsuccessfulStatus",
    "ParseError",
    "SelectorError",
    "ExtractionError",
    "MissingAttribute",
    "NoMatch",
]
