"""Ready-made extractions for the Hacker News front page.

Each recipe pairs a top-level query with a field spec.  The CLI exposes them
by name; library callers can use them directly::

    tree = parse(fetch("https://news.ycombinator.com/"))
    result = get_recipe("stories").apply(tree)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple, Union

from harvest.scraper.extractor import extract_all
from harvest.scraper.models import AttrField, ExtractionResult, FieldSpec, TextField
from harvest.scraper.parser import ParsedTree, match
from harvest.scraper.query import ClassMembership, Query, TagName


@dataclass(frozen=True)
class Recipe:
    name: str
    description: str
    query: Union[Query, str]
    fields: FieldSpec
    #: (field, value) pairs; records where ``record[field] == value`` are dropped.
    skip: Tuple[Tuple[str, str], ...] = field(default=())

    def apply(self, tree: ParsedTree) -> ExtractionResult:
        result = extract_all(match(tree, self.query), self.fields)
        if self.skip:
            result.records = [r for r in result.records if not self._skipped(r)]
        return result

    def _skipped(self, record) -> bool:
        return any(record.get(name) == value for name, value in self.skip)


_STORY_LINK = ClassMembership("title").descendant(TagName("a"))

RECIPES: Dict[str, Recipe] = {
    recipe.name: recipe
    for recipe in (
        Recipe(
            name="links",
            description="The href of every anchor on the page.",
            query=TagName("a"),
            fields={"href": AttrField("href")},
        ),
        Recipe(
            name="stories",
            description="Rank, title and link of every story row (class 'athing').",
            query=ClassMembership("athing"),
            fields={
                "rank": TextField(ClassMembership("rank"), strip=True),
                "title": TextField(_STORY_LINK, strip=True),
                "href": AttrField("href", _STORY_LINK),
            },
        ),
        Recipe(
            name="headlines",
            description="Headline text of every story link.",
            query=".titleline > a",
            fields={"title": TextField(strip=True)},
        ),
        Recipe(
            name="front-page",
            description="Title and link of every anchor in the story column, minus 'login'.",
            query="td:nth-child(3) > span > a",
            fields={"title": TextField(strip=True), "href": AttrField("href")},
            skip=(("title", "login"),),
        ),
    )
}


def get_recipe(name: str) -> Recipe:
    """Return the recipe called *name*.

    Raises:
        KeyError: If no such recipe exists.
    """
    try:
        return RECIPES[name]
    except KeyError:
        known = ", ".join(sorted(RECIPES))
        raise KeyError(f"Unknown recipe {name!r} (known: {known})") from None
