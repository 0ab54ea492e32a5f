"""Shared fixtures: a trimmed-down Hacker News front page."""

from __future__ import annotations

import pytest

from harvest.scraper import RawDocument, parse

HN_URL = "https://news.example.com/"

_FRONT_PAGE_HTML = """\
<html>
<head><title>Hacker News</title></head>
<body>
<table id="hnmain">
  <tr id="header">
    <td><a href="https://news.example.com"><img src="y18.svg"></a></td>
    <td><span class="pagetop"><a href="news">Hacker News</a></span></td>
    <td><span class="pagetop"><a href="login?goto=news">login</a></span></td>
  </tr>
  <tr class="athing" id="1">
    <td class="title"><span class="rank">1.</span></td>
    <td class="votelinks"><center>up</center></td>
    <td class="title"><span class="titleline"><a href="/item?id=1">Story A</a></span></td>
  </tr>
  <tr><td class="subtext">100 points</td></tr>
  <tr class="athing" id="2">
    <td class="title"><span class="rank">2.</span></td>
    <td class="votelinks"><center>up</center></td>
    <td class="title"><span class="titleline"><a href="/item?id=2">Story B</a></span></td>
  </tr>
  <tr><td class="subtext">50 points</td></tr>
  <tr class="athing" id="3">
    <td class="title"><span class="rank">3.</span></td>
    <td class="votelinks"><center>up</center></td>
    <td class="title"><span class="titleline"><a href="/item?id=3">Story C</a></span></td>
  </tr>
  <tr><td class="subtext">10 points</td></tr>
</table>
</body>
</html>
"""


@pytest.fixture
def front_page_html() -> str:
    return _FRONT_PAGE_HTML


@pytest.fixture
def front_page_doc() -> RawDocument:
    return RawDocument.from_text(_FRONT_PAGE_HTML, url=HN_URL)


@pytest.fixture
def front_page_tree(front_page_doc):
    return parse(front_page_doc)
