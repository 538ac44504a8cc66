"""Shared fixtures: sample pages, a stub page fetcher and HTML parsing helpers."""

import json
from datetime import datetime, timezone

import pytest
from bs4 import BeautifulSoup

from fetcher import FetchedPage

PAGE_URL = "https://example.com/guides/solar-panels"


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def json_ld(*items) -> str:
    return "".join(
        f'<script type="application/ld+json">{json.dumps(item)}</script>' for item in items
    )


def fetched(html: str, url: str = PAGE_URL) -> FetchedPage:
    return FetchedPage(
        soup=make_soup(html),
        html=html,
        status_code=200,
        url=url,
        headers={"content-type": "text/html"},
        redirected=False,
    )


class StubFetcher:
    """Page fetcher returning canned HTML and recording requested URLs."""

    def __init__(self, html: str):
        self.html = html
        self.calls: list[str] = []

    def __call__(self, url: str) -> FetchedPage:
        self.calls.append(url)
        return fetched(self.html, url)


THIN_WORDS = " ".join(["word"] * 49 + ["end."])

THIN_PAGE = f"<html><body><p>{THIN_WORDS}</p></body></html>"


def rich_page(modified: datetime | None = None) -> str:
    """A page that does well in most analyzers."""
    modified = modified or datetime.now(timezone.utc)
    schema = json_ld(
        {
            "@context": "https://schema.org",
            "@graph": [
                {"@type": "Article", "headline": "Solar panels explained"},
                {"@type": "Person", "name": "Dana Reyes"},
                {"@type": "FAQPage", "mainEntity": []},
            ],
        }
    )
    return f"""
    <html>
      <head>
        <title>Solar Panels: How They Work and What They Cost</title>
        <meta name="description" content="{'Answer engine optimization explained. ' * 4}">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <meta name="author" content="Dana Reyes">
        <meta property="article:modified_time" content="{modified.isoformat()}">
        <link rel="canonical" href="{PAGE_URL}">
        {schema}
      </head>
      <body>
        <main>
          <article>
            <h1>Solar panels explained</h1>
            <p>Solar panels convert sunlight into electricity for homes and businesses.
            This guide explains how solar panels work, what they cost and how to choose one.</p>
            <h2>What are solar panels?</h2>
            <p>What is a solar panel? It is a set of photovoltaic cells. Why does it matter?
            It lowers bills by 40% on average. How to start? Get a quote first.</p>
            <ul><li>Cost: $12,000</li><li>Lifespan: 25 years</li><li>Payback: 8 years</li>
            <li>Output: 400 watts</li><li>Warranty: 20 years</li></ul>
            <ol><li>Get quotes</li><li>Install</li></ol>
            <table><tr><td>Panel</td><td>Watts</td></tr></table>
            <p>I tested three systems. We tested two more. I found that output varies.
            In my experience, after using them for a year, we discovered real savings.</p>
            <p>According to Jane Doe, a certified installer with years of experience, costs fell.
            Research shows prices dropped. Study found 30% growth. Source: energy.gov.</p>
            <img src="a.jpg" alt="solar panels on a roof">
            <img src="b.jpg" alt="installer at work">
            <img src="c.jpg" alt="inverter">
            <figure><img src="d.jpg" alt="chart"><figcaption>Output</figcaption></figure>
            <a href="https://www.energy.gov/solar">DOE</a>
            <a href="https://en.wikipedia.org/wiki/Solar_panel">Wikipedia</a>
            <a href="https://www.nrel.gov/">NREL</a>
            <a href="/about">About us</a>
            <a href="mailto:hello@example.com">Contact</a>
            <a href="/privacy">Privacy</a>
          </article>
        </main>
      </body>
    </html>
    """


@pytest.fixture
def thin_soup() -> BeautifulSoup:
    return make_soup(THIN_PAGE)


@pytest.fixture
def rich_soup() -> BeautifulSoup:
    return make_soup(rich_page())


@pytest.fixture
def empty_soup() -> BeautifulSoup:
    return make_soup("")


# Unclosed IPv6 bracket: urllib.parse rejects this target outright
MALFORMED_LINK = '<a href="http://[broken/page">Broken</a>'
