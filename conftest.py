"""
Shared pytest fixtures.

Pages come from samples/*.html; network access is replaced by FakeFetcher,
which serves a fixed URL → bytes table and records every call.
"""

from pathlib import Path

import pytest

from boxoffice_parser.exceptions import FetchFailed

SAMPLES = Path(__file__).parent / "samples"


def sample(name: str) -> str:
    return (SAMPLES / name).read_text(encoding="utf-8")


class FakeFetcher:
    """Stands in for Fetcher; unknown URLs fail like a 404 would."""

    def __init__(self, pages: dict):
        self.pages = pages
        self.calls = []

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.pages:
            raise FetchFailed(url, reason="404 Client Error: Not Found")
        return self.pages[url]


@pytest.fixture
def load_sample():
    return sample


@pytest.fixture
def site_pages() -> dict:
    """Every page a full 2024 yearly run touches."""
    files = {
        "https://www.boxofficemojo.com/year/2024/?grossesOption=totalGrosses": "year.html",
        "https://www.boxofficemojo.com/release/rl100/": "release.html",
        "https://www.boxofficemojo.com/title/tt1000001/": "title.html",
        "https://pro.imdb.com/title/tt1000001/": "pro_title.html",
        "https://www.boxofficemojo.com/release/rl200/": "release_limited.html",
        "https://www.boxofficemojo.com/title/tt2000002/": "title_limited.html",
        "https://pro.imdb.com/title/tt2000002/": "pro_series.html",
    }
    return {url: (SAMPLES / name).read_bytes() for url, name in files.items()}


@pytest.fixture
def fake_fetcher(site_pages) -> FakeFetcher:
    return FakeFetcher(site_pages)
