"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def soup_of(name: str) -> BeautifulSoup:
    return BeautifulSoup(_read_fixture(name), "lxml")


@pytest.fixture
def blog_html() -> str:
    return _read_fixture("blog_article.html")


@pytest.fixture
def gated_html() -> str:
    return _read_fixture("gated_resource.html")


@pytest.fixture
def case_study_html() -> str:
    return _read_fixture("case_study.html")


@pytest.fixture
def solutions_html() -> str:
    return _read_fixture("solutions_page.html")


@pytest.fixture
def solutions_fallback_html() -> str:
    return _read_fixture("solutions_fallback.html")


@pytest.fixture
def built_for_html() -> str:
    return _read_fixture("built_for_audience.html")


@pytest.fixture
def company_html() -> str:
    return _read_fixture("company_utility.html")


@pytest.fixture
def catalog_path() -> Path:
    return FIXTURES_DIR / "url-catalog.json"


@pytest.fixture
def no_sleep():
    """A ``sleep`` stand-in that records the delays it was asked for."""
    calls: list[float] = []

    def _sleep(seconds: float) -> None:
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep
