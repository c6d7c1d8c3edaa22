"""Base HTML parsing utilities shared across all parsers."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup


def parse_html(html: str, parser: str = "lxml") -> BeautifulSoup:
    """Parse an HTML string and return a BeautifulSoup document.

    Args:
        html: Raw HTML content from the switch response.
        parser: Parser library to use (default: ``lxml``).

    Returns:
        Parsed BeautifulSoup document.
    """
    return BeautifulSoup(html, parser)


def normalize_text(s: str) -> str:
    """Strip surrounding whitespace and collapse internal runs.

    Args:
        s: Raw text extracted from an HTML element.

    Returns:
        Cleaned string with single spaces between words.
    """
    return re.sub(r"\s+", " ", s).strip()


def find_input_value(soup: BeautifulSoup, name: str) -> str | None:
    """Return the ``value`` of the first ``<input>`` named (or with id) *name*.

    The switch firmware is inconsistent about ``name`` vs ``id`` and about
    quoting, so both attributes are tried.

    Args:
        soup: Parsed document.
        name: Input ``name``/``id`` to look for.

    Returns:
        The stripped value, or ``None`` if no such input exists or its value
        is empty.
    """
    tag = soup.find("input", attrs={"name": name}) or soup.find("input", attrs={"id": name})
    if tag is None:
        return None
    value = tag.get("value")
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None
