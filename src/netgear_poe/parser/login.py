"""Parsers for the Netgear login pages and login responses."""

from __future__ import annotations

import re

from netgear_poe.parser.html import find_input_value, normalize_text, parse_html
from netgear_poe.vendor.netgear.endpoints import (
    GAMBIT_LOGIN,
    GAMBIT_LOGIN_SUBMIT,
    LEGACY_LOGIN,
)
from netgear_poe.vendor.netgear.mappings import LOGIN_ERROR_MESSAGES, MODEL_DIALECTS

# Longest names first so "GS308EPP" is not reported as "GS308EP".
_MODEL_RE: re.Pattern[str] = re.compile(
    "|".join(sorted(MODEL_DIALECTS, key=len, reverse=True))
)

# Anything shorter than this is not a real page.
_MIN_PAGE_LEN: int = 10

_LOGIN_MARKERS: tuple[str, ...] = (LEGACY_LOGIN, GAMBIT_LOGIN, GAMBIT_LOGIN_SUBMIT)


def parse_rand(html: str) -> str | None:
    """Extract the ``rand`` login seed from a login page.

    Example input::

        <input type=hidden id="rand" name="rand" value='1735414426' disabled>

    Returns:
        The seed string, or ``None`` if the page carries no ``rand`` input.
    """
    return find_input_value(parse_html(html), "rand")


def parse_gambit(html: str) -> str | None:
    """Extract the session token from the hidden ``Gambit`` input of a GS316 page."""
    return find_input_value(parse_html(html), "Gambit")


def parse_model_name(html: str) -> str | None:
    """Return the model name (e.g. ``"GS308EPP"``) shown on a switch page.

    The ``<title>`` is checked first, then the whole page text.
    """
    soup = parse_html(html)
    candidates: list[str] = []
    if soup.title is not None:
        candidates.append(normalize_text(soup.title.get_text()))
    candidates.append(normalize_text(soup.get_text(" ")))
    for text in candidates:
        m = _MODEL_RE.search(text.upper())
        if m:
            return m.group(0)
    return None


def parse_login_error(html: str) -> str | None:
    """Return a known firmware rejection message contained in *html*, if any."""
    text = normalize_text(parse_html(html).get_text(" ")).lower()
    for message in LOGIN_ERROR_MESSAGES:
        if message in text:
            return message
    return None


def is_login_page(html: str) -> bool:
    """Return ``True`` if *html* is the switch asking for a (re-)login.

    The firmware answers requests carrying a stale session with an almost
    empty body or with a page redirecting to one of the login resources.
    """
    if len(html.strip()) < _MIN_PAGE_LEN:
        return True
    return any(marker in html for marker in _LOGIN_MARKERS)
