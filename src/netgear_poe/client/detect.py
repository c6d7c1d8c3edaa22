"""Switch model detection: decide which login dialect a host speaks."""

from __future__ import annotations

import logging

from netgear_poe.client.errors import UnrecognizedModelError
from netgear_poe.client.http import NetgearHTTP
from netgear_poe.model.session import ModelDialect
from netgear_poe.parser.login import parse_model_name
from netgear_poe.vendor.netgear.endpoints import GAMBIT_LOGIN, LEGACY_LOGIN, ROOT
from netgear_poe.vendor.netgear.mappings import MODEL_DIALECTS

logger = logging.getLogger(__name__)


def detect_dialect(http: NetgearHTTP) -> ModelDialect:
    """Probe the switch landing page and return its login dialect.

    Only an unauthenticated GET is issued, so detection never disturbs an
    existing session on the switch.

    Args:
        http: Transport bound to the switch.

    Returns:
        The detected :class:`ModelDialect`.

    Raises:
        UnreachableHostError: If the landing page cannot be fetched.
        UnrecognizedModelError: If the page matches no known model family.
    """
    html = http.get(ROOT).text
    dialect = classify_landing_page(html)
    if dialect is None:
        raise UnrecognizedModelError(
            f"Could not determine the switch model at {http.base_url!r}; "
            f"supported models: {', '.join(sorted(MODEL_DIALECTS))}"
        )
    return dialect


def classify_landing_page(html: str) -> ModelDialect | None:
    """Classify a landing page by model name, falling back to its login link.

    Returns:
        The dialect, or ``None`` if the page is not recognised.
    """
    model = parse_model_name(html)
    if model is not None:
        logger.debug("Detected model %s", model)
        return MODEL_DIALECTS[model]
    if GAMBIT_LOGIN in html:
        logger.debug("No model name on landing page; found %s link", GAMBIT_LOGIN)
        return ModelDialect.GAMBIT_FORM
    if LEGACY_LOGIN in html:
        logger.debug("No model name on landing page; found %s link", LEGACY_LOGIN)
        return ModelDialect.LEGACY_COOKIE
    return None
