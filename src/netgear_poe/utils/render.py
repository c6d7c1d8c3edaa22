"""JSON-friendly renderers for session state, used by the example scripts."""

from __future__ import annotations

from typing import Any

from netgear_poe.model.session import SessionToken, mask_token


def render_session(host: str, token: SessionToken | None) -> dict[str, Any]:
    """Serialize the session state of *host* to a JSON-serializable dict.

    Returns:
        A dict with keys:

        - ``"host"`` — the switch host.
        - ``"authenticated"`` — whether a token is held.
        - ``"dialect"`` — dialect value (``"legacy"``/``"gambit"``) or ``None``.
        - ``"token"`` — masked token, or ``None``.
    """
    return {
        "host": host,
        "authenticated": token is not None,
        "dialect": token.model.value if token is not None else None,
        "token": mask_token(token.token) if token is not None else None,
    }
