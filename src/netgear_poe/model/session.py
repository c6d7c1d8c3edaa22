"""Typed models for switch login dialects and session tokens."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ModelDialect(enum.Enum):
    """Login/session convention spoken by a switch model family.

    Attributes:
        LEGACY_COOKIE: GS305EP(P)/GS308EP(P); session carried in the ``SID`` cookie.
        GAMBIT_FORM: GS316EP(P); session carried in the ``Gambit`` form field.
    """

    LEGACY_COOKIE = "legacy"
    GAMBIT_FORM = "gambit"


@dataclass(frozen=True)
class SessionToken:
    """An opaque session token together with the dialect it was issued under.

    No expiry is recorded: a token is valid until the switch stops accepting it.

    Attributes:
        model: Dialect the token belongs to.
        token: Raw token value (``SID`` cookie or ``Gambit`` field).
    """

    model: ModelDialect
    token: str

    def __repr__(self) -> str:
        return f"SessionToken(model={self.model.name}, token={mask_token(self.token)!r})"


def mask_token(token: str) -> str:
    """Return *token* with all but the last four characters hidden."""
    if len(token) <= 4:
        return "*" * len(token)
    return "*" * (len(token) - 4) + token[-4:]
