"""Login exchange for Netgear POE switches.

One login attempt runs through::

    Unauthenticated -> ChallengeObtained -> CredentialSubmitted -> Authenticated | Rejected

1. GET the dialect's login page and read the one-time ``rand`` seed.
2. Interleave the password with the seed and MD5 it (the same transform the
   firmware's login page runs in JavaScript).
3. POST the digest to the dialect's submit page.
4. Read the session token from the ``SID`` cookie (GS305/GS308) or from
   the hidden ``Gambit`` input (GS316).

Nothing here retries or touches the token cache; see
:mod:`netgear_poe.client.session` for that.
"""

from __future__ import annotations

import hashlib
import logging

import requests

from netgear_poe.client.errors import (
    AuthenticationRejectedError,
    ChallengeUnavailableError,
    UnreachableHostError,
)
from netgear_poe.client.http import NetgearHTTP
from netgear_poe.model.session import ModelDialect, SessionToken, mask_token
from netgear_poe.parser.login import parse_gambit, parse_login_error, parse_rand
from netgear_poe.vendor.netgear.dialects import DialectProfile, profile_for

logger = logging.getLogger(__name__)


def fetch_challenge(http: NetgearHTTP, dialect: ModelDialect) -> str:
    """Fetch a fresh login seed from the switch.

    Must be called immediately before every login attempt; seeds rotate on
    each page load and are never reused.

    Raises:
        ChallengeUnavailableError: If the page cannot be fetched or has no
            ``rand`` input.
    """
    profile = profile_for(dialect)
    try:
        html = http.get(profile.challenge_path).text
    except UnreachableHostError as exc:
        raise ChallengeUnavailableError(
            f"Could not fetch login page {profile.challenge_path!r}: {exc}"
        ) from exc
    seed = parse_rand(html)
    if seed is None:
        raise ChallengeUnavailableError(
            f"No 'rand' input found on login page {profile.challenge_path!r}"
        )
    logger.debug("Obtained %s login seed from %s", profile.dialect.value, profile.challenge_path)
    return seed


def merge_password(password: str, challenge: str) -> str:
    """Interleave *password* and *challenge* character by character.

    Password characters beyond the length of the challenge are appended at
    the end, e.g. ``merge_password("admin123", "zzz111") == "azdzmzi1n11123"``.
    """
    merged: list[str] = []
    for i, c in enumerate(challenge):
        if i < len(password):
            merged.append(password[i])
        merged.append(c)
    if len(password) > len(challenge):
        merged.append(password[len(challenge):])
    return "".join(merged)


def encode_credential(password: str, challenge: str) -> str:
    """Return the lowercase hex MD5 of the merged password and challenge."""
    merged = merge_password(password, challenge)
    return hashlib.md5(merged.encode("utf-8")).hexdigest()


def authenticate(http: NetgearHTTP, dialect: ModelDialect, password: str) -> SessionToken:
    """Perform one complete login attempt.

    Args:
        http: Transport bound to the switch.
        dialect: Login dialect of the switch.
        password: Plaintext admin password.

    Returns:
        The newly issued :class:`SessionToken`.

    Raises:
        ChallengeUnavailableError: If no seed could be obtained.
        UnreachableHostError: If the credential could not be submitted.
        AuthenticationRejectedError: If the response carries no session token.
    """
    profile = profile_for(dialect)
    challenge = fetch_challenge(http, dialect)
    credential = encode_credential(password, challenge)
    resp = http.post_form(profile.submit_path, data={profile.password_field: credential})

    token = _extract_token(profile, resp)
    if token is None:
        reason = parse_login_error(resp.text)
        detail = f": {reason}" if reason else ""
        raise AuthenticationRejectedError(
            f"{profile.dialect.value} login rejected by {http.base_url} "
            f"(no {profile.token_field!r} in response){detail}"
        )
    logger.debug(
        "%s login accepted by %s, token %s",
        profile.dialect.value,
        http.base_url,
        mask_token(token),
    )
    return SessionToken(model=profile.dialect, token=token)


def _extract_token(profile: DialectProfile, resp: requests.Response) -> str | None:
    """Pull the session token out of a login response, or ``None``."""
    if profile.token_in_cookie:
        return resp.cookies.get(profile.token_field) or None
    return parse_gambit(resp.text)
