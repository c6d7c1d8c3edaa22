#!/usr/bin/env python3
"""Example: log in to a Netgear POE switch and cache the session token.

Usage::

    export NETGEAR_HOST=192.0.2.10
    export NETGEAR_PASSWORD_192_0_2_10=your-password
    python examples/login.py

    # Discard the cached token and log in again:
    FORCE=1 python examples/login.py

    # Forget the cached token:
    LOGOUT=1 python examples/login.py

Environment variables:
    NETGEAR_HOST               Switch IP or hostname (required).
    NETGEAR_PASSWORD_<HOST>    Password for that host (host upper-cased, non
                               alphanumerics replaced by "_").
    NETGEAR_SWITCHES           Alternative: "host1=password1;host2=password2".
    NETGEAR_TOKEN_DIR          Token cache directory (default: ~/.netgear).
    NETGEAR_DEBUG              Set to "1" for debug logging.
    FORCE                      Set to "1" to ignore the cached token.
    LOGOUT                     Set to "1" to remove the cached token and exit.

Exit codes:
    0 — session established (or removed) and printed.
    1 — missing environment variable or login error.
"""

from __future__ import annotations

import json
import logging
import os
import sys


def main() -> None:
    host = os.environ.get("NETGEAR_HOST", "")
    if not host:
        print("ERROR: NETGEAR_HOST environment variable is required.", file=sys.stderr)
        sys.exit(1)
    if os.environ.get("NETGEAR_DEBUG", "0") == "1":
        logging.basicConfig(level=logging.DEBUG)

    # Import here so import errors surface after env var check.
    from netgear_poe.client.errors import NetgearError
    from netgear_poe.client.session import NetgearSession
    from netgear_poe.config import SwitchConfig
    from netgear_poe.utils.render import render_session

    try:
        config = SwitchConfig.from_env(host)
    except NetgearError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    with NetgearSession(config) as session:
        try:
            if os.environ.get("LOGOUT", "0") == "1":
                session.logout()
                token = None
            else:
                token = session.login(force=os.environ.get("FORCE", "0") == "1")
        except NetgearError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            sys.exit(1)

    print(json.dumps(render_session(host, token), indent=2))


if __name__ == "__main__":
    main()
