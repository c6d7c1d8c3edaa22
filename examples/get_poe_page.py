#!/usr/bin/env python3
"""Example: fetch a POE page from a switch through the self-healing session.

The cached token is reused when present; if the switch has dropped the
session the script logs in again transparently.  The raw HTML is written to
stdout; parsing it is up to the caller.

Usage::

    export NETGEAR_HOST=192.0.2.10
    export NETGEAR_SWITCHES="192.0.2.10=your-password"
    python examples/get_poe_page.py            # POE port status
    PAGE=config python examples/get_poe_page.py  # POE port configuration

Environment variables:
    NETGEAR_HOST      Switch IP or hostname (required).
    PAGE              "status" (default) or "config".
    NETGEAR_DEBUG     Set to "1" for debug logging.
    (password variables as for examples/login.py)
"""

from __future__ import annotations

import logging
import os
import sys


def main() -> None:
    host = os.environ.get("NETGEAR_HOST", "")
    if not host:
        print("ERROR: NETGEAR_HOST environment variable is required.", file=sys.stderr)
        sys.exit(1)
    page = os.environ.get("PAGE", "status")
    if page not in {"status", "config"}:
        print(f"ERROR: PAGE must be 'status' or 'config', got {page!r}", file=sys.stderr)
        sys.exit(1)
    if os.environ.get("NETGEAR_DEBUG", "0") == "1":
        logging.basicConfig(level=logging.DEBUG)

    from netgear_poe.client.errors import NetgearError
    from netgear_poe.client.session import NetgearSession
    from netgear_poe.config import SwitchConfig
    from netgear_poe.model.session import ModelDialect
    from netgear_poe.vendor.netgear import endpoints

    pages = {
        ModelDialect.LEGACY_COOKIE: {
            "status": endpoints.LEGACY_POE_STATUS,
            "config": endpoints.LEGACY_POE_CONFIG,
        },
        ModelDialect.GAMBIT_FORM: {
            "status": endpoints.GAMBIT_POE_STATUS,
            "config": endpoints.GAMBIT_POE_CONFIG,
        },
    }

    try:
        config = SwitchConfig.from_env(host)
        with NetgearSession(config) as session:
            html = session.get(pages[session.dialect][page])
    except NetgearError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    sys.stdout.write(html)


if __name__ == "__main__":
    main()
