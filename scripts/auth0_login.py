"""auth0_login.py

Command-line helper around :class:`auth0_client.AuthClient` for trying out a
tenant configuration by hand.

Key features
------------
* Tenant coordinates from ``AUTH0_DOMAIN`` / ``AUTH0_CLIENT_ID`` (optionally
  loaded from a ``.env`` style file via ``--env-file``)
* ``password``  – resource-owner password login
* ``browser``   – system-browser login with a loopback redirect receiver
* ``manual``    – headless login, paste the redirect URL back
* ``refresh``   – mint a new ID token from a refresh token
* Prints the resulting session / delegation response as JSON on stdout;
  diagnostics go to stderr and never include token values

Example
-------
    uv run python scripts/auth0_login.py password --connection Username-Password-Authentication \
        --username jane@example.com --offline
"""
from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

import anyio

from auth0_client import (
    AuthClient,
    BrowserLoginLauncher,
    ClientConfig,
    ManualLoginLauncher,
    capture,
)
from auth0_client.launchers import logout_url_for

DEFAULT_ENV_FILE = Path("scripts/.env.auth0")


# --------------------------------------------------------------------------- #
# Environment helpers
# --------------------------------------------------------------------------- #
def _load_env_file(env_path: Path | None) -> None:
    """Load KEY=VALUE pairs from a .env style file into *os.environ*."""
    if env_path is None or not env_path.exists():
        return

    for raw in env_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip()
        if key and key not in os.environ:
            os.environ[key] = val


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #
async def _run(args: argparse.Namespace, cfg: ClientConfig) -> Any:
    launcher = None
    if args.command == "browser":
        launcher = BrowserLoginLauncher(
            timeout=args.timeout,
            logout_url=logout_url_for(cfg.domain, cfg.client_id),
        )
        # the loopback receiver decides the redirect URI
        cfg = replace(cfg, callback_url=launcher.callback_url)
    elif args.command == "manual":
        launcher = ManualLoginLauncher(stdout=sys.stderr)

    async with AuthClient.from_config(cfg, launcher=launcher) as client:
        if args.command == "password":
            password = os.getenv("AUTH0_PASSWORD") or getpass.getpass("Password: ")
            session = await client.login(
                args.connection,
                args.username,
                password,
                with_refresh_token=args.offline,
                scope=args.scope,
            )
            return session.to_dict()
        if args.command in ("browser", "manual"):
            session = await client.login_interactive(
                args.connection or "",
                with_refresh_token=args.offline,
                scope=args.scope,
                title="auth0_login",
            )
            return session.to_dict()
        if args.command == "refresh":
            token = args.refresh_token or os.getenv("AUTH0_REFRESH_TOKEN", "")
            return await client.refresh_token(token)
    raise ValueError(f"unknown command {args.command}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[1])
    parser.add_argument("--env-file", type=Path, default=DEFAULT_ENV_FILE)
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    pw = sub.add_parser("password", help="resource-owner password login")
    pw.add_argument("--connection", required=True)
    pw.add_argument("--username", required=True)

    for name in ("browser", "manual"):
        p = sub.add_parser(name, help=f"{name} redirect login")
        p.add_argument("--connection", default="")
        if name == "browser":
            p.add_argument("--timeout", type=float, default=300)

    for p in (pw, sub.choices["browser"], sub.choices["manual"]):
        p.add_argument("--scope", default="openid")
        p.add_argument("--offline", action="store_true", help="request a refresh token")

    rf = sub.add_parser("refresh", help="exchange a refresh token for a new id_token")
    rf.add_argument("--refresh-token", default="")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    _load_env_file(args.env_file)

    try:
        cfg = ClientConfig.from_env()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    outcome = anyio.run(capture, _run(args, cfg))
    if outcome.cancelled:
        print("Login cancelled.", file=sys.stderr)
        return 1
    if outcome.error is not None:
        print(json.dumps(outcome.error.to_payload()), file=sys.stderr)
        return 1

    json.dump(outcome.value, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
