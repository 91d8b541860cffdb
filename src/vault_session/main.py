"""CLI entry point — parses flags, resolves the session and shows the result."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.markup import escape

from vault_session.auth.flags import FlagError, general_options_usage


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="vault-session",
        description="Show the Vault connection and token a command would use.",
        epilog="General options:\n" + general_options_usage(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-token", "--token",
        default="",
        help="Token to use instead of VAULT_TOKEN or the cached credential file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args, rest = parser.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    from vault_session.auth.session import Session
    from vault_session.prompt.cli import run_cli

    session = Session()
    try:
        session.flag_set(parser.prog).parse_args(rest, namespace=session)
    except FlagError as exc:
        session.ui.print(f"[red]{escape(str(exc))}[/red]")
        sys.exit(2)

    run_cli(session, token=args.token)


if __name__ == "__main__":
    main()
