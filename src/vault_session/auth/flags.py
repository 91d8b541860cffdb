"""Command-line flags shared by every command that talks to Vault.

The parser returned by ``new_flag_set`` stores parsed values directly on the
``Session`` it was created for: pass the session as the namespace when
parsing, e.g. ``parser.parse_args(argv, namespace=session)``.
"""

from __future__ import annotations

import argparse
import enum
from collections.abc import Iterable
from typing import Any, NoReturn


class FlagError(Exception):
    """Raised when command-line flags cannot be parsed."""


class FlagGroup(enum.Enum):
    """Named groups of options that a command can ask for."""

    SERVER = "server"


DEFAULT_FLAG_GROUPS: frozenset[FlagGroup] = frozenset({FlagGroup.SERVER})


class FlagParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises ``FlagError`` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise FlagError(f"{self.prog}: {message}")


def new_flag_set(
    session: Any,
    name: str,
    groups: Iterable[FlagGroup] = DEFAULT_FLAG_GROUPS,
) -> FlagParser:
    """Return a parser for command *name* with the options from *groups*.

    *session* must carry the ``flag_*`` fields; its current values are used as
    defaults and are overwritten in place when parsing into it.
    """
    groups = frozenset(groups)
    parser = FlagParser(prog=name, add_help=False, allow_abbrev=False)

    if FlagGroup.SERVER in groups:
        _add_server_flags(parser, session)

    return parser


def _add_server_flags(parser: argparse.ArgumentParser, session: Any) -> None:
    group = parser.add_argument_group("server")
    for flag, dest, metavar in (
        ("address", "flag_address", "addr"),
        ("ca-cert", "flag_ca_cert", "path"),
        ("ca-path", "flag_ca_path", "path"),
        ("client-cert", "flag_client_cert", "path"),
        ("client-key", "flag_client_key", "path"),
    ):
        group.add_argument(
            f"-{flag}", f"--{flag}",
            dest=dest,
            metavar=metavar,
            default=getattr(session, dest),
        )
    # both spellings write the same field
    group.add_argument(
        "-insecure", "--insecure", "-tls-skip-verify", "--tls-skip-verify",
        dest="flag_insecure",
        action="store_true",
        default=session.flag_insecure,
    )


_GENERAL_OPTIONS_USAGE = """
  -address=addr           The address of the Vault server
                          Overrides the VAULT_ADDR environment variable if set.

  -ca-cert=path           Path to a PEM encoded CA cert file to use to
                          verify the Vault server SSL certificate.
                          Overrides the VAULT_CACERT environment variable if set.

  -ca-path=path           Path to a directory of PEM encoded CA cert files
                          to verify the Vault server SSL certificate. If both
                          -ca-cert and -ca-path are specified, -ca-cert is used.
                          Overrides the VAULT_CAPATH environment variable if set.

  -client-cert=path       Path to a PEM encoded client certificate for TLS
                          authentication to the Vault server. Must also specify
                          -client-key. Overrides the VAULT_CLIENT_CERT
                          environment variable if set.

  -client-key=path        Path to an unencrypted PEM encoded private key
                          matching the client certificate from -client-cert.
                          Overrides the VAULT_CLIENT_KEY environment variable
                          if set.

  -tls-skip-verify        Do not verify TLS certificate. This is highly
                          not recommended. Verification will also be skipped
                          if VAULT_SKIP_VERIFY is set.
"""


def general_options_usage() -> str:
    """Help text for the server flags, for inclusion in a command's help."""
    return _GENERAL_OPTIONS_USAGE
