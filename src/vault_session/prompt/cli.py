"""Console rendering of a resolved Vault connection.

Pattern: Prompt Renderer
-------------------------
The CLI is the human-facing boundary.  It asks the ``Session`` for a client,
then shows the user what was resolved: address, namespace, TLS settings and
where the token came from.  Nothing is sent to the Vault server.

Errors raised while resolving are presented here and nowhere else.
"""

from __future__ import annotations

import logging
import sys

import hvac
from rich.markup import escape
from rich.table import Table

from vault_session.auth.session import Session
from vault_session.vault.client import ClientConstructionError
from vault_session.vault.config import ClientConfig, ConfigurationError
from vault_session.vault.keys import CredentialFileError

logger = logging.getLogger(__name__)


def mask_token(token: str) -> str:
    """Hide all but the last four characters of *token*."""
    if not token:
        return "(none)"
    if len(token) <= 4:
        return "*" * len(token)
    return "*" * (len(token) - 4) + token[-4:]


def _token_source(session: Session, config: ClientConfig, explicit_token: str, token: str) -> str:
    if not token:
        return "(none)"
    if explicit_token or session.token:
        return "explicit override"
    if config.token:
        return "VAULT_TOKEN"
    return str(session.keys_path)


def _render(session: Session, config: ClientConfig, client: hvac.Client, explicit_token: str) -> None:
    table = Table(title="Vault Connection")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="bold")

    table.add_row("Address", client.url)
    table.add_row("Namespace", config.namespace or "(none)")
    tls = config.tls
    if tls is None:
        table.add_row("TLS", "(defaults)")
    else:
        table.add_row("CA cert", tls.ca_cert or "(none)")
        table.add_row("CA path", tls.ca_path or "(none)")
        table.add_row("Client cert", tls.client_cert or "(none)")
        table.add_row("Client key", tls.client_key or "(none)")
        table.add_row("TLS server name", tls.tls_server_name or "(none)")
        table.add_row("Skip verify", "yes" if tls.insecure else "no")
    table.add_row("Token source", _token_source(session, config, explicit_token, client.token))
    table.add_row("Token", mask_token(client.token))

    session.ui.print(table)


def run_cli(session: Session, address: str = "", token: str = "") -> None:
    """Resolve a client for *session* and display the effective connection."""
    logger.debug("Resolving Vault client for %s", session)
    try:
        config = session.config(address)
        client = session.client_for_config(config, token)
    except (ConfigurationError, ClientConstructionError, CredentialFileError) as exc:
        session.ui.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    _render(session, config, client, token)
