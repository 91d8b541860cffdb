"""Session state shared by commands that talk to Vault.

Pattern: Credential Precedence Chain
-------------------------------------
A ``Session`` owns the raw command-line flag values and the token resolved
for the current command.  ``Session.client`` turns them into an
``hvac.Client``:

  * Address: explicit argument > ``-address`` flag > ``VAULT_ADDR`` > default.
  * TLS: any TLS flag replaces the environment's TLS settings wholesale.
  * Token: cached session token > ``VAULT_TOKEN`` > ``root_token`` from
    ``.local/vault.json``; an explicit token overrides all of them and is
    cached on the session for later calls.

Because the cached token is checked first, the first explicit token sticks
for the rest of the session unless a new explicit token is passed.

The session is mutable and not thread-safe; callers serialise access.
"""

from __future__ import annotations

import dataclasses
import logging
import pathlib
from collections.abc import Iterable

import hvac
from rich.console import Console

from vault_session.auth.flags import DEFAULT_FLAG_GROUPS, FlagGroup, FlagParser, new_flag_set
from vault_session.vault.client import new_client
from vault_session.vault.config import ClientConfig, build_config
from vault_session.vault.keys import LOCAL_KEYS_PATH, read_vault_keys

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Session:
    """Meta-options used by almost every command.

    Attributes:
        ui:               Console used to talk to the user.
        flag_address:     Value of ``-address``.
        flag_ca_cert:     Value of ``-ca-cert``.
        flag_ca_path:     Value of ``-ca-path``.
        flag_client_cert: Value of ``-client-cert``.
        flag_client_key:  Value of ``-client-key``.
        flag_insecure:    Set by ``-insecure`` or ``-tls-skip-verify``.
        keys_path:        Cached credential file, relative to the working
                          directory unless absolute.
    """

    ui: Console = dataclasses.field(default_factory=Console)
    flag_address: str = ""
    flag_ca_cert: str = ""
    flag_ca_path: str = ""
    flag_client_cert: str = ""
    flag_client_key: str = ""
    flag_insecure: bool = False
    keys_path: pathlib.Path = LOCAL_KEYS_PATH
    _token: str = dataclasses.field(default="", init=False, repr=False)

    @property
    def token(self) -> str:
        """The token cached by an explicit override, or ``""``."""
        return self._token

    def flag_set(self, name: str, groups: Iterable[FlagGroup] = DEFAULT_FLAG_GROUPS) -> FlagParser:
        """Return a parser whose options are bound to this session's fields."""
        return new_flag_set(self, name, groups)

    def config(self, address: str = "") -> ClientConfig:
        """Return the effective client configuration.

        Raises ``ConfigurationError`` if the environment cannot be read.
        """
        return build_config(self, address)

    def client(self, address: str = "", token: str = "") -> hvac.Client:
        """Return a client carrying the resolved address, TLS settings and token.

        Raises ``ConfigurationError``, ``ClientConstructionError`` or
        ``CredentialFileError``; nothing is retried.
        """
        return self.client_for_config(self.config(address), token)

    def client_for_config(self, config: ClientConfig, token: str = "") -> hvac.Client:
        """Like ``client`` but for an already built *config*."""
        client = new_client(config)

        resolved = self._token
        source = "session"
        if not resolved:
            resolved = client.token or ""
            source = "environment"
        if not resolved:
            keys = read_vault_keys(self.keys_path)
            resolved = keys.root_token
            source = str(self.keys_path)

        # an explicit token overrides VAULT_TOKEN and everything else
        if token:
            resolved = token
            self._token = token
            source = "explicit override"

        logger.debug("Vault token resolved from %s", source if resolved else "nowhere")
        client.token = resolved
        return client

    def __str__(self) -> str:
        return f"Session(address={self.flag_address or '<unset>'}, token_cached={bool(self._token)})"
