"""Connection configuration for the Vault client.

Pattern: Layered Configuration
-------------------------------
The effective configuration is assembled in layers, each one overriding the
one before it:

  1. Library defaults (``ClientConfig.default()``).
  2. The process environment (``VAULT_ADDR``, ``VAULT_CACERT`` ...).
  3. Command-line flags bound on the ``Session``.
  4. An explicit address passed by the caller.

TLS settings are replaced as a unit: if any TLS flag is set, the flag values
win outright and nothing inherited from the environment survives.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Protocol

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "https://127.0.0.1:8200"

ENV_VAULT_ADDRESS = "VAULT_ADDR"
ENV_VAULT_CA_CERT = "VAULT_CACERT"
ENV_VAULT_CA_PATH = "VAULT_CAPATH"
ENV_VAULT_CLIENT_CERT = "VAULT_CLIENT_CERT"
ENV_VAULT_CLIENT_KEY = "VAULT_CLIENT_KEY"
ENV_VAULT_INSECURE = "VAULT_SKIP_VERIFY"
ENV_VAULT_TLS_SERVER_NAME = "VAULT_TLS_SERVER_NAME"
ENV_VAULT_TOKEN = "VAULT_TOKEN"
ENV_VAULT_NAMESPACE = "VAULT_NAMESPACE"


class ConfigurationError(Exception):
    """Raised when the client configuration cannot be assembled."""


@dataclasses.dataclass(frozen=True)
class TLSConfig:
    """TLS material handed to the HTTP stack as plain paths.

    Attributes:
        ca_cert:         PEM encoded CA certificate file.
        ca_path:         Directory of PEM encoded CA certificate files.
        client_cert:     PEM encoded client certificate.
        client_key:      Unencrypted PEM encoded key matching ``client_cert``.
        tls_server_name: SNI override for the server certificate.
        insecure:        Skip server certificate verification.
    """

    ca_cert: str = ""
    ca_path: str = ""
    client_cert: str = ""
    client_key: str = ""
    tls_server_name: str = ""
    insecure: bool = False


@dataclasses.dataclass
class ClientConfig:
    address: str = DEFAULT_ADDRESS
    tls: TLSConfig | None = None
    token: str = ""
    namespace: str = ""

    @classmethod
    def default(cls) -> ClientConfig:
        return cls()

    def read_environment(self) -> None:
        """Overlay settings from ``VAULT_*`` environment variables.

        Raises ``ConfigurationError`` if a variable holds an unusable value.
        """
        try:
            env = VaultEnvironment()
        except ValidationError as exc:
            raise ConfigurationError(f"Error reading environment: {exc}") from exc

        if env.VAULT_ADDR:
            self.address = env.VAULT_ADDR
        if env.VAULT_TOKEN:
            self.token = env.VAULT_TOKEN
        if env.VAULT_NAMESPACE:
            self.namespace = env.VAULT_NAMESPACE

        if env.has_tls_settings():
            self.configure_tls(TLSConfig(
                ca_cert=env.VAULT_CACERT or "",
                ca_path=env.VAULT_CAPATH or "",
                client_cert=env.VAULT_CLIENT_CERT or "",
                client_key=env.VAULT_CLIENT_KEY or "",
                tls_server_name=env.VAULT_TLS_SERVER_NAME or "",
                insecure=bool(env.VAULT_SKIP_VERIFY),
            ))

    def configure_tls(self, tls: TLSConfig) -> None:
        self.tls = tls


class VaultEnvironment(BaseSettings):
    """The subset of the process environment that shapes a client."""

    VAULT_ADDR: str | None = None
    VAULT_CACERT: str | None = None
    VAULT_CAPATH: str | None = None
    VAULT_CLIENT_CERT: str | None = None
    VAULT_CLIENT_KEY: str | None = None
    VAULT_SKIP_VERIFY: bool | None = None
    VAULT_TLS_SERVER_NAME: str | None = None
    VAULT_TOKEN: str | None = None
    VAULT_NAMESPACE: str | None = None

    model_config = SettingsConfigDict(case_sensitive=True, env_ignore_empty=True, extra="ignore")

    def has_tls_settings(self) -> bool:
        return any((
            self.VAULT_CACERT,
            self.VAULT_CAPATH,
            self.VAULT_CLIENT_CERT,
            self.VAULT_CLIENT_KEY,
            self.VAULT_TLS_SERVER_NAME,
            self.VAULT_SKIP_VERIFY is not None,
        ))


class ServerFlags(Protocol):
    """Anything carrying the server flag fields (normally a ``Session``)."""

    flag_address: str
    flag_ca_cert: str
    flag_ca_path: str
    flag_client_cert: str
    flag_client_key: str
    flag_insecure: bool


def build_config(flags: ServerFlags, address: str = "") -> ClientConfig:
    """Merge defaults, environment, *flags* and *address* into one config."""
    config = ClientConfig.default()
    config.read_environment()

    if flags.flag_address:
        config.address = flags.flag_address
        logger.debug("Vault address taken from -address flag")
    # an explicit address beats the flag
    if address:
        config.address = address
        logger.debug("Vault address taken from explicit override")

    if (
        flags.flag_ca_cert
        or flags.flag_ca_path
        or flags.flag_client_cert
        or flags.flag_client_key
        or flags.flag_insecure
    ):
        config.configure_tls(TLSConfig(
            ca_cert=flags.flag_ca_cert,
            ca_path=flags.flag_ca_path,
            client_cert=flags.flag_client_cert,
            client_key=flags.flag_client_key,
            tls_server_name="",
            insecure=flags.flag_insecure,
        ))
        logger.debug("TLS settings taken from command-line flags")

    return config
