"""Construction of ``hvac.Client`` handles from a ``ClientConfig``."""

from __future__ import annotations

import logging
import urllib.parse

import hvac

from vault_session.vault.config import ClientConfig, TLSConfig

logger = logging.getLogger(__name__)

_SCHEMES = ("http", "https")


class ClientConstructionError(Exception):
    """Raised when a configuration cannot be turned into a client."""


def new_client(config: ClientConfig) -> hvac.Client:
    """Build a client for *config*.  No request is sent to the server."""
    _check_address(config.address)
    verify, cert = _tls_options(config.tls)

    # token and cert are never None so hvac skips its own ~/.vault-token and
    # VAULT_CLIENT_CERT fallbacks
    return hvac.Client(
        url=config.address,
        token=config.token,
        cert=cert,
        verify=verify,
        namespace=config.namespace or None,
    )


def _check_address(address: str) -> None:
    try:
        parts = urllib.parse.urlsplit(address)
    except ValueError as exc:
        raise ClientConstructionError(f"Invalid Vault address {address!r}: {exc}") from exc
    if parts.scheme not in _SCHEMES or not parts.netloc:
        raise ClientConstructionError(
            f"Invalid Vault address {address!r}: expected http(s)://host[:port]"
        )


def _tls_options(tls: TLSConfig | None) -> tuple[bool | str, tuple[str, str] | str | bool]:
    if tls is None:
        return True, False

    verify: bool | str
    if tls.insecure:
        verify = False
    elif tls.ca_cert:
        verify = tls.ca_cert
    elif tls.ca_path:
        verify = tls.ca_path
    else:
        verify = True

    cert: tuple[str, str] | str | bool = False
    if tls.client_cert and tls.client_key:
        cert = (tls.client_cert, tls.client_key)
    elif tls.client_cert:
        cert = tls.client_cert
    elif tls.client_key:
        logger.debug("Client key %s ignored without a client certificate", tls.client_key)

    if tls.tls_server_name:
        logger.debug("TLS server name override %s is not applied by the HTTP stack", tls.tls_server_name)
    return verify, cert
