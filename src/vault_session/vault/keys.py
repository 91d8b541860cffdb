"""Read-only access to the locally cached Vault credential file.

A previous ``vault operator init`` run (or a bootstrap script) may leave the
root token and unseal keys in ``.local/vault.json``.  This module only reads
that file; it never creates or updates it.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import pathlib
from typing import Any

logger = logging.getLogger(__name__)

LOCAL_DIR = ".local"
LOCAL_FILE = "vault.json"
LOCAL_KEYS_PATH = pathlib.Path(LOCAL_DIR) / LOCAL_FILE


class CredentialFileError(Exception):
    """Raised when the cached credential file exists but cannot be used."""


@dataclasses.dataclass(frozen=True)
class VaultKeys:
    """Keys and tokens parsed out of the cached credential file.

    Attributes:
        root_token:  Root token issued at initialisation.
        master_keys: Keys used to unseal the Vault servers, in order.
        token:       A token issued by the Vault server.
    """

    root_token: str = ""
    master_keys: tuple[str, ...] = ()
    token: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VaultKeys:
        root_token = data.get("root_token") or ""
        token = data.get("token") or ""
        master_keys = data.get("master_keys") or []
        if not isinstance(root_token, str) or not isinstance(token, str):
            raise ValueError("root_token and token must be strings")
        if not isinstance(master_keys, list) or not all(isinstance(k, str) for k in master_keys):
            raise ValueError("master_keys must be a list of strings")
        return cls(root_token=root_token, master_keys=tuple(master_keys), token=token)


def read_vault_keys(path: str | pathlib.Path = LOCAL_KEYS_PATH) -> VaultKeys:
    """Return the ``VaultKeys`` stored at *path*.

    A missing file yields an empty record.  Raises ``CredentialFileError`` if
    the file cannot be read or does not hold a JSON object of the expected
    shape.
    """
    path = pathlib.Path(path)
    if not path.exists():
        logger.debug("No cached credential file at %s", path)
        return VaultKeys()

    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        raise CredentialFileError(f"Failed to read Vault keys from {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise CredentialFileError(f"Vault keys file {path} must contain a JSON object")

    try:
        return VaultKeys.from_dict(data)
    except ValueError as exc:
        raise CredentialFileError(f"Invalid Vault keys file {path}: {exc}") from exc
