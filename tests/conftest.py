"""Shared fixtures for tests."""

from __future__ import annotations

import io
import json
import os
import pathlib

import pytest
from rich.console import Console

from vault_session.auth.session import Session


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> pathlib.Path:
    """Hide the developer's VAULT_* variables and cached credential file."""
    for name in list(os.environ):
        if name.startswith("VAULT_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def session() -> Session:
    return Session(ui=Console(file=io.StringIO(), width=120))


@pytest.fixture
def write_keys(isolated_env: pathlib.Path):
    """Write ``.local/vault.json`` in the working directory."""

    def _write(content: dict | str) -> pathlib.Path:
        local = isolated_env / ".local"
        local.mkdir(exist_ok=True)
        path = local / "vault.json"
        path.write_text(content if isinstance(content, str) else json.dumps(content))
        return path

    return _write
