"""Tests for the vault-session command."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from vault_session.auth.session import Session
from vault_session.main import main
from vault_session.prompt.cli import mask_token, run_cli
from vault_session.vault.config import build_config


def _output(session: Session) -> str:
    return session.ui.file.getvalue()  # type: ignore[attr-defined]


class TestMaskToken:
    @pytest.mark.parametrize(
        ("token", "masked"),
        [
            ("", "(none)"),
            ("abc", "***"),
            ("s.abcdef1234", "********1234"),
        ],
    )
    def test_mask(self, token: str, masked: str) -> None:
        assert mask_token(token) == masked


class TestRunCli:
    def test_renders_resolved_connection(self, session: Session) -> None:
        session.flag_address = "http://flag:8200"
        session.flag_insecure = True
        run_cli(session, token="s.override-9999")
        out = _output(session)
        assert "http://flag:8200" in out
        assert "explicit override" in out
        assert "9999" in out
        assert "s.override-9999" not in out

    def test_reports_cached_file_source(self, session: Session, write_keys) -> None:
        write_keys({"root_token": "s.root-abcd"})
        run_cli(session)
        out = _output(session)
        assert "vault.json" in out
        assert "abcd" in out

    def test_reports_environment_source(self, monkeypatch: pytest.MonkeyPatch, session: Session) -> None:
        monkeypatch.setenv("VAULT_TOKEN", "s.env-wxyz")
        run_cli(session)
        assert "VAULT_TOKEN" in _output(session)

    def test_environment_is_read_once(self, session: Session) -> None:
        with patch(
            "vault_session.auth.session.build_config", wraps=build_config
        ) as mock_build:
            run_cli(session, token="s.once")
        mock_build.assert_called_once()

    def test_error_exits_non_zero(self, session: Session, write_keys) -> None:
        write_keys("{broken")
        with pytest.raises(SystemExit) as exc_info:
            run_cli(session)
        assert exc_info.value.code == 1
        assert "Error" in _output(session)


class TestMain:
    def test_flags_and_token(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["-address", "http://flag:8200", "-token", "s.cli-5678", "-tls-skip-verify"])
        out = capsys.readouterr().out
        assert "http://flag:8200" in out
        assert "5678" in out
        assert "yes" in out

    def test_unknown_flag_exits_with_usage_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["-bogus"])
        assert exc_info.value.code == 2
        assert "-bogus" in capsys.readouterr().out
