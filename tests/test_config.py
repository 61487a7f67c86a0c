"""Tests for loading client settings from YAML."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from bynder_sdk.config import ClientConfig, TransportAgents


def _write(tmp_path: Path, text: str) -> Path:
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir(parents=True, exist_ok=True)
    config_file = conf_dir / "bynder.yml"
    config_file.write_text(text.strip())
    return config_file


def test_from_file_missing_file(tmp_path: Path) -> None:
    """Given no config file, when `ClientConfig.from_file()` runs,
    then a `FileNotFoundError` is raised."""
    with pytest.raises(FileNotFoundError):
        ClientConfig.from_file(tmp_path / "conf" / "bynder.yml")


def test_from_file_missing_values(tmp_path: Path) -> None:
    config_file = _write(tmp_path, "BYNDER_BASE_URL: https://portal.example.com\n")

    with pytest.raises(ValueError, match="BYNDER_CLIENT_ID, BYNDER_CLIENT_SECRET"):
        ClientConfig.from_file(config_file)


def test_from_file_success_with_lowercase_keys(tmp_path: Path) -> None:
    config_file = _write(
        tmp_path,
        """
bynder_base_url: https://portal.example.com
bynder_client_id: cid
bynder_client_secret: secret
bynder_redirect_uri: https://app.example.com/callback
""",
    )

    config = ClientConfig.from_file(config_file)

    assert config.base_url == "https://portal.example.com"
    assert config.client_id == "cid"
    assert config.client_secret == "secret"
    assert config.redirect_uri == "https://app.example.com/callback"
    assert config.permanent_token is None
    assert config.token is None


def test_from_file_resolves_env_interpolation(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TEST_BYNDER_TOKEN", "perm-from-env")
    config_file = _write(
        tmp_path,
        """
BYNDER_BASE_URL: https://portal.example.com
BYNDER_CLIENT_ID: cid
BYNDER_CLIENT_SECRET: secret
BYNDER_PERMANENT_TOKEN: ${oc.env:TEST_BYNDER_TOKEN}
""",
    )

    assert ClientConfig.from_file(config_file).permanent_token == "perm-from-env"


def test_env_path_overrides_argument(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = _write(
        tmp_path,
        """
BYNDER_BASE_URL: https://env.example.com
BYNDER_CLIENT_ID: cid
BYNDER_CLIENT_SECRET: secret
""",
    )
    monkeypatch.setenv("BYNDER_CONFIG_PATH", str(config_file))

    config = ClientConfig.from_file(tmp_path / "does-not-exist.yml")

    assert config.base_url == "https://env.example.com"


def test_from_file_rejects_non_mapping(tmp_path: Path) -> None:
    config_file = _write(tmp_path, "- just\n- a list\n")

    with pytest.raises(ValueError, match="mapping"):
        ClientConfig.from_file(config_file)


def test_transport_agents_mount_per_scheme() -> None:
    plain = httpx.MockTransport(lambda request: httpx.Response(200))
    tls = httpx.MockTransport(lambda request: httpx.Response(200))
    agents = TransportAgents(http=plain, https=tls)

    assert agents.mounts() == {"http://": plain, "https://": tls}
    assert agents.for_url("https://portal.example.com") is tls
    assert agents.for_url("http://localhost:8080") is plain
    assert TransportAgents().mounts() == {}


def test_from_file_loads_stored_token(tmp_path: Path) -> None:
    """Given a config naming a token file written by `obtain_token.py redeem`,
    when `ClientConfig.from_file()` runs, then the token payload is loaded."""
    token_file = tmp_path / "conf" / "token.json"
    token_file.parent.mkdir(parents=True, exist_ok=True)
    token_file.write_text('{"access_token": "at", "refresh_token": "rt", "expires_at": 9999999999}')
    config_file = _write(
        tmp_path,
        f"""
BYNDER_BASE_URL: https://portal.example.com
BYNDER_CLIENT_ID: cid
BYNDER_CLIENT_SECRET: secret
BYNDER_TOKEN_PATH: {token_file}
""",
    )

    config = ClientConfig.from_file(config_file)

    assert config.token == {
        "access_token": "at",
        "refresh_token": "rt",
        "expires_at": 9999999999,
    }


def test_from_file_missing_token_file(tmp_path: Path) -> None:
    config_file = _write(
        tmp_path,
        f"""
BYNDER_BASE_URL: https://portal.example.com
BYNDER_CLIENT_ID: cid
BYNDER_CLIENT_SECRET: secret
BYNDER_TOKEN_PATH: {tmp_path / "missing.json"}
""",
    )

    with pytest.raises(FileNotFoundError, match="BYNDER_TOKEN_PATH"):
        ClientConfig.from_file(config_file)


def test_from_file_treats_empty_token_file_as_no_token(tmp_path: Path) -> None:
    token_file = tmp_path / "token.json"
    token_file.write_text("")
    config_file = _write(
        tmp_path,
        f"""
BYNDER_BASE_URL: https://portal.example.com
BYNDER_CLIENT_ID: cid
BYNDER_CLIENT_SECRET: secret
BYNDER_TOKEN_PATH: {token_file}
""",
    )

    assert ClientConfig.from_file(config_file).token is None
