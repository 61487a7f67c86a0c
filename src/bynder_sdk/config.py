"""Client configuration: the settings object and its YAML loader."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import httpx
from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field

CONFIG_PATH_ENV = "BYNDER_CONFIG_PATH"
DEFAULT_CONFIG_FILE = "conf/bynder.yml"

REQUIRED_KEYS = ("BYNDER_BASE_URL", "BYNDER_CLIENT_ID", "BYNDER_CLIENT_SECRET")
TOKEN_PATH_KEY = "BYNDER_TOKEN_PATH"


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _candidate_paths(raw: Path) -> tuple[Path, ...]:
    if raw.is_absolute():
        return (raw,)
    return (Path.cwd() / raw, _repo_root() / raw)


def _existing_unique_paths(candidates: tuple[Path, ...]) -> tuple[Path, ...]:
    existing: list[Path] = []
    seen: set[Path] = set()
    for candidate in candidates:
        if not candidate.exists():
            continue
        resolved = candidate.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        existing.append(resolved)
    return tuple(existing)


def _resolve_config_location(spec: Path | str, *, source: str) -> Path:
    raw = Path(spec).expanduser()
    candidates = _candidate_paths(raw)
    existing = _existing_unique_paths(candidates)
    if len(existing) == 1:
        return existing[0]
    if not existing:
        checked = "\n".join(str(candidate) for candidate in candidates)
        raise FileNotFoundError(f"Config file not found for {source}: {raw}\nChecked:\n{checked}")
    joined = ", ".join(str(path) for path in existing)
    raise RuntimeError(f"Multiple config files found for {source}: {raw}. Candidates: {joined}")


def _load_normalized_config(location: Path) -> dict[str, Any]:
    raw_config = OmegaConf.load(location)
    config = OmegaConf.to_container(raw_config, resolve=True)
    if not isinstance(config, dict):
        raise ValueError("Config file must contain a mapping of Bynder settings.")
    return {str(key).upper(): value for key, value in config.items()}


def _require_keys(normalized: dict[str, Any]) -> None:
    missing = [key for key in REQUIRED_KEYS if not normalized.get(key)]
    if missing:
        joined = ", ".join(missing)
        raise ValueError(f"Missing Bynder settings: {joined}")


def _optional_str(normalized: dict[str, Any], key: str) -> str | None:
    value = normalized.get(key)
    return str(value) if value else None


def _load_token(normalized: dict[str, Any]) -> Any:
    """Read a stored OAuth2 token document when ``BYNDER_TOKEN_PATH`` names one.

    An empty file counts as no token, so a redeem can write over it.
    """
    spec = normalized.get(TOKEN_PATH_KEY)
    if not spec:
        return None
    location = _resolve_config_location(str(spec), source=TOKEN_PATH_KEY)
    text = location.read_text(encoding="utf-8")
    return json.loads(text) if text.strip() else None


class TransportAgents(BaseModel):
    """Connection transports for plain HTTP and TLS traffic.

    Both are handed to httpx untouched; ``None`` keeps httpx's default pool.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http: httpx.AsyncBaseTransport | None = None
    https: httpx.AsyncBaseTransport | None = None

    def mounts(self) -> dict[str, httpx.AsyncBaseTransport]:
        mounts: dict[str, httpx.AsyncBaseTransport] = {}
        if self.http is not None:
            mounts["http://"] = self.http
        if self.https is not None:
            mounts["https://"] = self.https
        return mounts

    def for_url(self, url: str) -> httpx.AsyncBaseTransport | None:
        """Pick the transport serving the scheme of ``url``."""
        return self.https if url.lower().startswith("https:") else self.http


class ClientConfig(BaseModel):
    """Settings used to build a ``BynderClient``.

    ``base_url`` is checked by the request executor, ``token`` by the client,
    so both stay loosely typed here.
    """

    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(
        alias="baseUrl",
        description="Portal URL",
        examples=["https://portal.getbynder.com"],
    )
    client_id: str = Field(alias="clientId", description="OAuth2 application client id")
    client_secret: str = Field(
        alias="clientSecret", description="OAuth2 application client secret"
    )
    redirect_uri: str | None = Field(
        default=None,
        alias="redirectUri",
        description="Redirect URI registered for the authorization-code flow",
        examples=["https://127.0.0.1/callback"],
    )
    permanent_token: str | None = Field(
        default=None,
        alias="permanentToken",
        description="Long-lived token; takes precedence over any OAuth2 token",
    )
    token: Any = Field(
        default=None,
        description="Previously issued OAuth2 token payload with an `access_token` string",
    )
    transport_agents: TransportAgents = Field(
        default_factory=TransportAgents, alias="transportAgents"
    )

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> ClientConfig:
        """Create a config from a YAML file located at ``conf/bynder.yml`` by default."""
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            location = _resolve_config_location(env_path, source=CONFIG_PATH_ENV)
        elif path is not None:
            location = _resolve_config_location(path, source="path")
        else:
            location = _resolve_config_location(DEFAULT_CONFIG_FILE, source="default")

        normalized = _load_normalized_config(location)
        _require_keys(normalized)
        return cls(
            base_url=str(normalized["BYNDER_BASE_URL"]),
            client_id=str(normalized["BYNDER_CLIENT_ID"]),
            client_secret=str(normalized["BYNDER_CLIENT_SECRET"]),
            redirect_uri=_optional_str(normalized, "BYNDER_REDIRECT_URI"),
            permanent_token=_optional_str(normalized, "BYNDER_PERMANENT_TOKEN"),
            token=_load_token(normalized),
        )
