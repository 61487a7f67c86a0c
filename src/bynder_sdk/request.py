"""Authenticated request execution against the Bynder REST API."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from loguru import logger
from pydantic import HttpUrl, TypeAdapter, ValidationError

from .auth import AccessToken
from .config import TransportAgents
from .errors import BynderAPIError, ConfigurationError, MissingCredentialError
from .version import USER_AGENT

_HTTP_URL = TypeAdapter(HttpUrl)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def join_url(base_url: str, path: str) -> str:
    """Join ``base_url`` and ``path`` into a target that always ends in a slash."""
    segments = [base_url.rstrip("/"), *(part for part in path.split("/") if part)]
    return "/".join(segments) + "/"


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_params(body: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten a payload into sorted key/value pairs; sequences repeat the key."""
    pairs: list[tuple[str, str]] = []
    for key in sorted(body):
        value = body[key]
        if value is None:
            continue
        if isinstance(value, Sequence) and not isinstance(value, str | bytes):
            pairs.extend((key, _encode_value(item)) for item in value)
        else:
            pairs.append((key, _encode_value(value)))
    return pairs


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class RequestExecutor:
    """Perform one authenticated HTTP round trip per ``send`` call.

    Holds either credential form. A permanent token always signs requests when
    present; otherwise the expiring token is used and refreshed first when it
    has expired. Concurrent callers that observe the same expired token share
    one in-flight refresh.
    """

    def __init__(
        self,
        base_url: str,
        transport_agents: TransportAgents | None = None,
        token: AccessToken | None = None,
        permanent_token: str | None = None,
    ) -> None:
        try:
            _HTTP_URL.validate_python(base_url)
        except ValidationError as exc:
            raise ConfigurationError(f"The base URL provided is not valid: {base_url!r}") from exc

        self.base_url = base_url
        self.transport_agents = transport_agents or TransportAgents()
        self.token = token
        self.permanent_token = permanent_token
        self._refresh_task: asyncio.Task[AccessToken] | None = None
        self._client = httpx.AsyncClient(mounts=self.transport_agents.mounts() or None)

    async def send(
        self, method: str, path: str, body: Mapping[str, Any] | None = None
    ) -> Any:
        """Issue ``method`` against ``path`` and return the normalized response data.

        Raises:
            MissingCredentialError: no permanent or expiring token is configured
            BynderAPIError: the service answered with a status of 400 or above
        """
        url = join_url(self.base_url, path)
        body = body or {}
        method = method.upper()

        if not (self.token or self.permanent_token):
            raise MissingCredentialError()

        headers = {
            "User-Agent": USER_AGENT,
            "Authorization": f"Bearer {await self._bearer()}",
        }
        params: list[tuple[str, str]] | None = None
        content: str | None = None

        if method == "POST":
            headers["Content-Type"] = FORM_CONTENT_TYPE
            content = str(httpx.QueryParams(encode_params(body)))
        elif body:
            params = encode_params(body)

        logger.debug(f"{method} {url}")
        response = await self._client.request(
            method, url, params=params, content=content, headers=headers
        )
        logger.debug(f"{method} {url} -> {response.status_code}")
        return self._normalize(response)

    async def _bearer(self) -> str:
        if self.permanent_token:
            return self.permanent_token

        assert self.token is not None
        if self.token.expired():
            self.token = await self._refresh(self.token)
        return self.token.access_token

    async def _refresh(self, token: AccessToken) -> AccessToken:
        if self._refresh_task is None:
            task = asyncio.ensure_future(token.refresh())
            task.add_done_callback(self._clear_refresh)
            self._refresh_task = task
        return await asyncio.shield(self._refresh_task)

    def _clear_refresh(self, task: asyncio.Task[AccessToken]) -> None:
        if self._refresh_task is task:
            self._refresh_task = None

    @staticmethod
    def _normalize(response: httpx.Response) -> Any:
        status = response.status_code
        if status >= 400:
            raise BynderAPIError(status, response.reason_phrase, _parse_body(response))
        if 200 <= status <= 202:
            return _parse_body(response)
        return {}

    async def aclose(self) -> None:
        await self._client.aclose()
