"""OAuth2 authorization-code primitives for the Bynder client."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.oauth2.rfc6749 import OAuth2Token
from loguru import logger

from .errors import BynderAPIError

AUTHENTICATION_PATH = "v6/authentication/"


def oauth_base_url(base_url: str) -> str:
    """Return the OAuth2 host for a portal, always ending in a slash."""
    return f"{base_url.rstrip('/')}/{AUTHENTICATION_PATH}"


class OAuth2AuthorizationCode:
    """Wrap the authlib client with Bynder's fixed OAuth2 endpoint paths."""

    TOKEN_PATH = "oauth2/token"
    REVOKE_PATH = "oauth2/revoke"
    AUTHORIZE_PATH = "oauth2/auth"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        client: AsyncOAuth2Client | None = None,
    ) -> None:
        self.auth_base_url = oauth_base_url(base_url)
        self.token_url = self.auth_base_url + self.TOKEN_PATH
        self.revoke_url = self.auth_base_url + self.REVOKE_PATH
        self.authorize_url = self.auth_base_url + self.AUTHORIZE_PATH
        self._client = client or AsyncOAuth2Client(
            client_id=client_id,
            client_secret=client_secret,
            token_endpoint=self.token_url,
            transport=transport,
        )

    def authorization_url(self, *, redirect_uri: str | None, scope: str, state: str) -> str:
        """Build the consent URL; purely local, no request is made."""
        url, _ = self._client.create_authorization_url(
            self.authorize_url,
            state=state,
            redirect_uri=redirect_uri,
            scope=scope,
        )
        return str(url)

    async def get_token(self, *, code: str, redirect_uri: str | None) -> OAuth2Token:
        """Exchange an authorization code for a token at ``oauth2/token``."""
        token = await self._client.fetch_token(
            self.token_url,
            grant_type="authorization_code",
            code=code,
            redirect_uri=redirect_uri,
        )
        logger.info("Exchanged authorization code for an access token")
        return OAuth2Token.from_dict(token)

    async def refresh(self, token: OAuth2Token) -> OAuth2Token:
        refreshed = await self._client.refresh_token(
            self.token_url, refresh_token=token.get("refresh_token")
        )
        logger.info("Refreshed expired access token")
        return OAuth2Token.from_dict(refreshed)

    async def revoke(self, token: OAuth2Token) -> None:
        if token.get("refresh_token"):
            value, hint = token["refresh_token"], "refresh_token"
        else:
            value, hint = token["access_token"], "access_token"

        response = await self._client.revoke_token(
            self.revoke_url, token=value, token_type_hint=hint
        )
        if response.status_code >= 400:
            raise BynderAPIError(response.status_code, response.reason_phrase, response.text)
        logger.info("Revoked OAuth2 token")

    def create_token(self, payload: Mapping[str, Any]) -> AccessToken:
        """Wrap a raw token payload so it can report expiry and refresh itself."""
        return AccessToken(self, payload)

    async def aclose(self) -> None:
        await self._client.aclose()


class AccessToken:
    """An expiring OAuth2 credential bound to the client that can refresh it."""

    def __init__(self, oauth: OAuth2AuthorizationCode, payload: Mapping[str, Any]) -> None:
        self._oauth = oauth
        self.token = OAuth2Token.from_dict(dict(payload))

    @property
    def access_token(self) -> str:
        return str(self.token["access_token"])

    def expired(self) -> bool:
        # is_expired() returns None when the provider sent no expiry
        return bool(self.token.is_expired())

    async def refresh(self) -> AccessToken:
        """Return a new token issued from this token's refresh token."""
        refreshed = await self._oauth.refresh(self.token)
        return AccessToken(self._oauth, refreshed)

    async def revoke(self) -> None:
        await self._oauth.revoke(self.token)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping suitable for storing and passing back as ``ClientConfig.token``."""
        return dict(self.token)

    def __repr__(self) -> str:
        return f"AccessToken(expires_at={self.token.get('expires_at')!r})"
