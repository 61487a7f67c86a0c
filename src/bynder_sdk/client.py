"""Bynder client facade: OAuth2 flow plus one coroutine per REST endpoint."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger

from .auth import AccessToken, OAuth2AuthorizationCode
from .config import ClientConfig
from .errors import BynderError, BynderValidationError, TokenFormatError
from .models import (
    DEFAULT_ASSETS_PER_PAGE,
    MediaEditParams,
    MediaIdParams,
    MediaInfoParams,
    MediaItemsResult,
    MediaListParams,
    MetaPropertiesParams,
    MetapropertyOptionParams,
    MetapropertyParams,
    UserLoginParams,
)
from .request import RequestExecutor

Params = Mapping[str, Any]


def _require(module: str, *values: tuple[str, Any]) -> None:
    """Raise a validation error naming ``module`` when any value is empty."""
    if any(not value for _, value in values):
        raise BynderValidationError(module, tuple(name for name, _ in values))


class BynderClient:
    """Entry point applications construct and call endpoint methods on.

    Usage:
        ```python
        async with BynderClient(ClientConfig.from_file()) as bynder:
            url = bynder.make_authorization_url(state="xyz", scope="offline asset:read")
            token = await bynder.get_token(code)
            media = await bynder.get_media_list({"limit": 10})
        ```
    """

    def __init__(self, config: ClientConfig | Params) -> None:
        if not isinstance(config, ClientConfig):
            config = ClientConfig.model_validate(dict(config))

        self.redirect_uri = config.redirect_uri
        self.api = RequestExecutor(config.base_url, config.transport_agents)

        if isinstance(config.permanent_token, str):
            self.api.permanent_token = config.permanent_token

        self.oauth = OAuth2AuthorizationCode(
            config.client_id,
            config.client_secret,
            config.base_url,
            transport=config.transport_agents.for_url(config.base_url),
        )

        if config.token is not None:
            token = config.token
            if not isinstance(token, Mapping) or not isinstance(token.get("access_token"), str):
                raise TokenFormatError(
                    "Invalid token format: " + json.dumps(token, indent=2, default=str)
                )
            self.api.token = self.oauth.create_token(token)

    async def __aenter__(self) -> BynderClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.api.aclose()
        await self.oauth.aclose()

    # ------------------------------------------------------------------------
    # OAUTH2
    # ------------------------------------------------------------------------

    def make_authorization_url(self, state: str, scope: str) -> str:
        return self.oauth.authorization_url(
            redirect_uri=self.redirect_uri, scope=scope, state=state
        )

    async def get_token(self, code: str) -> AccessToken:
        """Exchange an authorization code and install the resulting token.

        A configured permanent token keeps taking precedence for signing.
        """
        raw = await self.oauth.get_token(code=code, redirect_uri=self.redirect_uri)
        token = self.oauth.create_token(raw)
        self.api.token = token
        return token

    async def revoke_token(self) -> None:
        """Revoke the installed OAuth2 token and forget it."""
        if self.api.token is None:
            logger.warning("No OAuth2 token installed; nothing to revoke")
            return
        await self.api.token.revoke()
        self.api.token = None

    # ------------------------------------------------------------------------
    # USERS & SMART FILTERS
    # ------------------------------------------------------------------------

    async def get_smart_filters(self) -> Any:
        return await self.api.send("GET", "v4/smartfilters/")

    async def user_login(self, params: UserLoginParams | Params | None = None) -> Any:
        login = UserLoginParams.coerce(params)
        _require(
            "authentication",
            ("username", login.username),
            ("password", login.password),
            ("consumerId", login.consumer_id),
        )
        return await self.api.send("POST", "v4/users/login/", login.wire())

    # ------------------------------------------------------------------------
    # MEDIA
    # ------------------------------------------------------------------------

    async def get_media_list(self, params: MediaListParams | Params | None = None) -> Any:
        query = MediaListParams.coerce(params)
        return await self.api.send("GET", "v4/media/", query.list_query())

    async def get_media_info(self, params: MediaInfoParams | Params | None = None) -> Any:
        info = MediaInfoParams.coerce(params)
        _require("media", ("id", info.id))
        return await self.api.send("GET", f"v4/media/{info.id}/", info.wire(exclude={"id"}))

    async def get_all_media_items(
        self, params: MediaListParams | Params | None = None
    ) -> MediaItemsResult:
        """Walk ``v4/media/`` page by page until a short page comes back.

        A failing page stops the walk; the items gathered so far are returned
        together with the error instead of raising it.
        """
        query = MediaListParams.coerce(params)
        page = query.page or 1
        limit = query.limit or DEFAULT_ASSETS_PER_PAGE
        result = MediaItemsResult()

        while True:
            try:
                media = await self.get_media_list(query.for_page(page, limit))
            except (BynderError, httpx.HTTPError) as exc:
                logger.warning(f"Media listing stopped at page {page}: {exc}")
                result.error = exc
                return result

            if not isinstance(media, list):
                return result
            result.items.extend(media)
            if len(media) < limit:
                return result
            page += 1

    async def get_media_total(self, params: MediaListParams | Params | None = None) -> Any:
        query = MediaListParams.coerce(params)
        data = await self.api.send("GET", "v4/media/", query.total_query())
        return data["count"]["total"]

    async def edit_media(self, params: MediaEditParams | Params | None = None) -> Any:
        edit = MediaEditParams.coerce(params)
        _require("media", ("id", edit.id))
        return await self.api.send("POST", "v4/media", edit.wire())

    async def delete_media(self, params: MediaIdParams | Params | None = None) -> Any:
        media = MediaIdParams.coerce(params)
        _require("media", ("id", media.id))
        return await self.api.send("DELETE", f"v4/media/{media.id}/")

    # ------------------------------------------------------------------------
    # METAPROPERTIES
    # ------------------------------------------------------------------------

    async def get_meta_properties(
        self, params: MetaPropertiesParams | Params | None = None
    ) -> list[Any]:
        """Return the metaproperties as a list; the service keys them by name."""
        query = MetaPropertiesParams.coerce(params)
        data = await self.api.send("GET", "v4/metaproperties/", query.wire())
        if isinstance(data, Mapping):
            return list(data.values())
        return list(data or [])

    async def get_metaproperty(self, params: MetapropertyParams | Params | None = None) -> Any:
        metaproperty = MetapropertyParams.coerce(params)
        _require("metaproperty", ("id", metaproperty.id))
        return await self.api.send("GET", f"v4/metaproperties/{metaproperty.id}/")

    async def save_new_meta_property(
        self, params: MetapropertyParams | Params | None = None
    ) -> Any:
        metaproperty = MetapropertyParams.coerce(params)
        return await self.api.send("POST", "v4/metaproperties", metaproperty.as_data_field())

    async def edit_metaproperty(self, params: MetapropertyParams | Params | None = None) -> Any:
        metaproperty = MetapropertyParams.coerce(params)
        _require("metaproperty", ("id", metaproperty.id))
        return await self.api.send(
            "POST", f"v4/metaproperties/{metaproperty.id}/", metaproperty.as_data_field()
        )

    async def delete_meta_property(
        self, params: MetapropertyParams | Params | None = None
    ) -> Any:
        metaproperty = MetapropertyParams.coerce(params)
        _require("metaproperty", ("id", metaproperty.id))
        return await self.api.send("DELETE", f"v4/metaproperties/{metaproperty.id}/")

    async def save_new_meta_property_option(
        self, params: MetapropertyOptionParams | Params | None = None
    ) -> Any:
        option = MetapropertyOptionParams.coerce(params)
        _require("metaproperty option", ("id", option.id), ("name", option.name))
        return await self.api.send(
            "POST", f"v4/metaproperties/{option.id}/options/", option.as_data_field()
        )

    async def edit_meta_property_option(
        self, params: MetapropertyOptionParams | Params | None = None
    ) -> Any:
        option = MetapropertyOptionParams.coerce(params)
        _require("metaproperty option", ("id", option.id), ("optionId", option.option_id))
        return await self.api.send(
            "POST",
            f"v4/metaproperties/{option.id}/options/{option.option_id}/",
            option.as_data_field(),
        )
