"""SharePoint lists as a record store, through Microsoft Graph."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ValidationError

from tracker_sync.adapters.http_resilience import ClientFactory, default_client_factory
from tracker_sync.config.sharepoint import GRAPH_SCOPE, SharePointConfig, get_sharepoint_config
from tracker_sync.domain.errors import RecordStoreAuthError, RecordStoreError
from tracker_sync.domain.model import Collection
from tracker_sync.domain.ports.store import ListStore

from .schema import (
    CreatedItemResponse,
    GraphErrorResponse,
    GraphListItem,
    GraphListItemsPage,
    SiteResponse,
    TokenResponse,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from tracker_sync.adapters.http_resilience import RequestOptions, ResilientClient
    from tracker_sync.domain.ports.store import RawItem

log = getLogger(__name__)

PAGE_SIZE = 999
# refresh the token this many seconds before Graph says it expires
TOKEN_EXPIRY_MARGIN_SECONDS = 300


def transform_list_item(item: GraphListItem) -> RawItem:
    """Flatten a Graph list item into ``ID`` + columns + ``Created``/``Modified``."""

    transformed: RawItem = {"ID": int(item.id)}
    transformed.update(item.fields)
    if item.created_date_time:
        transformed["Created"] = item.created_date_time
    if item.last_modified_date_time:
        transformed["Modified"] = item.last_modified_date_time
    return transformed


@dataclass(slots=True)
class _Token:
    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


@dataclass(slots=True)
class GraphListStore:
    config: SharePointConfig = field(default_factory=get_sharepoint_config)
    client_factory: ClientFactory = field(default=default_client_factory)
    _client: ResilientClient | None = field(default=None, init=False, repr=False)
    _token: _Token | None = field(default=None, init=False, repr=False)
    _site_id: str | None = field(default=None, init=False, repr=False)

    def _list_id(self, collection: Collection) -> str:
        lists = self.config.lists
        list_id = {
            Collection.GROUPS: lists.groups,
            Collection.SESSIONS: lists.sessions,
            Collection.PROFILES: lists.profiles,
            Collection.ENTRIES: lists.entries,
            Collection.CONSENT_RECORDS: lists.consent_records,
        }[collection]
        if not list_id:
            raise RecordStoreError(f"No SharePoint list configured for {collection}")
        return list_id

    def has_collection(self, collection: Collection) -> bool:
        try:
            self._list_id(collection)
        except RecordStoreError:
            return False
        return True

    async def list_items(
        self,
        collection: Collection,
        select: Sequence[str] | None = None,
    ) -> list[RawItem]:
        list_id = self._list_id(collection)
        site_id = await self._get_site_id()
        expand = f"fields(select={','.join(select)})" if select else "fields"
        url: str | None = f"sites/{site_id}/lists/{list_id}/items"
        params: dict[str, str | int] | None = {"expand": expand, "$top": PAGE_SIZE}

        items: list[RawItem] = []
        pages = 0
        while url is not None:
            payload = await self._request_json("GET", url, params=params)
            page = _validate(GraphListItemsPage, payload, url)
            pages += 1
            items.extend(transform_list_item(item) for item in page.value)
            # nextLink is absolute and already carries the query string
            url, params = page.next_link, None
            if url is not None:
                log.debug("Fetching page %s of %s", pages + 1, collection)

        log.info("Fetched %s %s across %s page(s)", len(items), collection, pages)
        return items

    async def create_item(self, collection: Collection, fields: Mapping[str, Any]) -> int:
        list_id = self._list_id(collection)
        site_id = await self._get_site_id()
        url = f"sites/{site_id}/lists/{list_id}/items"
        payload = await self._request_json("POST", url, json={"fields": dict(fields)})
        created = _validate(CreatedItemResponse, payload, url)
        return int(created.id)

    async def update_item(
        self,
        collection: Collection,
        item_id: int,
        fields: Mapping[str, Any],
    ) -> None:
        list_id = self._list_id(collection)
        site_id = await self._get_site_id()
        url = f"sites/{site_id}/lists/{list_id}/items/{item_id}/fields"
        await self._request("PATCH", url, json=dict(fields))

    async def delete_item(self, collection: Collection, item_id: int) -> None:
        list_id = self._list_id(collection)
        site_id = await self._get_site_id()
        url = f"sites/{site_id}/lists/{list_id}/items/{item_id}"
        await self._request("DELETE", url)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self._client

    async def _get_access_token(self) -> str:
        now = time.monotonic()
        if self._token is not None and self._token.is_valid(now):
            return self._token.value

        try:
            response = await self._http().post(
                self.config.token_url,
                data={
                    "client_id": self.config.client_id,
                    "client_secret": self.config.client_secret,
                    "scope": GRAPH_SCOPE,
                    "grant_type": "client_credentials",
                },
            )
        except httpx.HTTPError as exc:
            raise RecordStoreAuthError(f"Failed to authenticate with SharePoint: {exc}") from exc
        if response.is_error:
            log.error("Token request failed (%s): %s", response.status_code, response.text)
            raise RecordStoreAuthError(
                "Failed to authenticate with SharePoint", status_code=response.status_code
            )

        token = _validate(TokenResponse, response.json(), "token")
        lifetime = max(token.expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0)
        self._token = _Token(value=token.access_token, expires_at=now + lifetime)
        return token.access_token

    async def _get_site_id(self) -> str:
        if self._site_id is not None:
            return self._site_id

        parts = urlsplit(self.config.site_url)
        hostname = parts.hostname or ""
        site_path = parts.path.strip("/")
        try:
            payload = await self._request_json("GET", f"sites/{hostname}:/{site_path}")
        except RecordStoreAuthError:
            raise
        except RecordStoreError:
            payload = await self._request_json("GET", f"sites/{hostname}")
            log.warning(
                "Using root site instead of %s; list queries may not work as expected",
                self.config.site_url,
            )

        self._site_id = _validate(SiteResponse, payload, "site").id
        return self._site_id

    async def _request_json(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> object:
        response = await self._request(method, url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise RecordStoreError(f"Graph returned invalid JSON for {method} {url}") from exc

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        token = await self._get_access_token()
        options: RequestOptions = {"headers": {"Authorization": f"Bearer {token}"}, **kwargs}
        try:
            response = await self._http().request(method, url, **options)
        except httpx.TimeoutException as exc:
            raise RecordStoreError(f"Graph request timed out: {method} {url}") from exc
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"Graph request failed: {method} {url}: {exc}") from exc

        if response.is_error:
            raise _error_from_response(method, url, response)
        return response


def _validate[TModel: BaseModel](model: type[TModel], payload: object, context: str) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RecordStoreError(f"Unexpected Graph payload for {context}") from exc


def _error_from_response(method: str, url: str, response: httpx.Response) -> RecordStoreError:
    detail = response.text
    try:
        error = GraphErrorResponse.model_validate(response.json())
        detail = f"{error.error.code}: {error.error.message}"
    except (ValueError, ValidationError):
        pass

    status = response.status_code
    log.error("Microsoft Graph error %s for %s %s: %s", status, method, url, detail)
    if status in {401, 403}:
        return RecordStoreAuthError(
            "Access denied by Microsoft Graph - check API permissions", status_code=status
        )
    if status == 404:
        return RecordStoreError("SharePoint list or item not found", status_code=status)
    return RecordStoreError(f"Microsoft Graph error {status}: {detail}", status_code=status)


if TYPE_CHECKING:
    _store_check: ListStore = GraphListStore()
