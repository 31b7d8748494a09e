"""Async client for the Dynamic Content management API.

Client specifics:
- Auth: POST to the OAuth token endpoint with client credentials, token
  cached in memory for the lifetime of the client
- All requests use a Bearer token
- Collections are HAL pages (``_embedded.<resource>`` plus ``page``)
- 404 responses raise NotFoundError; other failures raise ApiError,
  including 2xx bodies that are not JSON or do not fit the expected model

Transient failures (429, 5xx, timeouts) are retried with exponential
backoff before an ApiError is raised.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import anyio
import httpx
from pydantic import BaseModel, ValidationError

from hubshift.api.models import ContentItem, Edition, EditionSlot, Event, Hub
from hubshift.api.paginator import DEFAULT_PAGE_SIZE, Page, paginate
from hubshift.core.config import ConfigurationParameters
from hubshift.core.errors import ApiError, NotFoundError
from hubshift.utils.debug import debug

T = TypeVar("T")

API_URL = "https://api.amplience.net/v2/content"
AUTH_URL = "https://auth.amplience.net/oauth/token"

_RETRY_STATUS_CODES = (429, 500, 502, 503, 504)

M = TypeVar("M", bound=BaseModel)


def _decode_json(response: httpx.Response, operation_name: str) -> dict[str, Any]:
    """Decode a successful response body, which must be a JSON object."""
    try:
        data = response.json()
    except ValueError as exc:
        raise ApiError(
            operation_name,
            status_code=response.status_code,
            detail=f"invalid JSON response: {response.text[:200]}",
        ) from exc
    if not isinstance(data, dict):
        raise ApiError(
            operation_name,
            status_code=response.status_code,
            detail=f"expected a JSON object, got {type(data).__name__}",
        )
    return data


def _validate(model: type[M], data: Any, operation_name: str) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ApiError(
            operation_name, detail=f"unexpected {model.__name__} payload: {exc}"
        ) from exc


class ContentClient:
    """Thin async wrapper over the management API endpoints hubshift uses."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        api_url: str = API_URL,
        auth_url: str = AUTH_URL,
        http_client: httpx.AsyncClient | None = None,
        max_retries: int = 3,
    ) -> None:
        """Initialize the client.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            api_url: Management API base URL
            auth_url: OAuth token endpoint
            http_client: Optional preconfigured httpx client (tests inject one
                with a mock transport)
            max_retries: Maximum attempts for transient failures
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self.api_url = api_url.rstrip("/")
        self.auth_url = auth_url
        self.max_retries = max_retries
        self._client = http_client or httpx.AsyncClient(timeout=30.0)
        self._access_token: str | None = None

        self.hubs = HubsResource(self)
        self.content_items = ContentItemsResource(self)
        self.events = EventsResource(self)
        self.editions = EditionsResource(self)

    @classmethod
    def from_config(cls, config: ConfigurationParameters, **kwargs: Any) -> ContentClient:
        return cls(config.client_id, config.client_secret, **kwargs)

    def __repr__(self) -> str:
        return f"ContentClient(client_id={self._client_id!r}, client_secret=***)"

    @staticmethod
    def calculate_backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
        """Exponential backoff delay (1s, 2s, 4s...) capped at 30 seconds."""
        return min(base_delay * (2 ** (attempt - 1)), 30.0)

    async def _get_access_token(self) -> str:
        if self._access_token:
            return self._access_token

        try:
            response = await self._client.post(
                self.auth_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ApiError(
                "authenticate", status_code=exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            raise ApiError("authenticate", detail=str(exc)) from exc

        token = _decode_json(response, "authenticate").get("access_token")
        if not isinstance(token, str) or not token:
            raise ApiError("authenticate", detail="token response has no access_token")
        self._access_token = token
        return token

    async def _execute_with_retry(
        self, func: Callable[[], Awaitable[T]], operation_name: str
    ) -> T:
        """Run ``func`` and retry on 429, 5xx and timeouts.

        Raises:
            ApiError: After max retries or on a non-retriable error
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                return await func()

            except httpx.HTTPStatusError as exc:
                status_code = exc.response.status_code
                if status_code not in _RETRY_STATUS_CODES or attempt >= self.max_retries:
                    raise ApiError(
                        operation_name,
                        status_code=status_code,
                        detail=exc.response.text or None,
                    ) from exc

            except httpx.TimeoutException as exc:
                if attempt >= self.max_retries:
                    raise ApiError(
                        operation_name,
                        detail=f"timed out after {self.max_retries} attempts",
                    ) from exc

            except httpx.TransportError as exc:
                raise ApiError(operation_name, detail=str(exc)) from exc

            delay = self.calculate_backoff_delay(attempt)
            debug(f"{operation_name} attempt {attempt} failed, retrying in {delay}s")
            await anyio.sleep(delay)

        raise ApiError(operation_name, detail=f"failed after {self.max_retries} retries")

    async def request(
        self,
        method: str,
        path: str,
        operation_name: str,
        *,
        entity_id: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Send an authenticated request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            operation_name: Name used in error messages
            entity_id: ID reported in NotFoundError on a 404
            **kwargs: Passed through to httpx (params, json)

        Raises:
            NotFoundError: On HTTP 404
            ApiError: On any other failure
        """
        token = await self._get_access_token()
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}

        async def _send() -> dict[str, Any]:
            response = await self._client.request(
                method, f"{self.api_url}{path}", headers=headers, **kwargs
            )
            response.raise_for_status()
            if not response.content:
                return {}
            return _decode_json(response, operation_name)

        try:
            return await self._execute_with_retry(_send, operation_name)
        except ApiError as exc:
            if exc.status_code == 404:
                raise NotFoundError(operation_name, entity_id or path) from exc
            raise

    async def fetch_page(
        self,
        path: str,
        embedded_key: str,
        parse: Callable[[Any], T],
        number: int,
        operation_name: str,
        params: dict[str, Any] | None = None,
    ) -> Page[T]:
        query = {"page": number, "size": DEFAULT_PAGE_SIZE, **(params or {})}
        data = await self.request("GET", path, operation_name, params=query)
        try:
            return Page.from_hal(data, embedded_key, parse)
        except (ValueError, TypeError, AttributeError) as exc:
            raise ApiError(operation_name, detail=f"malformed page: {exc}") from exc

    async def list_all(
        self,
        path: str,
        embedded_key: str,
        parse: Callable[[Any], T],
        operation_name: str,
        params: dict[str, Any] | None = None,
    ) -> list[T]:
        async def _page(number: int) -> Page[T]:
            return await self.fetch_page(
                path, embedded_key, parse, number, operation_name, params
            )

        return await paginate(_page)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ContentClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()


class HubsResource:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    async def get(self, hub_id: str) -> Hub:
        data = await self._client.request(
            "GET", f"/hubs/{hub_id}", "hubs.get", entity_id=hub_id
        )
        return _validate(Hub, data, "hubs.get")


class ContentItemsResource:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    async def get(self, item_id: str) -> ContentItem:
        data = await self._client.request(
            "GET", f"/content-items/{item_id}", "content_items.get", entity_id=item_id
        )
        return _validate(ContentItem, data, "content_items.get")

    async def find(self, item_id: str) -> ContentItem | None:
        """Like ``get``, but returns None when the item does not exist."""
        try:
            return await self.get(item_id)
        except NotFoundError:
            return None

    async def list(
        self,
        repository_id: str,
        folder_id: str | None = None,
        status: str | None = "ACTIVE",
    ) -> list[ContentItem]:
        """List items in a repository, or in one folder of it."""
        path = (
            f"/folders/{folder_id}/content-items"
            if folder_id
            else f"/content-repositories/{repository_id}/content-items"
        )
        params = {"status": status} if status else None
        return await self._client.list_all(
            path,
            "content-items",
            ContentItem.model_validate,
            "content_items.list",
            params,
        )

    async def create(
        self, repository_id: str, item: ContentItem, folder_id: str | None = None
    ) -> ContentItem:
        payload: dict[str, Any] = {"label": item.label, "body": item.body}
        if item.locale:
            payload["locale"] = item.locale
        if folder_id:
            payload["folderId"] = folder_id
        data = await self._client.request(
            "POST",
            f"/content-repositories/{repository_id}/content-items",
            "content_items.create",
            json=payload,
        )
        return _validate(ContentItem, data, "content_items.create")

    async def archive(self, item: ContentItem) -> ContentItem:
        return await self._change_status(item, "archive")

    async def unarchive(self, item: ContentItem) -> ContentItem:
        return await self._change_status(item, "unarchive")

    async def _change_status(self, item: ContentItem, action: str) -> ContentItem:
        if not item.id:
            raise ApiError(f"content_items.{action}", detail="item has no id")
        data = await self._client.request(
            "POST",
            f"/content-items/{item.id}/{action}",
            f"content_items.{action}",
            entity_id=item.id,
            json={"version": item.version},
        )
        if not data:
            return item
        return _validate(ContentItem, data, f"content_items.{action}")


class EventsResource:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    async def get(self, event_id: str) -> Event:
        data = await self._client.request(
            "GET", f"/events/{event_id}", "events.get", entity_id=event_id
        )
        return _validate(Event, data, "events.get")

    async def list(self, hub_id: str) -> list[Event]:
        return await self._client.list_all(
            f"/hubs/{hub_id}/events", "events", Event.model_validate, "events.list"
        )

    async def list_editions(self, event_id: str) -> list[Edition]:
        return await self._client.list_all(
            f"/events/{event_id}/editions",
            "editions",
            Edition.model_validate,
            "events.list_editions",
        )


class EditionsResource:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    async def list_slots(self, edition_id: str) -> list[EditionSlot]:
        return await self._client.list_all(
            f"/editions/{edition_id}/slots",
            "slots",
            EditionSlot.model_validate,
            "editions.list_slots",
        )
