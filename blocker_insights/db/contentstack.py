"""Contentstack HTTP client wrapper.

Reads go through the Content Delivery API (CDN), writes through the
Content Management API. Every created or updated entry is published to the
configured environment so that delivery reads can see it.
"""

import json
import logging
from typing import Any

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from blocker_insights.config import Settings, get_settings

logger = logging.getLogger(__name__)

# (delivery host, management host) per region
REGION_HOSTS: dict[str, tuple[str, str]] = {
    "us": ("https://cdn.contentstack.io", "https://api.contentstack.io"),
    "eu": ("https://eu-cdn.contentstack.com", "https://eu-api.contentstack.com"),
    "azure-na": (
        "https://azure-na-cdn.contentstack.com",
        "https://azure-na-api.contentstack.com",
    ),
    "azure-eu": (
        "https://azure-eu-cdn.contentstack.com",
        "https://azure-eu-api.contentstack.com",
    ),
}

DEFAULT_LOCALE = "en-us"

# Transient failures worth retrying on reads
RETRIABLE_EXCEPTIONS = (
    httpx.TransportError,
)

read_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
    retry=retry_if_exception_type(RETRIABLE_EXCEPTIONS),
    before_sleep=before_sleep_log(logger, logging.INFO),
    reraise=True,
)


class ContentstackError(Exception):
    """Raised when the content platform rejects a request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: int | None = None,
        entry_uid: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.entry_uid = entry_uid


def region_hosts(region: str) -> tuple[str, str]:
    """Resolve (delivery, management) base URLs for a region name.

    Unknown regions fall back to the US hosts.
    """
    return REGION_HOSTS.get(region.lower(), REGION_HOSTS["us"])


class ContentstackClient:
    """Async wrapper for the Contentstack delivery and management APIs."""

    def __init__(
        self,
        settings: Settings | None = None,
        delivery_transport: httpx.AsyncBaseTransport | None = None,
        management_transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client with connection parameters.

        Args:
            settings: Application settings. Defaults to cached settings.
            delivery_transport: Optional transport for the delivery API (tests).
            management_transport: Optional transport for the management API (tests).
        """
        self._settings = settings or get_settings()
        self.delivery_url, self.management_url = region_hosts(
            self._settings.contentstack_region
        )
        self.environment = self._settings.contentstack_environment
        self._delivery_transport = delivery_transport
        self._management_transport = management_transport
        self._delivery: httpx.AsyncClient | None = None
        self._management: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying HTTP clients."""
        if self._delivery is not None:
            return

        api_key = self._settings.contentstack_api_key or ""
        timeout = httpx.Timeout(self._settings.contentstack_timeout_seconds)

        self._delivery = httpx.AsyncClient(
            base_url=f"{self.delivery_url}/v3",
            headers={
                "api_key": api_key,
                "access_token": self._settings.contentstack_delivery_token or "",
            },
            timeout=timeout,
            transport=self._delivery_transport,
        )
        self._management = httpx.AsyncClient(
            base_url=f"{self.management_url}/v3",
            headers={
                "api_key": api_key,
                "authorization": self._settings.contentstack_management_token or "",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=self._management_transport,
        )
        logger.info(f"Connected to Contentstack: {self.delivery_url}")

    async def close(self) -> None:
        """Close the HTTP clients."""
        if self._delivery is not None:
            await self._delivery.aclose()
            self._delivery = None
        if self._management is not None:
            await self._management.aclose()
            self._management = None
        logger.info("Contentstack connection closed")

    async def get_entries(
        self,
        content_type: str,
        *,
        where: dict[str, Any] | None = None,
        limit: int | None = None,
        skip: int | None = None,
        include_reference: list[str] | None = None,
        order_desc: str | None = None,
    ) -> list[dict[str, Any]]:
        """Query entries of a content type.

        Args:
            content_type: Content type uid
            where: Query filter (Contentstack query JSON)
            limit: Maximum entries to return
            skip: Entries to skip
            include_reference: Reference fields to expand
            order_desc: Field to sort descending by

        Returns:
            List of raw entry dicts
        """
        params: list[tuple[str, str | int]] = [("environment", self.environment)]
        if where:
            params.append(("query", json.dumps(where, separators=(",", ":"))))
        if limit:
            params.append(("limit", limit))
        if skip:
            params.append(("skip", skip))
        for field in include_reference or []:
            params.append(("include[]", field))
        if order_desc:
            params.append(("desc", order_desc))

        payload = await self._read(f"/content_types/{content_type}/entries", params)
        return payload.get("entries", [])

    async def get_entry(
        self,
        content_type: str,
        entry_uid: str,
        include_reference: list[str] | None = None,
    ) -> dict[str, Any] | None:
        """Fetch a single entry by uid.

        Returns:
            Raw entry dict, or None if the entry does not exist
        """
        params: list[tuple[str, str | int]] = [("environment", self.environment)]
        for field in include_reference or []:
            params.append(("include[]", field))

        try:
            payload = await self._read(
                f"/content_types/{content_type}/entries/{entry_uid}", params
            )
        except ContentstackError as e:
            if e.status_code == 404:
                return None
            raise
        return payload.get("entry")

    async def create_entry(
        self, content_type: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Create and publish an entry.

        Write failures are raised as ContentstackError without retry. If
        publishing fails the error carries the uid of the unpublished entry.

        Returns:
            The created entry as returned by the management API
        """
        response = await self._require(self._management).post(
            f"/content_types/{content_type}/entries",
            params={"locale": DEFAULT_LOCALE},
            json={"entry": data},
        )
        entry = self._check(response).get("entry", {})
        uid = entry["uid"]
        try:
            await self.publish_entry(content_type, uid)
        except ContentstackError as e:
            # The entry exists but delivery reads cannot see it
            logger.error(f"Created {content_type} entry {uid} was not published")
            raise ContentstackError(
                f"Entry {uid} created but not published: {e}",
                status_code=e.status_code,
                error_code=e.error_code,
                entry_uid=uid,
            ) from e
        return entry

    async def update_entry(
        self, content_type: str, entry_uid: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Update and republish an entry.

        Returns:
            The updated entry as returned by the management API
        """
        response = await self._require(self._management).put(
            f"/content_types/{content_type}/entries/{entry_uid}",
            params={"locale": DEFAULT_LOCALE},
            json={"entry": data},
        )
        entry = self._check(response).get("entry", {})
        await self.publish_entry(content_type, entry_uid)
        return entry

    async def publish_entry(self, content_type: str, entry_uid: str) -> None:
        """Publish an entry to the configured environment."""
        response = await self._require(self._management).post(
            f"/content_types/{content_type}/entries/{entry_uid}/publish",
            json={
                "entry": {
                    "environments": [self.environment],
                    "locales": [DEFAULT_LOCALE],
                }
            },
        )
        self._check(response)

    @read_retry
    async def _read(
        self, path: str, params: list[tuple[str, str | int]]
    ) -> dict[str, Any]:
        response = await self._require(self._delivery).get(path, params=params)
        return self._check(response)

    @staticmethod
    def _require(client: httpx.AsyncClient | None) -> httpx.AsyncClient:
        if client is None:
            msg = "Not connected. Call connect() first."
            raise RuntimeError(msg)
        return client

    @staticmethod
    def _check(response: httpx.Response) -> dict[str, Any]:
        """Return the JSON body or raise ContentstackError for error statuses."""
        if response.is_success:
            return response.json() if response.content else {}

        error_code = None
        message = response.reason_phrase
        try:
            body = response.json()
            error_code = body.get("error_code")
            message = body.get("error_message", message)
        except ValueError:
            pass

        logger.error(
            f"Contentstack request failed: {response.request.method} "
            f"{response.request.url.path} -> {response.status_code} {message}"
        )
        raise ContentstackError(
            message, status_code=response.status_code, error_code=error_code
        )
