"""Repository for blocker entries."""

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from blocker_insights.db.contentstack import ContentstackClient
from blocker_insights.models.blocker import Blocker
from blocker_insights.repositories.mappers import (
    BLOCKER_CONTENT_TYPE,
    blocker_from_entry,
    format_timestamp,
)

logger = logging.getLogger(__name__)


def sort_newest_first(blockers: Iterable[Blocker]) -> list[Blocker]:
    """Sort blockers by timestamp descending.

    The sort is stable: blockers with equal timestamps keep their
    relative order.
    """
    return sorted(blockers, key=lambda b: b.timestamp, reverse=True)


class BlockerRepository:
    """Blocker store backed by the content platform.

    Queries go by owner (the ``team_member`` reference) and an optional
    lower bound on the report timestamp.
    """

    def __init__(self, client: ContentstackClient):
        """Initialize repository with content platform client.

        Args:
            client: ContentstackClient instance for entry operations
        """
        self._client = client

    async def list_by_owner(
        self,
        owner_id: str,
        since: datetime | None = None,
        limit: int = 10,
    ) -> list[Blocker]:
        """Get an owner's blockers, newest first.

        Args:
            owner_id: Team member uid
            since: Only blockers reported at or after this instant
            limit: Maximum blockers to return

        Returns:
            Blockers sorted by timestamp descending
        """
        where: dict[str, Any] = {"team_member.uid": owner_id}
        if since is not None:
            where["timestamp"] = {"$gte": format_timestamp(since)}

        entries = await self._client.get_entries(
            BLOCKER_CONTENT_TYPE,
            where=where,
            limit=limit,
            include_reference=["team_member"],
            order_desc="timestamp",
        )
        blockers = [blocker_from_entry(e) for e in entries]
        # Guard against a store that ignores the reference filter
        blockers = [b for b in blockers if b.owner_id == owner_id]
        if since is not None:
            blockers = [b for b in blockers if b.timestamp >= since]
        return sort_newest_first(blockers)

    async def list_by_owner_set(
        self,
        owner_ids: list[str],
        since: datetime | None = None,
        limit: int = 10,
    ) -> list[Blocker]:
        """Get blockers for several owners, merged newest first.

        Fetches per owner in parallel; ``limit`` applies per owner. Ties on
        timestamp keep the order of ``owner_ids``.
        """
        if not owner_ids:
            return []

        per_owner = await asyncio.gather(
            *(self.list_by_owner(uid, since=since, limit=limit) for uid in owner_ids)
        )
        merged = [blocker for blockers in per_owner for blocker in blockers]
        return sort_newest_first(merged)

    async def get(self, blocker_id: str) -> Blocker | None:
        """Get a blocker by uid."""
        entry = await self._client.get_entry(
            BLOCKER_CONTENT_TYPE, blocker_id, include_reference=["team_member"]
        )
        return blocker_from_entry(entry) if entry else None

    async def create(self, fields: dict[str, Any]) -> Blocker:
        """Create and publish a blocker entry.

        Args:
            fields: Entry fields in store format

        Returns:
            The stored blocker
        """
        entry = await self._client.create_entry(BLOCKER_CONTENT_TYPE, fields)
        logger.info(f"Created blocker {entry.get('uid')}")
        return blocker_from_entry(entry)

    async def update(self, blocker_id: str, fields: dict[str, Any]) -> Blocker:
        """Update and republish a blocker entry."""
        entry = await self._client.update_entry(BLOCKER_CONTENT_TYPE, blocker_id, fields)
        logger.info(f"Updated blocker {blocker_id}")
        return blocker_from_entry(entry)
