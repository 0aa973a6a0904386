"""Content platform client."""

from blocker_insights.db.contentstack import ContentstackClient, ContentstackError

__all__ = ["ContentstackClient", "ContentstackError"]
