"""Slack adapter for direct messages to team members."""

import asyncio

import structlog
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

logger = structlog.get_logger()


class SlackAdapter:
    """Adapter for sending Slack direct messages.

    Wraps the synchronous WebClient; calls run in a worker thread.
    """

    def __init__(self, bot_token: str | None = None, client: WebClient | None = None):
        """Initialize with bot token.

        Args:
            bot_token: Slack bot token (xoxb-...)
            client: Optional WebClient for dependency injection
        """
        self._token = bot_token
        self._client = client

    @property
    def is_configured(self) -> bool:
        """Whether a token or client is available."""
        return self._client is not None or bool(self._token)

    def _get_client(self) -> WebClient:
        """Get or create Slack client."""
        if self._client is None:
            if not self._token:
                raise ValueError(
                    "No Slack token. Set SLACK_BOT_TOKEN env var "
                    "or pass bot_token to constructor."
                )
            self._client = WebClient(token=self._token)
        return self._client

    async def send_dm(
        self,
        user_id: str,
        message: str,
    ) -> dict:
        """Send direct message to a Slack user.

        Args:
            user_id: Slack user ID (not email)
            message: Message text (supports mrkdwn formatting)

        Returns:
            Dict with 'success' and 'ts' (timestamp) or 'error'
        """
        try:
            client = self._get_client()
            response = await asyncio.to_thread(
                client.chat_postMessage,
                channel=user_id,  # DM channel opened automatically
                text=message,
                mrkdwn=True,
            )
            return {"success": True, "ts": response["ts"]}
        except SlackApiError as e:
            error = e.response.get("error", "unknown_error")
            logger.warning(
                "Failed to send Slack DM",
                user_id=user_id,
                error=error,
            )
            return {"success": False, "error": error}
        except ValueError as e:
            logger.warning("Slack not configured", user_id=user_id, error=str(e))
            return {"success": False, "error": "not_configured"}
