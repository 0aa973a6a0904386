"""Schemas for report notifications."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationResult(BaseModel):
    """Result of a notification attempt."""

    model_config = ConfigDict(str_strip_whitespace=True)

    success: bool = Field(description="Whether notification was sent successfully")
    recipient_id: str = Field(description="Team member uid of the recipient")
    recipient_slack_id: str | None = Field(
        default=None, description="Slack user ID if known"
    )
    message_ts: str | None = Field(default=None, description="Slack message timestamp")
    error: str | None = Field(default=None, description="Error message if failed")


class NotificationRecord(BaseModel):
    """Audit record for a sent notification."""

    model_config = ConfigDict(str_strip_whitespace=True)

    recipient_id: str = Field(description="Team member uid of the recipient")
    report_id: str = Field(description="Report the notification was about")
    sent_at: datetime = Field(description="When notification was sent")
    success: bool = Field(description="Whether notification succeeded")
    error: str | None = Field(default=None, description="Error if notification failed")
