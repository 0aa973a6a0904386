"""TeamMember model and the caller identity used for authorization."""

from dataclasses import dataclass

from pydantic import Field

from blocker_insights.models.base import StoredEntity


class TeamMember(StoredEntity):
    """A member of the organization.

    Belongs to zero or one primary team; managers are flagged with
    ``is_manager``.
    """

    first_name: str
    last_name: str = Field(default="")
    email: str
    slack_id: str | None = Field(default=None)
    designation: str | None = Field(default=None)
    team: str | None = Field(default=None)
    is_manager: bool = Field(default=False)
    status: str | None = Field(default=None, description="Active or Inactive")

    @property
    def full_name(self) -> str:
        """First and last name joined."""
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Actor:
    """The member performing an operation."""

    member_id: str
    is_manager: bool = False
