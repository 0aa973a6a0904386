"""Error kinds surfaced to callers of the report and blocker services."""


class NotFoundError(Exception):
    """Raised when a member, team or blocker does not resolve."""

    pass


class AuthorizationError(Exception):
    """Raised when an actor may not perform a restricted update."""

    pass
