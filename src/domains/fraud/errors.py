"""Errors raised by the fraud scoring engine."""


class NotFoundError(LookupError):
    """An identity or fraud rule referenced by the caller does not exist."""


class ProfileNotFoundError(NotFoundError):
    """No agent profile exists for the user being scored.

    Raised when recompute is called for a non-agent user; callers treat it
    as an integrity problem rather than a user-facing error.
    """

    def __init__(self, user_id: str) -> None:
        super().__init__(f"No agent profile for user {user_id}")
        self.user_id = user_id
