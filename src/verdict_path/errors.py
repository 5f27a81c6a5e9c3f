"""Domain exceptions for the rewards core.

Idempotent outcomes (a substage completed twice, a second daily claim on the
same day) are normal results and never raised.
"""

from __future__ import annotations


class RewardsError(Exception):
    """Base class; ``status_code`` is what the HTTP layer answers with."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class UserNotFound(RewardsError):
    status_code = 404

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class UnknownStage(RewardsError):
    status_code = 404

    def __init__(self, stage_id: int) -> None:
        super().__init__(f"Stage {stage_id} is not part of the litigation taxonomy")
        self.stage_id = stage_id


class StorageError(RewardsError):
    """The backing store failed; transient, safe to resubmit."""

    status_code = 503


class InsufficientCoins(RewardsError):
    status_code = 400


class ConversionCapExceeded(RewardsError):
    status_code = 400
