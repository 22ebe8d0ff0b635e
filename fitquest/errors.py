from __future__ import annotations

from fastapi import status


class FitQuestError(ValueError):
    """Base class for errors surfaced to API callers.

    Subclasses carry the HTTP status the router should answer with, so route
    handlers can translate any core failure with a single `except` clause.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST


class NotFound(FitQuestError):
    status_code = status.HTTP_404_NOT_FOUND


class NoActiveBattle(NotFound):
    # Answered like a precondition failure; 404 is reserved for a missing player.
    status_code = status.HTTP_400_BAD_REQUEST


class PreconditionFailed(FitQuestError):
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientFunds(PreconditionFailed):
    pass


class ValidationError(FitQuestError):
    status_code = 422


class Unauthorized(FitQuestError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PlayerBusy(FitQuestError):
    status_code = status.HTTP_409_CONFLICT


class StorageError(FitQuestError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
