"""Errors raised by the request lifecycle engine and the notification feed."""

from __future__ import annotations


class RequestLifecycleError(Exception):
    """Base class for every error the engine reports to its callers."""

    retryable = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(RequestLifecycleError):
    """The referenced request, notification or domain object does not exist."""


class Forbidden(RequestLifecycleError):
    """The actor lacks authority, or the record belongs to someone else."""


class InvalidTransition(RequestLifecycleError):
    """The request is already decided or the action is illegal for its kind."""


class PreconditionFailed(RequestLifecycleError):
    """A kind-specific rule rejected the action (missing reason, expiry, ...)."""


class EffectFailed(RequestLifecycleError):
    """A downstream domain mutation failed; the whole transition was rolled back."""

    retryable = True


class DispatchFailed(RequestLifecycleError):
    """A notification could not be persisted.

    Never surfaced to the caller of a decision; the dispatcher retries it.
    """

    retryable = True


__all__ = [
    "DispatchFailed",
    "EffectFailed",
    "Forbidden",
    "InvalidTransition",
    "NotFound",
    "PreconditionFailed",
    "RequestLifecycleError",
]
