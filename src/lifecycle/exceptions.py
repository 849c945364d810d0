"""Lifecycle exceptions.

Every failure the engines report derives from ``LifecycleError`` so the
trigger handler and the API layer can catch the whole family in one place.
"""


class LifecycleError(Exception):
    """Base class for all order-lifecycle failures."""

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class DuplicateEntity(LifecycleError):
    """An entity with the same identity is already in the store."""


class NotFound(LifecycleError):
    """No entity with the requested identity exists."""


class InvalidTransition(LifecycleError):
    """The requested status is not the immediate successor of the current one."""


class PartialCommitFailure(LifecycleError):
    """A write batch failed verification; nothing was committed."""


class CarrierError(LifecycleError):
    """The carrier refused to create a shipment."""


class TriggerTimeout(LifecycleError):
    """An asynchronous trigger did not complete within its timeout."""


class ValidationError(LifecycleError):
    """Input failed validation.

    ``messages`` maps a field name to a list of error strings.
    """

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(str(messages))
