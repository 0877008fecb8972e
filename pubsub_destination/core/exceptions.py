"""
Destination exceptions.

Construction and teardown errors are raised to the host pipeline. Per-event
errors are raised inside the publish path and converted to Failure outcomes.
"""


class DestinationError(Exception):
    """Base exception for Pub/Sub destination errors."""

    status_code = 400


class ConfigError(DestinationError):
    """Destination configuration is malformed or cannot be deserialized."""

    pass


class ClientInitError(DestinationError):
    """
    Raised when the Pub/Sub client cannot be constructed.

    Covers missing credentials or project ID as well as authentication
    failures while building the client.
    """

    pass


class InvalidHandleError(DestinationError):
    """The handle passed by the host is not a producer owned by this adapter."""

    pass


class TeardownError(DestinationError):
    """Closing the Pub/Sub client failed."""

    pass


class PayloadError(DestinationError):
    """Event envelope has no message or the message cannot be serialized."""

    pass


class TopicResolutionError(DestinationError):
    """topicId is missing, empty, not a string, or not a configured topic."""

    pass


class PublishError(DestinationError):
    """
    Pub/Sub rejected the message or failed to acknowledge it.

    status_code is derived from the service error kind.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code
