"""
Port definitions (interfaces) for the destination.

The host pipeline depends on these contracts, not on the Pub/Sub adapter.
"""

from typing import Any, Protocol

from pubsub_destination.core.domain import Outcome


class DestinationPublisher(Protocol):
    """
    Port (interface) for publishing pipeline events to a destination.

    Implemented by infrastructure adapters (e.g., GooglePubSubProducer).
    Publishing never raises: every failure is reported through the Outcome.
    """

    def publish(self, envelope: Any) -> Outcome:
        """
        Publish one event envelope.

        Args:
            envelope: Raw JSON event envelope (bytes, str or decoded dict)

        Returns:
            Outcome triple describing the result
        """
        ...

    def close(self) -> None:
        """Close the publisher and release client resources."""
        ...
