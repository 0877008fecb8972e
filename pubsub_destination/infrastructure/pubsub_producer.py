"""
Google Cloud Pub/Sub destination producer.

This is a driven adapter that implements the DestinationPublisher port.
The host pipeline builds one producer per destination configuration and
calls publish once per event.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from google.cloud import pubsub_v1
from google.oauth2 import service_account

from pubsub_destination.config import AdapterConfig, get_adapter_config
from pubsub_destination.core.domain import DestinationConfig, Outcome, TopicBinding
from pubsub_destination.core.exceptions import (
    ClientInitError,
    ConfigError,
    DestinationError,
    InvalidHandleError,
    PayloadError,
    PublishError,
    TeardownError,
    TopicResolutionError,
)
from pubsub_destination.core.status_codes import status_code_for_error

logger = logging.getLogger(__name__)

ERROR_PREFIX = "[GooglePubSub] error :: "


def parse_destination_config(destination_config: Any) -> DestinationConfig:
    """
    Deserialize destination configuration.

    Args:
        destination_config: DestinationConfig, JSON string/bytes, or any
            JSON-convertible object

    Returns:
        Validated DestinationConfig

    Raises:
        ConfigError: If the configuration cannot be converted or validated
    """
    if isinstance(destination_config, DestinationConfig):
        return destination_config
    try:
        if isinstance(destination_config, (str, bytes)):
            return DestinationConfig.model_validate_json(destination_config)
        return DestinationConfig.model_validate(
            json.loads(json.dumps(destination_config))
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise ConfigError(
            f"{ERROR_PREFIX}error while deserializing destination config: {e}"
        ) from e


def create_publisher_client(
    config: DestinationConfig, adapter_config: AdapterConfig
) -> pubsub_v1.PublisherClient:
    """
    Build a Pub/Sub publisher client for the destination.

    Delay batching is disabled once here so each publish is sent immediately.

    Raises:
        ClientInitError: If credentials or project ID are missing, or the
            client cannot be constructed
    """
    if not config.can_create_client():
        raise ClientInitError(
            f"{ERROR_PREFIX}credentials and projectId are required to create a client"
        )

    batch_settings = pubsub_v1.types.BatchSettings(max_latency=0)

    try:
        if adapter_config.using_emulator:
            # The emulator does not authenticate
            logger.info(f"Using Pub/Sub emulator at {adapter_config.emulator_host}")
            return pubsub_v1.PublisherClient(batch_settings=batch_settings)

        credentials = service_account.Credentials.from_service_account_info(
            json.loads(config.credentials)
        )
        return pubsub_v1.PublisherClient(
            credentials=credentials, batch_settings=batch_settings
        )
    except Exception as e:
        logger.error(f"Failed to initialize Pub/Sub client: {str(e)}")
        raise ClientInitError(
            f"{ERROR_PREFIX}failed to initialize Pub/Sub client: {e}"
        ) from e


class GooglePubSubProducer:
    """
    Concrete implementation of DestinationPublisher using Google Cloud Pub/Sub.

    Owns the publisher client and the topic bindings resolved from the
    destination's event-to-topic map. Bindings are read-only after
    construction, so concurrent publishes are safe.
    """

    def __init__(
        self,
        client: pubsub_v1.PublisherClient,
        bindings: Iterable[TopicBinding],
        publish_timeout: Optional[float] = None,
    ):
        """
        Initialize the producer.

        Args:
            client: Pub/Sub publisher client (owned by the producer)
            bindings: Topic bindings in configuration order
            publish_timeout: Seconds to wait for a publish acknowledgment
                (None blocks until the service answers)
        """
        self.client = client
        self.bindings: Tuple[TopicBinding, ...] = tuple(bindings)
        self.publish_timeout = publish_timeout

    @classmethod
    def from_config(
        cls, destination_config: Any, adapter_config: Optional[AdapterConfig] = None
    ) -> "GooglePubSubProducer":
        """
        Create a producer from destination configuration.

        Raises:
            ConfigError: If the configuration is malformed
            ClientInitError: If the client cannot be constructed
        """
        config = parse_destination_config(destination_config)
        adapter_config = adapter_config or get_adapter_config()
        client = create_publisher_client(config, adapter_config)

        bindings = [
            TopicBinding(
                event=mapping.event,
                topic=client.topic_path(config.project_id, mapping.topic),
            )
            for mapping in config.event_to_topic_map
        ]
        logger.info(
            f"Pub/Sub producer initialized for project {config.project_id} "
            f"with {len(bindings)} topic binding(s)"
        )
        return cls(client, bindings, publish_timeout=adapter_config.publish_timeout)

    def publish(self, envelope: Any, timeout: Optional[float] = None) -> Outcome:
        """
        Publish the message carried by an event envelope.

        Never raises: every failure is returned as a Failure outcome.

        Args:
            envelope: Raw JSON envelope (bytes, str or decoded dict) with a
                "message" field and a "topicId" field
            timeout: Seconds to wait for the acknowledgment, overriding the
                producer's publish_timeout

        Returns:
            Outcome triple (status code, status, message)
        """
        topic_id = None
        try:
            event = self._parse_envelope(envelope)
            data = self._extract_message(event)
            topic_id = event.get("topicId")
            binding = self._resolve_topic(topic_id)
            message_id = self._publish_data(binding, data, timeout)
        except DestinationError as e:
            outcome = Outcome.failure(e.status_code, ERROR_PREFIX + str(e))
            logger.error(
                outcome.message,
                extra={
                    "extra_fields": {
                        "topic_id": topic_id,
                        "status_code": outcome.status_code,
                    }
                },
            )
            return outcome

        logger.info(f"Published message to Pub/Sub: {message_id}")
        return Outcome.success("Message publish with serverID" + message_id)

    async def publish_async(
        self, envelope: Any, timeout: Optional[float] = None
    ) -> Outcome:
        """
        Publish without blocking the event loop.

        Uses asyncio.to_thread() to wait for the acknowledgment in a worker thread.
        """
        return await asyncio.to_thread(self.publish, envelope, timeout)

    def close(self) -> None:
        """
        Close the publisher client, flushing any pending messages.

        Raises:
            TeardownError: If the client fails to stop
        """
        try:
            self.client.stop()
        except Exception as e:
            logger.error(f"error in closing Google Pub/Sub producer: {str(e)}")
            raise TeardownError(f"error in closing Google Pub/Sub producer: {e}") from e
        logger.info("Pub/Sub producer closed")

    def find_binding(self, topic_id: str) -> Optional[TopicBinding]:
        """Return the first binding whose topic name equals topic_id."""
        for binding in self.bindings:
            if binding.topic_id == topic_id:
                return binding
        return None

    def _parse_envelope(self, envelope: Any) -> Dict[str, Any]:
        if isinstance(envelope, dict):
            return envelope
        try:
            event = json.loads(envelope)
        except (TypeError, ValueError, RecursionError) as e:
            raise PayloadError(f"could not parse event payload: {e}") from e
        if not isinstance(event, dict):
            raise PayloadError("could not parse event payload: not a JSON object")
        return event

    def _extract_message(self, event: Dict[str, Any]) -> bytes:
        message = event.get("message")
        if message is None:
            raise PayloadError("message from payload not found")
        try:
            return json.dumps(
                message, separators=(",", ":"), ensure_ascii=False, allow_nan=False
            ).encode("utf-8")
        except (TypeError, ValueError, RecursionError) as e:
            raise PayloadError(str(e)) from e

    def _resolve_topic(self, topic_id: Any) -> TopicBinding:
        # Event-name lookup is not used: topicId is required
        if topic_id is None:
            raise TopicResolutionError("Topic Id not found")
        if not isinstance(topic_id, str):
            raise TopicResolutionError("Could not parse topic id to string")
        if topic_id == "":
            raise TopicResolutionError("empty topic id string")

        binding = self.find_binding(topic_id)
        if binding is None:
            raise TopicResolutionError("Topic not found in project")
        return binding

    def _publish_data(
        self, binding: TopicBinding, data: bytes, timeout: Optional[float]
    ) -> str:
        if timeout is None:
            timeout = self.publish_timeout
        try:
            future = self.client.publish(binding.topic, data)
            message_id: str = future.result(timeout=timeout)
        except Exception as e:
            raise PublishError(
                f"Failed to publish:{e}", status_code=status_code_for_error(e)
            ) from e
        return message_id


def new_producer(destination_config: Any) -> GooglePubSubProducer:
    """Create a producer based on destination configuration."""
    return GooglePubSubProducer.from_config(destination_config)


def produce(
    json_data: Any, producer: Any, destination_config: Any = None
) -> Outcome:
    """
    Publish one event through an opaque producer handle.

    destination_config is accepted for the host's calling contract and unused.
    """
    if not isinstance(producer, GooglePubSubProducer):
        logger.error(ERROR_PREFIX + "Could not create producer")
        return Outcome.failure(400, ERROR_PREFIX + "Could not create producer")
    return producer.publish(json_data)


def close_producer(producer: Any) -> None:
    """
    Close a producer returned by new_producer.

    Raises:
        InvalidHandleError: If producer is not a GooglePubSubProducer
        TeardownError: If closing the client fails
    """
    if not isinstance(producer, GooglePubSubProducer):
        raise InvalidHandleError("error while closing producer")
    producer.close()
