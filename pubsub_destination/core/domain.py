"""
Core domain models for the Pub/Sub destination.

These models describe destination configuration and publish outcomes and are
independent of the Pub/Sub client library.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TopicMapping(BaseModel):
    """One configured event-name to topic-name pair."""

    event: str = Field(default="", alias="from", description="Event name")
    topic: str = Field(default="", alias="to", description="Pub/Sub topic name")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DestinationConfig(BaseModel):
    """
    Destination configuration supplied by the host pipeline.

    Field names follow the destination's JSON configuration
    (credentials, projectId, eventToTopicMap).
    """

    credentials: str = Field(default="", description="Service account JSON blob")
    project_id: str = Field(default="", alias="projectId", description="GCP project ID")
    event_to_topic_map: List[TopicMapping] = Field(
        default_factory=list,
        alias="eventToTopicMap",
        description="Ordered event-name to topic-name pairs",
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("credentials", "project_id", mode="before")
    @classmethod
    def validate_optional_string(cls, v):
        """Treat null credentials or project ID as absent."""
        if v is None:
            return ""
        return v

    def can_create_client(self) -> bool:
        """Check if a client can be constructed (credentials and project available)."""
        return bool(self.credentials and self.project_id)


@dataclass(frozen=True)
class TopicBinding:
    """A configured event name bound to a fully qualified topic path."""

    event: str
    topic: str

    # projects/<project>/topics/<name>
    TOPIC_NAME_SEGMENT = 3

    @property
    def topic_id(self) -> str:
        segments = self.topic.split("/")
        if len(segments) <= self.TOPIC_NAME_SEGMENT:
            return ""
        return segments[self.TOPIC_NAME_SEGMENT]


class OutcomeStatus(str, Enum):
    """Coarse publish status reported to the host pipeline."""

    SUCCESS = "Success"
    FAILURE = "Failure"


class Outcome(NamedTuple):
    """Result of a single publish: (status code, status label, message)."""

    status_code: int
    status: str
    message: str

    @classmethod
    def success(cls, message: str) -> "Outcome":
        return cls(200, OutcomeStatus.SUCCESS.value, message)

    @classmethod
    def failure(cls, status_code: int, message: str) -> "Outcome":
        return cls(status_code, OutcomeStatus.FAILURE.value, message)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS.value
