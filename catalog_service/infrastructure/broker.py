"""Message broker producer for catalog change notifications.

The producer is created and connected once when the application starts
and shared by every request; it is disconnected on shutdown.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

import structlog
from redis import asyncio as redis
from redis.exceptions import RedisError

from catalog_service.domain.base import DomainEvent
from catalog_service.domain.exceptions import UpstreamFailure

logger = structlog.get_logger()


class MessageProducer(ABC):
    """Interface of the outbound message broker connection."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the producer can send messages."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the broker connection."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the broker connection."""

    @abstractmethod
    async def send_message(self, topic: str, message: str) -> None:
        """Send a raw message to a topic."""

    async def publish(self, event: DomainEvent) -> None:
        """Publish a domain event as a JSON envelope on its topic.

        Args:
            event: Event to publish.
        """
        message = json.dumps(event.to_message(), default=str)
        await self.send_message(event.topic, message)
        logger.info(
            "Event published",
            topic=event.topic,
            event_type=event.event_type,
            event_id=str(event.event_id),
        )


class RedisMessageProducer(MessageProducer):
    """Producer appending to Redis streams named after topics.

    Each message is one stream entry with a single ``message`` field.
    Entries persist until trimmed, so consumers that were offline read
    them on reconnect from their last seen entry id.
    """

    MESSAGE_FIELD = "message"

    def __init__(
        self,
        url: str,
        max_length: int | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize producer.

        Args:
            url: Redis connection URL.
            max_length: Approximate cap on entries kept per stream.
            client: Pre-built ``redis.asyncio.Redis`` client.
        """
        self.url = url
        self.max_length = max_length
        self._client = client
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Whether connect() succeeded and disconnect() has not run."""
        return self._connected

    async def connect(self) -> None:
        """Open the connection and verify it with PING.

        Raises:
            UpstreamFailure: If the broker is unreachable.
        """
        if self._client is None:
            self._client = redis.from_url(self.url, decode_responses=True)
        try:
            await self._client.ping()
        except RedisError as e:
            logger.error("Broker connection failed", url=self.url, error=str(e))
            raise UpstreamFailure(f"Failed to connect to message broker: {e}") from e

        self._connected = True
        logger.info("Broker connected", url=self.url)

    async def disconnect(self) -> None:
        """Close the connection if it is open."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._connected = False
        logger.info("Broker disconnected", url=self.url)

    async def send_message(self, topic: str, message: str) -> None:
        """Append a message to the stream named ``topic``.

        Raises:
            UpstreamFailure: If the producer is not connected or the
                broker rejects the call.
        """
        if not self._connected or self._client is None:
            raise UpstreamFailure(
                "Message producer is not connected",
                details={"topic": topic},
            )
        try:
            await self._client.xadd(
                topic,
                {self.MESSAGE_FIELD: message},
                maxlen=self.max_length,
                approximate=True,
            )
        except RedisError as e:
            logger.error("Publish failed", topic=topic, error=str(e))
            raise UpstreamFailure(
                f"Failed to publish message: {e}",
                details={"topic": topic},
            ) from e
