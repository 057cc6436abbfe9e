"""Base classes for domain layer.

Provides foundational abstractions for value objects and the
change notifications the catalog publishes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar
from uuid import UUID, uuid4


# ============================================================================
# Value Object Base
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes,
    not by identity. They have no lifecycle and are interchangeable
    when their values are equal.

    Example:
        @dataclass(frozen=True)
        class ProductAttribute(ValueObject):
            name: str
            value: str | bool
    """

    pass


# ============================================================================
# Domain Event Base
# ============================================================================


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Base class for domain events.

    Domain events represent something significant that happened
    in the catalog. They are immutable and contain everything a
    downstream consumer needs to react.

    Attributes:
        event_type: String identifier for the event type (set by subclass).
        topic: Broker topic the event is published to (set by subclass).
        event_id: Unique identifier for this event instance.
        occurred_at: Timestamp when the event occurred.
    """

    event_type: ClassVar[str]
    topic: ClassVar[str]

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_message(self) -> dict[str, Any]:
        """Build the broker envelope.

        Returns:
            ``{"event_type": ..., "data": {...}}``.
        """
        return {
            "event_type": self.event_type,
            "data": self._payload(),
        }

    @abstractmethod
    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload data.

        Returns:
            Dictionary with event-specific data.
        """
        pass
