"""Domain events for decoupled side effects and integrations."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for all domain events."""
    aggregate_id: int
    event_id: str = field(default="", kw_only=True)
    timestamp: datetime | None = field(default=None, kw_only=True)

    def __post_init__(self):
        if not self.event_id:
            self.event_id = str(uuid4())
        if not self.timestamp:
            self.timestamp = datetime.now()


@dataclass
class GraphCreated(DomainEvent):
    """Raised when a new graph is created."""
    name: str


@dataclass
class GraphDeleted(DomainEvent):
    """Raised when a graph and all its children are deleted."""


@dataclass
class ServiceCreated(DomainEvent):
    """Raised when a service is added to a graph."""
    graph_id: int
    name: str


@dataclass
class ServiceUpdated(DomainEvent):
    graph_id: int
    changes: Dict[str, Any]


@dataclass
class ServiceDeleted(DomainEvent):
    graph_id: int


@dataclass
class RelationCreated(DomainEvent):
    """Raised when a relation is added to a graph."""
    graph_id: int
    from_service: int
    to_service: int


@dataclass
class RelationUpdated(DomainEvent):
    graph_id: int
    changes: Dict[str, Any]


@dataclass
class RelationDeleted(DomainEvent):
    graph_id: int


@dataclass
class WatermarkAdvanced(DomainEvent):
    """Raised when a create moved max_node_id or max_edge_id forward."""
    counter: str
    value: int


class DomainEventPublisher:
    """Singleton publisher for domain events."""

    _instance: DomainEventPublisher | None = None
    _subscribers: Dict[type, List[Callable[[DomainEvent], None]]]

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._subscribers = {}
        return cls._instance

    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        event_type = type(event)
        for handler in self._subscribers.get(event_type, []):
            try:
                handler(event)
            except Exception:
                # Log error but don't fail the main operation
                logger.exception("Event handler error for %s", event_type.__name__)

    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers = {}


# Singleton instance
event_publisher = DomainEventPublisher()
