"""Event handlers for domain events."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.events import (
        GraphCreated,
        GraphDeleted,
        ServiceCreated,
        ServiceUpdated,
        ServiceDeleted,
        RelationCreated,
        RelationUpdated,
        RelationDeleted,
        WatermarkAdvanced,
    )

logger = logging.getLogger(__name__)


class AuditLogHandler:
    """Logs all domain events for audit trail."""

    def handle_graph_created(self, event: GraphCreated) -> None:
        logger.info(f"[AUDIT] Graph created: {event.aggregate_id} - {event.name}")

    def handle_graph_deleted(self, event: GraphDeleted) -> None:
        logger.info(f"[AUDIT] Graph deleted: {event.aggregate_id}")

    def handle_service_created(self, event: ServiceCreated) -> None:
        logger.info(f"[AUDIT] Service created: {event.aggregate_id} - {event.name} in graph {event.graph_id}")

    def handle_service_updated(self, event: ServiceUpdated) -> None:
        logger.info(f"[AUDIT] Service updated: {event.aggregate_id} in graph {event.graph_id} ({', '.join(event.changes)})")

    def handle_service_deleted(self, event: ServiceDeleted) -> None:
        logger.info(f"[AUDIT] Service deleted: {event.aggregate_id} in graph {event.graph_id}")

    def handle_relation_created(self, event: RelationCreated) -> None:
        logger.info(
            f"[AUDIT] Relation created: {event.aggregate_id} "
            f"({event.from_service} -> {event.to_service}) in graph {event.graph_id}"
        )

    def handle_relation_updated(self, event: RelationUpdated) -> None:
        logger.info(f"[AUDIT] Relation updated: {event.aggregate_id} in graph {event.graph_id} ({', '.join(event.changes)})")

    def handle_relation_deleted(self, event: RelationDeleted) -> None:
        logger.info(f"[AUDIT] Relation deleted: {event.aggregate_id} in graph {event.graph_id}")


class WatermarkLogHandler:
    """Traces watermark movement per graph."""

    def handle_watermark_advanced(self, event: WatermarkAdvanced) -> None:
        logger.debug(f"[WATERMARK] Graph {event.aggregate_id}: {event.counter} -> {event.value}")


def register_event_handlers():
    """Register all event handlers with the publisher."""
    from app.domain.events import (
        event_publisher,
        GraphCreated,
        GraphDeleted,
        ServiceCreated,
        ServiceUpdated,
        ServiceDeleted,
        RelationCreated,
        RelationUpdated,
        RelationDeleted,
        WatermarkAdvanced,
    )

    # The publisher outlives app restarts within one process
    event_publisher.clear_subscribers()

    audit = AuditLogHandler()
    watermark = WatermarkLogHandler()

    # Audit handlers (all entity events)
    event_publisher.subscribe(GraphCreated, audit.handle_graph_created)
    event_publisher.subscribe(GraphDeleted, audit.handle_graph_deleted)
    event_publisher.subscribe(ServiceCreated, audit.handle_service_created)
    event_publisher.subscribe(ServiceUpdated, audit.handle_service_updated)
    event_publisher.subscribe(ServiceDeleted, audit.handle_service_deleted)
    event_publisher.subscribe(RelationCreated, audit.handle_relation_created)
    event_publisher.subscribe(RelationUpdated, audit.handle_relation_updated)
    event_publisher.subscribe(RelationDeleted, audit.handle_relation_deleted)

    event_publisher.subscribe(WatermarkAdvanced, watermark.handle_watermark_advanced)
