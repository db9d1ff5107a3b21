"""Write side of the graph aggregate: entity CRUD and watermark maintenance."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.models import Graph, Relation, Service
from app.db.repositories import GraphRepository, ServiceRepository, RelationRepository
from app.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
    WatermarkUpdateError,
)
from app.domain.events import (
    DomainEvent,
    DomainEventPublisher,
    GraphCreated,
    GraphDeleted,
    RelationCreated,
    RelationDeleted,
    RelationUpdated,
    ServiceCreated,
    ServiceDeleted,
    ServiceUpdated,
    WatermarkAdvanced,
    event_publisher,
)

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes; SQLite only reports the message text
_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


def _integrity_kind(exc: IntegrityError) -> str:
    """Return "unique", "foreign_key" or "other" for a constraint failure."""
    pgcode = getattr(exc.orig, "pgcode", None)
    message = str(exc.orig)
    if pgcode == _UNIQUE_VIOLATION or "UNIQUE constraint failed" in message:
        return "unique"
    if pgcode == _FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in message:
        return "foreign_key"
    return "other"


class GraphWriteService:
    """Creates, updates and deletes graphs, services and relations.

    Creating a service or relation is two statements in one transaction:
    the row insert, then a conditional UPDATE that raises the graph's
    ``max_node_id``/``max_edge_id`` to ``id + 1`` if it is lower. If either
    fails, both are rolled back. Updates and deletes never lower a watermark.
    """

    def __init__(self, db: Session, publisher: DomainEventPublisher = event_publisher) -> None:
        self._db = db
        self._publisher = publisher
        self._graphs = GraphRepository(db)
        self._services = ServiceRepository(db)
        self._relations = RelationRepository(db)

    @contextmanager
    def _unit_of_work(self, action: str) -> Iterator[List[DomainEvent]]:
        """Commit on success, roll back and translate store errors on failure.

        Events appended to the yielded list are published after the commit.
        """
        events: List[DomainEvent] = []
        try:
            yield events
            self._db.commit()
        except DomainError:
            self._db.rollback()
            raise
        except IntegrityError as exc:
            self._db.rollback()
            kind = _integrity_kind(exc)
            if kind == "unique":
                raise ConflictError(f"Failed to {action}: id already exists") from exc
            if kind == "foreign_key":
                raise NotFoundError(
                    f"Failed to {action}: graph no longer exists", code="graph_not_found"
                ) from exc
            logger.exception("Failed to %s", action)
            raise StorageError(f"Failed to {action}") from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.exception("Failed to %s", action)
            raise StorageError(f"Failed to {action}") from exc

        for event in events:
            self._publisher.publish(event)

    def _require_graph(self, graph_id: int) -> Graph:
        graph = self._graphs.get_graph(graph_id)
        if graph is None:
            raise NotFoundError(f"Graph not found: {graph_id}", code="graph_not_found")
        return graph

    # Graphs

    def create_graph(self, name: str, graph_id: int | None = None) -> Graph:
        if not name or not name.strip():
            raise ValidationError("Graph name is required and cannot be empty")

        with self._unit_of_work("create graph") as events:
            if graph_id is not None and self._graphs.get_graph(graph_id) is not None:
                raise ConflictError(f"Graph {graph_id} already exists", code="duplicate_graph")
            graph = self._graphs.create_graph(name.strip(), graph_id)
            events.append(GraphCreated(aggregate_id=graph.id, name=graph.name))

        return graph

    def delete_graph(self, graph_id: int) -> None:
        with self._unit_of_work("delete graph") as events:
            if not self._graphs.delete_graph(graph_id):
                raise NotFoundError(f"Graph not found: {graph_id}", code="graph_not_found")
            events.append(GraphDeleted(aggregate_id=graph_id))

    # Services

    def create_service(self, graph_id: int, service_id: int, name: str = "",
                       description: str = "", x: float = 0.0, y: float = 0.0) -> Service:
        """Insert a service and advance its graph's ``max_node_id``.

        Raises:
            NotFoundError: the graph does not exist.
            ConflictError: the id is already used in this graph.
            WatermarkUpdateError: the watermark could not be advanced; the
                insert has been rolled back.
            StorageError: any other store failure.
        """
        with self._unit_of_work("create service") as events:
            self._require_graph(graph_id)
            if self._services.get_service(graph_id, service_id) is not None:
                raise ConflictError(
                    f"Service {service_id} already exists in graph {graph_id}",
                    code="duplicate_service",
                )
            service = self._services.create_service(graph_id, service_id, name, description, x, y)

            try:
                advanced = self._graphs.advance_max_node_id(graph_id, service_id + 1)
            except SQLAlchemyError as exc:
                logger.exception("Failed to update max node id for graph %s", graph_id)
                raise WatermarkUpdateError(f"Failed to update max node id for graph {graph_id}") from exc

            events.append(ServiceCreated(aggregate_id=service_id, graph_id=graph_id, name=name))
            if advanced:
                events.append(WatermarkAdvanced(aggregate_id=graph_id, counter="max_node_id", value=service_id + 1))

        return service

    def get_service(self, graph_id: int, service_id: int) -> Service:
        try:
            service = self._services.get_service(graph_id, service_id)
        except SQLAlchemyError as exc:
            raise StorageError("Database error") from exc
        if service is None:
            raise NotFoundError(f"Service not found: {service_id}", code="service_not_found")
        return service

    def update_service(self, graph_id: int, service_id: int, changes: Dict[str, Any]) -> Service:
        if not changes:
            raise ValidationError("No fields to update", code="empty_update")

        with self._unit_of_work("update service") as events:
            service = self._services.update_service(graph_id, service_id, changes)
            if service is None:
                raise NotFoundError(f"Service not found: {service_id}", code="service_not_found")
            events.append(ServiceUpdated(aggregate_id=service_id, graph_id=graph_id, changes=dict(changes)))

        return service

    def delete_service(self, graph_id: int, service_id: int) -> None:
        with self._unit_of_work("delete service") as events:
            if not self._services.delete_service(graph_id, service_id):
                raise NotFoundError(f"Service not found: {service_id}", code="service_not_found")
            events.append(ServiceDeleted(aggregate_id=service_id, graph_id=graph_id))

    # Relations

    def create_relation(self, graph_id: int, relation_id: int, from_service: int, to_service: int,
                        name: str = "", description: str = "") -> Relation:
        """Insert a relation and advance its graph's ``max_edge_id``.

        Endpoints are not checked: a relation may point at service ids that
        do not exist (yet) in any graph.
        """
        with self._unit_of_work("create relation") as events:
            self._require_graph(graph_id)
            if self._relations.get_relation(graph_id, relation_id) is not None:
                raise ConflictError(
                    f"Relation {relation_id} already exists in graph {graph_id}",
                    code="duplicate_relation",
                )
            relation = self._relations.create_relation(
                graph_id, relation_id, from_service, to_service, name, description
            )

            try:
                advanced = self._graphs.advance_max_edge_id(graph_id, relation_id + 1)
            except SQLAlchemyError as exc:
                logger.exception("Failed to update max edge id for graph %s", graph_id)
                raise WatermarkUpdateError(f"Failed to update max edge id for graph {graph_id}") from exc

            events.append(RelationCreated(
                aggregate_id=relation_id,
                graph_id=graph_id,
                from_service=from_service,
                to_service=to_service,
            ))
            if advanced:
                events.append(WatermarkAdvanced(aggregate_id=graph_id, counter="max_edge_id", value=relation_id + 1))

        return relation

    def get_relation(self, graph_id: int, relation_id: int) -> Relation:
        try:
            relation = self._relations.get_relation(graph_id, relation_id)
        except SQLAlchemyError as exc:
            raise StorageError("Database error") from exc
        if relation is None:
            raise NotFoundError(f"Relation not found: {relation_id}", code="relation_not_found")
        return relation

    def update_relation(self, graph_id: int, relation_id: int, changes: Dict[str, Any]) -> Relation:
        if not changes:
            raise ValidationError("No fields to update", code="empty_update")

        with self._unit_of_work("update relation") as events:
            relation = self._relations.update_relation(graph_id, relation_id, changes)
            if relation is None:
                raise NotFoundError(f"Relation not found: {relation_id}", code="relation_not_found")
            events.append(RelationUpdated(aggregate_id=relation_id, graph_id=graph_id, changes=dict(changes)))

        return relation

    def delete_relation(self, graph_id: int, relation_id: int) -> None:
        with self._unit_of_work("delete relation") as events:
            if not self._relations.delete_relation(graph_id, relation_id):
                raise NotFoundError(f"Relation not found: {relation_id}", code="relation_not_found")
            events.append(RelationDeleted(aggregate_id=relation_id, graph_id=graph_id))
