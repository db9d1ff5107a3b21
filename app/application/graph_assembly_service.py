"""Builds the nested graph document from the flat graphs/services/relations rows."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.repositories import GraphRepository, ServiceRepository, RelationRepository
from app.domain.errors import NotFoundError, StorageError
from app.schemas.api_schemas import GraphDocument, Relation, Service

logger = logging.getLogger(__name__)


class GraphAssemblyService:
    """Read side of the graph aggregate.

    The document carries every service and relation whose ``graph_id`` is the
    requested graph, with their fields copied as stored. Relation endpoints
    stay service ids; they are not resolved to service names.
    """

    def __init__(self, db: Session) -> None:
        self._db = db
        self._graphs = GraphRepository(db)
        self._services = ServiceRepository(db)
        self._relations = RelationRepository(db)

    def assemble_graph(self, graph_id: int) -> GraphDocument:
        """Return the full document for *graph_id*.

        Raises:
            NotFoundError: no graph with this id.
            StorageError: the store failed, so existence is unknown.
        """
        try:
            graph = self._graphs.get_graph(graph_id)
            if graph is None:
                raise NotFoundError(f"Graph not found: {graph_id}", code="graph_not_found")
            services = self._services.get_graph_services(graph_id)
            relations = self._relations.get_graph_relations(graph_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to retrieve graph %s", graph_id)
            raise StorageError("Failed to retrieve graph") from exc

        logger.debug(
            "Assembled graph %s with %d services and %d relations",
            graph_id, len(services), len(relations),
        )
        return GraphDocument(
            id=graph.id,
            name=graph.name,
            max_node_id=graph.max_node_id,
            max_edge_id=graph.max_edge_id,
            services=[Service.model_validate(s) for s in services],
            relations=[Relation.model_validate(r) for r in relations],
        )
