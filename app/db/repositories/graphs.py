from sqlalchemy import update
from sqlalchemy.orm import Session
from app.db.models import Graph
from typing import Optional

class GraphRepository:
    """Repository for graph operations.

    Writes are flushed, not committed: the caller owns the transaction so a
    child insert and the watermark advance commit or roll back together.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_graph(self, name: str, graph_id: int = None) -> Graph:
        """
        Create a new graph with both watermarks at zero.

        Args:
            name: Graph name
            graph_id: Explicit id (optional, generated when omitted)

        Returns:
            Created graph
        """
        graph = Graph(id=graph_id, name=name, max_node_id=0, max_edge_id=0)
        self.db.add(graph)
        self.db.flush()
        return graph

    def get_graph(self, graph_id: int) -> Optional[Graph]:
        """
        Get a graph by ID.

        Args:
            graph_id: Graph ID

        Returns:
            Graph if found, None otherwise
        """
        return self.db.query(Graph).filter(Graph.id == graph_id).first()

    def delete_graph(self, graph_id: int) -> bool:
        """
        Delete a graph by ID, cascading to its services and relations.

        Returns:
            True if graph was deleted, False otherwise
        """
        graph = self.get_graph(graph_id)
        if not graph:
            return False

        self.db.delete(graph)
        self.db.flush()
        return True

    def advance_max_node_id(self, graph_id: int, candidate: int) -> bool:
        """Raise ``max_node_id`` to *candidate* unless it is already at least that high."""
        return self._advance(Graph.max_node_id, graph_id, candidate)

    def advance_max_edge_id(self, graph_id: int, candidate: int) -> bool:
        """Raise ``max_edge_id`` to *candidate* unless it is already at least that high."""
        return self._advance(Graph.max_edge_id, graph_id, candidate)

    def _advance(self, column, graph_id: int, candidate: int) -> bool:
        # Single conditional UPDATE: concurrent writers converge on the maximum
        # without a read-modify-write in Python.
        result = self.db.execute(
            update(Graph)
            .where(Graph.id == graph_id, column < candidate)
            .values({column.key: candidate})
        )
        return bool(result.rowcount)
