from sqlalchemy.orm import Session
from app.db.models import Relation
from typing import Any, Dict, List, Optional

class RelationRepository:
    """Repository for relation (edge) rows."""

    def __init__(self, db: Session):
        self.db = db

    def create_relation(self, graph_id: int, relation_id: int, from_service: int, to_service: int,
                        name: str = "", description: str = "") -> Relation:
        """
        Insert a relation row with a caller-supplied id.

        The endpoints are stored as given; they are not checked against the
        services table.

        Raises:
            sqlalchemy.exc.IntegrityError: if the id is taken in this graph
                or the graph does not exist
        """
        relation = Relation(
            graph_id=graph_id,
            id=relation_id,
            name=name,
            description=description,
            from_service=from_service,
            to_service=to_service,
        )
        self.db.add(relation)
        self.db.flush()
        return relation

    def get_relation(self, graph_id: int, relation_id: int) -> Optional[Relation]:
        return (
            self.db.query(Relation)
            .filter(Relation.graph_id == graph_id, Relation.id == relation_id)
            .first()
        )

    def get_graph_relations(self, graph_id: int) -> List[Relation]:
        """
        Get all relations in a graph.

        Args:
            graph_id: Graph ID

        Returns:
            List of relations in the graph, ordered by id
        """
        return (
            self.db.query(Relation)
            .filter(Relation.graph_id == graph_id)
            .order_by(Relation.id)
            .all()
        )

    def update_relation(self, graph_id: int, relation_id: int, changes: Dict[str, Any]) -> Optional[Relation]:
        relation = self.get_relation(graph_id, relation_id)
        if not relation:
            return None

        for field in ("name", "description", "from_service", "to_service"):
            if field in changes:
                setattr(relation, field, changes[field])
        self.db.flush()
        return relation

    def delete_relation(self, graph_id: int, relation_id: int) -> bool:
        relation = self.get_relation(graph_id, relation_id)
        if not relation:
            return False

        self.db.delete(relation)
        self.db.flush()
        return True
