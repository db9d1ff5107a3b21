from sqlalchemy.orm import Session
from app.db.models import Service
from typing import Any, Dict, List, Optional

class ServiceRepository:
    """Repository for service (node) rows."""

    def __init__(self, db: Session):
        self.db = db

    def create_service(self, graph_id: int, service_id: int, name: str = "",
                       description: str = "", x: float = 0.0, y: float = 0.0) -> Service:
        """
        Insert a service row with a caller-supplied id.

        Raises:
            sqlalchemy.exc.IntegrityError: if the id is taken in this graph
                or the graph does not exist
        """
        service = Service(
            graph_id=graph_id,
            id=service_id,
            name=name,
            description=description,
            x=x,
            y=y,
        )
        self.db.add(service)
        self.db.flush()
        return service

    def get_service(self, graph_id: int, service_id: int) -> Optional[Service]:
        return (
            self.db.query(Service)
            .filter(Service.graph_id == graph_id, Service.id == service_id)
            .first()
        )

    def get_graph_services(self, graph_id: int) -> List[Service]:
        """
        Get all services in a graph.

        Args:
            graph_id: Graph ID

        Returns:
            List of services in the graph, ordered by id
        """
        return (
            self.db.query(Service)
            .filter(Service.graph_id == graph_id)
            .order_by(Service.id)
            .all()
        )

    def update_service(self, graph_id: int, service_id: int, changes: Dict[str, Any]) -> Optional[Service]:
        """
        Apply *changes* to the mutable fields of a service.

        Returns:
            Updated service or None if service not found
        """
        service = self.get_service(graph_id, service_id)
        if not service:
            return None

        for field in ("name", "description", "x", "y"):
            if field in changes:
                setattr(service, field, changes[field])
        self.db.flush()
        return service

    def delete_service(self, graph_id: int, service_id: int) -> bool:
        service = self.get_service(graph_id, service_id)
        if not service:
            return False

        self.db.delete(service)
        self.db.flush()
        return True
