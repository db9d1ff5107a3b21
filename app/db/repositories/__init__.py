from app.db.repositories.graphs import GraphRepository
from app.db.repositories.services import ServiceRepository
from app.db.repositories.relations import RelationRepository

__all__ = ['GraphRepository', 'ServiceRepository', 'RelationRepository']
