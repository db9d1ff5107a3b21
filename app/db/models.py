"""
Database Models using SQLAlchemy.

These define the relational layout of graphs, their services (nodes) and
relations (edges). They are NOT the API schemas (see app.schemas.api_schemas).
Service and relation ids are supplied by the caller and are unique within
their graph, hence the composite primary keys.
"""
from sqlalchemy import Column, ForeignKey, Integer, String, Float, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

class Graph(Base):
    __tablename__ = "graphs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    # High-water marks: next id a client can safely use
    max_node_id = Column(Integer, nullable=False, default=0, server_default="0")
    max_edge_id = Column(Integer, nullable=False, default=0, server_default="0")

    # Relationships
    services = relationship(
        "Service", back_populates="graph", cascade="all, delete-orphan",
        passive_deletes=True, order_by="Service.id",
    )
    relations = relationship(
        "Relation", back_populates="graph", cascade="all, delete-orphan",
        passive_deletes=True, order_by="Relation.id",
    )

class Service(Base):
    __tablename__ = "services"

    graph_id = Column(Integer, ForeignKey("graphs.id", ondelete="CASCADE"), primary_key=True)
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    x = Column(Float, nullable=False, default=0.0)
    y = Column(Float, nullable=False, default=0.0)

    # Relationships
    graph = relationship("Graph", back_populates="services")

class Relation(Base):
    __tablename__ = "relations"

    graph_id = Column(Integer, ForeignKey("graphs.id", ondelete="CASCADE"), primary_key=True)
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    # Endpoints are plain service ids, not foreign keys
    from_service = Column(Integer, nullable=False)
    to_service = Column(Integer, nullable=False)

    # Relationships
    graph = relationship("Graph", back_populates="relations")
