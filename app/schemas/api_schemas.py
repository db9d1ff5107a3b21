"""
API Request/Response Schemas using Pydantic.

Structure of HTTP requests and responses for the service graph API.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# Ids live in INTEGER columns and id + 1 must fit too
MAX_ID = 2**31 - 2

# Service schemas
class ServiceCreate(BaseModel):
    id: int = Field(..., ge=0, le=MAX_ID, description="Caller-chosen id, unique within the graph")
    graph_id: int = Field(..., ge=1, le=MAX_ID, description="ID of the graph the service belongs to")
    name: str = Field("", description="Display name of the service", max_length=255)
    description: str = Field("", description="Free-form description")
    x: float = Field(0.0, allow_inf_nan=False, description="Layout x coordinate")
    y: float = Field(0.0, allow_inf_nan=False, description="Layout y coordinate")

class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    x: Optional[float] = Field(None, allow_inf_nan=False)
    y: Optional[float] = Field(None, allow_inf_nan=False)

class Service(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    graph_id: int
    name: str
    description: str
    x: float
    y: float

# Relation schemas
class RelationCreate(BaseModel):
    id: int = Field(..., ge=0, le=MAX_ID, description="Caller-chosen id, unique within the graph")
    graph_id: int = Field(..., ge=1, le=MAX_ID, description="ID of the graph the relation belongs to")
    name: str = Field("", description="Display name of the relation", max_length=255)
    description: str = Field("", description="Free-form description")
    from_service: int = Field(..., ge=0, le=MAX_ID, description="ID of the source service")
    to_service: int = Field(..., ge=0, le=MAX_ID, description="ID of the target service")

class RelationUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    from_service: Optional[int] = Field(None, ge=0, le=MAX_ID)
    to_service: Optional[int] = Field(None, ge=0, le=MAX_ID)

class Relation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    graph_id: int
    name: str
    description: str
    from_service: int
    to_service: int

# Graph schemas
class GraphCreate(BaseModel):
    id: Optional[int] = Field(None, ge=1, le=MAX_ID, description="Explicit graph id, generated when omitted")
    name: str = Field(..., description="Name of the graph", min_length=1, max_length=255)

class GraphDocument(BaseModel):
    id: int = Field(..., description="Graph id")
    name: str = Field(..., description="Name of the graph")
    max_node_id: int = Field(..., description="Next service id that is safe to use")
    max_edge_id: int = Field(..., description="Next relation id that is safe to use")
    services: List[Service] = Field(default_factory=list, description="Services in the graph")
    relations: List[Relation] = Field(default_factory=list, description="Relations in the graph")

# Generic responses
class MessageResponse(BaseModel):
    message: str

class ErrorResponse(BaseModel):
    error: str = Field(..., description="Machine-readable reason")
    detail: str = Field("", description="Human-readable explanation")
