from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from app.config import settings
from app.schemas.api_schemas import MAX_ID, MessageResponse, Relation, RelationCreate, RelationUpdate
from app.dependencies import get_graph_write_service
from app.application.graph_write_service import GraphWriteService

router = APIRouter()

GraphIdQuery = Query(None, ge=1, le=MAX_ID, description="Graph containing the relation; defaults to DEFAULT_GRAPH_ID")


def _graph_or_default(graph_id: Optional[int]) -> int:
    return settings.DEFAULT_GRAPH_ID if graph_id is None else graph_id


@router.post("/relations", response_model=MessageResponse, status_code=201)
def create_relation(
    relation_data: RelationCreate,
    writer: GraphWriteService = Depends(get_graph_write_service),
):
    """
    Add a relation with a caller-chosen id and advance the graph's max_edge_id.

    from_service and to_service are stored as given, without checking that
    those services exist.
    """
    writer.create_relation(
        graph_id=relation_data.graph_id,
        relation_id=relation_data.id,
        from_service=relation_data.from_service,
        to_service=relation_data.to_service,
        name=relation_data.name,
        description=relation_data.description,
    )
    return MessageResponse(message="Relation created successfully")

@router.get("/relations/{relation_id}", response_model=Relation)
def get_relation(
    relation_id: int = Path(..., ge=0, le=MAX_ID),
    graph_id: Optional[int] = GraphIdQuery,
    writer: GraphWriteService = Depends(get_graph_write_service),
):
    return writer.get_relation(_graph_or_default(graph_id), relation_id)

@router.put("/relations/{relation_id}", response_model=MessageResponse)
def update_relation(
    relation_data: RelationUpdate,
    relation_id: int = Path(..., ge=0, le=MAX_ID),
    graph_id: Optional[int] = GraphIdQuery,
    writer: GraphWriteService = Depends(get_graph_write_service),
):
    changes = relation_data.model_dump(exclude_unset=True, exclude_none=True)
    writer.update_relation(_graph_or_default(graph_id), relation_id, changes)
    return MessageResponse(message="Relation updated successfully")

@router.delete("/relations/{relation_id}", response_model=MessageResponse)
def delete_relation(
    relation_id: int = Path(..., ge=0, le=MAX_ID),
    graph_id: Optional[int] = GraphIdQuery,
    writer: GraphWriteService = Depends(get_graph_write_service),
):
    """
    Delete a relation. The graph's max_edge_id is not lowered.
    """
    writer.delete_relation(_graph_or_default(graph_id), relation_id)
    return MessageResponse(message="Relation deleted successfully")
