from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from app.config import settings
from app.schemas.api_schemas import MAX_ID, MessageResponse, Service, ServiceCreate, ServiceUpdate
from app.dependencies import get_graph_write_service
from app.application.graph_write_service import GraphWriteService

router = APIRouter()

GraphIdQuery = Query(None, ge=1, le=MAX_ID, description="Graph containing the service; defaults to DEFAULT_GRAPH_ID")


def _graph_or_default(graph_id: Optional[int]) -> int:
    return settings.DEFAULT_GRAPH_ID if graph_id is None else graph_id


@router.post("/services", response_model=MessageResponse, status_code=201)
def create_service(
    service_data: ServiceCreate,
    writer: GraphWriteService = Depends(get_graph_write_service),
):
    """
    Add a service with a caller-chosen id and advance the graph's max_node_id.
    """
    writer.create_service(
        graph_id=service_data.graph_id,
        service_id=service_data.id,
        name=service_data.name,
        description=service_data.description,
        x=service_data.x,
        y=service_data.y,
    )
    return MessageResponse(message="Service created successfully")

@router.get("/services/{service_id}", response_model=Service)
def get_service(
    service_id: int = Path(..., ge=0, le=MAX_ID),
    graph_id: Optional[int] = GraphIdQuery,
    writer: GraphWriteService = Depends(get_graph_write_service),
):
    return writer.get_service(_graph_or_default(graph_id), service_id)

@router.put("/services/{service_id}", response_model=MessageResponse)
def update_service(
    service_data: ServiceUpdate,
    service_id: int = Path(..., ge=0, le=MAX_ID),
    graph_id: Optional[int] = GraphIdQuery,
    writer: GraphWriteService = Depends(get_graph_write_service),
):
    """
    Update name, description or coordinates. Omitted fields are left as they are.
    """
    changes = service_data.model_dump(exclude_unset=True, exclude_none=True)
    writer.update_service(_graph_or_default(graph_id), service_id, changes)
    return MessageResponse(message="Service updated successfully")

@router.delete("/services/{service_id}", response_model=MessageResponse)
def delete_service(
    service_id: int = Path(..., ge=0, le=MAX_ID),
    graph_id: Optional[int] = GraphIdQuery,
    writer: GraphWriteService = Depends(get_graph_write_service),
):
    """
    Delete a service. The graph's max_node_id is not lowered.
    """
    writer.delete_service(_graph_or_default(graph_id), service_id)
    return MessageResponse(message="Service deleted successfully")
