from fastapi import APIRouter, Depends, Path
from app.schemas.api_schemas import MAX_ID, GraphCreate, GraphDocument, MessageResponse
from app.dependencies import get_graph_assembly_service, get_graph_write_service
from app.application.graph_assembly_service import GraphAssemblyService
from app.application.graph_write_service import GraphWriteService

router = APIRouter()

@router.post("/graph", response_model=GraphDocument, status_code=201)
def create_graph(
    graph_data: GraphCreate,
    writer: GraphWriteService = Depends(get_graph_write_service),
    assembler: GraphAssemblyService = Depends(get_graph_assembly_service),
):
    """
    Create an empty graph. Both watermarks start at 0.
    """
    graph = writer.create_graph(graph_data.name, graph_data.id)
    return assembler.assemble_graph(graph.id)

@router.get("/graph/{graph_id}", response_model=GraphDocument)
def get_graph(
    graph_id: int = Path(..., ge=1, le=MAX_ID),
    assembler: GraphAssemblyService = Depends(get_graph_assembly_service),
):
    """
    Retrieve the graph with all of its services and relations.
    """
    return assembler.assemble_graph(graph_id)

@router.delete("/graph/{graph_id}", response_model=MessageResponse)
def delete_graph(
    graph_id: int = Path(..., ge=1, le=MAX_ID),
    writer: GraphWriteService = Depends(get_graph_write_service),
):
    """
    Delete a graph and all its services and relations.
    """
    writer.delete_graph(graph_id)
    return MessageResponse(message="Graph deleted successfully")
