import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.routers import graphs, health, relations, services
from app.domain.errors import DomainError, NotFoundError, ValidationError, ConflictError, StorageError
from app.application.event_handlers import register_event_handlers
from app.dependencies import dispose_engine, get_engine

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Service Graph API",
    description="Graphs of services and relations, served as nested JSON documents",
    version=settings.VERSION,
)

# Register domain event handlers and make sure the tables exist
@app.on_event("startup")
def startup_event():
    register_event_handlers()
    if settings.AUTO_CREATE_TABLES:
        from app.db.init_db import create_tables
        create_tables(get_engine())

@app.on_event("shutdown")
def shutdown_event():
    dispose_engine()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allows all origins
    allow_credentials=True,
    allow_methods=["*"],  # Allows all methods
    allow_headers=["*"],  # Allows all headers
)


def _error_response(status_code: int, exc: DomainError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": exc.code, "detail": str(exc)})


# Domain error handlers
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error_response(404, exc)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error_response(400, exc)


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    return _error_response(409, exc)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(500, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "invalid_body", "detail": detail})

# Include routers
app.include_router(health.router, prefix=settings.API_PREFIX, tags=["Health"])  # Health check endpoints first
app.include_router(graphs.router, prefix=settings.API_PREFIX, tags=["Graphs"])
app.include_router(services.router, prefix=settings.API_PREFIX, tags=["Services"])
app.include_router(relations.router, prefix=settings.API_PREFIX, tags=["Relations"])

@app.get("/")
async def root():
    return {"message": "Welcome to Service Graph API. See /docs for API documentation"}
