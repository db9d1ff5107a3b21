"""
service-graph-api Application Package

Directory Structure:
├── routers/           # FastAPI route handlers (/ping, /graph, /services, /relations)
├── schemas/           # Pydantic models for API requests/responses
│   └── api_schemas.py # HTTP request/response structures
├── application/       # Graph assembly and write services
├── domain/            # Error hierarchy and domain events
├── db/                # SQLAlchemy models, engine setup and repositories
└── config.py          # Application configuration

A graph owns services (nodes) and relations (edges). Ids of services and
relations are chosen by the client; each graph keeps max_node_id and
max_edge_id watermarks so a client can ask for the next safe id.
"""
