from fastapi import APIRouter
from advisory_crm.api.v1.endpoints import (
    health, team_members, projects, clients, documents, stats
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])

# Resource endpoints
api_router.include_router(team_members.router, prefix="/team-members", tags=["team-members"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(documents.router, prefix="/clients", tags=["documents"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
