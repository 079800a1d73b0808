"""Client router - FastAPI endpoints for client operations"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_editor_profile
from ...database import get_db
from ...models import EditorProfile
from .schemas import ClientCreate, ClientProjectSummary, ClientResponse
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/clients", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("")
async def get_clients(
    editor: EditorProfile = Depends(get_editor_profile),
    service: ClientService = Depends(get_client_service),
):
    """Get all clients for the current editor, newest first"""
    clients = service.get_clients(editor)
    return {"clients": [ClientResponse.model_validate(c) for c in clients]}


@router.post("")
async def create_client(
    data: ClientCreate,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ClientService = Depends(get_client_service),
):
    client = service.create_client(data, editor)
    return {
        "message": "Client created successfully",
        "client": ClientResponse.model_validate(client),
    }


@router.get("/{client_id}")
async def get_client(
    client_id: str,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ClientService = Depends(get_client_service),
):
    """Get a client with its projects"""
    client = service.get_client(client_id, editor)
    projects = service.get_client_projects(client)
    return {
        "client": ClientResponse.model_validate(client),
        "projects": [ClientProjectSummary.model_validate(p) for p in projects],
    }


@router.patch("/{client_id}")
async def update_client(
    client_id: str,
    data: ClientCreate,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ClientService = Depends(get_client_service),
):
    client = service.update_client(client_id, data, editor)
    return {
        "message": "Client updated successfully",
        "client": ClientResponse.model_validate(client),
    }


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ClientService = Depends(get_client_service),
):
    service.delete_client(client_id, editor)
    return {"message": "Client deleted successfully"}
