"""Client service - Business logic for client operations"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Client, EditorProfile, Project
from ...shared.validators import clean_optional
from .repository import ClientRepository
from .schemas import ClientCreate

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_clients(self, editor: EditorProfile) -> list[Client]:
        return self.repo.get_clients(self.db, editor.id)

    def get_client(self, client_id: str, editor: EditorProfile) -> Client:
        """Get a client owned by the editor"""
        client = self.repo.get_client_by_id(self.db, client_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        if client.editor_id != editor.id:
            logger.warning(f"🚫 Editor {editor.id} denied access to client {client_id}")
            raise HTTPException(status_code=403, detail="Unauthorized")
        return client

    def get_client_projects(self, client: Client) -> list[Project]:
        return self.repo.get_client_projects(self.db, client.id)

    @staticmethod
    def _fields(data: ClientCreate) -> dict:
        name = clean_optional(data.name)
        if not name:
            raise HTTPException(status_code=400, detail="Client name is required")
        return {
            "name": name,
            "email": data.email,
            "company": clean_optional(data.company),
            "phone": clean_optional(data.phone),
            "notes": clean_optional(data.notes),
        }

    def create_client(self, data: ClientCreate, editor: EditorProfile) -> Client:
        logger.info(f"📥 Creating client for editor: {editor.id}")
        return self.repo.create_client(self.db, editor.id, **self._fields(data))

    def update_client(self, client_id: str, data: ClientCreate, editor: EditorProfile) -> Client:
        client = self.get_client(client_id, editor)
        return self.repo.update_client(self.db, client, **self._fields(data))

    def delete_client(self, client_id: str, editor: EditorProfile) -> None:
        client = self.get_client(client_id, editor)
        self.repo.delete_client(self.db, client)
        logger.info(f"🗑️ Client {client_id} deleted by editor {editor.id}")
