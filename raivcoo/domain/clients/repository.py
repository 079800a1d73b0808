"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client, Project


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_clients(db: Session, editor_id: str) -> list[Client]:
        """Get all clients for an editor"""
        return (
            db.query(Client)
            .filter(Client.editor_id == editor_id)
            .order_by(Client.created_at.desc())
            .all()
        )

    @staticmethod
    def get_client_by_id(db: Session, client_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def get_client_projects(db: Session, client_id: str) -> list[Project]:
        return (
            db.query(Project)
            .filter(Project.client_id == client_id)
            .order_by(Project.created_at.desc())
            .all()
        )

    @staticmethod
    def create_client(db: Session, editor_id: str, **client_data) -> Client:
        client = Client(editor_id=editor_id, **client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            if hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> None:
        """Delete a client, detaching its projects first"""
        db.query(Project).filter(Project.client_id == client.id).update({Project.client_id: None})
        db.delete(client)
        db.commit()
