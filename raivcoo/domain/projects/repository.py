"""Project repository - Database operations for projects, media, review links and members"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...models import (
    ActivityNotification,
    Client,
    EditorProfile,
    Project,
    ProjectFolder,
    ProjectInvitation,
    ProjectMedia,
    ProjectMember,
    ReviewLink,
    Subscription,
)


class ProjectRepository:
    """Repository for project database operations"""

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    @staticmethod
    def get_projects(db: Session, editor_id: str) -> list[Project]:
        return (
            db.query(Project)
            .filter(Project.editor_id == editor_id)
            .order_by(Project.created_at.desc())
            .all()
        )

    @staticmethod
    def get_client(db: Session, client_id: str, editor_id: str) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.editor_id == editor_id)
            .first()
        )

    @staticmethod
    def create_project(db: Session, **project_data) -> Project:
        project = Project(**project_data)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def delete_project(db: Session, project: Project) -> None:
        """Delete a project and every row hanging off it"""
        db.query(ReviewLink).filter(ReviewLink.project_id == project.id).delete()
        db.query(ProjectMember).filter(ProjectMember.project_id == project.id).delete()
        db.query(ProjectInvitation).filter(ProjectInvitation.project_id == project.id).delete()
        # Versions reference their parent, so drop them before the originals
        db.query(ProjectMedia).filter(
            ProjectMedia.project_id == project.id, ProjectMedia.parent_media_id.isnot(None)
        ).delete()
        db.query(ProjectMedia).filter(ProjectMedia.project_id == project.id).delete()
        # Unlink nested folders so they can go in one statement
        db.query(ProjectFolder).filter(ProjectFolder.project_id == project.id).update(
            {ProjectFolder.parent_folder_id: None}
        )
        db.query(ProjectFolder).filter(ProjectFolder.project_id == project.id).delete()
        db.query(ActivityNotification).filter(ActivityNotification.project_id == project.id).delete()
        db.delete(project)
        db.commit()

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    @staticmethod
    def get_project_media(db: Session, project_id: str) -> list[ProjectMedia]:
        return db.query(ProjectMedia).filter(ProjectMedia.project_id == project_id).all()

    @staticmethod
    def get_project_storage_bytes(db: Session, project_id: str) -> int:
        total = (
            db.query(func.coalesce(func.sum(ProjectMedia.file_size), 0))
            .filter(ProjectMedia.project_id == project_id)
            .scalar()
        )
        return int(total or 0)

    @staticmethod
    def get_version_group(db: Session, root_id: str) -> list[ProjectMedia]:
        """The original upload and all of its versions, oldest version first"""
        return (
            db.query(ProjectMedia)
            .filter(or_(ProjectMedia.id == root_id, ProjectMedia.parent_media_id == root_id))
            .order_by(ProjectMedia.version_number.asc())
            .all()
        )

    @staticmethod
    def get_active_subscription(db: Session, user_id: str) -> Optional[Subscription]:
        return (
            db.query(Subscription)
            .filter(Subscription.user_id == user_id, Subscription.status == "active")
            .order_by(Subscription.created_at.desc())
            .first()
        )

    @staticmethod
    def delete_media(db: Session, media: ProjectMedia) -> None:
        db.query(ReviewLink).filter(ReviewLink.media_id == media.id).delete()
        db.delete(media)
        db.commit()

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    @staticmethod
    def get_folder(
        db: Session, project_id: str, name: str, parent_folder_id: Optional[str]
    ) -> Optional[ProjectFolder]:
        query = db.query(ProjectFolder).filter(
            ProjectFolder.project_id == project_id, ProjectFolder.name == name
        )
        if parent_folder_id:
            query = query.filter(ProjectFolder.parent_folder_id == parent_folder_id)
        else:
            query = query.filter(ProjectFolder.parent_folder_id.is_(None))
        return query.first()

    @staticmethod
    def create_folder(db: Session, **folder_data) -> ProjectFolder:
        folder = ProjectFolder(**folder_data)
        db.add(folder)
        db.flush()
        return folder

    # ------------------------------------------------------------------
    # Review links
    # ------------------------------------------------------------------

    @staticmethod
    def create_review_link(db: Session, **link_data) -> ReviewLink:
        link = ReviewLink(**link_data)
        db.add(link)
        db.commit()
        db.refresh(link)
        return link

    @staticmethod
    def get_media_review_links(db: Session, media_id: str) -> list[ReviewLink]:
        return (
            db.query(ReviewLink)
            .filter(ReviewLink.media_id == media_id)
            .order_by(ReviewLink.created_at.desc())
            .all()
        )

    # ------------------------------------------------------------------
    # Members and invitations
    # ------------------------------------------------------------------

    @staticmethod
    def get_editor_by_email(db: Session, email: str) -> Optional[EditorProfile]:
        return (
            db.query(EditorProfile)
            .filter(func.lower(EditorProfile.email) == email.lower())
            .first()
        )

    @staticmethod
    def get_member_by_user(db: Session, project_id: str, user_id: str) -> Optional[ProjectMember]:
        return (
            db.query(ProjectMember)
            .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_invitation_by_email(db: Session, project_id: str, email: str) -> Optional[ProjectInvitation]:
        return (
            db.query(ProjectInvitation)
            .filter(ProjectInvitation.project_id == project_id, ProjectInvitation.email == email)
            .first()
        )

    @staticmethod
    def add(db: Session, instance):
        db.add(instance)
        db.commit()
        db.refresh(instance)
        return instance
