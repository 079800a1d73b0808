"""Project service - projects, review links and project members"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import APP_URL
from ...models import EditorProfile, Project, ProjectInvitation, ProjectMember, ReviewLink
from ...security_utils import generate_token, hash_password_bcrypt
from ...services import email_service, storage
from ...shared.ownership import (
    get_owned_project,
    get_project_media,
    get_project_member,
    get_project_review_link,
)
from ...shared.validators import clean_optional
from .repository import ProjectRepository
from .schemas import MemberInvite, ProjectCreate, ProjectUpdate, ReviewLinkCreate

logger = logging.getLogger(__name__)

MAX_PROJECT_NAME_LENGTH = 255
REVIEW_LINK_TOKEN_LENGTH = 12
INVITATION_TOKEN_LENGTH = 32


class ProjectService:
    """Service layer for project business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProjectRepository()

    # ========================================================================
    # PROJECTS
    # ========================================================================

    def get_projects(self, editor: EditorProfile) -> list[Project]:
        return self.repo.get_projects(self.db, editor.id)

    @staticmethod
    def _validate_name(name) -> str:
        name = clean_optional(name)
        if not name:
            raise HTTPException(status_code=400, detail="Project name cannot be empty.")
        if len(name) > MAX_PROJECT_NAME_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Project name is too long (max {MAX_PROJECT_NAME_LENGTH} chars).",
            )
        return name

    def _resolve_client_id(self, client_id, editor: EditorProfile):
        if not client_id:
            return None
        if not self.repo.get_client(self.db, client_id, editor.id):
            raise HTTPException(status_code=404, detail="Client not found")
        return client_id

    def create_project(self, data: ProjectCreate, editor: EditorProfile) -> Project:
        project = self.repo.create_project(
            self.db,
            editor_id=editor.id,
            name=self._validate_name(data.name),
            description=clean_optional(data.description),
            client_id=self._resolve_client_id(data.clientId, editor),
            deadline=data.deadline,
        )
        logger.info(f"📁 Project {project.id} created by editor {editor.id}")
        return project

    def update_project(self, project_id: str, data: ProjectUpdate, editor: EditorProfile) -> Project:
        project = get_owned_project(self.db, project_id, editor)
        sent = data.model_fields_set

        if "name" in sent:
            project.name = self._validate_name(data.name)
        if "description" in sent:
            project.description = clean_optional(data.description)
        if "deadline" in sent:
            project.deadline = data.deadline
        if "clientId" in sent:
            project.client_id = self._resolve_client_id(data.clientId, editor)

        new_password = clean_optional(data.accessPassword)
        if data.passwordProtected is True:
            if not project.access_password_hash and not new_password:
                raise HTTPException(
                    status_code=400, detail="Password is required when enabling protection."
                )
            project.password_protected = True
            if new_password:
                project.access_password_hash = hash_password_bcrypt(new_password)
        elif data.passwordProtected is False:
            project.password_protected = False
            project.access_password_hash = None
        elif new_password and project.password_protected:
            project.access_password_hash = hash_password_bcrypt(new_password)

        self.db.commit()
        self.db.refresh(project)
        return project

    def delete_project(self, project_id: str, editor: EditorProfile) -> None:
        project = get_owned_project(self.db, project_id, editor)

        for media in self.repo.get_project_media(self.db, project.id):
            storage.delete_object(media.r2_key)
            storage.delete_object(media.thumbnail_r2_key)

        self.repo.delete_project(self.db, project)
        logger.info(f"🗑️ Project {project_id} deleted by editor {editor.id}")

    # ========================================================================
    # REVIEW LINKS
    # ========================================================================

    def create_review_link(
        self, project_id: str, data: ReviewLinkCreate, editor: EditorProfile
    ) -> ReviewLink:
        project = get_owned_project(self.db, project_id, editor)
        if not data.mediaId:
            raise HTTPException(status_code=400, detail="Media ID is required")
        media = get_project_media(self.db, project, data.mediaId)

        password = clean_optional(data.password)
        link = self.repo.create_review_link(
            self.db,
            project_id=project.id,
            media_id=media.id,
            link_token=generate_token(REVIEW_LINK_TOKEN_LENGTH),
            title=clean_optional(data.title),
            is_active=True,
            requires_password=bool(password),
            password_hash=hash_password_bcrypt(password) if password else None,
            expires_at=data.expiresAt,
        )
        logger.info(f"🔗 Review link {link.id} created for media {media.id}")
        return link

    def get_media_review_links(
        self, project_id: str, media_id: str, editor: EditorProfile
    ) -> list[ReviewLink]:
        project = get_owned_project(self.db, project_id, editor)
        media = get_project_media(self.db, project, media_id)
        return self.repo.get_media_review_links(self.db, media.id)

    def toggle_review_link(
        self, project_id: str, link_id: str, is_active, editor: EditorProfile
    ) -> str:
        if not isinstance(is_active, bool):
            raise HTTPException(status_code=400, detail="isActive must be a boolean")

        project = get_owned_project(self.db, project_id, editor)
        link = get_project_review_link(self.db, project, link_id)

        link.is_active = is_active
        self.db.commit()

        state = "activated" if is_active else "deactivated"
        logger.info(f"🔗 Review link {link.id} {state}")
        return f"Review link {state} successfully"

    @staticmethod
    def review_url(link: ReviewLink) -> str:
        return f"{APP_URL}/review/{link.link_token}"

    # ========================================================================
    # MEMBERS
    # ========================================================================

    def invite(self, project_id: str, data: MemberInvite, editor: EditorProfile) -> dict:
        """Add an existing editor as a pending member, otherwise create an email invitation"""
        project = get_owned_project(self.db, project_id, editor)
        if not data.email:
            raise HTTPException(status_code=400, detail="Email is required")

        invitee = self.repo.get_editor_by_email(self.db, data.email)
        if invitee:
            if self.repo.get_member_by_user(self.db, project.id, invitee.user_id):
                raise HTTPException(
                    status_code=400, detail="User is already a member of this project"
                )
            member = self.repo.add(
                self.db,
                ProjectMember(
                    project_id=project.id,
                    user_id=invitee.user_id,
                    role=data.role,
                    status="pending",
                    invited_by=editor.id,
                ),
            )
            logger.info(f"👥 Editor {invitee.id} invited to project {project.id}")
            return {"member": member, "message": "User invited successfully"}

        if self.repo.get_invitation_by_email(self.db, project.id, data.email):
            raise HTTPException(status_code=400, detail="Invitation already sent to this email")

        invitation = self.repo.add(
            self.db,
            ProjectInvitation(
                project_id=project.id,
                email=data.email,
                role=data.role,
                invited_by=editor.id,
                invitation_token=generate_token(INVITATION_TOKEN_LENGTH),
            ),
        )
        invite_url = f"{APP_URL}/invite/{invitation.invitation_token}"

        try:
            email_service.send_project_invitation(
                data.email, project.name, editor.full_name or editor.display_name, invite_url
            )
        except Exception as e:
            logger.warning(f"⚠️ Invitation email to {data.email} not sent: {str(e)}")

        logger.info(f"✉️ Invitation {invitation.id} created for project {project.id}")
        return {
            "invitation": invitation,
            "inviteUrl": invite_url,
            "message": "Invitation sent successfully",
        }

    def update_member_role(
        self, project_id: str, member_id: str, role, editor: EditorProfile
    ) -> None:
        project = get_owned_project(self.db, project_id, editor)
        if not role:
            raise HTTPException(status_code=400, detail="Role is required")
        member = get_project_member(self.db, project, member_id)
        member.role = role
        self.db.commit()

    def remove_member(self, project_id: str, member_id: str, editor: EditorProfile) -> None:
        project = get_owned_project(self.db, project_id, editor)
        member = get_project_member(self.db, project, member_id)
        self.db.delete(member)
        self.db.commit()
        logger.info(f"👥 Member {member_id} removed from project {project_id}")
