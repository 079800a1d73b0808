"""Project router - FastAPI endpoints for projects, media, review links and members"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_editor_profile
from ...database import get_db
from ...models import EditorProfile, User
from .media_service import MediaService
from .schemas import (
    FolderResponse,
    InvitationResponse,
    MediaResponse,
    MemberInvite,
    MemberResponse,
    MemberUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    ReviewLinkCreate,
    ReviewLinkResponse,
    ReviewLinkToggle,
)
from .service import ProjectService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["Projects"])


def get_project_service(db: Session = Depends(get_db)) -> ProjectService:
    """Dependency injection for ProjectService"""
    return ProjectService(db)


def get_media_service(db: Session = Depends(get_db)) -> MediaService:
    """Dependency injection for MediaService"""
    return MediaService(db)


# ============================================================================
# PROJECTS
# ============================================================================


@router.get("")
async def get_projects(
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    projects = service.get_projects(editor)
    return {"projects": [ProjectResponse.model_validate(p) for p in projects]}


@router.post("")
async def create_project(
    data: ProjectCreate,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    project = service.create_project(data, editor)
    return {
        "message": "Project created successfully",
        "project": ProjectResponse.model_validate(project),
    }


@router.patch("/{project_id}")
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    project = service.update_project(project_id, data, editor)
    return {
        "message": "Project updated successfully",
        "project": ProjectResponse.model_validate(project),
    }


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Delete a project, its media (including stored objects), links and members"""
    service.delete_project(project_id, editor)
    return {"message": "Project deleted successfully"}


# ============================================================================
# MEDIA
# ============================================================================


@router.post("/{project_id}/media")
async def upload_media(
    project_id: str,
    files: Optional[list[UploadFile]] = File(None),
    thumbnails: Optional[list[UploadFile]] = File(None),
    thumbnailFor: Optional[list[str]] = Form(None),
    parentMediaId: Optional[str] = Form(None),
    user: User = Depends(get_current_user),
    editor: EditorProfile = Depends(get_editor_profile),
    service: MediaService = Depends(get_media_service),
):
    """Upload one or more files (optionally as a new version of existing media)"""
    uploaded = await service.upload_media(
        project_id,
        files or [],
        thumbnails or [],
        thumbnailFor or [],
        parentMediaId,
        user,
        editor,
    )
    return {
        "message": f"Successfully uploaded {len(uploaded)} file(s)",
        "files": [MediaResponse.model_validate(m) for m in uploaded],
    }


@router.post("/{project_id}/upload-folder")
async def upload_folder(
    project_id: str,
    files: Optional[list[UploadFile]] = File(None),
    filePaths: Optional[list[str]] = Form(None),
    user: User = Depends(get_current_user),
    editor: EditorProfile = Depends(get_editor_profile),
    service: MediaService = Depends(get_media_service),
):
    """Upload a folder; filePaths[i] is the relative path of files[i] inside it"""
    uploaded, folders = await service.upload_folder(
        project_id, files or [], filePaths or [], user, editor
    )
    return {
        "message": (
            f"Successfully uploaded {len(uploaded)} files and created {len(folders)} folders"
        ),
        "files": [MediaResponse.model_validate(m) for m in uploaded],
        "folders": [FolderResponse.model_validate(f) for f in folders],
    }


@router.delete("/{project_id}/media/{media_id}")
async def delete_media(
    project_id: str,
    media_id: str,
    editor: EditorProfile = Depends(get_editor_profile),
    service: MediaService = Depends(get_media_service),
):
    service.delete_media(project_id, media_id, editor)
    return {"message": "Media file deleted successfully"}


# ============================================================================
# REVIEW LINKS
# ============================================================================


@router.post("/{project_id}/review-links")
async def create_review_link(
    project_id: str,
    data: ReviewLinkCreate,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    link = service.create_review_link(project_id, data, editor)
    return {
        "message": "Review link created successfully",
        "reviewLink": ReviewLinkResponse.model_validate(link),
        "reviewUrl": service.review_url(link),
    }


@router.get("/{project_id}/media/{media_id}/review-links")
async def get_media_review_links(
    project_id: str,
    media_id: str,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    links = service.get_media_review_links(project_id, media_id, editor)
    return {"links": [ReviewLinkResponse.model_validate(link) for link in links]}


@router.patch("/{project_id}/review-links/{link_id}/toggle")
async def toggle_review_link(
    project_id: str,
    link_id: str,
    data: ReviewLinkToggle,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    message = service.toggle_review_link(project_id, link_id, data.isActive, editor)
    return {"message": message}


# ============================================================================
# MEMBERS
# ============================================================================


@router.post("/{project_id}/invite")
async def invite_member(
    project_id: str,
    data: MemberInvite,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    result = service.invite(project_id, data, editor)
    response = {"success": True, "message": result["message"]}
    if "member" in result:
        response["member"] = MemberResponse.model_validate(result["member"])
    else:
        response["invitation"] = InvitationResponse.model_validate(result["invitation"])
        response["inviteUrl"] = result["inviteUrl"]
    return response


@router.patch("/{project_id}/members/{member_id}")
async def update_member_role(
    project_id: str,
    member_id: str,
    data: MemberUpdate,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    service.update_member_role(project_id, member_id, data.role, editor)
    return {"success": True}


@router.delete("/{project_id}/members/{member_id}")
async def remove_member(
    project_id: str,
    member_id: str,
    editor: EditorProfile = Depends(get_editor_profile),
    service: ProjectService = Depends(get_project_service),
):
    service.remove_member(project_id, member_id, editor)
    return {"success": True}
