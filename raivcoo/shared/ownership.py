"""Ownership chain lookups: editor profile -> project -> media / review link / member"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..models import EditorProfile, Project, ProjectMedia, ProjectMember, ReviewLink

logger = logging.getLogger(__name__)


def get_owned_project(db: Session, project_id: str, editor: EditorProfile) -> Project:
    """Project owned by the editor; 404 when missing, 403 when someone else's"""
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if project.editor_id != editor.id:
        logger.warning(f"🚫 Editor {editor.id} denied access to project {project_id}")
        raise HTTPException(status_code=403, detail="Access denied")
    return project


def is_collaborator(db: Session, project: Project, user_id: str) -> bool:
    """Accepted collaborator membership grants upload rights"""
    return (
        db.query(ProjectMember)
        .filter(
            ProjectMember.project_id == project.id,
            ProjectMember.user_id == user_id,
            ProjectMember.status == "accepted",
            ProjectMember.role == "collaborator",
        )
        .first()
        is not None
    )


def get_project_media(db: Session, project: Project, media_id: str) -> ProjectMedia:
    media = (
        db.query(ProjectMedia)
        .filter(ProjectMedia.id == media_id, ProjectMedia.project_id == project.id)
        .first()
    )
    if not media:
        raise HTTPException(status_code=404, detail="Media not found")
    return media


def get_project_review_link(db: Session, project: Project, link_id: str) -> ReviewLink:
    link = (
        db.query(ReviewLink)
        .filter(ReviewLink.id == link_id, ReviewLink.project_id == project.id)
        .first()
    )
    if not link:
        raise HTTPException(status_code=404, detail="Review link not found")
    return link


def get_project_member(db: Session, project: Project, member_id: str) -> ProjectMember:
    member = (
        db.query(ProjectMember)
        .filter(ProjectMember.id == member_id, ProjectMember.project_id == project.id)
        .first()
    )
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return member
