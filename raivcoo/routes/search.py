import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..auth import get_current_user, get_editor_profile
from ..database import get_db
from ..models import EditorProfile, Project, ProjectMedia, ProjectMember, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Search"])

MAX_RESULTS = 50


class SearchFilters(BaseModel):
    type: str = "all"  # all, projects, media
    mediaType: Optional[str] = "all"
    status: Optional[str] = "all"
    sortBy: Optional[str] = "updated_at"  # name, file_size, created_at, updated_at
    sortOrder: Optional[str] = "desc"


class SearchRequest(BaseModel):
    query: str = ""
    filters: SearchFilters = SearchFilters()
    currentProjectId: Optional[str] = None


def _accessible_project_ids(db: Session, editor: EditorProfile, user: User) -> list[str]:
    """Projects the caller owns plus those they are an accepted member of"""
    owned = [row.id for row in db.query(Project.id).filter(Project.editor_id == editor.id)]
    member = [
        row.project_id
        for row in db.query(ProjectMember.project_id).filter(
            ProjectMember.user_id == user.id, ProjectMember.status == "accepted"
        )
    ]
    return list(dict.fromkeys(owned + member))


def _search_projects(db: Session, project_ids: list[str], term: str) -> list[dict]:
    query = db.query(Project).filter(Project.id.in_(project_ids))
    if term:
        pattern = f"%{term.lower()}%"
        query = query.filter(
            or_(func.lower(Project.name).like(pattern), func.lower(Project.description).like(pattern))
        )

    return [
        {
            "id": project.id,
            "type": "project",
            "title": project.name,
            "subtitle": project.description or "No description",
            "url": f"/dashboard/projects/{project.id}",
            "status": "active",
            "created_at": project.created_at,
            "updated_at": project.updated_at,
        }
        for project in query.all()
    ]


def _search_media(
    db: Session, project_ids: list[str], term: str, filters: SearchFilters
) -> list[dict]:
    query = (
        db.query(ProjectMedia, Project.name)
        .join(Project, Project.id == ProjectMedia.project_id)
        .filter(ProjectMedia.project_id.in_(project_ids))
    )
    if term:
        pattern = f"%{term.lower()}%"
        query = query.filter(
            or_(
                func.lower(ProjectMedia.original_filename).like(pattern),
                func.lower(ProjectMedia.filename).like(pattern),
            )
        )
    if filters.mediaType and filters.mediaType != "all":
        query = query.filter(ProjectMedia.file_type == filters.mediaType)
    if filters.status and filters.status != "all":
        query = query.filter(ProjectMedia.status == filters.status)

    return [
        {
            "id": media.id,
            "type": "media",
            "title": media.original_filename,
            "subtitle": f"Project: {project_name or 'Unknown'}",
            "url": f"/dashboard/projects/{media.project_id}",
            "status": media.status,
            "mediaType": media.file_type,
            "fileSize": media.file_size,
            "projectName": project_name,
            "projectId": media.project_id,
            "mediaUrl": f"/media/full-size/{media.id}",
            "thumbnailUrl": media.r2_url,
            "uploadedAt": media.uploaded_at,
            "created_at": media.uploaded_at,
            "updated_at": media.uploaded_at,
        }
        for media, project_name in query.all()
    ]


def _sort_results(results: list[dict], sort_by: Optional[str], sort_order: Optional[str]) -> None:
    reverse = sort_order != "asc"
    if sort_by == "name":
        results.sort(key=lambda r: (r["title"] or "").lower(), reverse=reverse)
    elif sort_by == "file_size":
        results.sort(key=lambda r: r.get("fileSize") or 0, reverse=reverse)
    else:
        now = datetime.utcnow()
        results.sort(key=lambda r: r.get("updated_at") or r.get("created_at") or now, reverse=reverse)


@router.post("/search")
async def search(
    data: SearchRequest,
    user: User = Depends(get_current_user),
    editor: EditorProfile = Depends(get_editor_profile),
    db: Session = Depends(get_db),
):
    """Search projects and media the caller can access, newest first by default"""
    term = data.query.strip()
    project_ids = _accessible_project_ids(db, editor, user)

    results = []
    if project_ids:
        if data.filters.type in ("all", "projects"):
            results.extend(_search_projects(db, project_ids, term))
        if data.filters.type in ("all", "media"):
            results.extend(_search_media(db, project_ids, term, data.filters))

    _sort_results(results, data.filters.sortBy, data.filters.sortOrder)

    logger.debug(f"🔎 Search '{term}' by editor {editor.id}: {len(results)} result(s)")
    return {"results": results[:MAX_RESULTS]}
