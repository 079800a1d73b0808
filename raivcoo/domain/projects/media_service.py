"""Media service - uploads to object storage with plan limits, versioning, folders and deletion"""

import logging
import math
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy.orm import Session

from ...models import EditorProfile, Project, ProjectFolder, ProjectMedia, User
from ...security_utils import generate_token
from ...services import storage
from ...shared.ownership import get_owned_project, get_project_media, is_collaborator
from ..billing.pricing import FREE_STORAGE_GB, MAX_UPLOAD_SIZE_MB, max_upload_size_mb
from .notifications import notify_media_upload
from .repository import ProjectRepository

logger = logging.getLogger(__name__)

MB = 1024 * 1024
GB = 1024 * MB

ALLOWED_MIME_TYPES = {
    # Video
    "video/mp4",
    "video/mov",
    "video/quicktime",
    "video/avi",
    "video/mkv",
    "video/webm",
    # Image
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    # Audio
    "audio/mpeg",
    "audio/wav",
    "audio/ogg",
    "audio/flac",
    "audio/aac",
    "audio/mp4",
    "audio/x-wav",
    "audio/vorbis",
    # Documents
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "text/plain",
}


@dataclass
class UploadLimits:
    plan_name: str
    is_paid: bool
    max_upload_bytes: int
    max_storage_bytes: int


def format_bytes(size: float) -> str:
    if size <= 0:
        return "0 Bytes"
    sizes = ["Bytes", "KB", "MB", "GB"]
    i = min(int(math.floor(math.log(size) / math.log(1024))), len(sizes) - 1)
    return f"{round(size / (1024 ** i), 2):g} {sizes[i]}"


def classify_file_type(mime_type: str) -> str:
    if mime_type.startswith("video/"):
        return "video"
    if mime_type.startswith("image/"):
        return "image"
    if mime_type.startswith("audio/"):
        return "audio"
    if (
        mime_type == "application/pdf"
        or "document" in mime_type
        or "presentation" in mime_type
        or mime_type == "text/plain"
    ):
        return "document"
    return "file"


class MediaService:
    """Service layer for project media"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProjectRepository()

    def get_upload_limits(self, user: User) -> UploadLimits:
        """Limits from the caller's active paid subscription, free allowance otherwise"""
        subscription = self.repo.get_active_subscription(self.db, user.id)
        is_active = bool(
            subscription
            and subscription.current_period_end
            and subscription.current_period_end > datetime.utcnow()
        )

        if is_active and subscription.plan_id in ("lite", "pro"):
            max_upload_mb = subscription.max_upload_size_mb or max_upload_size_mb(
                subscription.plan_id
            )
            storage_gb = subscription.storage_gb or FREE_STORAGE_GB
            return UploadLimits(
                plan_name=subscription.plan_id.capitalize(),
                is_paid=True,
                max_upload_bytes=int(max_upload_mb * MB),
                max_storage_bytes=int(storage_gb * GB),
            )

        return UploadLimits(
            plan_name="Free",
            is_paid=False,
            max_upload_bytes=MAX_UPLOAD_SIZE_MB["free"] * MB,
            max_storage_bytes=int(FREE_STORAGE_GB * GB),
        )

    def _get_uploadable_project(self, project_id: str, user: User, editor: EditorProfile) -> Project:
        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")
        if project.editor_id != editor.id and not is_collaborator(self.db, project, user.id):
            logger.warning(f"🚫 User {user.id} may not upload to project {project_id}")
            raise HTTPException(
                status_code=403, detail="You don't have permission to upload media"
            )
        return project

    async def _read_uploads(
        self, project: Project, files: list[UploadFile], limits: UploadLimits
    ) -> list[tuple[str, str, bytes]]:
        """Read every file and check plan limits before anything is stored"""
        hint_file = (
            "Upgrade to Lite or Pro for larger files."
            if not limits.is_paid
            else "Check your subscription settings."
        )
        payloads = []
        for upload in files:
            content = await upload.read()
            mime_type = upload.content_type or "application/octet-stream"
            name = upload.filename or "upload"
            if len(content) > limits.max_upload_bytes:
                raise HTTPException(
                    status_code=413,
                    detail=(
                        f'File "{name}" ({format_bytes(len(content))}) exceeds the '
                        f"{limits.plan_name} plan limit of {format_bytes(limits.max_upload_bytes)} "
                        f"per file. {hint_file}"
                    ),
                )
            payloads.append((name, mime_type, content))

        current_total = self.repo.get_project_storage_bytes(self.db, project.id)
        upload_total = sum(len(content) for _, _, content in payloads)
        if current_total + upload_total > limits.max_storage_bytes:
            hint = (
                "Upgrade to Lite or Pro for more storage."
                if not limits.is_paid
                else "Increase your storage allocation."
            )
            raise HTTPException(
                status_code=413,
                detail=(
                    f"Upload would exceed {limits.plan_name} plan storage limit. "
                    f"Current size: {format_bytes(current_total)}, "
                    f"Upload size: {format_bytes(upload_total)}, "
                    f"Available space: {format_bytes(limits.max_storage_bytes - current_total)}. {hint}"
                ),
            )
        return payloads

    @staticmethod
    def _storage_key(project_id: str, name: str) -> tuple[str, str]:
        extension = os.path.splitext(name)[1].lstrip(".").lower() or "bin"
        unique_filename = f"{generate_token(21)}.{extension}"
        return unique_filename, f"projects/{project_id}/{unique_filename}"

    async def upload_media(
        self,
        project_id: str,
        files: list[UploadFile],
        thumbnails: list[UploadFile],
        thumbnail_for: list[str],
        parent_media_id: Optional[str],
        user: User,
        editor: EditorProfile,
    ) -> list[ProjectMedia]:
        project = self._get_uploadable_project(project_id, user, editor)

        if not files:
            raise HTTPException(status_code=400, detail="No files provided")

        for upload in files:
            mime_type = upload.content_type or "application/octet-stream"
            if mime_type not in ALLOWED_MIME_TYPES:
                raise HTTPException(status_code=400, detail=f"File type {mime_type} is not supported")

        payloads = await self._read_uploads(project, files, self.get_upload_limits(user))

        parent = None
        if parent_media_id:
            parent = get_project_media(self.db, project, parent_media_id)
            # Versions always hang off the original upload
            if parent.parent_media_id:
                parent = get_project_media(self.db, project, parent.parent_media_id)

        thumbnail_map = {}
        for index, thumbnail in enumerate(thumbnails or []):
            if index < len(thumbnail_for) and thumbnail_for[index]:
                thumbnail_map[thumbnail_for[index]] = thumbnail

        uploaded = []
        stored_keys = []
        for name, mime_type, content in payloads:
            unique_filename, r2_key = self._storage_key(project.id, name)

            try:
                public_url = storage.upload_object(r2_key, content, mime_type, cache=True)
            except Exception as e:
                self.db.rollback()
                logger.error(f"❌ Error uploading {name}: {str(e)}")
                # Nothing from this request is kept, so drop what already reached storage
                for key in stored_keys:
                    storage.delete_object(key)
                raise HTTPException(status_code=500, detail=f"Failed to upload {name}") from e
            stored_keys.append(r2_key)

            file_type = classify_file_type(mime_type)
            media = ProjectMedia(
                project_id=project.id,
                filename=unique_filename,
                original_filename=name,
                file_type=file_type,
                mime_type=mime_type,
                file_size=len(content),
                r2_key=r2_key,
                r2_url=public_url,
                version_number=1,
                is_current_version=True,
            )

            if file_type == "video" and name in thumbnail_map:
                await self._attach_thumbnail(media, thumbnail_map[name], project.id, unique_filename)
                if media.thumbnail_r2_key:
                    stored_keys.append(media.thumbnail_r2_key)

            if parent:
                group = self.repo.get_version_group(self.db, parent.id)
                for version in group:
                    version.is_current_version = False
                media.parent_media_id = parent.id
                media.version_number = max(v.version_number for v in group) + 1

            self.db.add(media)
            self.db.flush()
            uploaded.append(media)

        self.db.commit()
        for media in uploaded:
            self.db.refresh(media)

        logger.info(f"📤 Uploaded {len(uploaded)} file(s) to project {project.id}")
        notify_media_upload(self.db, project, user, editor, uploaded)
        return uploaded

    async def _attach_thumbnail(
        self, media: ProjectMedia, thumbnail: UploadFile, project_id: str, unique_filename: str
    ) -> None:
        """Best effort: a failed thumbnail never fails the upload"""
        try:
            key = f"projects/{project_id}/thumbnails/{unique_filename}_thumbnail.jpg"
            content = await thumbnail.read()
            media.thumbnail_r2_url = storage.upload_object(key, content, "image/jpeg", cache=True)
            media.thumbnail_r2_key = key
            media.thumbnail_generated_at = datetime.utcnow()
        except Exception as e:
            logger.warning(f"⚠️ Thumbnail upload error for {media.original_filename}: {str(e)}")

    # ========================================================================
    # FOLDER UPLOAD
    # ========================================================================

    def _ensure_folders(self, project: Project, file_paths: list[str], user: User) -> tuple[dict, list]:
        """
        Create the folder tree named by the relative file paths, parents first.
        Existing folders with the same name and parent are reused.

        Returns:
            Tuple of (path -> folder id, newly created folders)
        """
        folder_paths = set()
        for file_path in file_paths:
            parts = [part for part in file_path.split("/") if part][:-1]
            for depth in range(1, len(parts) + 1):
                folder_paths.add("/".join(parts[:depth]))

        folder_map = {}
        created = []
        # Sorting puts every parent before its children
        for folder_path in sorted(folder_paths):
            parent_path, _, name = folder_path.rpartition("/")
            parent_id = folder_map.get(parent_path) if parent_path else None

            existing = self.repo.get_folder(self.db, project.id, name, parent_id)
            if existing:
                folder_map[folder_path] = existing.id
                continue

            folder = self.repo.create_folder(
                self.db,
                project_id=project.id,
                name=name,
                parent_folder_id=parent_id,
                created_by=user.id,
            )
            folder_map[folder_path] = folder.id
            created.append(folder)

        return folder_map, created

    async def upload_folder(
        self,
        project_id: str,
        files: list[UploadFile],
        file_paths: list[str],
        user: User,
        editor: EditorProfile,
    ) -> tuple[list[ProjectMedia], list[ProjectFolder]]:
        """
        Upload a dropped folder, recreating its structure as project folders.
        Unsupported or failing files are skipped rather than failing the batch.
        """
        project = self._get_uploadable_project(project_id, user, editor)

        if not files or not file_paths:
            raise HTTPException(status_code=400, detail="No files provided")

        payloads = await self._read_uploads(project, files, self.get_upload_limits(user))
        folder_map, created_folders = self._ensure_folders(project, file_paths, user)

        uploaded = []
        for index, (name, mime_type, content) in enumerate(payloads):
            if mime_type not in ALLOWED_MIME_TYPES:
                logger.warning(f"⚠️ Skipping unsupported file type: {mime_type}")
                continue

            file_path = file_paths[index] if index < len(file_paths) else name
            parts = [part for part in file_path.split("/") if part][:-1]
            folder_id = folder_map.get("/".join(parts)) if parts else None

            unique_filename, r2_key = self._storage_key(project.id, name)
            try:
                public_url = storage.upload_object(r2_key, content, mime_type, cache=True)
            except Exception as e:
                logger.error(f"❌ Error uploading {name}: {str(e)}")
                continue

            media = ProjectMedia(
                project_id=project.id,
                folder_id=folder_id,
                filename=unique_filename,
                original_filename=name,
                file_type=classify_file_type(mime_type),
                mime_type=mime_type,
                file_size=len(content),
                r2_key=r2_key,
                r2_url=public_url,
                version_number=1,
                is_current_version=True,
            )
            self.db.add(media)
            uploaded.append(media)

        self.db.commit()
        for media in uploaded:
            self.db.refresh(media)

        logger.info(
            f"📁 Folder upload to project {project.id}: {len(uploaded)} file(s), "
            f"{len(created_folders)} new folder(s)"
        )
        if uploaded:
            count = len(uploaded)
            notify_media_upload(
                self.db,
                project,
                user,
                editor,
                uploaded,
                subject=(
                    f"Folder Upload - {count} {'file' if count == 1 else 'files'} "
                    f"added to {project.name}"
                ),
            )
        return uploaded, created_folders

    def delete_media(self, project_id: str, media_id: str, editor: EditorProfile) -> None:
        project = get_owned_project(self.db, project_id, editor)
        media = get_project_media(self.db, project, media_id)

        storage.delete_object(media.r2_key)
        storage.delete_object(media.thumbnail_r2_key)

        # Keep the remaining versions grouped and one of them current
        root_id = media.parent_media_id or media.id
        remaining = [v for v in self.repo.get_version_group(self.db, root_id) if v.id != media.id]
        if remaining:
            if media.id == root_id:
                new_root = remaining[0]
                new_root.parent_media_id = None
                for version in remaining[1:]:
                    version.parent_media_id = new_root.id
            if media.is_current_version:
                remaining[-1].is_current_version = True
            self.db.flush()

        self.repo.delete_media(self.db, media)
        logger.info(f"🗑️ Media {media_id} deleted from project {project_id}")
