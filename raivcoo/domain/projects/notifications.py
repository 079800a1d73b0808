"""
Upload notifications for project members.
Each recipient gets an activity feed row and an email; failures never fail the upload.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...config import SITE_URL
from ...models import ActivityNotification, EditorProfile, Project, ProjectMedia, ProjectMember, User
from ...services import email_service

logger = logging.getLogger(__name__)


def get_notification_recipients(db: Session, project: Project) -> list[dict]:
    """The project owner plus every accepted member"""
    recipients = []

    owner = db.query(EditorProfile).filter(EditorProfile.id == project.editor_id).first()
    if owner:
        recipients.append(
            {
                "user_id": owner.user_id,
                "email": owner.email,
                "full_name": owner.full_name,
                "is_owner": True,
            }
        )

    members = (
        db.query(ProjectMember, EditorProfile, User)
        .outerjoin(EditorProfile, EditorProfile.user_id == ProjectMember.user_id)
        .outerjoin(User, User.id == ProjectMember.user_id)
        .filter(ProjectMember.project_id == project.id, ProjectMember.status == "accepted")
        .all()
    )
    for member, profile, user in members:
        recipients.append(
            {
                "user_id": member.user_id,
                "email": (profile.email if profile else None) or (user.email if user else None),
                "full_name": profile.full_name if profile else None,
                "is_owner": False,
            }
        )

    return recipients


def format_file_list(names: list[str], max_show: int = 3) -> str:
    shown = ", ".join(f'"{name}"' for name in names[:max_show])
    remaining = len(names) - max_show
    if remaining > 0:
        return f"{shown} and {remaining} more {'file' if remaining == 1 else 'files'}"
    return shown


def upload_activity_title(actor_name: str, count: int, is_owner: bool) -> str:
    noun = "file" if count == 1 else "files"
    if is_owner:
        return f"{actor_name} uploaded {count} {noun} to your project"
    return f"{actor_name} uploaded {count} {noun}"


def media_details(media: list[ProjectMedia]) -> list[dict]:
    return [
        {
            "name": m.original_filename,
            "type": m.mime_type,
            "size": f"{m.file_size / 1024 / 1024:.2f} MB",
        }
        for m in media
    ]


def notify_media_upload(
    db: Session,
    project: Project,
    uploader: User,
    actor: EditorProfile,
    media: list[ProjectMedia],
    subject: Optional[str] = None,
) -> int:
    """
    Notify everyone on the project except the uploader.

    Returns:
        Number of recipients that got an activity row
    """
    if not media or not project.notifications_enabled:
        return 0

    actor_name = actor.full_name or actor.email or "Unknown User"
    details = media_details(media)
    description = (
        f"{actor_name} uploaded {format_file_list([m.original_filename for m in media])} "
        f"to {project.name}"
    )
    project_url = f"{SITE_URL}/dashboard/projects/{project.id}"

    try:
        recipients = [
            r for r in get_notification_recipients(db, project) if r["user_id"] != uploader.id
        ]
    except Exception as e:
        logger.error(f"❌ Error getting notification recipients for {project.id}: {str(e)}")
        return 0

    notified = 0
    for recipient in recipients:
        try:
            db.add(
                ActivityNotification(
                    user_id=recipient["user_id"],
                    project_id=project.id,
                    title=upload_activity_title(actor_name, len(media), recipient["is_owner"]),
                    description=description,
                    activity_data={
                        "type": "media_upload",
                        "media_count": len(media),
                        "media_details": details,
                        "is_owner": recipient["is_owner"],
                        "is_my_media": False,
                    },
                    actor_id=uploader.id,
                    actor_name=actor_name,
                    is_read=False,
                )
            )
            db.commit()
            notified += 1
        except Exception as e:
            db.rollback()
            logger.error(f"❌ Error creating activity notification: {str(e)}")

        if not recipient["email"]:
            continue
        try:
            email_service.send_media_activity(
                recipient["email"],
                recipient["full_name"],
                actor_name,
                project.name,
                project_url,
                details,
                subject=subject,
            )
        except Exception as e:
            logger.warning(f"⚠️ Upload email to {recipient['email']} not sent: {str(e)}")

    logger.info(f"🔔 Upload in project {project.id} notified {notified} recipient(s)")
    return notified
