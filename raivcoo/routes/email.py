import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import EditorProfile, User
from ..services import email_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Email"])


@router.post("/email")
async def send_signup_notification(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Notify the admin inbox about the most recent editor signup"""
    last_profile = (
        db.query(EditorProfile)
        .order_by(EditorProfile.created_at.desc())
        .first()
    )

    try:
        email_service.send_signup_notification(
            last_profile.email if last_profile else None,
            last_profile.display_name if last_profile else None,
        )
    except Exception as e:
        logger.error(f"❌ Error sending signup notification: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal Server Error") from e

    return {"message": "Email sent successfully!"}
