"""Review service - password checks and public access to review links"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ProjectMedia, ReviewLink
from ...security_utils import verify_password_bcrypt

logger = logging.getLogger(__name__)

INCORRECT_PASSWORD = "Incorrect password. Please check your password and try again."


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def _get_active_link(self, token: str) -> ReviewLink:
        link = (
            self.db.query(ReviewLink)
            .filter(ReviewLink.link_token == token, ReviewLink.is_active.is_(True))
            .first()
        )
        if not link:
            raise HTTPException(status_code=404, detail="Review link not found")
        return link

    def verify_password(self, token: Optional[str], password: Optional[str]) -> None:
        if not token or not password:
            raise HTTPException(status_code=400, detail="Token and password are required")

        link = self._get_active_link(token)
        if not link.requires_password:
            return

        if not verify_password_bcrypt(password, link.password_hash):
            logger.info(f"🔒 Wrong password for review link {link.id}")
            raise HTTPException(status_code=401, detail=INCORRECT_PASSWORD)

    def get_review(self, token: str, password: Optional[str]) -> tuple[ReviewLink, ProjectMedia]:
        """Resolve an active, unexpired link and the media it shares"""
        link = self._get_active_link(token)

        if link.expires_at and link.expires_at <= datetime.utcnow():
            raise HTTPException(status_code=410, detail="Review link has expired")

        if link.requires_password:
            if not password:
                raise HTTPException(status_code=401, detail="Password required")
            if not verify_password_bcrypt(password, link.password_hash):
                raise HTTPException(status_code=401, detail=INCORRECT_PASSWORD)

        media = self.db.query(ProjectMedia).filter(ProjectMedia.id == link.media_id).first()
        if not media:
            raise HTTPException(status_code=404, detail="Media not found")

        logger.debug(f"👀 Review link {link.id} opened")
        return link, media
