"""Portfolio repository - Database operations for editor profiles and profile views"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import EditorProfile, ProfileView


class PortfolioRepository:
    """Repository for portfolio database operations"""

    @staticmethod
    def get_profile_by_user(db: Session, user_id: str) -> Optional[EditorProfile]:
        return db.query(EditorProfile).filter(EditorProfile.user_id == user_id).first()

    @staticmethod
    def get_profile_by_id(db: Session, profile_id: str) -> Optional[EditorProfile]:
        return db.query(EditorProfile).filter(EditorProfile.id == profile_id).first()

    @staticmethod
    def get_profile_by_display_name(db: Session, display_name: str) -> Optional[EditorProfile]:
        return (
            db.query(EditorProfile)
            .filter(EditorProfile.display_name == display_name.lower())
            .first()
        )

    @staticmethod
    def save_profile(db: Session, profile: EditorProfile) -> EditorProfile:
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def create_view(db: Session, **view_data) -> ProfileView:
        view = ProfileView(**view_data)
        db.add(view)
        db.commit()
        db.refresh(view)
        return view

    @staticmethod
    def get_view(db: Session, view_id: str) -> Optional[ProfileView]:
        return db.query(ProfileView).filter(ProfileView.id == view_id).first()
