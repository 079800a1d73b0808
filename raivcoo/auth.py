import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from .config import SUPABASE_JWT_AUDIENCE, SUPABASE_JWT_SECRET
from .database import get_db
from .models import EditorProfile, User

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401 rather than FastAPI's default 403
security = HTTPBearer(auto_error=False)


def verify_access_token(token: str) -> dict:
    """
    Verify a hosted-auth access token.
    Tokens are HS256 JWTs signed with the project's JWT secret.
    """
    try:
        payload = jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        logger.info("ℹ️ Access token expired")
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token") from e

    return payload


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer access token"""

    if not credentials or not credentials.credentials:
        logger.warning("⚠️ No credentials provided")
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    payload = verify_access_token(token)

    auth_uid = payload.get("sub")
    email = payload.get("email")
    if not auth_uid:
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    # Find or create the local mirror of the auth identity
    user = db.query(User).filter(User.id == auth_uid).first()
    if not user:
        logger.info(f"🆕 Creating local user record: {email}")
        user = User(id=auth_uid, email=email)
        db.add(user)
        try:
            db.commit()
            db.refresh(user)
        except Exception as e:
            db.rollback()
            logger.error(f"❌ Failed to create user record: {str(e)}")
            # Another request may have inserted the same identity
            user = db.query(User).filter(User.id == auth_uid).first()
            if not user:
                raise HTTPException(status_code=500, detail="Failed to load user") from e
    elif email and user.email != email:
        user.email = email
        db.commit()

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


async def get_editor_profile(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> EditorProfile:
    """
    Resolve the caller's editor profile.
    Every dashboard resource hangs off the profile, not the auth identity.
    """
    profile = db.query(EditorProfile).filter(EditorProfile.user_id == user.id).first()
    if not profile:
        logger.warning(f"⚠️ No editor profile for user {user.id}")
        raise HTTPException(status_code=404, detail="Editor profile not found")
    return profile
