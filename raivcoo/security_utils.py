"""
Security utilities for review-link passwords and share tokens
"""

import logging
import secrets
import string
from typing import Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# URL-safe alphabet used for link and invitation tokens
TOKEN_ALPHABET = string.ascii_letters + string.digits + "_-"


def hash_password_bcrypt(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password against bcrypt hash"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        # Malformed hash stored in the database
        logger.error(f"❌ Password verification error: {str(e)}")
        return False


def generate_token(length: int = 12) -> str:
    """Generate a random URL-safe token of exactly `length` characters"""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))
