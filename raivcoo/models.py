import uuid

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_uuid():
    """Generate a string UUID primary key (matches the hosted backend's uuid columns)"""
    return str(uuid.uuid4())


class User(Base):
    """Local mirror of the hosted auth identity (id is the auth provider's user id)"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(255), index=True, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    editor_profile = relationship("EditorProfile", back_populates="user", uselist=False)


class EditorProfile(Base):
    __tablename__ = "editor_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    email = Column(String(255), index=True, nullable=True)
    full_name = Column(String(255), nullable=True)
    display_name = Column(String(100), unique=True, index=True, nullable=True)  # public portfolio slug
    title = Column(String(255), nullable=True)
    country = Column(String(100), nullable=True)
    biography = Column(Text, nullable=True)
    avatar_url = Column(String(500), nullable=True)
    skills = Column(JSON, default=list, nullable=True)
    languages = Column(JSON, default=list, nullable=True)  # [{"language": ..., "level": ...}]
    is_published = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)  # set after a PayPal pro purchase
    account_status = Column(String(50), default="active", nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="editor_profile")
    clients = relationship("Client", back_populates="editor")
    projects = relationship("Project", back_populates="editor")


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    editor_id = Column(String(36), ForeignKey("editor_profiles.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    editor = relationship("EditorProfile", back_populates="clients")
    projects = relationship("Project", back_populates="client")


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    editor_id = Column(String(36), ForeignKey("editor_profiles.id"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    deadline = Column(DateTime, nullable=True)
    status = Column(String(50), default="active", nullable=False)
    notifications_enabled = Column(Boolean, default=True, nullable=False)
    password_protected = Column(Boolean, default=False, nullable=False)
    access_password_hash = Column(String(255), nullable=True)  # bcrypt
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    editor = relationship("EditorProfile", back_populates="projects")
    client = relationship("Client", back_populates="projects")
    media = relationship("ProjectMedia", back_populates="project")
    review_links = relationship("ReviewLink", back_populates="project")
    members = relationship("ProjectMember", back_populates="project")


class ProjectFolder(Base):
    """Folder inside a project; nested through parent_folder_id"""

    __tablename__ = "project_folders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    parent_folder_id = Column(String(36), ForeignKey("project_folders.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    color = Column(String(20), default="#3B82F6", nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class ProjectMedia(Base):
    """Uploaded file stored in R2; versions of one asset share parent_media_id"""

    __tablename__ = "project_media"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    parent_media_id = Column(String(36), ForeignKey("project_media.id"), nullable=True, index=True)
    folder_id = Column(String(36), ForeignKey("project_folders.id"), nullable=True, index=True)
    filename = Column(String(255), nullable=False)
    original_filename = Column(String(500), nullable=False)
    file_type = Column(String(20), nullable=False)  # video, image, audio, document, file
    mime_type = Column(String(255), nullable=False)
    file_size = Column(BigInteger, default=0, nullable=False)
    r2_key = Column(String(500), nullable=False)
    r2_url = Column(String(1000), nullable=True)
    thumbnail_r2_key = Column(String(500), nullable=True)
    thumbnail_r2_url = Column(String(1000), nullable=True)
    thumbnail_generated_at = Column(DateTime, nullable=True)
    version_number = Column(Integer, default=1, nullable=False)
    is_current_version = Column(Boolean, default=True, nullable=False)
    status = Column(String(50), default="in_review", nullable=False)
    uploaded_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="media")
    review_links = relationship("ReviewLink", back_populates="media")


class ReviewLink(Base):
    __tablename__ = "review_links"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    media_id = Column(String(36), ForeignKey("project_media.id"), nullable=False, index=True)
    link_token = Column(String(64), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    requires_password = Column(Boolean, default=False, nullable=False)
    password_hash = Column(String(255), nullable=True)  # bcrypt
    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="review_links")
    media = relationship("ProjectMedia", back_populates="review_links")


class ProjectMember(Base):
    __tablename__ = "project_members"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(50), default="viewer", nullable=False)  # viewer, reviewer, collaborator
    status = Column(String(20), default="pending", nullable=False)  # pending, accepted
    invited_by = Column(String(36), ForeignKey("editor_profiles.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="members")


class ProjectInvitation(Base):
    """Invitation for an email address that has no account yet"""

    __tablename__ = "project_invitations"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    role = Column(String(50), default="viewer", nullable=False)
    invited_by = Column(String(36), ForeignKey("editor_profiles.id"), nullable=True)
    invitation_token = Column(String(64), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())


class ActivityNotification(Base):
    """In-app activity feed entry (e.g. media uploaded to a project)"""

    __tablename__ = "activity_notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=True, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    activity_data = Column(JSON, nullable=True)
    actor_id = Column(String(36), nullable=True)
    actor_name = Column(String(255), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class CheckoutSession(Base):
    """Priced plan selection awaiting payment; expires after 30 minutes"""

    __tablename__ = "checkout_sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    plan_id = Column(String(50), nullable=False)
    plan_name = Column(String(100), nullable=False)
    storage_gb = Column(Float, nullable=False)
    amount = Column(Float, nullable=False)
    billing_period = Column(String(20), default="monthly", nullable=False)  # monthly, yearly
    action = Column(String(20), default="new", nullable=False)  # new, upgrade, downgrade, renew
    current_subscription_id = Column(String(36), nullable=True)
    status = Column(String(20), default="pending", nullable=False)
    features = Column(JSON, default=list, nullable=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Order(Base):
    """One-time payment record: pending → completed / cancelled / failed"""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    plan_id = Column(String(50), nullable=True)
    plan_name = Column(String(100), nullable=True)
    amount = Column(Float, nullable=False, default=0)
    currency = Column(String(10), default="USD", nullable=False)
    status = Column(String(20), default="pending", nullable=False, index=True)
    payment_method = Column(String(50), nullable=True)  # paypal, polar
    transaction_id = Column(String(255), nullable=True)
    paypal_order_id = Column(String(255), nullable=True)
    paypal_payment_id = Column(String(255), nullable=True)
    polar_checkout_id = Column(String(255), nullable=True)
    order_metadata = Column("metadata", JSON, default=dict, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    completed_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)


class Subscription(Base):
    """Recurring-access period granted by a completed order"""

    __tablename__ = "subscriptions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    profile_id = Column(String(36), ForeignKey("editor_profiles.id"), nullable=True)
    plan_id = Column(String(50), nullable=False)
    plan_name = Column(String(100), nullable=True)
    status = Column(String(20), default="active", nullable=False, index=True)  # active, cancelled
    storage_gb = Column(Float, nullable=True)
    billing_period = Column(String(20), default="monthly", nullable=True)
    max_upload_size_mb = Column(Integer, nullable=True)
    current_period_start = Column(DateTime, nullable=True)
    current_period_end = Column(DateTime, nullable=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=True)
    last_action = Column(String(20), nullable=True)
    # Direct PayPal verification (verify-pro) records the raw payment details
    amount = Column(Float, nullable=True)
    currency = Column(String(10), nullable=True)
    paypal_order_id = Column(String(255), nullable=True)
    payment_status = Column(String(50), nullable=True)
    subscription_metadata = Column("metadata", JSON, default=dict, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class ProfileView(Base):
    """Portfolio page visit with derived geolocation, device and referrer"""

    __tablename__ = "profile_views"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    profile_id = Column(String(36), ForeignKey("editor_profiles.id"), nullable=False, index=True)
    viewer_country = Column(String(100), nullable=True)
    viewer_country_code = Column(String(10), nullable=True)
    viewer_city = Column(String(100), nullable=True)
    device_type = Column(String(20), nullable=True)  # Mobile, PC, Unknown
    ip = Column(String(64), nullable=True)
    duration = Column(Integer, default=0, nullable=False)  # seconds
    referrer = Column(JSON, nullable=True)  # {"type", "source", "url"}
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
