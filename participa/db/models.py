"""SQLAlchemy database models."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def translated(value, locale: str = None, default_locale: str = "en") -> str:
    """Pick a value out of a {locale: text} field, falling back to the default locale."""
    if not value:
        return ""
    if not isinstance(value, dict):
        return str(value)
    if locale and value.get(locale):
        return value[locale]
    if value.get(default_locale):
        return value[default_locale]
    return next((v for v in value.values() if v), "")


class Organization(Base):
    """Tenant that owns spaces, scopes and users."""
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False, unique=True)
    host = Column(String(200), nullable=False, unique=True)
    available_locales = Column(JSON, default=lambda: ["en"])
    default_locale = Column(String(10), default="en")
    created_at = Column(DateTime, default=datetime.utcnow)

    scopes = relationship("Scope", back_populates="organization", cascade="all, delete-orphan")
    users = relationship("User", back_populates="organization", cascade="all, delete-orphan")
    participatory_spaces = relationship(
        "ParticipatorySpace", back_populates="organization", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Organization(id={self.id}, name='{self.name}')>"


class Scope(Base):
    """Territorial or thematic scope inside an organization."""
    __tablename__ = "scopes"

    id = Column(Integer, primary_key=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    name = Column(JSON, nullable=False)
    code = Column(String(50), nullable=True)

    organization = relationship("Organization", back_populates="scopes")

    def __repr__(self):
        return f"<Scope(id={self.id}, code='{self.code}')>"


class ParticipatorySpace(Base):
    """A participatory process or assembly where components are mounted."""
    __tablename__ = "participatory_spaces"

    id = Column(Integer, primary_key=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    scope_id = Column(Integer, ForeignKey("scopes.id"), nullable=True)
    slug = Column(String(100), nullable=False, unique=True)
    title = Column(JSON, nullable=False)
    manifest_name = Column(String(50), default="participatory_processes")
    published_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    organization = relationship("Organization", back_populates="participatory_spaces")
    scope = relationship("Scope")
    categories = relationship(
        "Category", back_populates="participatory_space", cascade="all, delete-orphan"
    )
    components = relationship(
        "Component", back_populates="participatory_space", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<ParticipatorySpace(id={self.id}, slug='{self.slug}')>"


class Category(Base):
    """Categories of a space. Subcategories point at their parent."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    participatory_space_id = Column(Integer, ForeignKey("participatory_spaces.id"), nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    name = Column(JSON, nullable=False)
    description = Column(JSON, nullable=True)
    weight = Column(Integer, default=0)

    participatory_space = relationship("ParticipatorySpace", back_populates="categories")
    parent = relationship("Category", remote_side=[id], back_populates="subcategories")
    subcategories = relationship("Category", back_populates="parent")

    def __repr__(self):
        return f"<Category(id={self.id}, parent_id={self.parent_id})>"


class User(Base):
    """Participants and administrators of an organization."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    email = Column(String(200), nullable=False)
    name = Column(String(200), nullable=False)
    nickname = Column(String(50), nullable=True)
    admin = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    organization = relationship("Organization", back_populates="users")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', admin={self.admin})>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "nickname": self.nickname,
            "email": self.email,
            "admin": self.admin,
        }


class Component(Base):
    """A feature module mounted into a participatory space."""
    __tablename__ = "components"

    id = Column(Integer, primary_key=True)
    participatory_space_id = Column(Integer, ForeignKey("participatory_spaces.id"), nullable=False)
    manifest_name = Column(String(50), nullable=False)
    name = Column(JSON, nullable=False)
    settings = Column(JSON, default=lambda: {"global": {}, "step": {}})
    weight = Column(Integer, default=0)
    published_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    participatory_space = relationship("ParticipatorySpace", back_populates="components")

    def __repr__(self):
        return f"<Component(id={self.id}, manifest='{self.manifest_name}')>"

    @property
    def organization(self):
        return self.participatory_space.organization

    @property
    def published(self) -> bool:
        return self.published_at is not None

    @property
    def global_settings(self) -> dict:
        return (self.settings or {}).get("global", {})

    @property
    def step_settings(self) -> dict:
        return (self.settings or {}).get("step", {})

    def to_dict(self):
        return {
            "id": self.id,
            "manifest_name": self.manifest_name,
            "name": self.name,
            "participatory_space_id": self.participatory_space_id,
            "settings": self.settings,
            "published_at": self.published_at.isoformat() if self.published_at else None,
        }


class ActionLog(Base):
    """Audit trail written by the traceability service."""
    __tablename__ = "action_logs"

    id = Column(Integer, primary_key=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    action = Column(String(50), nullable=False)
    resource_type = Column(String(100), nullable=False)
    resource_id = Column(Integer, nullable=True)
    participatory_space_id = Column(Integer, nullable=True)
    component_id = Column(Integer, nullable=True)
    visibility = Column(String(20), default="admin-only")  # admin-only, public-only, all
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User")

    def __repr__(self):
        return f"<ActionLog(action='{self.action}', resource={self.resource_type}#{self.resource_id})>"


class Comment(Base):
    """Comments on any commentable resource, addressed by type name and id."""
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True)
    commentable_type = Column(String(100), nullable=False)
    commentable_id = Column(Integer, nullable=False)
    root_commentable_type = Column(String(100), nullable=False)
    root_commentable_id = Column(Integer, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    body = Column(JSON, nullable=False)
    depth = Column(Integer, default=0)
    alignment = Column(Integer, default=0)  # -1 against, 0 neutral, 1 in favor
    created_at = Column(DateTime, default=datetime.utcnow)

    author = relationship("User")

    def __repr__(self):
        return f"<Comment(id={self.id}, on={self.commentable_type}#{self.commentable_id})>"


class APIKey(Base):
    """API keys identifying a user against the HTTP engines."""
    __tablename__ = "api_keys"

    id = Column(Integer, primary_key=True)
    key = Column(String(64), unique=True, nullable=False)  # API key (hashed)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    last_used = Column(DateTime, nullable=True)
    usage_count = Column(Integer, default=0)

    user = relationship("User")

    def __repr__(self):
        return f"<APIKey(user_id={self.user_id}, active={self.is_active})>"

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "description": self.description,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_used": self.last_used.isoformat() if self.last_used else None,
            "usage_count": self.usage_count,
        }
