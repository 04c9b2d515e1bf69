"""Database models for the Accountability component."""

from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, ForeignKey, JSON, UniqueConstraint, event,
)
from sqlalchemy.orm import relationship, validates
from sqlalchemy.orm.attributes import set_committed_value

from participa.db.models import Base


class Status(Base):
    """Execution status of results (e.g. 'planned', 'in progress', 'done')."""
    __tablename__ = "accountability_statuses"
    __table_args__ = (UniqueConstraint("component_id", "key", name="uq_accountability_status_key"),)

    id = Column(Integer, primary_key=True)
    component_id = Column(Integer, ForeignKey("components.id"), nullable=False)
    key = Column(String(100), nullable=False)
    name = Column(JSON, nullable=False)
    description = Column(JSON, nullable=True)
    progress = Column(Integer, nullable=True)  # 0-100, applied to results taking this status
    created_at = Column(DateTime, default=datetime.utcnow)

    component = relationship("Component")
    results = relationship("Result", back_populates="status")

    @validates("progress")
    def validate_progress(self, key, value):
        if value is not None and not 0 <= value <= 100:
            raise ValueError(f"Status progress must be between 0 and 100, got {value}")
        return value

    def __repr__(self):
        return f"<Status(id={self.id}, key='{self.key}')>"

    def to_dict(self):
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "progress": self.progress,
        }


class Result(Base):
    """A public commitment and how far along its execution is."""
    __tablename__ = "accountability_results"

    id = Column(Integer, primary_key=True)
    component_id = Column(Integer, ForeignKey("components.id"), nullable=False)
    parent_id = Column(Integer, ForeignKey("accountability_results.id"), nullable=True)
    scope_id = Column(Integer, ForeignKey("scopes.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    status_id = Column(Integer, ForeignKey("accountability_statuses.id"), nullable=True)
    title = Column(JSON, nullable=False)
    description = Column(JSON, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    progress = Column(Float, nullable=True)
    weight = Column(Integer, default=0)
    external_id = Column(String(100), nullable=True)
    reference = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    component = relationship("Component")
    scope = relationship("Scope")
    category = relationship("Category")
    status = relationship("Status", back_populates="results")
    parent = relationship("Result", remote_side=[id], back_populates="children")
    children = relationship("Result", back_populates="parent", order_by="Result.id")
    timeline_entries = relationship(
        "TimelineEntry", back_populates="result", cascade="all, delete-orphan",
        order_by="TimelineEntry.entry_date",
    )

    @validates("parent")
    def validate_parent(self, key, parent):
        # Only two levels: a child result can't be a parent
        if parent is not None and (parent.parent_id is not None or parent.parent is not None):
            raise ValueError("Results can only be nested one level deep")
        if parent is not None and self.children:
            raise ValueError("A result with children can't become a child")
        if parent is not None and parent is self:
            raise ValueError("A result can't be its own parent")
        return parent

    @validates("progress")
    def validate_progress(self, key, value):
        if value is not None and not 0 <= value <= 100:
            raise ValueError(f"Result progress must be between 0 and 100, got {value}")
        return value

    def __repr__(self):
        return f"<Result(id={self.id}, parent_id={self.parent_id}, progress={self.progress})>"

    def update_progress(self):
        """Set a parent's progress to the mean of its children's progress."""
        values = [child.progress for child in self.children if child.progress is not None]
        if not values:
            # Nothing left to derive the progress from
            self.progress = None
            return None
        self.progress = round(sum(values) / len(values), 2)
        return self.progress

    def build_reference(self) -> str:
        created = self.created_at or datetime.utcnow()
        return f"P-ACC-{created:%Y-%m}-{self.id}"

    def to_dict(self):
        return {
            "id": self.id,
            "component_id": self.component_id,
            "parent_id": self.parent_id,
            "scope_id": self.scope_id,
            "category_id": self.category_id,
            "status": self.status.to_dict() if self.status else None,
            "title": self.title,
            "description": self.description,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "progress": self.progress,
            "weight": self.weight,
            "external_id": self.external_id,
            "reference": self.reference,
            "children_count": len(self.children),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@event.listens_for(Result, "after_insert")
def _assign_reference(mapper, connection, target):
    """Store the public reference once the id is known."""
    reference = target.build_reference()
    connection.execute(
        Result.__table__.update().where(Result.__table__.c.id == target.id).values(reference=reference)
    )
    set_committed_value(target, "reference", reference)


class TimelineEntry(Base):
    """Dated milestone in the execution of a result."""
    __tablename__ = "accountability_timeline_entries"

    id = Column(Integer, primary_key=True)
    result_id = Column(Integer, ForeignKey("accountability_results.id"), nullable=False)
    entry_date = Column(Date, nullable=False)
    title = Column(JSON, nullable=False)
    description = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    result = relationship("Result", back_populates="timeline_entries")

    def __repr__(self):
        return f"<TimelineEntry(id={self.id}, result_id={self.result_id}, date={self.entry_date})>"

    @property
    def component(self):
        return self.result.component if self.result else None

    def to_dict(self):
        return {
            "id": self.id,
            "result_id": self.result_id,
            "entry_date": self.entry_date.isoformat(),
            "title": self.title,
            "description": self.description,
        }
