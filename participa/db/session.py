"""Database session management."""

import importlib
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager
from pathlib import Path

from .models import Base

_engine = None
_SessionLocal = None


def _import_component_models():
    """Import each component's models so their tables are part of the metadata."""
    components_dir = Path(__file__).parent.parent / "components"
    for component_dir in components_dir.iterdir():
        if component_dir.is_dir() and (component_dir / "models.py").exists():
            importlib.import_module(f"participa.components.{component_dir.name}.models")


def init_db(db_path: str):
    """Initialize the database."""
    global _engine, _SessionLocal

    # Ensure directory exists
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    _engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    _SessionLocal = sessionmaker(bind=_engine, expire_on_commit=False)

    _import_component_models()

    # Create tables
    Base.metadata.create_all(_engine)

    return _engine


@contextmanager
def get_session():
    """Get a database session as a context manager."""
    if _SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
