"""Shared FastAPI dependencies for component engines."""

from fastapi import Depends, HTTPException, status

from participa.db import get_session, Component, ParticipatorySpace


def get_db():
    """Yield a session for the duration of a request."""
    with get_session() as session:
        yield session


def component_dependency(manifest_name: str, published_only: bool = True):
    """
    Build a dependency that loads the component addressed by the route.

    Args:
        manifest_name: Only components of this manifest are resolved
        published_only: Hide unpublished components (public engines)
    """
    def load_component(space_slug: str, component_id: int, db=Depends(get_db)) -> Component:
        component = (
            db.query(Component)
            .join(ParticipatorySpace)
            .filter(
                ParticipatorySpace.slug == space_slug,
                Component.id == component_id,
                Component.manifest_name == manifest_name,
            )
            .first()
        )
        if component is None or (published_only and not component.published):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Component #{component_id} not found in space '{space_slug}'"
            )
        return component

    return load_component
