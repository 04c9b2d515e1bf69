"""Main FastAPI application mounting the engines of registered components."""

import logging
from typing import Optional
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.responses import Response

from participa.core.component_loader import ComponentLoader
from participa.core.component_system import registry
from participa.db import Component, Organization, ParticipatorySpace, User
from participa.services import ComponentService, ExportService
from .auth import require_user
from .deps import get_db

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
}


def mount_components(app: FastAPI, component_registry=None):
    """Include the public and admin engines of every enabled component."""
    component_registry = component_registry or registry
    for component in component_registry.get_enabled():
        if component.engine is not None:
            app.include_router(component.engine)
        if component.admin_engine is not None:
            app.include_router(component.admin_engine)
        logger.info(f"Mounted engines of component: {component.name}")


def create_app(config_path: str = "components_config.yaml", load_components: bool = True) -> FastAPI:
    """
    Build the API application.

    Args:
        config_path: Components configuration file for the loader
        load_components: Load components into the registry if it is empty
    """
    app = FastAPI(
        title="Participa API",
        description="Public and admin engines of Participa components",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if load_components and not registry.get_all():
        ComponentLoader(config_path).load_all_components()

    @app.get("/", tags=["general"])
    async def root():
        """Root endpoint - API information."""
        return {
            "name": "Participa API",
            "version": "1.0.0",
            "status": "online",
            "docs": "/docs",
            "components": [c.name for c in registry.get_enabled()],
        }

    @app.get("/health", tags=["general"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/components", tags=["general"])
    async def list_components():
        """Registered components and what they declare."""
        return registry.get_component_info()

    @app.get("/spaces/{space_slug}/stats", tags=["stats"])
    async def space_stats(space_slug: str, primary: Optional[bool] = None, db=Depends(get_db)):
        """Stats of the published components of a space."""
        space = db.query(ParticipatorySpace).filter_by(slug=space_slug).first()
        if space is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Space '{space_slug}' not found"
            )
        components = [c for c in space.components if c.published]
        return ComponentService(db).stats(components, primary=primary)

    @app.get("/organizations/{organization_id}/open_data", tags=["exports"])
    async def open_data(organization_id: int, db=Depends(get_db)):
        """Every open-data export of the organization."""
        organization = db.get(Organization, organization_id)
        if organization is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Organization #{organization_id} not found"
            )
        return ExportService(db).open_data(organization)

    @app.get("/admin/spaces/{space_slug}/components/{component_id}/exports/{export_name}",
             tags=["exports"])
    async def export_component(
        space_slug: str,
        component_id: int,
        export_name: str,
        format: str = "json",
        db=Depends(get_db),
        user: User = Depends(require_user),
    ):
        """Download a component export. Requires an admin of the organization."""
        component = (
            db.query(Component)
            .join(ParticipatorySpace)
            .filter(ParticipatorySpace.slug == space_slug, Component.id == component_id)
            .first()
        )
        if component is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Component #{component_id} not found in space '{space_slug}'"
            )
        if not user.admin or user.organization_id != component.organization.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only organization admins can export data"
            )

        try:
            content = ExportService(db).export(component, export_name, format)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

        logger.info(f"User {user.id} exported {export_name} of component {component_id}")
        return Response(
            content=content,
            media_type=CONTENT_TYPES.get(format, "application/octet-stream"),
            headers={"Content-Disposition": f'attachment; filename="{export_name}.{format}"'},
        )

    mount_components(app)
    return app
