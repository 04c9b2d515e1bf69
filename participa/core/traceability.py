"""Traceability service: performs actions and writes them to the action log."""

import logging
from typing import Any, Callable, Dict

from participa.db.models import ActionLog, Component, ParticipatorySpace

logger = logging.getLogger(__name__)

VISIBILITIES = ("admin-only", "public-only", "all")


class Traceability:
    """Wrap resource changes so every one of them leaves an ActionLog entry."""

    def __init__(self, session):
        self.session = session

    def perform_action(self, action: str, resource_class, user, fn: Callable[[], Any],
                       visibility: str = "admin-only", extra: Dict[str, Any] = None) -> Any:
        """
        Run fn and log the action against the resource it returns.

        Args:
            action: Action name (e.g. 'publish', 'create')
            resource_class: Model class of the resource
            user: Acting user (may be None for system actions)
            fn: Callable performing the change and returning the resource
            visibility: 'admin-only', 'public-only' or 'all'
            extra: Additional data stored with the log entry

        Returns:
            Whatever fn returned
        """
        resource = fn()
        self.session.flush()
        self.log(action, user, resource, visibility=visibility, resource_type=resource_class.__name__,
                 extra=extra)
        return resource

    def create(self, model_class, user, params: Dict[str, Any], visibility: str = "admin-only"):
        """Create and flush a model instance, logging a 'create' action."""
        def build():
            resource = model_class(**params)
            self.session.add(resource)
            return resource

        return self.perform_action("create", model_class, user, build, visibility=visibility)

    def update(self, resource, user, params: Dict[str, Any], visibility: str = "admin-only"):
        """Apply params to a resource, logging an 'update' action."""
        def apply():
            for key, value in params.items():
                setattr(resource, key, value)
            return resource

        return self.perform_action("update", type(resource), user, apply, visibility=visibility,
                                   extra={"changed": sorted(params)})

    def delete(self, resource, user, visibility: str = "admin-only"):
        """Delete a resource, logging a 'delete' action first."""
        self.log("delete", user, resource, visibility=visibility)
        self.session.delete(resource)
        self.session.flush()

    def log(self, action: str, user, resource, visibility: str = "admin-only",
            resource_type: str = None, extra: Dict[str, Any] = None) -> ActionLog:
        """Write a single ActionLog row."""
        if visibility not in VISIBILITIES:
            raise ValueError(f"Invalid visibility: {visibility}")

        component, space = self._locate(resource)
        organization_id = None
        if space is not None:
            organization_id = space.organization_id
        elif user is not None:
            organization_id = user.organization_id

        entry = ActionLog(
            action=action,
            resource_type=resource_type or type(resource).__name__,
            resource_id=getattr(resource, "id", None),
            user_id=user.id if user is not None else None,
            organization_id=organization_id,
            participatory_space_id=space.id if space is not None else None,
            component_id=component.id if component is not None else None,
            visibility=visibility,
            extra=extra,
        )
        self.session.add(entry)
        self.session.flush()

        logger.info(
            f"{action} {entry.resource_type}#{entry.resource_id} "
            f"by user {entry.user_id} (visibility={visibility})"
        )
        return entry

    @staticmethod
    def _locate(resource):
        """Find the component and space a resource lives in."""
        if isinstance(resource, Component):
            return resource, resource.participatory_space
        if isinstance(resource, ParticipatorySpace):
            return None, resource
        component = getattr(resource, "component", None)
        if component is not None:
            return component, component.participatory_space
        return None, getattr(resource, "participatory_space", None)
