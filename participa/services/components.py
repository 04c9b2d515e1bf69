"""Component lifecycle management."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from participa.core.component_system import registry as default_registry
from participa.core.traceability import Traceability
from participa.db.models import Component, ParticipatorySpace

logger = logging.getLogger(__name__)


class ComponentService:
    """Create, configure and destroy components of participatory spaces."""

    def __init__(self, session, component_registry=None):
        self.session = session
        self.registry = component_registry or default_registry

    def manifest_for(self, component_or_name):
        name = getattr(component_or_name, "manifest_name", component_or_name)
        manifest = self.registry.get(name)
        if manifest is None:
            raise ValueError(f"No component registered as '{name}'")
        return manifest

    def build_settings(self, manifest_name: str, global_values: Dict[str, Any] = None,
                       step_values: Dict[str, Any] = None) -> Dict[str, Dict[str, Any]]:
        """Validate raw settings against both schemas of a manifest."""
        manifest = self.manifest_for(manifest_name)
        return {
            "global": manifest.settings("global").build(global_values),
            "step": manifest.settings("step").build(step_values),
        }

    def create(self, participatory_space: ParticipatorySpace, manifest_name: str, name: Dict[str, str],
               settings: Dict[str, Any] = None, step_settings: Dict[str, Any] = None,
               published_at: datetime = None, user=None) -> Component:
        """Create a component, logging a 'create' action."""
        params = {
            "participatory_space": participatory_space,
            "manifest_name": manifest_name,
            "name": name,
            "settings": self.build_settings(manifest_name, settings, step_settings),
            "published_at": published_at,
        }
        component = Traceability(self.session).create(Component, user, params)
        self.manifest_for(manifest_name).run_hooks("create", component, self.session)
        return component

    def update_settings(self, component: Component, global_values: Dict[str, Any] = None,
                        step_values: Dict[str, Any] = None, user=None) -> Component:
        """Merge new values over the current settings and re-validate them."""
        merged_global = dict(component.global_settings)
        merged_global.update(global_values or {})
        merged_step = dict(component.step_settings)
        merged_step.update(step_values or {})

        settings = self.build_settings(component.manifest_name, merged_global, merged_step)
        Traceability(self.session).update(component, user, {"settings": settings})
        self.manifest_for(component).run_hooks("update", component, self.session)
        return component

    def publish(self, component: Component, user=None) -> Component:
        def apply():
            component.published_at = datetime.utcnow()
            return component

        Traceability(self.session).perform_action("publish", Component, user, apply, visibility="all")
        self.manifest_for(component).run_hooks("publish", component, self.session)
        return component

    def unpublish(self, component: Component, user=None) -> Component:
        def apply():
            component.published_at = None
            return component

        Traceability(self.session).perform_action("unpublish", Component, user, apply, visibility="all")
        self.manifest_for(component).run_hooks("unpublish", component, self.session)
        return component

    def destroy(self, component: Component, user=None):
        """
        Delete a component.

        Raises:
            ComponentInUseError: If a before_destroy hook refuses the deletion
        """
        manifest = self.manifest_for(component)
        manifest.run_hooks("before_destroy", component, self.session)
        Traceability(self.session).delete(component, user)
        manifest.run_hooks("destroy", component, self.session)
        logger.info(f"Destroyed component {component.manifest_name}#{component.id}")

    def stats(self, components: List[Component], start_at: datetime = None, end_at: datetime = None,
              primary: Optional[bool] = None) -> Dict[str, Any]:
        """Aggregate every registered stat over the given components, by manifest."""
        by_manifest: Dict[str, List[Component]] = {}
        for component in components:
            by_manifest.setdefault(component.manifest_name, []).append(component)

        totals: Dict[str, Any] = {}
        for manifest_name, manifest_components in by_manifest.items():
            manifest = self.registry.get(manifest_name)
            if manifest is None or not manifest.enabled:
                continue
            for name, value in manifest.stats.with_context(
                self.session, manifest_components, start_at, end_at, primary=primary
            ):
                totals[name] = totals.get(name, 0) + value
        return totals
