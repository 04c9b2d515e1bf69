"""Accountability component definition."""

from functools import partial
from sqlalchemy.orm import joinedload

from participa.core import ComponentManifest, ComponentConfig, ComponentInUseError, HIGH_PRIORITY
from participa.db.models import Component, ParticipatorySpace
from participa.services.comments import CommentService, CommentSerializer
from . import seeds
from .admin_engine import router as admin_router
from .engine import router as public_router
from .models import Result, Status, TimelineEntry
from .permissions import Permissions
from .serializers import ResultSerializer


def results_count(session, components, start_at=None, end_at=None) -> int:
    """Number of results in the given components (the date range is not applied)."""
    component_ids = [c.id for c in components]
    if not component_ids:
        return 0
    return session.query(Result).filter(Result.component_id.in_(component_ids)).count()


def results_collection(session, component):
    return (
        session.query(Result)
        .options(
            joinedload(Result.category),
            joinedload(Result.scope),
            joinedload(Result.status),
            joinedload(Result.component)
            .joinedload(Component.participatory_space)
            .joinedload(ParticipatorySpace.organization),
        )
        .filter(Result.component_id == component.id)
        .order_by(Result.id)
    )


def result_comments_collection(session, component):
    return CommentService(session).for_resource(Result, component)


def ensure_no_results(component, session):
    if session.query(Result).filter(Result.component_id == component.id).count() > 0:
        raise ComponentInUseError("Can't remove this component")


def remove_statuses(component, session):
    session.query(Status).filter(Status.component_id == component.id).delete()


class AccountabilityComponent(ComponentManifest):
    """Track the execution of public commitments."""

    def __init__(self, config: ComponentConfig = None):
        super().__init__(config)

        self.engine = public_router
        self.admin_engine = admin_router
        self.icon = "media/images/participa_accountability.svg"
        self.stylesheet = "participa/accountability/accountability"
        self.permissions_class = Permissions
        self.query_type = "AccountabilityType"

        # Register models
        self._models = [Result, Status, TimelineEntry]

        self.on("before_destroy", ensure_no_results)
        self.on("before_destroy", remove_statuses)

        # These actions permissions can be configured in the admin panel
        self.actions = ["comment"]

        self.register_resource(
            "result",
            model_class=Result,
            template="participa/accountability/results/linked_results",
            card="participa/accountability/result",
            searchable=False,
            actions=["comment"],
        )

        global_settings = self.settings("global")
        global_settings.attribute("scopes_enabled", type="boolean", default=True)
        global_settings.attribute("scope_id", type="scope")
        global_settings.attribute("comments_enabled", type="boolean", default=True)
        global_settings.attribute("comments_max_length", type="integer", required=False)
        global_settings.attribute("intro", type="text", translated=True, editor=True)
        global_settings.attribute("categories_label", type="string", translated=True, editor=True)
        global_settings.attribute("subcategories_label", type="string", translated=True, editor=True)
        global_settings.attribute("heading_parent_level_results", type="string", translated=True, editor=True)
        global_settings.attribute("heading_leaf_level_results", type="string", translated=True, editor=True)
        global_settings.attribute("display_progress_enabled", type="boolean", default=True)

        self.register_stat("results_count", results_count, primary=True, priority=HIGH_PRIORITY)

        self.settings("step").attribute("comments_blocked", type="boolean", default=False)

        results_export = self.exports("results")
        results_export.collection(results_collection)
        results_export.include_in_open_data = True
        results_export.serializer(ResultSerializer)

        comments_export = self.exports("result_comments")
        comments_export.collection(result_comments_collection)
        comments_export.include_in_open_data = True
        comments_export.serializer(CommentSerializer)

        self.seeds(partial(seeds.seed, self))

    @property
    def name(self) -> str:
        return "accountability"

    @property
    def display_name(self) -> str:
        return "Accountability"

    @property
    def description(self) -> str:
        return "Results with status, progress and timeline of public commitments"

    @property
    def version(self) -> str:
        return "1.0.0"
