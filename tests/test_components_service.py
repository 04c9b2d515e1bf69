"""Tests for component lifecycle: settings, publication, stats and destroy guards."""

import pytest
from datetime import datetime

from participa.core import ComponentInUseError, SettingsError
from participa.db import get_session, ActionLog, Component, ParticipatorySpace, User
from participa.components.accountability.models import Result, Status
from participa.components.accountability.service import ResultService
from participa.services import ComponentService


@pytest.fixture
def empty_component(organization, accountability):
    """An accountability component without results."""
    with get_session() as session:
        space = session.get(ParticipatorySpace, organization['space_id'])
        component = ComponentService(session).create(
            space, "accountability", {"en": "Results"},
            settings={"comments_max_length": "280"},
            published_at=datetime.utcnow(),
        )
        return {**organization, 'component_id': component.id}


class TestCreateComponent:
    """Test component creation."""

    def test_settings_are_validated(self, empty_component):
        with get_session() as session:
            component = session.get(Component, empty_component['component_id'])

            assert component.global_settings["comments_max_length"] == 280
            assert component.global_settings["comments_enabled"] is True
            assert component.step_settings == {"comments_blocked": False}

    def test_invalid_settings(self, organization, accountability):
        with get_session() as session:
            space = session.get(ParticipatorySpace, organization['space_id'])
            with pytest.raises(SettingsError):
                ComponentService(session).create(
                    space, "accountability", {"en": "Results"}, settings={"comments_enabled": "perhaps"}
                )

    def test_unknown_manifest(self, organization, accountability):
        with get_session() as session:
            space = session.get(ParticipatorySpace, organization['space_id'])
            with pytest.raises(ValueError):
                ComponentService(session).create(space, "surveys", {"en": "Survey"})


class TestUpdateSettings:
    """Test settings updates."""

    def test_values_are_merged(self, empty_component):
        with get_session() as session:
            component = session.get(Component, empty_component['component_id'])
            ComponentService(session).update_settings(
                component, {"comments_enabled": False}, {"comments_blocked": True}
            )

        with get_session() as session:
            component = session.get(Component, empty_component['component_id'])
            assert component.global_settings["comments_enabled"] is False
            assert component.global_settings["comments_max_length"] == 280
            assert component.step_settings["comments_blocked"] is True

            entry = session.query(ActionLog).filter_by(action="update", resource_type="Component").one()
            assert entry.extra == {"changed": ["settings"]}


class TestPublication:
    """Test publish and unpublish."""

    def test_unpublish_and_publish(self, empty_component):
        with get_session() as session:
            component = session.get(Component, empty_component['component_id'])
            service = ComponentService(session)

            service.unpublish(component)
            assert not component.published

            service.publish(component)
            assert component.published

            entries = (
                session.query(ActionLog)
                .filter_by(resource_type="Component")
                .order_by(ActionLog.id)
                .all()
            )
            actions = [e.action for e in entries]
            assert actions == ["create", "unpublish", "publish"]


class TestDestroy:
    """Test the destroy guard."""

    def test_destroy_empty_component(self, empty_component):
        with get_session() as session:
            component = session.get(Component, empty_component['component_id'])
            admin = session.get(User, empty_component['admin_id'])
            ResultService(session, component).create_status("done", {"en": "Done"})

            ComponentService(session).destroy(component, user=admin)

        with get_session() as session:
            assert session.get(Component, empty_component['component_id']) is None
            assert session.query(Status).count() == 0
            entry = session.query(ActionLog).filter_by(action="delete", resource_type="Component").one()
            assert entry.user_id == empty_component['admin_id']

    def test_component_with_results_is_kept(self, seeded):
        with get_session() as session:
            component = session.get(Component, seeded['component_id'])
            with pytest.raises(ComponentInUseError) as exc_info:
                ComponentService(session).destroy(component)
            assert "Can't remove this component" in str(exc_info.value)

        with get_session() as session:
            assert session.get(Component, seeded['component_id']) is not None
            assert session.query(Result).filter_by(component_id=seeded['component_id']).count() == 36
            assert session.query(Status).filter_by(component_id=seeded['component_id']).count() == 5


class TestStats:
    """Test stats aggregation."""

    def test_results_count(self, seeded):
        with get_session() as session:
            component = session.get(Component, seeded['component_id'])
            assert ComponentService(session).stats([component]) == {"results_count": 36}

    def test_primary_filter(self, seeded):
        with get_session() as session:
            component = session.get(Component, seeded['component_id'])
            service = ComponentService(session)

            assert service.stats([component], primary=True) == {"results_count": 36}
            assert service.stats([component], primary=False) == {}

    def test_sums_over_components(self, seeded, accountability):
        with get_session() as session:
            space = session.get(ParticipatorySpace, seeded['space_id'])
            second = accountability.seed(session, space)
            first = session.get(Component, seeded['component_id'])

            assert ComponentService(session).stats([first, second]) == {"results_count": 72}

    def test_no_components(self, organization, accountability):
        with get_session() as session:
            assert ComponentService(session).stats([]) == {}
