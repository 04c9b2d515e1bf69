"""Tests for the action log."""

import pytest

from participa.core.traceability import Traceability
from participa.db import get_session, ActionLog, Category, ParticipatorySpace, User


class TestTraceability:
    """Test that changes leave log entries."""

    def test_create(self, organization):
        with get_session() as session:
            space = session.get(ParticipatorySpace, organization['space_id'])
            user = session.get(User, organization['admin_id'])

            category = Traceability(session).create(
                Category, user, {"participatory_space": space, "name": {"en": "Culture"}}
            )

            entry = session.query(ActionLog).one()
            assert entry.action == "create"
            assert entry.resource_type == "Category"
            assert entry.resource_id == category.id
            assert entry.user_id == user.id
            assert entry.organization_id == organization['organization_id']
            assert entry.visibility == "admin-only"

    def test_space_is_located(self, organization):
        with get_session() as session:
            space = session.get(ParticipatorySpace, organization['space_id'])
            Traceability(session).log("update", None, space, visibility="all")

            entry = session.query(ActionLog).one()
            assert entry.participatory_space_id == space.id
            assert entry.component_id is None
            assert entry.organization_id == organization['organization_id']

    def test_update_records_changed_fields(self, organization):
        with get_session() as session:
            space = session.get(ParticipatorySpace, organization['space_id'])
            Traceability(session).update(space, None, {"title": {"en": "Renamed"}, "slug": "renamed"})

            assert space.slug == "renamed"
            entry = session.query(ActionLog).one()
            assert entry.extra == {"changed": ["slug", "title"]}

    def test_perform_action_returns_resource(self, organization):
        with get_session() as session:
            space = session.get(ParticipatorySpace, organization['space_id'])
            returned = Traceability(session).perform_action(
                "publish", ParticipatorySpace, None, lambda: space, visibility="public-only"
            )

            assert returned is space
            assert session.query(ActionLog).one().visibility == "public-only"

    def test_delete_logs_before_removing(self, organization):
        with get_session() as session:
            category = session.query(Category).filter_by(participatory_space_id=organization['space_id']).first()
            category_id = category.id

            Traceability(session).delete(category, None)

            assert session.get(Category, category_id) is None
            entry = session.query(ActionLog).one()
            assert entry.action == "delete"
            assert entry.resource_id == category_id

    def test_invalid_visibility(self, organization):
        with get_session() as session:
            space = session.get(ParticipatorySpace, organization['space_id'])
            with pytest.raises(ValueError):
                Traceability(session).log("update", None, space, visibility="everyone")
