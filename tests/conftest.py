"""Shared test fixtures for the Participa test suite."""

import pytest
import random
import tempfile
import os
from datetime import datetime

# Add parent directory to path so we can import participa modules
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from participa.db import (
    init_db, get_session, Organization, Scope, ParticipatorySpace, Category, User, APIKey,
)
from participa.core.component_system import registry
from participa.components.accountability import AccountabilityComponent


@pytest.fixture
def test_db():
    """Create a temporary test database."""
    db_fd, db_path = tempfile.mkstemp(suffix='.db')

    init_db(db_path)

    yield db_path

    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def accountability():
    """Register a fresh Accountability manifest in the global registry."""
    registry.clear()
    manifest = AccountabilityComponent()
    registry.register(manifest)
    yield manifest
    registry.clear()


def create_space(session, organization, slug, scope=None, categories=("Mobility", "Environment")):
    space = ParticipatorySpace(
        organization=organization,
        slug=slug,
        title={"en": slug.replace("-", " ").title()},
        scope=scope,
        published_at=datetime.utcnow(),
    )
    session.add(space)
    for label in categories:
        session.add(Category(participatory_space=space, name={"en": label, "ca": label}))
    session.flush()
    return space


@pytest.fixture
def organization(test_db):
    """Create an organization with an admin, two participants, scopes and a space."""
    with get_session() as session:
        org = Organization(
            name="Test City",
            host="test.example.org",
            available_locales=["en", "ca"],
            default_locale="en",
        )
        session.add(org)

        admin = User(organization=org, email="admin@example.org", name="Admin", admin=True)
        participant = User(organization=org, email="user@example.org", name="Participant")
        other = User(organization=org, email="user2@example.org", name="Other Participant")
        session.add_all([admin, participant, other])

        north = Scope(organization=org, code="north", name={"en": "North", "ca": "Nord"})
        south = Scope(organization=org, code="south", name={"en": "South", "ca": "Sud"})
        session.add_all([north, south])
        session.flush()

        space = create_space(session, org, "test-process", scope=north)

        return {
            'organization_id': org.id,
            'admin_id': admin.id,
            'participant_id': participant.id,
            'other_id': other.id,
            'scope_ids': [north.id, south.id],
            'space_id': space.id,
            'space_slug': space.slug,
        }


@pytest.fixture
def seeded(organization, accountability):
    """Run the accountability seeds in the test space with a fixed random seed."""
    with get_session() as session:
        space = session.get(ParticipatorySpace, organization['space_id'])
        component = accountability.seed(session, space, rng=random.Random(1234))
        return {**organization, 'component_id': component.id}


def create_api_key(user_id: int, raw_key: str) -> str:
    from participa.api.auth import hash_api_key

    with get_session() as session:
        session.add(APIKey(key=hash_api_key(raw_key), user_id=user_id, is_active=True))
    return raw_key


@pytest.fixture
def admin_key(organization):
    """API key of the organization admin."""
    return create_api_key(organization['admin_id'], "admin-key-12345")


@pytest.fixture
def participant_key(organization):
    """API key of a regular participant."""
    return create_api_key(organization['participant_id'], "participant-key-67890")
