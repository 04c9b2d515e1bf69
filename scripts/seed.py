#!/usr/bin/env python3
"""Seed a demo organization and run the seeds of every enabled component."""

import sys
import random
import logging
import argparse
from pathlib import Path
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from participa.config import get, load_config
from participa.core.component_loader import ComponentLoader
from participa.core.component_system import registry
from participa.db import get_session, init_db, translated, Organization, Scope, ParticipatorySpace, Category, User

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("admin@example.org", "Admin", True),
    ("user@example.org", "Demo User", False),
    ("user2@example.org", "Second User", False),
]


def ensure_demo_space(session, space_slug: str) -> ParticipatorySpace:
    """Create the demo organization, users, scopes and space if they don't exist."""
    space = session.query(ParticipatorySpace).filter_by(slug=space_slug).first()
    if space:
        return space

    org_config = get("seeds.organization", {}) or {}
    organization = session.query(Organization).filter_by(host=org_config.get("host", "localhost")).first()
    if not organization:
        organization = Organization(
            name=org_config.get("name", "Participa Demo"),
            host=org_config.get("host", "localhost"),
            available_locales=org_config.get("available_locales", ["en"]),
            default_locale=org_config.get("default_locale", "en"),
        )
        session.add(organization)

        for email, name, admin in DEMO_USERS:
            session.add(User(organization=organization, email=email, name=name, admin=admin))

        for code in ("north", "south", "center"):
            session.add(Scope(
                organization=organization,
                code=code,
                name={locale: code.capitalize() for locale in organization.available_locales},
            ))
        session.flush()

    space = ParticipatorySpace(
        organization=organization,
        slug=space_slug,
        title={locale: "Demo process" for locale in organization.available_locales},
        scope=organization.scopes[0] if organization.scopes else None,
        published_at=datetime.utcnow(),
    )
    session.add(space)

    for label in ("Mobility", "Environment"):
        session.add(Category(
            participatory_space=space,
            name={locale: label for locale in organization.available_locales},
        ))

    session.flush()
    print(f"✓ Created demo space '{space_slug}' in organization '{organization.name}'")
    return space


def main():
    parser = argparse.ArgumentParser(description="Seed Participa with demo data")
    parser.add_argument("--config", "-c", help="Path to config.yaml")
    parser.add_argument("--space", "-s", help="Slug of the space to seed (default from config)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible data")
    parser.add_argument("--component", action="append",
                        help="Only seed this component (repeatable, default: all enabled)")

    args = parser.parse_args()

    load_config(args.config)
    init_db(get("database.path"))

    loader = ComponentLoader(str(Path(__file__).parent.parent / get("components.config", "components_config.yaml")))
    if not loader.load_all_components():
        print("❌ Failed to load components")
        sys.exit(1)

    space_slug = args.space or get("seeds.space_slug", "demo-process")
    seed_value = args.seed if args.seed is not None else get("seeds.seed")
    rng = random.Random(seed_value)

    components = registry.get_enabled()
    if args.component:
        components = [c for c in components if c.name in args.component]

    with get_session() as session:
        space = ensure_demo_space(session, space_slug)

        for manifest in components:
            component = manifest.seed(session, space, rng=rng)
            if component is not None:
                name = translated(component.name, default_locale=space.organization.default_locale)
                print(f"✓ Seeded {name} (component #{component.id})")

    print("\n✅ Seeding complete\n")


if __name__ == "__main__":
    main()
