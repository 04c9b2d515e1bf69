"""Demo data for the Accountability component."""

import logging
import random
from datetime import datetime, date, timedelta

from participa.core.demo_text import LocalizedText
from participa.core.namer import ComponentNamer
from participa.core.traceability import Traceability
from participa.db.models import Category, Component, User
from participa.services.comments import CommentService
from .models import Result, Status, TimelineEntry

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@example.org"
STATUS_COUNT = 5
ROUNDS = 3
SUBCATEGORIES_PER_ROUND = 2
CHILDREN_PER_RESULT = 3
MAX_TIMELINE_ENTRIES = 5


def seed(manifest, session, participatory_space, rng: random.Random = None, today: date = None) -> Component:
    """
    Publish an accountability component in the space and fill it with results.

    Args:
        manifest: Accountability manifest, whose schemas validate the settings
        session: Open database session
        participatory_space: Space to seed
        rng: Random generator (pass a seeded one for reproducible data)
        today: Start date of child results (defaults to today)

    Returns:
        The published component
    """
    rng = rng or random.Random()
    today = today or date.today()
    organization = participatory_space.organization
    text = LocalizedText(organization.available_locales, rng)
    traceability = Traceability(session)
    comments = CommentService(session)

    admin_user = (
        session.query(User)
        .filter_by(organization_id=organization.id, email=ADMIN_EMAIL)
        .first()
    )
    if admin_user is None:
        logger.warning(f"No {ADMIN_EMAIL} in organization {organization.name}, seeding without an author")

    params = {
        "name": ComponentNamer(organization.available_locales, "accountability").i18n_name(),
        "manifest_name": "accountability",
        "published_at": datetime.utcnow(),
        "participatory_space": participatory_space,
        "settings": {
            "global": manifest.settings("global").build(_global_settings(text, participatory_space)),
            "step": manifest.settings("step").build({"comments_blocked": False}),
        },
    }

    component = traceability.perform_action(
        "publish", Component, admin_user, lambda: _add(session, Component(**params)), visibility="all"
    )

    statuses = [
        _add(session, Status(component=component, name=text.word(), key=f"status_{i}"))
        for i in range(STATUS_COUNT)
    ]
    session.flush()

    scopes = list(organization.scopes)

    for _ in range(ROUNDS):
        # Subcategories are only created under first-level categories
        space_categories = [c for c in participatory_space.categories if c.parent is None]
        parent_category = rng.choice(space_categories) if space_categories else None
        categories = [parent_category]

        for _ in range(SUBCATEGORIES_PER_ROUND):
            categories.append(_add(session, Category(
                name=text.sentence(word_count=5),
                description=text.wrapped("<p>", "</p>", lambda: text.paragraph(sentence_count=3)),
                parent=parent_category,
                participatory_space=participatory_space,
            )))

        for category in categories:
            result = traceability.create(
                Result,
                admin_user,
                {
                    "component": component,
                    "scope": rng.choice(scopes) if scopes else None,
                    "category": category,
                    "title": text.sentence(word_count=2),
                    "description": text.wrapped("<p>", "</p>", lambda: text.paragraph(sentence_count=3)),
                },
                visibility="all",
            )
            comments.seed_for(result, rng)

            for _ in range(CHILDREN_PER_RESULT):
                child_result = traceability.create(
                    Result,
                    admin_user,
                    {
                        "component": component,
                        "parent": result,
                        "start_date": today,
                        "end_date": today + timedelta(days=10),
                        "status": rng.choice(statuses),
                        "progress": rng.randint(1, 100),
                        "title": text.sentence(word_count=2),
                        "description": text.wrapped("<p>", "</p>", lambda: text.paragraph(sentence_count=3)),
                    },
                    visibility="all",
                )

                for i in range(rng.randint(0, MAX_TIMELINE_ENTRIES)):
                    entry_date = child_result.start_date + timedelta(days=i)
                    child_result.timeline_entries.append(_timeline_entry(text, entry_date))

                comments.seed_for(child_result, rng)

            result.update_progress()
            session.flush()

    logger.info(f"Seeded accountability component #{component.id} in {participatory_space.slug}")
    return component


def _global_settings(text: LocalizedText, participatory_space):
    return {
        "intro": text.wrapped("<p>", "</p>", lambda: text.sentence(word_count=4)),
        "categories_label": text.word(),
        "subcategories_label": text.word(),
        "heading_parent_level_results": text.word(),
        "heading_leaf_level_results": text.word(),
        "scopes_enabled": True,
        "scope_id": participatory_space.scope.id if participatory_space.scope else None,
    }


def _timeline_entry(text: LocalizedText, entry_date: date) -> TimelineEntry:
    return TimelineEntry(
        entry_date=entry_date,
        title=text.sentence(word_count=2),
        description=text.paragraph(sentence_count=1),
    )


def _add(session, instance):
    session.add(instance)
    return instance
