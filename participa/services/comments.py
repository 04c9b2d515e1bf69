"""Comments on commentable resources: creation, demo seeds and export queries."""

import logging
import random
from typing import Any, Dict, List
from sqlalchemy import select
from sqlalchemy.orm import joinedload

from participa.db.models import Comment, User
from participa.core.demo_text import LocalizedText

logger = logging.getLogger(__name__)


class CommentService:
    """Manage comments attached to resources by type name and id."""

    def __init__(self, session):
        self.session = session

    def add(self, resource, author: User, body: Dict[str, str], parent: Comment = None,
            alignment: int = 0) -> Comment:
        """Add a comment to a resource, or a reply to another comment on it."""
        if alignment not in (-1, 0, 1):
            raise ValueError(f"Invalid alignment: {alignment}")

        if parent is not None:
            commentable_type, commentable_id = "Comment", parent.id
            depth = parent.depth + 1
        else:
            commentable_type, commentable_id = type(resource).__name__, resource.id
            depth = 0

        comment = Comment(
            commentable_type=commentable_type,
            commentable_id=commentable_id,
            root_commentable_type=type(resource).__name__,
            root_commentable_id=resource.id,
            author=author,
            body=body,
            depth=depth,
            alignment=alignment,
        )
        self.session.add(comment)
        self.session.flush()
        return comment

    def seed_for(self, resource, rng: random.Random = None) -> List[Comment]:
        """Add a few demo comments (and replies) from organization users."""
        rng = rng or random.Random()
        organization = resource.component.organization
        users = organization.users
        if not users:
            logger.warning(f"No users to seed comments for {type(resource).__name__}#{resource.id}")
            return []

        text = LocalizedText([organization.default_locale], rng)
        comments = []
        for _ in range(rng.randint(1, 3)):
            comment = self.add(resource, rng.choice(users), text.paragraph(sentence_count=1),
                               alignment=rng.choice((-1, 0, 1)))
            comments.append(comment)
            for _ in range(rng.randint(0, 1)):
                comments.append(
                    self.add(resource, rng.choice(users), text.paragraph(sentence_count=1), parent=comment)
                )
        return comments

    def for_resource(self, model_class, component):
        """Query the comments whose root resource is a model_class row of the component."""
        resource_ids = select(model_class.id).where(model_class.component_id == component.id)
        return (
            self.session.query(Comment)
            .options(joinedload(Comment.author))
            .filter(
                Comment.root_commentable_type == model_class.__name__,
                Comment.root_commentable_id.in_(resource_ids),
            )
            .order_by(Comment.id)
        )


class CommentSerializer:
    """Serialize a comment for exports."""

    def __init__(self, comment: Comment):
        self.comment = comment

    def serialize(self) -> Dict[str, Any]:
        comment = self.comment
        return {
            "id": comment.id,
            "created_at": comment.created_at.isoformat() if comment.created_at else None,
            "body": comment.body,
            "locale": next(iter(comment.body), None) if comment.body else None,
            "author": {
                "id": comment.author.id,
                "name": comment.author.name,
            },
            "alignment": comment.alignment,
            "depth": comment.depth,
            "commentable_id": comment.commentable_id,
            "commentable_type": comment.commentable_type,
            "root_commentable_id": comment.root_commentable_id,
            "root_commentable_type": comment.root_commentable_type,
        }
