"""Serializers for Accountability exports."""

from typing import Any, Dict

from .models import Result


class ResultSerializer:
    """Serialize a result for the 'results' export."""

    def __init__(self, result: Result):
        self.result = result

    def serialize(self) -> Dict[str, Any]:
        result = self.result
        return {
            "id": result.id,
            "category": {
                "id": result.category.id if result.category else None,
                "name": result.category.name if result.category else None,
            },
            "scope": {
                "id": result.scope.id if result.scope else None,
                "name": result.scope.name if result.scope else None,
            },
            "parent": {
                "id": result.parent_id,
            },
            "title": result.title,
            "description": result.description,
            "start_date": result.start_date.isoformat() if result.start_date else None,
            "end_date": result.end_date.isoformat() if result.end_date else None,
            "status": {
                "id": result.status.id if result.status else None,
                "key": result.status.key if result.status else None,
                "name": result.status.name if result.status else None,
                "progress": result.status.progress if result.status else None,
            },
            "progress": result.progress,
            "created_at": result.created_at.isoformat() if result.created_at else None,
            "updated_at": result.updated_at.isoformat() if result.updated_at else None,
            "reference": result.reference,
            "url": self.url(),
            "component": {
                "id": result.component_id,
            },
        }

    def url(self) -> str:
        space = self.result.component.participatory_space
        return f"/spaces/{space.slug}/f/{self.result.component_id}/results/{self.result.id}"
