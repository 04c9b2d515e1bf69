"""Result management service for the Accountability component."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from participa.core.traceability import Traceability
from participa.db.models import Category, Scope
from .models import Result, Status, TimelineEntry

logger = logging.getLogger(__name__)


class ResultService:
    """Manage results, statuses and timeline entries of one component."""

    def __init__(self, session, component, user=None):
        self.session = session
        self.component = component
        self.user = user
        self.traceability = Traceability(session)

    # Results

    def list(self, parent_id: int = None) -> List[Result]:
        """Top-level results, or the children of parent_id."""
        query = self.session.query(Result).filter(Result.component_id == self.component.id)
        if parent_id is None:
            query = query.filter(Result.parent_id.is_(None))
        else:
            query = query.filter(Result.parent_id == parent_id)
        return query.order_by(Result.weight, Result.id).all()

    def get(self, result_id: int) -> Optional[Result]:
        return (
            self.session.query(Result)
            .filter(Result.component_id == self.component.id, Result.id == result_id)
            .first()
        )

    def get_status(self, status_id: int) -> Optional[Status]:
        return (
            self.session.query(Status)
            .filter(Status.component_id == self.component.id, Status.id == status_id)
            .first()
        )

    def _resolve(self, params: Dict[str, Any], result: Result = None) -> Dict[str, Any]:
        """Turn id references into component-scoped objects and apply status progress."""
        params = dict(params)

        if "parent_id" in params:
            parent_id = params.pop("parent_id")
            parent = self.get(parent_id) if parent_id is not None else None
            if parent_id is not None and parent is None:
                raise LookupError(f"Parent result {parent_id} not found")
            params["parent"] = parent

        if "status_id" in params:
            status_id = params.pop("status_id")
            status = self.get_status(status_id) if status_id is not None else None
            if status_id is not None and status is None:
                raise LookupError(f"Status {status_id} not found")
            params["status"] = status
            if params.get("progress") is None and status is not None and status.progress is not None:
                params["progress"] = status.progress

        space = self.component.participatory_space
        if params.get("scope_id") is not None:
            scope = self.session.query(Scope).filter_by(
                id=params["scope_id"], organization_id=space.organization_id
            ).first()
            if scope is None:
                raise LookupError(f"Scope {params['scope_id']} not found")
        if params.get("category_id") is not None:
            category = self.session.query(Category).filter_by(
                id=params["category_id"], participatory_space_id=space.id
            ).first()
            if category is None:
                raise LookupError(f"Category {params['category_id']} not found")

        start_date = params.get("start_date", result.start_date if result else None)
        end_date = params.get("end_date", result.end_date if result else None)
        if start_date and end_date and end_date < start_date:
            raise ValueError("end_date can't be before start_date")

        return params

    def create(self, **params) -> Result:
        """Create a result, then refresh its parent's progress."""
        params = self._resolve(params)
        params["component"] = self.component
        result = self.traceability.create(Result, self.user, params, visibility="all")
        self._refresh_parent(result.parent)
        logger.info(f"Created result #{result.id} in component {self.component.id}")
        return result

    def update(self, result: Result, **params) -> Result:
        previous_parent = result.parent
        params = self._resolve(params, result)
        self.traceability.update(result, self.user, params, visibility="all")
        self._refresh_parent(previous_parent)
        if result.parent is not previous_parent:
            self._refresh_parent(result.parent)
        return result

    def delete(self, result: Result):
        if result.children:
            raise ValueError("Can't delete a result that has children")
        parent = result.parent
        if parent is not None:
            parent.children.remove(result)
        self.traceability.delete(result, self.user)
        self._refresh_parent(parent)

    def _refresh_parent(self, parent: Optional[Result]):
        if parent is None:
            return
        parent.update_progress()
        self.session.flush()

    # Statuses

    def list_statuses(self) -> List[Status]:
        return (
            self.session.query(Status)
            .filter(Status.component_id == self.component.id)
            .order_by(Status.key)
            .all()
        )

    def create_status(self, key: str, name: Dict[str, str], description: Dict[str, str] = None,
                      progress: int = None) -> Status:
        existing = self.session.query(Status).filter_by(component_id=self.component.id, key=key).first()
        if existing:
            raise ValueError(f"Status key '{key}' already exists in this component")
        params = {
            "component": self.component,
            "key": key,
            "name": name,
            "description": description,
            "progress": progress,
        }
        return self.traceability.create(Status, self.user, params)

    def delete_status(self, status: Status):
        if status.results:
            raise ValueError(f"Status '{status.key}' is still used by results")
        self.traceability.delete(status, self.user)

    # Timeline

    def add_timeline_entry(self, result: Result, entry_date: date, title: Dict[str, str],
                           description: Dict[str, str] = None) -> TimelineEntry:
        entry = TimelineEntry(entry_date=entry_date, title=title, description=description)
        result.timeline_entries.append(entry)
        self.session.flush()
        self.traceability.log("create", self.user, entry, resource_type="TimelineEntry")
        return entry
