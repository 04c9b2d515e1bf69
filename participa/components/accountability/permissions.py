"""Permissions for the Accountability component."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ADMIN_SUBJECTS = ("result", "status", "timeline_entry")
ADMIN_ACTIONS = ("create", "update", "destroy", "read")


class PermissionDenied(Exception):
    """Raised when a user is not allowed to perform an action."""

    def __init__(self, permission_action: "PermissionAction"):
        self.permission_action = permission_action
        super().__init__(
            f"Not allowed to {permission_action.action} {permission_action.subject} "
            f"({permission_action.scope})"
        )


@dataclass(frozen=True)
class PermissionAction:
    """What is being attempted: scope ('public' or 'admin'), action and subject."""
    scope: str
    action: str
    subject: str


class Permissions:
    """
    Decide whether a user can perform an action on accountability resources.

    Context keys:
        component: Component the action happens in
        status: Status being acted on (admin status destroy)
    """

    def __init__(self, user, permission_action: PermissionAction, context: Optional[Dict[str, Any]] = None):
        self.user = user
        self.permission_action = permission_action
        self.context = context or {}

    @property
    def component(self):
        return self.context.get("component")

    def allowed(self) -> bool:
        action = self.permission_action
        if action.scope == "public":
            return self._public_allowed()
        if action.scope == "admin":
            return self._admin_allowed()
        return False

    def ensure(self):
        """Raise PermissionDenied unless the action is allowed."""
        if not self.allowed():
            logger.warning(
                f"Denied {self.permission_action} for user "
                f"{self.user.id if self.user is not None else 'anonymous'}"
            )
            raise PermissionDenied(self.permission_action)

    def _public_allowed(self) -> bool:
        action = self.permission_action
        if action.subject != "result":
            return False

        if action.action == "read":
            return True

        if action.action == "comment":
            if self.user is None or self.component is None:
                return False
            # Both settings default to the component being open for comments
            if not self.component.global_settings.get("comments_enabled", True):
                return False
            if self.component.step_settings.get("comments_blocked", False):
                return False
            return True

        return False

    def _admin_allowed(self) -> bool:
        action = self.permission_action
        if self.user is None or not self.user.admin:
            return False
        if self.component is not None and self.user.organization_id != self.component.organization.id:
            return False
        if action.subject not in ADMIN_SUBJECTS or action.action not in ADMIN_ACTIONS:
            return False

        if action.subject == "status" and action.action == "destroy":
            status = self.context.get("status")
            return status is None or not status.results

        return True
