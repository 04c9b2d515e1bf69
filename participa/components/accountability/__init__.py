"""Accountability component: results, statuses and timelines of public commitments."""

from .component import AccountabilityComponent

__all__ = ["AccountabilityComponent"]
