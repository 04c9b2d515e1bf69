"""Statistics registry used by components to publish counters."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

HIGH_PRIORITY = 1
MEDIUM_PRIORITY = 2
LOW_PRIORITY = 3


@dataclass
class Stat:
    """A named statistic and the function that resolves it."""
    name: str
    resolve: Callable
    primary: bool = False
    priority: int = LOW_PRIORITY
    tag: Optional[str] = None


class StatsRegistry:
    """Holds the statistics registered by a component manifest."""

    def __init__(self):
        self._stats: Dict[str, Stat] = {}

    def register(
        self,
        name: str,
        resolve: Callable,
        primary: bool = False,
        priority: int = LOW_PRIORITY,
        tag: str = None,
    ) -> Stat:
        """
        Register a statistic.

        Args:
            name: Unique stat name (e.g. 'results_count')
            resolve: Callable(session, components, start_at, end_at) returning the value
            primary: Whether the stat is shown in the space summary
            priority: HIGH_PRIORITY, MEDIUM_PRIORITY or LOW_PRIORITY
            tag: Optional grouping tag

        Returns:
            The registered Stat
        """
        if name in self._stats:
            raise ValueError(f"Stat {name} is already registered")
        if priority not in (HIGH_PRIORITY, MEDIUM_PRIORITY, LOW_PRIORITY):
            raise ValueError(f"Invalid priority for stat {name}: {priority}")

        stat = Stat(name=name, resolve=resolve, primary=primary, priority=priority, tag=tag)
        self._stats[name] = stat
        logger.debug(f"Registered stat: {name}")
        return stat

    def get(self, name: str) -> Optional[Stat]:
        return self._stats.get(name)

    def all(self) -> List[Stat]:
        return list(self._stats.values())

    def filter(self, primary: bool = None, priority: int = None, tag: str = None) -> List[Stat]:
        """Return stats matching every given condition."""
        stats = self.all()
        if primary is not None:
            stats = [s for s in stats if s.primary == primary]
        if priority is not None:
            stats = [s for s in stats if s.priority == priority]
        if tag is not None:
            stats = [s for s in stats if s.tag == tag]
        return stats

    def resolve(self, name: str, session, components, start_at=None, end_at=None) -> Any:
        """Compute a single stat for the given components."""
        stat = self.get(name)
        if stat is None:
            raise KeyError(f"Unknown stat: {name}")
        return stat.resolve(session, components, start_at, end_at)

    def with_context(
        self, session, components, start_at=None, end_at=None, **filters
    ) -> Iterator[Tuple[str, Any]]:
        """Yield (name, value) for matching stats, highest priority first."""
        for stat in sorted(self.filter(**filters), key=lambda s: s.priority):
            yield stat.name, stat.resolve(session, components, start_at, end_at)
