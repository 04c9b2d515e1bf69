"""Component system for mounting feature modules into participatory spaces."""

import logging
from typing import Dict, List, Optional, Any, Callable, Tuple
from collections import defaultdict
from dataclasses import dataclass, field
from abc import ABC, abstractmethod

from .stats import StatsRegistry, LOW_PRIORITY

logger = logging.getLogger(__name__)

SETTINGS_TYPES = ("boolean", "integer", "string", "text", "scope")
SETTINGS_KINDS = ("global", "step")
HOOK_EVENTS = ("create", "update", "publish", "unpublish", "before_destroy", "destroy")


class SettingsError(ValueError):
    """Raised when component settings do not match their schema."""


class ComponentInUseError(RuntimeError):
    """Raised by destroy guards when a component still holds content."""


@dataclass
class ComponentConfig:
    """Load configuration for a component."""
    enabled: bool = True
    priority: int = 100  # Lower = loads first
    config: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SettingsAttribute:
    """A single setting declared by a component."""
    name: str
    type: str
    default: Any = None
    required: bool = False
    translated: bool = False
    editor: bool = False

    def __post_init__(self):
        if self.type not in SETTINGS_TYPES:
            raise ValueError(f"Unknown settings type '{self.type}' for attribute {self.name}")

    def coerce(self, value: Any) -> Any:
        """Convert a raw value (e.g. from a form or YAML) to the attribute type."""
        if value is None:
            return None

        if self.translated:
            if not isinstance(value, dict):
                raise SettingsError(f"{self.name} must be a mapping of locale to text")
            translations = {}
            for locale, text in value.items():
                if text is None:
                    continue
                if not isinstance(text, str):
                    raise SettingsError(f"{self.name}[{locale}] must be text, got {text!r}")
                translations[str(locale)] = text
            return translations

        if self.type == "boolean":
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.lower() in ("true", "1"):
                return True
            if isinstance(value, str) and value.lower() in ("false", "0", ""):
                return False
            if isinstance(value, int):
                return bool(value)
            raise SettingsError(f"{self.name} must be a boolean, got {value!r}")

        if self.type in ("integer", "scope"):
            if isinstance(value, bool):
                raise SettingsError(f"{self.name} must be an integer, got {value!r}")
            if isinstance(value, str) and value.strip() == "":
                return None
            try:
                return int(value)
            except (TypeError, ValueError):
                raise SettingsError(f"{self.name} must be an integer, got {value!r}")

        return str(value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "default": self.default,
            "required": self.required,
            "translated": self.translated,
            "editor": self.editor,
        }


class SettingsSchema:
    """Ordered set of settings attributes for one settings kind."""

    def __init__(self, kind: str):
        self.kind = kind
        self.attributes: Dict[str, SettingsAttribute] = {}

    def attribute(self, name: str, type: str, **options) -> SettingsAttribute:
        """Declare a settings attribute."""
        attribute = SettingsAttribute(name=name, type=type, **options)
        self.attributes[name] = attribute
        return attribute

    def defaults(self) -> Dict[str, Any]:
        return {name: attr.default for name, attr in self.attributes.items()}

    def build(self, values: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        Validate raw values against the schema.

        Unknown keys are dropped, missing keys take their default.

        Raises:
            SettingsError: If a value can't be coerced or a required value is missing
        """
        values = values or {}
        result = {}
        for name, attr in self.attributes.items():
            value = attr.coerce(values[name]) if name in values else attr.default
            if attr.required and value in (None, "", {}):
                raise SettingsError(f"{self.kind} setting '{name}' is required")
            result[name] = value
        return result

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: attr.to_dict() for name, attr in self.attributes.items()}


@dataclass
class ResourceManifest:
    """A resource type exposed by a component (linkable, commentable, ...)."""
    name: str
    component_manifest_name: str
    model_class: Any = None
    template: Optional[str] = None
    card: Optional[str] = None
    searchable: bool = False
    actions: List[str] = field(default_factory=list)


@dataclass
class ExportManifest:
    """Describes a dataset a component can export."""
    name: str
    manifest_name: str
    include_in_open_data: bool = False
    formats: Tuple[str, ...] = ("json", "csv")
    _collection: Optional[Callable] = None
    _serializer: Any = None

    def collection(self, fn: Callable) -> Callable:
        """Register the callable(session, component) returning the records to export."""
        self._collection = fn
        return fn

    def serializer(self, serializer_class):
        """Register the class turning one record into a plain dict."""
        self._serializer = serializer_class
        return serializer_class

    def fetch(self, session, component) -> List[Any]:
        if self._collection is None:
            raise RuntimeError(f"Export {self.name} has no collection")
        return list(self._collection(session, component))

    def serialize(self, records) -> List[Dict[str, Any]]:
        if self._serializer is None:
            raise RuntimeError(f"Export {self.name} has no serializer")
        return [self._serializer(record).serialize() for record in records]


class ComponentManifest(ABC):
    """Base class for all Participa components."""

    def __init__(self, config: ComponentConfig = None):
        """
        Initialize the component manifest.

        Args:
            config: Component load configuration
        """
        self.config = config or ComponentConfig()
        self.enabled = self.config.enabled

        # Declared wiring, consumed by the host application
        self.engine = None
        self.admin_engine = None
        self.icon = None
        self.stylesheet = None
        self.permissions_class = None
        self.query_type = None

        # Actions whose permissions can be configured from the admin panel
        self.actions: List[str] = []

        self.stats = StatsRegistry()
        self._settings = {kind: SettingsSchema(kind) for kind in SETTINGS_KINDS}
        self._resources: Dict[str, ResourceManifest] = {}
        self._exports: Dict[str, ExportManifest] = {}
        self._hooks: Dict[str, List[Callable]] = defaultdict(list)
        self._seeds: Optional[Callable] = None
        self._models = []

    @property
    @abstractmethod
    def name(self) -> str:
        """Manifest name (unique identifier)."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable component name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Component description."""
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        """Component version."""
        pass

    def initialize(self) -> bool:
        """
        Initialize the component.
        Called once the component has been registered and loaded.

        Returns:
            True if initialization succeeded
        """
        logger.info(f"Initializing component: {self.display_name}")
        return True

    def shutdown(self):
        """Cleanup when component is unloaded."""
        logger.info(f"Shutting down component: {self.display_name}")

    def settings(self, kind: str = "global") -> SettingsSchema:
        """Get the settings schema of the given kind ('global' or 'step')."""
        if kind not in self._settings:
            raise ValueError(f"Unknown settings kind: {kind}")
        return self._settings[kind]

    def register_resource(self, name: str, **options) -> ResourceManifest:
        """Declare a resource handled by this component."""
        resource = ResourceManifest(name=name, component_manifest_name=self.name, **options)
        self._resources[name] = resource
        return resource

    def exports(self, name: str) -> ExportManifest:
        """Get or declare an export by name."""
        if name not in self._exports:
            self._exports[name] = ExportManifest(name=name, manifest_name=self.name)
        return self._exports[name]

    def register_stat(self, name: str, resolve: Callable, primary: bool = False,
                      priority: int = LOW_PRIORITY, tag: str = None):
        """Register a statistic for this component."""
        return self.stats.register(name, resolve, primary=primary, priority=priority, tag=tag)

    def on(self, event: str, hook: Callable):
        """Register a lifecycle hook."""
        if event not in HOOK_EVENTS:
            raise ValueError(f"Unknown component event: {event}")
        self._hooks[event].append(hook)

    def run_hooks(self, event: str, instance, session=None):
        """Run the hooks for an event. Hook exceptions propagate to the caller."""
        for hook in self._hooks.get(event, []):
            hook(instance, session)

    def seeds(self, fn: Callable) -> Callable:
        """Register the demo-data routine."""
        self._seeds = fn
        return fn

    def seed(self, session, participatory_space, **options):
        """Populate a participatory space with demo data for this component."""
        if self._seeds is None:
            logger.info(f"Component {self.name} has no seeds")
            return None
        logger.info(f"Seeding {self.name} in space {participatory_space.slug}")
        return self._seeds(session, participatory_space, **options)

    def get_resources(self) -> List[ResourceManifest]:
        return list(self._resources.values())

    def get_exports(self) -> List[ExportManifest]:
        return list(self._exports.values())

    def get_models(self) -> List[Any]:
        """
        Get database models for this component.

        Returns:
            List of SQLAlchemy model classes
        """
        return self._models

    def get_config_schema(self) -> Dict[str, Any]:
        """Describe both settings schemas."""
        return {kind: schema.to_dict() for kind, schema in self._settings.items()}

    def __repr__(self):
        return f"<Component: {self.display_name} v{self.version} (enabled={self.enabled})>"


class ComponentRegistry:
    """Registry for managing Participa components."""

    def __init__(self):
        self._components: Dict[str, ComponentManifest] = {}
        self._initialized = False

    def register(self, component: ComponentManifest):
        """
        Register a component manifest.

        Args:
            component: Manifest instance to register
        """
        if component.name in self._components:
            logger.warning(f"Component {component.name} already registered, replacing")

        self._components[component.name] = component
        logger.info(f"Registered component: {component.display_name} v{component.version}")

    def unregister(self, name: str):
        """Unregister a component."""
        if name in self._components:
            component = self._components[name]
            component.shutdown()
            del self._components[name]
            logger.info(f"Unregistered component: {name}")

    def get(self, name: str) -> Optional[ComponentManifest]:
        """Get a component manifest by name."""
        return self._components.get(name)

    def get_all(self) -> List[ComponentManifest]:
        return list(self._components.values())

    def get_enabled(self) -> List[ComponentManifest]:
        return [c for c in self._components.values() if c.enabled]

    def clear(self):
        """Shutdown and forget every component."""
        self.shutdown_all()
        self._components = {}

    def initialize_all(self) -> bool:
        """
        Initialize all enabled components in priority order.

        Returns:
            True if all components initialized successfully
        """
        if self._initialized:
            logger.warning("Components already initialized")
            return True

        components = sorted(self.get_enabled(), key=lambda c: c.config.priority)

        for component in components:
            try:
                if not component.initialize():
                    logger.error(f"Failed to initialize component: {component.name}")
                    return False
            except Exception as e:
                logger.error(f"Error initializing component {component.name}: {e}")
                return False

        self._initialized = True
        logger.info(f"Initialized {len(components)} components")
        return True

    def shutdown_all(self):
        """Shutdown all components."""
        for component in self._components.values():
            try:
                component.shutdown()
            except Exception as e:
                logger.error(f"Error shutting down component {component.name}: {e}")

        self._initialized = False

    def find_resource(self, name: str) -> Optional[ResourceManifest]:
        """Find a resource manifest by name across enabled components."""
        for component in self.get_enabled():
            for resource in component.get_resources():
                if resource.name == name:
                    return resource
        return None

    def get_component_info(self) -> List[Dict[str, Any]]:
        """Get information about all components."""
        return [
            {
                "name": c.name,
                "display_name": c.display_name,
                "description": c.description,
                "version": c.version,
                "enabled": c.enabled,
                "icon": c.icon,
                "actions": c.actions,
                "resources": [r.name for r in c.get_resources()],
                "exports": [e.name for e in c.get_exports()],
                "stats": [s.name for s in c.stats.all()],
                "models": [m.__tablename__ for m in c.get_models()],
            }
            for c in self._components.values()
        ]


# Global component registry instance
registry = ComponentRegistry()
