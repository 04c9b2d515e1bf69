"""Component loader for loading Participa components from configuration."""

import logging
import yaml
import importlib
from pathlib import Path
from typing import Dict, List
from .component_system import ComponentConfig, registry

logger = logging.getLogger(__name__)


class ComponentLoader:
    """Loads and initializes Participa components from configuration."""

    def __init__(self, config_path: str = "components_config.yaml", component_registry=None):
        """
        Initialize the component loader.

        Args:
            config_path: Path to components configuration file
            component_registry: Registry to load into (defaults to the global one)
        """
        self.config_path = Path(config_path)
        self.registry = component_registry or registry
        self.config = {}

    def load_config(self) -> Dict:
        """Load component configuration from YAML file."""
        if not self.config_path.exists():
            logger.warning(f"Component config not found: {self.config_path}, using defaults")
            return {"components": {}, "component_settings": {}}

        with open(self.config_path, 'r') as f:
            self.config = yaml.safe_load(f) or {}

        logger.info(f"Loaded component configuration from {self.config_path}")
        return self.config

    def get_available_components(self) -> List[str]:
        """
        Discover available components in the components directory.

        Returns:
            List of component names
        """
        components_dir = Path(__file__).parent.parent / "components"
        if not components_dir.exists():
            logger.warning(f"Components directory not found: {components_dir}")
            return []

        available = []
        for component_dir in sorted(components_dir.iterdir()):
            if component_dir.is_dir() and not component_dir.name.startswith('_'):
                if (component_dir / "component.py").exists():
                    available.append(component_dir.name)

        logger.info(f"Found {len(available)} available components: {available}")
        return available

    def load_component(self, component_name: str, component_config: Dict) -> bool:
        """
        Load a single component.

        Args:
            component_name: Name of the component to load
            component_config: Component configuration dict

        Returns:
            True if component loaded successfully
        """
        try:
            package = importlib.import_module(f"participa.components.{component_name}")

            # The manifest class is named {ComponentName}Component
            class_name = f"{component_name.replace('_', ' ').title().replace(' ', '')}Component"

            if not hasattr(package, class_name):
                logger.error(f"Component {component_name} does not export {class_name}")
                return False

            component_class = getattr(package, class_name)

            config = ComponentConfig(
                enabled=component_config.get('enabled', True),
                priority=component_config.get('priority', 100),
                config=component_config.get('config', {})
            )

            self.registry.register(component_class(config))

            logger.info(f"Loaded component: {component_name}")
            return True

        except Exception as e:
            logger.error(f"Failed to load component {component_name}: {e}")
            return False

    def load_all_components(self) -> bool:
        """
        Load all enabled components from configuration.

        Returns:
            True if all components loaded successfully
        """
        config = self.load_config()
        components_config = config.get('components', {}) or {}
        component_settings = config.get('component_settings', {}) or {}

        available = self.get_available_components()

        loaded = 0
        failed = 0

        for component_name in available:
            component_config = components_config.get(component_name, {}) or {}

            if not component_config.get('enabled', True):
                logger.info(f"Skipping disabled component: {component_name}")
                continue

            if self.load_component(component_name, component_config):
                loaded += 1
            else:
                failed += 1
                if component_settings.get('fail_on_error', False):
                    logger.error("Failing due to component load error (fail_on_error=true)")
                    return False

        logger.info(f"Component loading complete: {loaded} loaded, {failed} failed")

        if not self.registry.initialize_all():
            logger.error("Failed to initialize components")
            return False

        return True

    def reload_component(self, component_name: str) -> bool:
        """
        Reload a component (useful for development).

        Args:
            component_name: Name of component to reload

        Returns:
            True if reload successful
        """
        self.registry.unregister(component_name)

        config = self.load_config()
        component_config = (config.get('components', {}) or {}).get(component_name, {}) or {}

        return self.load_component(component_name, component_config)

    def get_component_status(self) -> Dict:
        """
        Get status of all components.

        Returns:
            Dict with component status information
        """
        return {
            "total_components": len(self.registry.get_all()),
            "enabled_components": len(self.registry.get_enabled()),
            "components": self.registry.get_component_info(),
        }
