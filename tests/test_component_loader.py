"""Tests for loading components from configuration."""

import yaml
import pytest

from participa.core.component_loader import ComponentLoader
from participa.core.component_system import ComponentRegistry


def write_config(tmp_path, config):
    path = tmp_path / "components_config.yaml"
    path.write_text(yaml.safe_dump(config))
    return str(path)


@pytest.fixture
def component_registry():
    return ComponentRegistry()


class TestComponentLoader:
    """Test discovery and loading."""

    def test_discovers_accountability(self, tmp_path, component_registry):
        loader = ComponentLoader(str(tmp_path / "missing.yaml"), component_registry)
        assert "accountability" in loader.get_available_components()

    def test_missing_config_uses_defaults(self, tmp_path, component_registry):
        loader = ComponentLoader(str(tmp_path / "missing.yaml"), component_registry)

        assert loader.load_config() == {"components": {}, "component_settings": {}}
        assert loader.load_all_components()
        assert component_registry.get("accountability") is not None

    def test_load_with_priority(self, tmp_path, component_registry):
        path = write_config(tmp_path, {
            "components": {"accountability": {"enabled": True, "priority": 5, "config": {"x": 1}}},
            "component_settings": {"fail_on_error": True},
        })
        loader = ComponentLoader(path, component_registry)

        assert loader.load_all_components()
        manifest = component_registry.get("accountability")
        assert manifest.config.priority == 5
        assert manifest.config.config == {"x": 1}

    def test_disabled_component_is_skipped(self, tmp_path, component_registry):
        path = write_config(tmp_path, {"components": {"accountability": {"enabled": False}}})
        loader = ComponentLoader(path, component_registry)

        assert loader.load_all_components()
        assert component_registry.get("accountability") is None

    def test_unknown_component(self, tmp_path, component_registry):
        loader = ComponentLoader(str(tmp_path / "missing.yaml"), component_registry)
        assert loader.load_component("petitions", {}) is False

    def test_reload(self, tmp_path, component_registry):
        loader = ComponentLoader(str(tmp_path / "missing.yaml"), component_registry)
        loader.load_all_components()
        first = component_registry.get("accountability")

        assert loader.reload_component("accountability")
        assert component_registry.get("accountability") is not first

    def test_status(self, tmp_path, component_registry):
        loader = ComponentLoader(str(tmp_path / "missing.yaml"), component_registry)
        loader.load_all_components()

        status = loader.get_component_status()
        assert status["total_components"] == 1
        assert status["enabled_components"] == 1
        assert status["components"][0]["name"] == "accountability"
        assert status["components"][0]["exports"] == ["results", "result_comments"]
