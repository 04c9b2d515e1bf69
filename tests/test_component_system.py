"""Tests for the component manifest base, settings schemas and stats registry."""

import pytest
from participa.core.component_system import (
    ComponentManifest, ComponentRegistry, ComponentConfig, SettingsSchema, SettingsError,
    ExportManifest,
)
from participa.core.stats import StatsRegistry, HIGH_PRIORITY, MEDIUM_PRIORITY, LOW_PRIORITY


class DummyComponent(ComponentManifest):
    """Minimal component used to exercise the base class."""

    def __init__(self, config: ComponentConfig = None, name: str = "dummy"):
        self._name = name
        super().__init__(config)
        self.register_resource("thing", searchable=True, actions=["vote"])

    @property
    def name(self) -> str:
        return self._name

    @property
    def display_name(self) -> str:
        return self._name.title()

    @property
    def description(self) -> str:
        return "Dummy component"

    @property
    def version(self) -> str:
        return "0.1.0"


class TestSettingsSchema:
    """Test settings declaration, defaults and validation."""

    def test_defaults(self):
        schema = SettingsSchema("global")
        schema.attribute("comments_enabled", type="boolean", default=True)
        schema.attribute("scope_id", type="scope")

        assert schema.defaults() == {"comments_enabled": True, "scope_id": None}
        assert schema.build() == {"comments_enabled": True, "scope_id": None}

    def test_unknown_type_rejected(self):
        schema = SettingsSchema("global")
        with pytest.raises(ValueError):
            schema.attribute("color", type="colour")

    def test_boolean_and_integer_coercion(self):
        schema = SettingsSchema("global")
        schema.attribute("enabled", type="boolean", default=False)
        schema.attribute("max_length", type="integer")

        settings = schema.build({"enabled": "true", "max_length": "500"})
        assert settings == {"enabled": True, "max_length": 500}

        settings = schema.build({"enabled": "0", "max_length": ""})
        assert settings == {"enabled": False, "max_length": None}

    def test_invalid_values_raise(self):
        schema = SettingsSchema("global")
        schema.attribute("enabled", type="boolean")
        schema.attribute("max_length", type="integer")

        with pytest.raises(SettingsError):
            schema.build({"enabled": "maybe"})
        with pytest.raises(SettingsError):
            schema.build({"max_length": "many"})
        with pytest.raises(SettingsError):
            schema.build({"max_length": True})

    def test_translated_requires_mapping(self):
        schema = SettingsSchema("global")
        schema.attribute("intro", type="text", translated=True, editor=True)

        assert schema.build({"intro": {"en": "<p>Hi</p>"}}) == {"intro": {"en": "<p>Hi</p>"}}
        with pytest.raises(SettingsError):
            schema.build({"intro": "<p>Hi</p>"})
        with pytest.raises(SettingsError):
            schema.build({"intro": {"en": "<p>Hi</p>", "ca": 5}})
        assert schema.build({"intro": {"en": "<p>Hi</p>", "ca": None}}) == {"intro": {"en": "<p>Hi</p>"}}

    def test_required_attribute(self):
        schema = SettingsSchema("step")
        schema.attribute("announcement", type="string", required=True)

        with pytest.raises(SettingsError):
            schema.build({})
        assert schema.build({"announcement": "Soon"}) == {"announcement": "Soon"}

    def test_unknown_keys_dropped(self):
        schema = SettingsSchema("global")
        schema.attribute("enabled", type="boolean", default=True)

        assert schema.build({"enabled": False, "legacy": 1}) == {"enabled": False}


class TestComponentManifest:
    """Test the declarative pieces of a manifest."""

    def test_settings_kinds(self):
        component = DummyComponent()
        assert component.settings("global").kind == "global"
        assert component.settings("step").kind == "step"
        with pytest.raises(ValueError):
            component.settings("space")

    def test_resource_registration(self):
        component = DummyComponent()
        resource = component.get_resources()[0]

        assert resource.name == "thing"
        assert resource.component_manifest_name == "dummy"
        assert resource.searchable is True
        assert resource.actions == ["vote"]

    def test_exports_are_reused_by_name(self):
        component = DummyComponent()
        assert component.exports("things") is component.exports("things")
        assert len(component.get_exports()) == 1

    def test_export_without_collection(self):
        export = ExportManifest(name="things", manifest_name="dummy")
        with pytest.raises(RuntimeError):
            export.fetch(None, None)

    def test_hooks(self):
        component = DummyComponent()
        calls = []
        component.on("before_destroy", lambda instance, session: calls.append(instance))

        component.run_hooks("before_destroy", "instance")
        assert calls == ["instance"]

        with pytest.raises(ValueError):
            component.on("after_lunch", lambda instance, session: None)

    def test_hook_errors_propagate(self):
        component = DummyComponent()

        def refuse(instance, session):
            raise RuntimeError("no")

        component.on("before_destroy", refuse)
        with pytest.raises(RuntimeError):
            component.run_hooks("before_destroy", "instance")

    def test_seed_without_seeds(self):
        component = DummyComponent()
        assert component.seed(None, type("Space", (), {"slug": "x"})()) is None

    def test_config_schema(self):
        component = DummyComponent()
        component.settings("global").attribute("enabled", type="boolean", default=True)

        schema = component.get_config_schema()
        assert schema["global"]["enabled"]["default"] is True
        assert schema["step"] == {}


class TestComponentRegistry:
    """Test registration and lookups."""

    def test_register_and_get(self):
        registry = ComponentRegistry()
        component = DummyComponent()
        registry.register(component)

        assert registry.get("dummy") is component
        assert registry.get("missing") is None
        assert registry.get_all() == [component]

    def test_enabled_filter(self):
        registry = ComponentRegistry()
        registry.register(DummyComponent(name="first"))
        registry.register(DummyComponent(ComponentConfig(enabled=False), name="second"))

        assert [c.name for c in registry.get_enabled()] == ["first"]

    def test_initialize_in_priority_order(self):
        registry = ComponentRegistry()
        order = []

        class Tracking(DummyComponent):
            def initialize(self):
                order.append(self.name)
                return True

        registry.register(Tracking(ComponentConfig(priority=50), name="late"))
        registry.register(Tracking(ComponentConfig(priority=5), name="early"))

        assert registry.initialize_all()
        assert order == ["early", "late"]

    def test_initialize_failure(self):
        registry = ComponentRegistry()

        class Broken(DummyComponent):
            def initialize(self):
                raise RuntimeError("boom")

        registry.register(Broken())
        assert registry.initialize_all() is False

    def test_find_resource(self):
        registry = ComponentRegistry()
        registry.register(DummyComponent())

        assert registry.find_resource("thing").component_manifest_name == "dummy"
        assert registry.find_resource("nothing") is None

    def test_unregister(self):
        registry = ComponentRegistry()
        registry.register(DummyComponent())
        registry.unregister("dummy")
        assert registry.get("dummy") is None

    def test_component_info(self):
        registry = ComponentRegistry()
        registry.register(DummyComponent())

        info = registry.get_component_info()[0]
        assert info["name"] == "dummy"
        assert info["resources"] == ["thing"]
        assert info["enabled"] is True
        assert info["models"] == []


class TestStatsRegistry:
    """Test stat registration and resolution."""

    def test_duplicate_name(self):
        stats = StatsRegistry()
        stats.register("count", lambda *args: 1)
        with pytest.raises(ValueError):
            stats.register("count", lambda *args: 2)

    def test_invalid_priority(self):
        stats = StatsRegistry()
        with pytest.raises(ValueError):
            stats.register("count", lambda *args: 1, priority=7)

    def test_filter_and_order(self):
        stats = StatsRegistry()
        stats.register("low", lambda *args: 3, priority=LOW_PRIORITY)
        stats.register("high", lambda *args: 1, primary=True, priority=HIGH_PRIORITY)
        stats.register("medium", lambda *args: 2, priority=MEDIUM_PRIORITY)

        assert [s.name for s in stats.filter(primary=True)] == ["high"]
        assert list(stats.with_context(None, [])) == [("high", 1), ("medium", 2), ("low", 3)]

    def test_resolve_passes_context(self):
        stats = StatsRegistry()
        stats.register("components", lambda session, components, start_at, end_at: len(components))

        assert stats.resolve("components", None, [1, 2, 3]) == 3
        with pytest.raises(KeyError):
            stats.resolve("missing", None, [])
