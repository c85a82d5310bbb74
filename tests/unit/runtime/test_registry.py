# tests/unit/runtime/test_registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from keylime.core.errors import ConflictError, NotFoundError, ValidationError
from keylime.core.model import ModelType
from keylime.runtime.registry import ExtensionRegistry


def test_surface_is_a_model_type(registry: ExtensionRegistry):
    assert issubclass(registry.surface, ModelType)
    assert registry.surface is not ExtensionRegistry().surface


# -----------------------------------------------------------------------------
# EXTENSIONS
# -----------------------------------------------------------------------------


def test_register_extension_adds_chainable_verb(registry: ExtensionRegistry, factory):
    calls = []

    def versioned(ctor, *args, **kwargs):
        """Mark as versioned."""
        calls.append((ctor, args, kwargs))

    registry.register_extension("versioned", versioned)
    Doc = factory.create_named("Doc")
    assert Doc.versioned(2, strict=True) is Doc
    assert calls == [(Doc, (2,), {"strict": True})]
    assert type(Doc).versioned.__doc__ == "Mark as versioned."


def test_extension_reaches_existing_constructors(registry: ExtensionRegistry, factory):
    Doc = factory.create_named("Doc")
    registry.register_extension("titled", lambda ctor: ctor.attr("title", "untitled"))
    assert Doc.titled()().title == "untitled"


def test_extension_does_not_leak_to_other_registries(registry: ExtensionRegistry, factory):
    from keylime.core.errors import ExtensionNotFoundError
    from keylime.core.factory import ModelFactory

    registry.register_extension("titled", lambda ctor: None)
    Other = ModelFactory().create_named("Other")
    with pytest.raises(ExtensionNotFoundError):
        Other.titled()


@pytest.mark.parametrize("name", ["attr", "on", "create", "mro"])
def test_register_extension_conflicts_with_surface(registry: ExtensionRegistry, name):
    with pytest.raises(ConflictError, match=f"'{name}' is already defined"):
        registry.register_extension(name, lambda ctor: None)


def test_register_extension_twice_conflicts(registry: ExtensionRegistry):
    registry.register_extension("titled", lambda ctor: None)
    with pytest.raises(ConflictError):
        registry.register_extension("titled", lambda ctor: None)


def test_register_extension_validates(registry: ExtensionRegistry):
    with pytest.raises(ValidationError):
        registry.register_extension("", lambda ctor: None)
    with pytest.raises(ValidationError):
        registry.register_extension("titled", "not callable")
    assert registry.registered_extensions() == {}


def test_unregister_extension(registry: ExtensionRegistry, factory):
    registry.register_extension("titled", lambda ctor: None)
    Doc = factory.create_named("Doc")
    assert registry.unregister_extension("titled") is True
    assert not hasattr(Doc, "titled")
    assert registry.unregister_extension("titled") is False
    registry.register_extension("titled", lambda ctor: None)


def test_unregister_builtin_verb_is_refused(registry: ExtensionRegistry):
    assert registry.unregister_extension("attr") is False
    assert hasattr(registry.surface, "attr")


def test_registered_extensions(registry: ExtensionRegistry):
    def titled(ctor):
        pass

    registry.register_extension("titled", titled)
    table = registry.registered_extensions()
    assert table == {"titled": titled}
    table.clear()
    assert registry.registered_extensions("titled") is titled
    assert registry.registered_extensions("missing") is None


# -----------------------------------------------------------------------------
# PLUGINS
# -----------------------------------------------------------------------------


def test_register_and_get_plugin(registry: ExtensionRegistry):
    plugin = MagicMock()
    registry.register_plugin("audited", plugin)
    assert registry.get_plugin("audited") is plugin
    assert registry.registered_plugins() == {"audited": plugin}
    assert registry.registered_plugins("audited") is plugin


def test_register_plugin_replaces(registry: ExtensionRegistry):
    first, second = MagicMock(), MagicMock()
    registry.register_plugin("audited", first)
    registry.register_plugin("audited", second)
    assert registry.get_plugin("audited") is second


def test_plugins_are_opt_in(registry: ExtensionRegistry, factory):
    plugin = MagicMock()
    registry.register_plugin("audited", plugin)
    factory.create_named("Doc")
    plugin.assert_not_called()


def test_unregister_plugin(registry: ExtensionRegistry):
    plugin = MagicMock()
    registry.register_plugin("audited", plugin)
    assert registry.unregister_plugin("audited") is plugin
    assert registry.unregister_plugin("audited") is False
    with pytest.raises(NotFoundError, match="audited"):
        registry.get_plugin("audited")


def test_register_plugin_validates(registry: ExtensionRegistry):
    with pytest.raises(ValidationError):
        registry.register_plugin(None, MagicMock())
    with pytest.raises(ValidationError):
        registry.register_plugin("audited", 3)


def test_register_extension_conflicts_with_attribute_helper(registry: ExtensionRegistry, factory):
    Doc = factory.create_named("Doc").attr_helper("indexed", lambda entry: None)
    with pytest.raises(ConflictError, match="attribute helper of: Doc"):
        registry.register_extension("indexed", lambda ctor: None)
    assert registry.registered_extensions() == {}
    assert Doc.attr("title").indexed() is Doc


def test_attribute_helper_conflicts_with_extension(registry: ExtensionRegistry, factory):
    registry.register_extension("indexed", lambda ctor: None)
    with pytest.raises(ConflictError):
        factory.create_named("Doc").attr_helper("indexed", lambda entry: None)


def test_registry_tracks_its_constructors(registry: ExtensionRegistry, factory):
    Doc = factory.create_named("Doc")

    class Memo(Doc):
        pass

    assert Doc in registry._constructors
    assert Memo in registry._constructors
