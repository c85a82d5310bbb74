# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from keylime.core.descriptor import AttributeDescriptor
from keylime.core.factory import ModelFactory
from keylime.runtime.registry import ExtensionRegistry


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")


@pytest.fixture
def descriptor():
    """An empty descriptor with no owner."""
    return AttributeDescriptor()


@pytest.fixture
def registry():
    """A private registry so extensions never leak between tests."""
    return ExtensionRegistry()


@pytest.fixture
def factory(registry):
    """A factory bound to the private registry."""
    return ModelFactory(registry=registry)


@pytest.fixture
def strict_factory(registry):
    """A factory that rejects unknown event names."""
    return ModelFactory(registry=registry, strict_events=True)


@pytest.fixture
def user_model(factory):
    """A small constructor with a plain default, a mutable default and a computed one."""
    return factory.create_named("User").attr("name", "anonymous").attr("tags", []).attr("score", lambda: 10)


@pytest.fixture
def init_spy():
    """An init handler mock."""
    return MagicMock(name="init_handler")


@pytest.fixture
def passthrough_handler():
    """A value handler mock returning its input unchanged."""
    return MagicMock(name="value_handler", side_effect=lambda value, instance, entry: value)


@pytest.fixture
def error_classes():
    """Provides a tuple of error classes for quick reference."""
    from keylime.core.errors import ConflictError, KeylimeError, NotFoundError, ValidationError

    return (KeylimeError, ValidationError, NotFoundError, ConflictError)
