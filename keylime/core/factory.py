# keylime/core/factory.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from keylime.core.attributes import AttributeEntry
from keylime.core.errors import ValidationError
from keylime.core.events import EventDispatcher
from keylime.core.model import Model, ModelType, is_model
from keylime.core.validations import Validator

if TYPE_CHECKING:
    from keylime.runtime.registry import ExtensionRegistry

logger = logging.getLogger(__name__)


class ModelFactory:
    """
    Produces named model constructors, or adapts existing classes into them.

    Constructors built by one factory share its registry's configuration surface,
    so extensions registered there are available on all of them.
    """

    def __init__(
        self,
        registry: Optional["ExtensionRegistry"] = None,
        validator: Optional[Validator] = None,
        strict_events: bool = False,
    ) -> None:
        """
        :param registry: Extension registry supplying the configuration surface. A
            private registry is created when omitted.
        :param validator: Optional validator for argument checks.
        :param strict_events: Raise ValidationError on unknown event names instead of
            ignoring them.
        """
        if registry is None:
            from keylime.runtime.registry import ExtensionRegistry

            registry = ExtensionRegistry(validator=validator)
        self._registry = registry
        self._validator = validator or Validator()
        self._events = EventDispatcher(strict=strict_events, validator=self._validator)

    @property
    def registry(self) -> "ExtensionRegistry":
        return self._registry

    def __call__(self, name_or_class: Union[str, type], initial_attrs: Optional[Mapping[str, Any]] = None) -> ModelType:
        """Create a named constructor from a string, or adapt a class."""
        if isinstance(name_or_class, str):
            constructor = self.create_named(name_or_class)
            _seed(constructor, initial_attrs)
            return constructor
        return self.adapt(name_or_class, initial_attrs)

    def create_named(self, name: str, parent: Optional[ModelType] = None) -> ModelType:
        """
        Create a constructor whose ``__name__`` is exactly name.

        :param name: Constructor name, a non-empty string.
        :param parent: Optional model constructor to inherit attributes, init
            handlers and methods from.
        :raises ValidationError: On a bad name or parent.
        """
        self._validator.validate_name(name, "create a named constructor")
        if parent is not None and not is_model(parent):
            raise ValidationError(
                f"The parent of '{name}' must be another model constructor.", details={"parent": parent}
            )
        bases = (parent,) if parent is not None else (Model,)
        namespace = {"__qualname__": name, **self._namespace()}
        return self._build(name, bases, namespace)

    def adapt(self, existing: type, initial_attrs: Optional[Mapping[str, Any]] = None) -> ModelType:
        """
        Give an existing class a descriptor and the configuration surface.

        The returned constructor subclasses existing and keeps its name, module,
        docstring and ``__init__`` body; attributes are populated before that body
        runs. Adapting a model constructor only installs initial_attrs.

        :param existing: The class to adapt.
        :param initial_attrs: Mapping of attribute name to default value or AttributeEntry.
        :raises ValidationError: If existing is not a class or cannot be combined
            with the model base.
        """
        if not isinstance(existing, type):
            raise ValidationError(
                "A class is required to convert to a model constructor.", details={"value": existing}
            )
        if is_model(existing):
            _seed(existing, initial_attrs)
            return existing

        namespace = {
            "__module__": existing.__module__,
            "__qualname__": existing.__qualname__,
            "__doc__": existing.__doc__,
            **self._namespace(),
        }
        constructor = self._build(existing.__name__, (existing, Model), namespace)
        _seed(constructor, initial_attrs)
        return constructor

    def _namespace(self) -> dict:
        return {"_validator": self._validator, "_events": self._events}

    def _build(self, name: str, bases: tuple, namespace: dict) -> ModelType:
        try:
            constructor = self._registry.surface(name, bases, namespace)
        except TypeError as e:
            raise ValidationError(f"Cannot build model constructor '{name}': {e}", details={"bases": bases}) from e
        logger.debug("Built constructor %r with bases %s", name, [b.__name__ for b in bases])
        return constructor


def _seed(constructor: ModelType, initial_attrs: Optional[Mapping[str, Any]]) -> None:
    for attr_name, value in (initial_attrs or {}).items():
        if isinstance(value, AttributeEntry):
            constructor._validator.validate_name(attr_name, f"install an attribute on {constructor.__name__}")
            constructor.descriptor.attributes[attr_name] = value
        else:
            constructor.attr(attr_name, value)
