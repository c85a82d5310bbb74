# keylime/core/model.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple

from keylime.core.attributes import AttributeEntry
from keylime.core.descriptor import AttributeDescriptor
from keylime.core.errors import ConflictError, ExtensionNotFoundError, ValidationError
from keylime.core.events import EventDispatcher
from keylime.core.validations import Validator
from keylime.interfaces.types import AttrHelperFunc, EventName, MixinFunc

if TYPE_CHECKING:
    from keylime.runtime.registry import ExtensionRegistry

logger = logging.getLogger(__name__)


class ModelType(type):
    """
    Metaclass of every model constructor.

    The chainable configuration verbs (``attr``, ``method``, ``on`` ...) live here,
    so they are available on constructors but never shadow attributes of instances.
    Calling a constructor allocates a blank instance, runs its descriptor, then the
    class's own ``__init__`` if it defines one, and finally ``_constructed``.
    """

    _validator: Validator = Validator()
    _events: EventDispatcher = EventDispatcher()
    _registry: Optional["ExtensionRegistry"] = None

    def __init__(cls, name: str, bases: Tuple[type, ...], namespace: Dict[str, Any], **kwargs: Any) -> None:
        super().__init__(name, bases, namespace)
        parent = _nearest_model_base(cls)
        cls._descriptor = AttributeDescriptor(
            parent=parent._descriptor if parent is not None else None,
            owner_name=name,
            validator=cls._validator,
        )
        cls._attr_helpers = {}
        cls._last_attr = None
        if type(cls)._registry is not None:
            type(cls)._registry.track(cls)
        logger.debug("Created model constructor %r (parent=%r)", name, parent.__name__ if parent else None)

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        overrides = _collect_overrides(args, kwargs)
        instance = cls.__new__(cls)
        cls._descriptor.init(instance, overrides, args, kwargs)
        if cls.__init__ is not object.__init__:
            cls.__init__(instance, *args, **kwargs)
        cls._constructed(instance)
        return instance

    def __getattr__(cls, name: str) -> Any:
        for klass in type.__getattribute__(cls, "__mro__"):
            helper = klass.__dict__.get("_attr_helpers", {}).get(name)
            if helper is not None:
                return _BoundAttrHelper(cls, name, helper)
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        raise ExtensionNotFoundError(
            f"Constructor '{cls.__name__}' has no attribute or extension '{name}'.",
            details={"constructor": cls.__name__, "name": name},
        )

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    @property
    def descriptor(cls) -> AttributeDescriptor:
        """The constructor's attribute descriptor."""
        return cls._descriptor

    def attr(cls, name: str, default: Any = None, **options: Any) -> "ModelType":
        """
        Declare an instance attribute. See AttributeDescriptor.set_attr for options.
        """
        cls._validator.validate_name(name, f"create an attribute on {cls.__name__}")
        cls._descriptor.set_attr(name, default, **options)
        cls._last_attr = name
        return cls

    def get_attrs(cls) -> Dict[str, AttributeEntry]:
        """Return the live mapping of attributes declared on this constructor."""
        return cls._descriptor.attributes

    def attrs(cls, name: Optional[str] = None) -> Any:
        """Return one attribute entry by name, or the live mapping when name is omitted."""
        if name is None:
            return cls.get_attrs()
        return cls._descriptor.get_attr(name)

    # -------------------------------------------------------------------------
    # Shared behaviour
    # -------------------------------------------------------------------------

    def method(cls, name: str, fn: Callable[..., Any]) -> "ModelType":
        """Add a method shared by all instances."""
        cls._validator.validate_name(name, f"supply a method on {cls.__name__}")
        cls._validator.validate_callable(fn, f"supply the method '{name}' on {cls.__name__}")
        setattr(cls, name, fn)
        return cls

    def class_method(cls, name: str, fn: Callable[..., Any]) -> "ModelType":
        """Add a class method; fn receives the constructor as its first argument."""
        cls._validator.validate_name(name, f"supply a class method on {cls.__name__}")
        cls._validator.validate_callable(fn, f"supply the class method '{name}' on {cls.__name__}")
        setattr(cls, name, classmethod(fn))
        return cls

    def include(cls, mixin: MixinFunc, *extra: Any) -> "ModelType":
        """Invoke ``mixin(cls, *extra)`` immediately."""
        cls._validator.validate_callable(mixin, f"include a mixin in {cls.__name__}")
        mixin(cls, *extra)
        return cls

    def use(cls, plugin: Any, *extra: Any) -> "ModelType":
        """
        Apply a plugin to this constructor. plugin is either a callable or the name
        of a plugin registered with the constructor's registry.

        :raises NotFoundError: If a plugin name is not registered.
        """
        if isinstance(plugin, str):
            registry = type(cls)._registry
            if registry is None:
                raise ValidationError(f"{cls.__name__} has no registry to look up plugin '{plugin}'.")
            plugin = registry.get_plugin(plugin)
        cls._validator.validate_callable(plugin, f"use a plugin on {cls.__name__}")
        plugin(cls, *extra)
        return cls

    def attr_helper(cls, name: str, fn: AttrHelperFunc) -> "ModelType":
        """
        Add a verb to this constructor that calls ``fn(entry, *args)`` with the entry
        of the most recently declared attribute.

        :raises ConflictError: If name is already a configuration verb.
        """
        cls._validator.validate_name(name, f"supply an attribute helper on {cls.__name__}")
        cls._validator.validate_callable(fn, f"supply the attribute helper '{name}' on {cls.__name__}")
        if hasattr(type(cls), name):
            raise ConflictError(
                f"'{name}' is already defined on the configuration surface of {cls.__name__}.",
                details={"constructor": cls.__name__, "name": name},
            )
        cls._attr_helpers[name] = fn
        return cls

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on(cls, event: EventName, *args: Any) -> "ModelType":
        """``on("init", handler)`` or ``on("attr", attr_name, handler)``."""
        cls._events.subscribe(cls._descriptor, event, args)
        return cls

    def off(cls, event: EventName, *args: Any) -> "ModelType":
        """``off("init", handler)`` or ``off("attr", attr_name, handler)``."""
        cls._events.unsubscribe(cls._descriptor, event, args)
        return cls

    def off_any(cls, event: EventName, *args: Any) -> "ModelType":
        """``off_any("init")`` or ``off_any("attr", attr_name)``."""
        cls._events.unsubscribe_all(cls._descriptor, event, args)
        return cls

    # -------------------------------------------------------------------------
    # Instances
    # -------------------------------------------------------------------------

    def create(cls, *args: Any, **kwargs: Any) -> Any:
        """Build a new instance; same as calling the constructor."""
        return cls(*args, **kwargs)


def is_model(value: Any) -> bool:
    """True if value is a model constructor."""
    return isinstance(value, ModelType)


def _nearest_model_base(cls: type) -> Optional[ModelType]:
    for base in cls.__mro__[1:]:
        if isinstance(base, ModelType) and not base.__dict__.get("_keylime_base", False):
            return base
    return None


def _collect_overrides(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    overrides: Optional[Dict[str, Any]] = None
    if args and isinstance(args[0], Mapping):
        overrides = dict(args[0])
    if kwargs:
        overrides = {**(overrides or {}), **kwargs}
    return overrides


class Model(metaclass=ModelType):
    """
    Base class of all model constructors.
    """

    _keylime_base = True

    def _constructed(self) -> None:
        """Called once the instance is fully built, after any ``__init__`` body."""

    def to_dict(self) -> Dict[str, Any]:
        """Attribute values of this instance, in declaration order."""
        names = type(self).descriptor.effective_attributes()
        return {name: getattr(self, name) for name in names if hasattr(self, name)}

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"{type(self).__name__}({fields})"


class _BoundAttrHelper:
    """
    Internal callable tying an attribute helper to the constructor it was looked up on.
    """

    def __init__(self, constructor: ModelType, name: str, fn: Callable[..., Any]) -> None:
        self._constructor = constructor
        self._name = name
        self._fn = fn

    def __call__(self, *args: Any, **kwargs: Any) -> ModelType:
        constructor = self._constructor
        last = constructor.__dict__.get("_last_attr")
        entry = constructor.descriptor.get_attr(last) if last else None
        if entry is None:
            raise ValidationError(
                f"An attribute must be added to {constructor.__name__} before using the helper '{self._name}'.",
                details={"constructor": constructor.__name__, "helper": self._name},
            )
        self._fn(entry, *args, **kwargs)
        return constructor
