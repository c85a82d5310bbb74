# keylime/runtime/registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Dict, Optional, Union

from keylime.core.errors import ConflictError, NotFoundError
from keylime.core.model import ModelType
from keylime.core.validations import Validator
from keylime.interfaces.types import ExtensionFunc

logger = logging.getLogger(__name__)


class ExtensionRegistry:
    """
    Table of named extensions and opt-in plugins shared by every constructor built
    against it.

    Each registry owns a configuration surface: a ModelType subclass used as the
    metaclass of its constructors. Registering an extension adds a chainable verb to
    that surface, so it shows up on all of the registry's constructors, past and
    future. Plugins are only stored; a constructor applies one by calling
    ``use(name)``.

    The registry is plain process state with no locking; hosts sharing it across
    threads must synchronize externally.
    """

    def __init__(self, validator: Optional[Validator] = None) -> None:
        self._validator = validator or Validator()
        self._extensions: Dict[str, ExtensionFunc] = {}
        self._plugins: Dict[str, Callable[..., Any]] = {}
        self._constructors: "weakref.WeakSet[ModelType]" = weakref.WeakSet()
        self._surface = type("ModelSurface", (ModelType,), {"_registry": self, "__module__": __name__})

    @property
    def surface(self) -> type:
        """The metaclass whose verbs are available on this registry's constructors."""
        return self._surface

    def track(self, constructor: ModelType) -> None:
        """Remember a constructor built on this registry's surface."""
        self._constructors.add(constructor)

    # -------------------------------------------------------------------------
    # Extensions
    # -------------------------------------------------------------------------

    def register_extension(self, name: str, fn: ExtensionFunc) -> None:
        """
        Add a chainable verb. ``Ctor.<name>(*args)`` calls ``fn(Ctor, *args)`` and
        returns ``Ctor``.

        :raises ValidationError: If name is not a string or fn is not callable.
        :raises ConflictError: If name already exists on the surface, or is an
            attribute helper of one of the registry's constructors.
        """
        self._validator.validate_name(name, "register an extension")
        self._validator.validate_callable(fn, f"register the extension '{name}'")
        if hasattr(self._surface, name):
            raise ConflictError(
                f"The extension name '{name}' is already defined on the constructor surface.",
                details={"extension": name},
            )
        owners = sorted(c.__name__ for c in list(self._constructors) if name in c.__dict__.get("_attr_helpers", {}))
        if owners:
            raise ConflictError(
                f"The extension name '{name}' is already an attribute helper of: {', '.join(owners)}.",
                details={"extension": name, "constructors": owners},
            )
        setattr(self._surface, name, _make_verb(name, fn))
        self._extensions[name] = fn
        logger.debug("Registered extension %r", name)

    def unregister_extension(self, name: str) -> bool:
        """Remove a verb. Returns False if no extension of that name is registered."""
        if self._extensions.pop(name, None) is None:
            return False
        delattr(self._surface, name)
        logger.debug("Unregistered extension %r", name)
        return True

    def registered_extensions(self, name: Optional[str] = None) -> Union[Dict[str, ExtensionFunc], ExtensionFunc, None]:
        """A copy of the extension table, or the single entry for name."""
        if name is not None:
            return self._extensions.get(name)
        return dict(self._extensions)

    # -------------------------------------------------------------------------
    # Plugins
    # -------------------------------------------------------------------------

    def register_plugin(self, name: str, fn: Callable[..., Any]) -> None:
        """
        Store a plugin under name. Re-registering a name replaces the previous plugin.

        :raises ValidationError: If name is not a string or fn is not callable.
        """
        self._validator.validate_name(name, "register a plugin")
        self._validator.validate_callable(fn, f"register the plugin '{name}'")
        self._plugins[name] = fn
        logger.debug("Registered plugin %r", name)

    def unregister_plugin(self, name: str) -> Union[Callable[..., Any], bool]:
        """Remove a plugin, returning it, or False if it was not registered."""
        fn = self._plugins.pop(name, None)
        if fn is None:
            return False
        logger.debug("Unregistered plugin %r", name)
        return fn

    def get_plugin(self, name: str) -> Callable[..., Any]:
        """
        :raises NotFoundError: If no plugin is registered under name.
        """
        try:
            return self._plugins[name]
        except KeyError:
            raise NotFoundError(f"No plugin named '{name}' is registered.", details={"plugin": name}) from None

    def registered_plugins(self, name: Optional[str] = None) -> Union[Dict[str, Callable[..., Any]], Callable[..., Any], None]:
        """A copy of the plugin table, or the single entry for name."""
        if name is not None:
            return self._plugins.get(name)
        return dict(self._plugins)


def _make_verb(name: str, fn: ExtensionFunc) -> Callable[..., Any]:
    def verb(cls, *args: Any, **kwargs: Any) -> ModelType:
        fn(cls, *args, **kwargs)
        return cls

    verb.__name__ = name
    verb.__qualname__ = f"ModelSurface.{name}"
    verb.__doc__ = getattr(fn, "__doc__", None)
    return verb
