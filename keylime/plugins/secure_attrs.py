# keylime/plugins/secure_attrs.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Callable, Dict

from keylime.core.attributes import AttributeEntry
from keylime.core.errors import KeylimeError
from keylime.core.model import Model, ModelType

_SEALED = "_keylime_sealed"


class LockedAttributeError(KeylimeError, AttributeError):
    """
    Raised when a locked attribute is reassigned or deleted after construction.
    """


def secure_attrs(model: ModelType) -> None:
    """
    Plugin adding ``hidden()`` and ``locked()`` attribute helpers to a constructor.

    Hidden attributes are left out of ``to_dict()`` and ``repr()``. Locked
    attributes can be set while the instance is being built, including by the
    class's own ``__init__``, but not afterwards.

    Example:
        Droid = keylime.model("Droid").use(secure_attrs).attr("serial").locked()
    """
    model.attr_helper("hidden", _mark_hidden)
    model.attr_helper("locked", _mark_locked)
    if not getattr(model._constructed, "_seals", False):
        model.method("_constructed", _sealing(model._constructed))
    model.method("__setattr__", _guarded_setattr)
    model.method("__delattr__", _guarded_delattr)
    model.method("to_dict", _visible_dict)


def _mark_hidden(entry: AttributeEntry) -> None:
    entry.metadata["hidden"] = True


def _mark_locked(entry: AttributeEntry) -> None:
    entry.metadata["locked"] = True


def _sealing(previous: Callable[[Any], None]) -> Callable[[Any], None]:
    def _constructed(self: Any) -> None:
        previous(self)
        object.__setattr__(self, _SEALED, True)

    _constructed._seals = True
    return _constructed


def _is_locked(instance: Any, name: str) -> bool:
    if not instance.__dict__.get(_SEALED, False):
        return False
    entry = type(instance).descriptor.effective_attributes().get(name)
    return entry is not None and entry.metadata.get("locked", False)


def _guarded_setattr(self: Any, name: str, value: Any) -> None:
    if _is_locked(self, name):
        raise LockedAttributeError(
            f"Attribute '{name}' of {type(self).__name__} is locked.",
            details={"attribute": name, "constructor": type(self).__name__},
        )
    object.__setattr__(self, name, value)


def _guarded_delattr(self: Any, name: str) -> None:
    if _is_locked(self, name):
        raise LockedAttributeError(
            f"Attribute '{name}' of {type(self).__name__} is locked.",
            details={"attribute": name, "constructor": type(self).__name__},
        )
    object.__delattr__(self, name)


def _visible_dict(self: Any) -> Dict[str, Any]:
    entries = type(self).descriptor.effective_attributes()
    return {k: v for k, v in Model.to_dict(self).items() if not entries[k].metadata.get("hidden", False)}
