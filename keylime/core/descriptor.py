# keylime/core/descriptor.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Sequence

from keylime.core.attributes import DEFAULT_COPY_MODE, AttributeEntry
from keylime.core.errors import NotFoundError
from keylime.core.instantiation import InstantiationEngine
from keylime.core.validations import Validator
from keylime.interfaces.types import AttrName, InitHandlerFunc, Overrides, ValueHandlerFunc

logger = logging.getLogger(__name__)


class AttributeDescriptor:
    """
    Describes how to build an instance of one model constructor: the ordered
    attribute entries and the init handlers that run once the attributes are set.

    Each constructor owns exactly one descriptor. A descriptor may point at a
    parent descriptor; the parent's attributes and init handlers are applied
    first when an instance is built.
    """

    def __init__(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        parent: Optional["AttributeDescriptor"] = None,
        owner_name: str = "",
        validator: Optional[Validator] = None,
    ) -> None:
        """
        :param attributes: Optional mapping of name to default value or AttributeEntry
            used to seed the descriptor.
        :param parent: Descriptor of the parent constructor, if any.
        :param owner_name: Name of the owning constructor, used in error messages.
        :param validator: Optional validator for argument checks.
        """
        self._validator = validator or Validator()
        self._engine = InstantiationEngine()
        self.attributes: Dict[str, AttributeEntry] = {}
        self.initializers: Optional[List[InitHandlerFunc]] = None
        self.parent = parent
        self.owner_name = owner_name

        for name, value in (attributes or {}).items():
            if isinstance(value, AttributeEntry):
                self._validator.validate_name(name, "install an attribute")
                self.attributes[name] = value
            else:
                self.set_attr(name, value)

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    def set_attr(self, name: str, default_value: Any = None, **options: Any) -> "AttributeDescriptor":
        """
        Create or overwrite an attribute entry.

        :param name: Attribute name, a non-empty string.
        :param default_value: Default value, or a zero-argument callable computing it.
        :param options: ``copy_mode`` and ``handlers`` are understood; any other key is
            stored in the entry's metadata.
        :raises ValidationError: On a bad name, copy mode or handler list.
        """
        self._validator.validate_name(name, "create an attribute")
        copy_mode = self._validator.validate_copy_mode(options.pop("copy_mode", None) or DEFAULT_COPY_MODE)
        handlers = self._validator.validate_handlers(options.pop("handlers", None), f"handle attribute '{name}'")

        self.attributes[name] = AttributeEntry(
            name=name,
            default_value=default_value,
            copy_mode=copy_mode,
            handlers=handlers,
            metadata=dict(options),
        )
        logger.debug("Set attribute %r on %s (copy_mode=%s)", name, self._label, copy_mode.value)
        return self

    def get_attr(self, name: str) -> Optional[AttributeEntry]:
        """Return the entry declared on this descriptor under name, or None."""
        self._validator.validate_name(name, "get an attribute")
        return self.attributes.get(name)

    def has_attr(self, name: str) -> bool:
        return name in self.attributes

    def remove_attr(self, name: str) -> bool:
        """Drop an attribute entry. Returns False if it was not declared."""
        self._validator.validate_name(name, "remove an attribute")
        return self.attributes.pop(name, None) is not None

    def get_default_value_for(self, name: str) -> Any:
        self._validator.validate_name(name, "get an attribute default value")
        entry = self.attributes.get(name)
        return entry.default_value if entry is not None else None

    def effective_attributes(self) -> Dict[str, AttributeEntry]:
        """
        Attribute entries of the whole parent chain, root first. An entry redeclared
        by a child replaces the parent's entry but keeps the parent's position.
        """
        merged: Dict[str, AttributeEntry] = {}
        for descriptor in self.lineage():
            merged.update(descriptor.attributes)
        return merged

    def lineage(self) -> List["AttributeDescriptor"]:
        """This descriptor and its ancestors, root first."""
        chain = []
        current: Optional[AttributeDescriptor] = self
        while current is not None:
            chain.append(current)
            current = current.parent
        chain.reverse()
        return chain

    # -------------------------------------------------------------------------
    # Init handlers
    # -------------------------------------------------------------------------

    def add_init_handler(self, handler: InitHandlerFunc) -> "AttributeDescriptor":
        self._validator.validate_callable(handler, "add an init handler")
        if self.initializers is None:
            self.initializers = []
        self.initializers.append(handler)
        logger.debug("Added init handler %r to %s", handler, self._label)
        return self

    def remove_init_handler(self, handler: InitHandlerFunc) -> bool:
        """Remove the first registered occurrence of handler. Returns False if absent."""
        removed = _remove_handler(self.initializers, handler)
        if removed and not self.initializers:
            self.initializers = None
        return removed

    def remove_all_init_handlers(self) -> List[InitHandlerFunc]:
        """Remove every init handler, returning the removed handlers."""
        removed = self.initializers or []
        self.initializers = None
        return removed

    # -------------------------------------------------------------------------
    # Attribute (value) handlers
    # -------------------------------------------------------------------------

    def add_attr_handler(self, attr_name: AttrName, handler: ValueHandlerFunc) -> "AttributeDescriptor":
        """
        Append a value handler to an attribute's chain. An attribute inherited from
        a parent is first copied onto this descriptor, so the parent keeps its chain.

        :raises NotFoundError: If no attribute named attr_name is declared here or on
            a parent.
        """
        self._validator.validate_callable(handler, f"handle attribute '{attr_name}'")
        entry = self._require_attr(attr_name)
        if entry.handlers is None:
            entry.handlers = []
        entry.handlers.append(handler)
        logger.debug("Added handler %r to attribute %r on %s", handler, attr_name, self._label)
        return self

    def remove_attr_handler(self, attr_name: AttrName, handler: ValueHandlerFunc) -> bool:
        entry = self._require_attr(attr_name)
        removed = _remove_handler(entry.handlers, handler)
        if removed and not entry.handlers:
            entry.handlers = None
        return removed

    def remove_all_attr_handlers(self, attr_name: AttrName) -> List[ValueHandlerFunc]:
        entry = self._require_attr(attr_name)
        removed = entry.handlers or []
        entry.handlers = None
        return removed

    # -------------------------------------------------------------------------
    # Instantiation
    # -------------------------------------------------------------------------

    def init(
        self,
        target: Any,
        overrides: Optional[Overrides] = None,
        args: Optional[Sequence[Any]] = None,
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Populate target from this descriptor (and its parents) and run init handlers.

        :param target: An already allocated object.
        :param overrides: Values taking precedence over defaults; unknown names are ignored.
        :param args: Positional arguments forwarded to init handlers. Defaults to
            ``(overrides,)`` when overrides are given.
        :param kwargs: Keyword arguments forwarded to init handlers.
        :return: target
        """
        if args is None:
            args = () if overrides is None else (overrides,)
        return self._engine.run(self, target, overrides, tuple(args), dict(kwargs or {}))

    def _require_attr(self, attr_name: str) -> AttributeEntry:
        self._validator.validate_name(attr_name, "look up an attribute handler")
        entry = self.attributes.get(attr_name)
        if entry is not None:
            return entry
        inherited = self.parent.effective_attributes().get(attr_name) if self.parent is not None else None
        if inherited is None:
            raise NotFoundError(
                f"Attribute '{attr_name}' is not declared on {self._label}.",
                details={"attribute": attr_name, "constructor": self.owner_name},
            )
        # handler chains belong to one descriptor; the parent's entry is left untouched
        entry = replace(
            inherited,
            handlers=list(inherited.handlers) if inherited.handlers else None,
            metadata=dict(inherited.metadata),
        )
        self.attributes[attr_name] = entry
        logger.debug("Copied inherited attribute %r onto %s", attr_name, self._label)
        return entry

    @property
    def _label(self) -> str:
        return f"'{self.owner_name}'" if self.owner_name else "descriptor"

    def __repr__(self) -> str:
        return f"AttributeDescriptor(owner={self.owner_name!r}, attributes={list(self.attributes)})"


def _remove_handler(handlers: Optional[List[Any]], handler: Any) -> bool:
    if not handlers:
        return False
    for i, existing in enumerate(handlers):
        if existing == handler:
            del handlers[i]
            return True
    return False
