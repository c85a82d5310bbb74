# keylime/core/attributes.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from keylime.interfaces.types import Metadata, ValueHandlerFunc


class CopyMode(str, Enum):
    """
    How an attribute's default (or override) value is copied onto new instances.
    """

    NONE = "none"  # share the reference
    SHALLOW = "shallow"  # new top-level container, shared elements
    DEEP = "deep"  # fully independent copy


DEFAULT_COPY_MODE = CopyMode.DEEP


@dataclass(eq=False)
class AttributeEntry:
    """Metadata describing one declared attribute of a model constructor."""

    name: str
    default_value: Any = None
    copy_mode: CopyMode = DEFAULT_COPY_MODE
    handlers: Optional[List[ValueHandlerFunc]] = None
    metadata: Metadata = field(default_factory=dict)

    def __setattr__(self, key: str, value: Any) -> None:
        if key == "name" and "name" in self.__dict__:
            raise AttributeError(f"Attribute entry '{self.name}' cannot be renamed.")
        super().__setattr__(key, value)

    @property
    def has_handlers(self) -> bool:
        return bool(self.handlers)

    def __repr__(self) -> str:
        return (
            f"AttributeEntry(name={self.name!r}, default_value={self.default_value!r}, "
            f"copy_mode={self.copy_mode.value!r}, handlers={len(self.handlers or [])})"
        )
