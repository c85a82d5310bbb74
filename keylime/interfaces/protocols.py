# keylime/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from keylime.core.attributes import AttributeEntry


@runtime_checkable
class ValueHandler(Protocol):
    """
    Value handler protocol for type checking.

    A value handler is attached to a single attribute and receives the value
    produced so far for that attribute, the instance being built and the
    attribute's entry. Whatever it returns is handed to the next handler; the
    last handler's return value is assigned on the instance.

    Runtime Invariants:
    - Handlers run in registration order.
    - Sibling attributes declared earlier are already assigned on the instance.

    Error Handling:
    - Exceptions propagate to the caller of the constructor. The instance is left
      partially initialized.
    """

    def __call__(self, value: Any, instance: Any, entry: "AttributeEntry") -> Any:
        ...


@runtime_checkable
class InitHandler(Protocol):
    """
    Init handler protocol for type checking.

    Called once per new instance after every attribute is assigned, with the
    instance followed by exactly the positional and keyword arguments the
    constructor call received.
    """

    def __call__(self, instance: Any, *args: Any, **kwargs: Any) -> None:
        ...
