# keylime/core/instantiation.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from keylime.core.attributes import AttributeEntry
from keylime.core.cloning import clone_for_mode

if TYPE_CHECKING:
    from keylime.core.descriptor import AttributeDescriptor


class InstantiationEngine:
    """
    Materializes an instance from a descriptor chain plus caller overrides.

    Attributes are assigned in declaration order (parents first), each value piped
    through its handler chain; init handlers run afterwards in registration order.
    A failing handler propagates immediately and leaves the target partially
    initialized.
    """

    def __init__(self) -> None:
        self._resolver = _ValueResolver()
        self._chain = _HandlerChainExecutor()
        self._init_invoker = _InitHandlerInvoker()

    def run(
        self,
        descriptor: "AttributeDescriptor",
        target: Any,
        overrides: Optional[Mapping[str, Any]],
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
    ) -> Any:
        """
        :param descriptor: The descriptor of the constructor being invoked.
        :param target: The freshly allocated instance.
        :param overrides: Attribute values supplied by the caller.
        :param args: Positional arguments of the constructor call.
        :param kwargs: Keyword arguments of the constructor call.
        :return: The populated target.
        """
        for entry in descriptor.effective_attributes().values():
            value = self._resolver.resolve(entry, overrides)
            value = self._chain.execute(entry, value, target)
            setattr(target, entry.name, value)

        for ancestor in descriptor.lineage():
            if ancestor.initializers:
                self._init_invoker.invoke(list(ancestor.initializers), target, args, kwargs)
        return target


class _ValueResolver:
    """
    Internal helper choosing an attribute's starting value: the override when one is
    given, otherwise the default, cloned per copy mode and evaluated when callable.
    """

    def resolve(self, entry: AttributeEntry, overrides: Optional[Mapping[str, Any]]) -> Any:
        if overrides is not None and entry.name in overrides:
            candidate = overrides[entry.name]
        else:
            candidate = entry.default_value

        value = clone_for_mode(candidate, entry.copy_mode)
        if callable(value):
            value = value()
        return value


class _HandlerChainExecutor:
    """
    Internal helper running an attribute's value handlers in order, each receiving
    the previous handler's output.
    """

    def execute(self, entry: AttributeEntry, value: Any, target: Any) -> Any:
        if not entry.has_handlers:
            return value
        # snapshot so a handler that edits the chain only affects later instances
        handlers: List[Any] = list(entry.handlers)
        for h in handlers:
            value = h(value, target, entry)
        return value


class _InitHandlerInvoker:
    """
    Internal helper calling init handlers with the instance and the constructor's
    original arguments.
    """

    def invoke(self, handlers: List[Any], target: Any, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> None:
        for h in handlers:
            h(target, *args, **kwargs)
