# keylime/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Tuple

from keylime.core.errors import ValidationError
from keylime.core.validations import Validator

if TYPE_CHECKING:
    from keylime.core.descriptor import AttributeDescriptor

logger = logging.getLogger(__name__)

INIT_EVENT = "init"
ATTR_EVENT = "attr"

EVENT_NAMES = (INIT_EVENT, ATTR_EVENT)


class EventDispatcher:
    """
    Routes ``on``/``off``/``off_any`` calls of the configuration surface to the
    matching descriptor operation.

    ``"init"`` events take ``(handler,)``; ``"attr"`` events take
    ``(attr_name, handler)`` (or just ``(attr_name,)`` for ``off_any``). Unknown
    event names are ignored unless the dispatcher is strict.
    """

    def __init__(self, strict: bool = False, validator: Optional[Validator] = None) -> None:
        self._strict = strict
        self._validator = validator or Validator()

    @property
    def strict(self) -> bool:
        return self._strict

    def subscribe(self, descriptor: "AttributeDescriptor", event: str, args: Tuple[Any, ...]) -> None:
        event = self._check_event(event, "subscribe to")
        if event == INIT_EVENT:
            (handler,) = self._unpack(event, args, 1, "on")
            descriptor.add_init_handler(handler)
        elif event == ATTR_EVENT:
            attr_name, handler = self._unpack(event, args, 2, "on")
            descriptor.add_attr_handler(attr_name, handler)
        else:
            self._ignore(event, descriptor)

    def unsubscribe(self, descriptor: "AttributeDescriptor", event: str, args: Tuple[Any, ...]) -> bool:
        event = self._check_event(event, "unsubscribe from")
        if event == INIT_EVENT:
            (handler,) = self._unpack(event, args, 1, "off")
            return descriptor.remove_init_handler(handler)
        if event == ATTR_EVENT:
            attr_name, handler = self._unpack(event, args, 2, "off")
            return descriptor.remove_attr_handler(attr_name, handler)
        self._ignore(event, descriptor)
        return False

    def unsubscribe_all(self, descriptor: "AttributeDescriptor", event: str, args: Tuple[Any, ...]) -> list:
        event = self._check_event(event, "unsubscribe from")
        if event == INIT_EVENT:
            self._unpack(event, args, 0, "off_any")
            return descriptor.remove_all_init_handlers()
        if event == ATTR_EVENT:
            (attr_name,) = self._unpack(event, args, 1, "off_any")
            return descriptor.remove_all_attr_handlers(attr_name)
        self._ignore(event, descriptor)
        return []

    def _check_event(self, event: Any, purpose: str) -> str:
        self._validator.validate_name(event, f"{purpose} an event")
        if self._strict and event not in EVENT_NAMES:
            raise ValidationError(
                f"Unknown event '{event}'; expected one of: {', '.join(EVENT_NAMES)}.",
                details={"event": event},
            )
        return event

    @staticmethod
    def _unpack(event: str, args: Tuple[Any, ...], expected: int, verb: str) -> Tuple[Any, ...]:
        if len(args) != expected:
            raise ValidationError(
                f"{verb}('{event}') takes {expected} argument(s) after the event name, got {len(args)}.",
                details={"event": event, "args": args},
            )
        return args

    @staticmethod
    def _ignore(event: str, descriptor: "AttributeDescriptor") -> None:
        logger.debug("Ignoring unknown event %r on %r", event, descriptor.owner_name)
