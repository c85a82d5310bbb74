# keylime/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from keylime.core.attributes import CopyMode
from keylime.core.errors import ValidationError


class Validator:
    """
    Performs argument validation for the configuration surface, ensuring names,
    handlers and options are well-formed before any state is mutated.
    """

    def __init__(self) -> None:
        """
        Initialize the validator with the default rule set.
        """
        self._rules_engine = _ValidationRulesEngine()

    def validate_name(self, name: Any, purpose: str) -> str:
        """
        Check that a name is a non-empty string.

        :param name: The candidate name.
        :param purpose: Short phrase used in the error message, e.g. "create an attribute".
        :raises ValidationError: If the name is missing or not a string.
        """
        return self._rules_engine.validate_name(name, purpose)

    def validate_callable(self, fn: Any, purpose: str) -> Any:
        """
        Check that a handler, mixin or extension is callable.

        :raises ValidationError: If fn is not callable.
        """
        return self._rules_engine.validate_callable(fn, purpose)

    def validate_copy_mode(self, copy_mode: Any) -> CopyMode:
        """
        Coerce a copy mode given as a CopyMode or its string value.

        :raises ValidationError: If the mode is unknown.
        """
        return self._rules_engine.validate_copy_mode(copy_mode)

    def validate_handlers(self, handlers: Optional[Iterable[Any]], purpose: str) -> Optional[List[Any]]:
        """
        Check an initial handler list, returning a fresh list (or None when empty).

        :raises ValidationError: If handlers is not iterable or holds a non-callable.
        """
        return self._rules_engine.validate_handlers(handlers, purpose)


class _ValidationRulesEngine:
    """
    Internal engine applying the validation rules. Centralizes validation logic
    for easier maintenance.
    """

    def __init__(self) -> None:
        self._default_rules = _DefaultValidationRules

    def validate_name(self, name: Any, purpose: str) -> str:
        return self._default_rules.validate_name(name, purpose)

    def validate_callable(self, fn: Any, purpose: str) -> Any:
        return self._default_rules.validate_callable(fn, purpose)

    def validate_copy_mode(self, copy_mode: Any) -> CopyMode:
        return self._default_rules.validate_copy_mode(copy_mode)

    def validate_handlers(self, handlers: Optional[Iterable[Any]], purpose: str) -> Optional[List[Any]]:
        return self._default_rules.validate_handlers(handlers, purpose)


class _DefaultValidationRules:
    """
    Built-in validation rules.
    """

    @staticmethod
    def validate_name(name: Any, purpose: str) -> str:
        if not isinstance(name, str) or not name:
            raise ValidationError(f"A 'name' string is required to {purpose}.", details={"name": name})
        return name

    @staticmethod
    def validate_callable(fn: Any, purpose: str) -> Any:
        if not callable(fn):
            raise ValidationError(f"A function is required to {purpose}.", details={"value": fn})
        return fn

    @staticmethod
    def validate_copy_mode(copy_mode: Any) -> CopyMode:
        if isinstance(copy_mode, CopyMode):
            return copy_mode
        try:
            return CopyMode(copy_mode)
        except ValueError:
            valid = ", ".join(m.value for m in CopyMode)
            raise ValidationError(
                f"Unknown copy mode {copy_mode!r}; expected one of: {valid}.",
                details={"copy_mode": copy_mode},
            ) from None

    @staticmethod
    def validate_handlers(handlers: Optional[Iterable[Any]], purpose: str) -> Optional[List[Any]]:
        if handlers is None:
            return None
        if callable(handlers):
            handlers = [handlers]
        try:
            result = list(handlers)
        except TypeError:
            raise ValidationError(f"Handlers to {purpose} must be a list of functions.") from None
        for h in result:
            _DefaultValidationRules.validate_callable(h, purpose)
        return result or None
