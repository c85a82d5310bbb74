# keylime/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, Optional


class KeylimeError(Exception):
    """
    Base exception class for errors raised by the keylime model library.

    :param message: Human-readable description naming the offending constructor,
        attribute or extension.
    :param details: Optional structured context for the failure.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(KeylimeError):
    """
    Raised when an operation receives malformed arguments (missing name, wrong type,
    unknown copy mode).
    """


class NotFoundError(KeylimeError):
    """
    Raised when an operation references an attribute, plugin or extension that does
    not exist.
    """


class ExtensionNotFoundError(NotFoundError, AttributeError):
    """
    Raised when a verb that is not (or no longer) registered is looked up on a
    constructor. Also an AttributeError so hasattr() and getattr() defaults keep working.
    """


class ConflictError(KeylimeError):
    """
    Raised when registering an extension whose name collides with an existing
    surface method.
    """
