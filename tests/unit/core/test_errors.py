# tests/unit/core/test_errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details


def test_error_hierarchy(error_classes):
    KeylimeError, ValidationError, NotFoundError, ConflictError = error_classes
    assert issubclass(ValidationError, KeylimeError)
    assert issubclass(NotFoundError, KeylimeError)
    assert issubclass(ConflictError, KeylimeError)
    assert issubclass(KeylimeError, Exception)


def test_exceptions_instantiation(error_classes):
    KeylimeError, ValidationError, NotFoundError, ConflictError = error_classes
    assert str(ValidationError("Bad name")) == "Bad name"
    assert str(NotFoundError("Missing attribute")) == "Missing attribute"
    assert str(ConflictError("Taken")) == "Taken"


def test_error_message_and_details():
    from keylime.core.errors import KeylimeError

    err = KeylimeError("Something failed", details={"attribute": "power"})
    assert err.message == "Something failed"
    assert err.details == {"attribute": "power"}


def test_error_without_details():
    from keylime.core.errors import ValidationError

    assert ValidationError("No details").details == {}


def test_extension_not_found_is_attribute_error():
    from keylime.core.errors import ExtensionNotFoundError, NotFoundError

    err = ExtensionNotFoundError("gone")
    assert isinstance(err, NotFoundError)
    assert isinstance(err, AttributeError)
