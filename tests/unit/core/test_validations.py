# tests/unit/core/test_validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from keylime.core.attributes import CopyMode
from keylime.core.errors import ValidationError
from keylime.core.validations import Validator


@pytest.fixture
def validator():
    return Validator()


@pytest.mark.parametrize("name", ["", None, 3, ["name"]])
def test_validate_name_rejects_non_strings(validator, name):
    with pytest.raises(ValidationError, match="name.*create an attribute"):
        validator.validate_name(name, "create an attribute")


def test_validate_name_returns_name(validator):
    assert validator.validate_name("power", "create an attribute") == "power"


def test_validate_callable(validator):
    fn = lambda: None  # noqa: E731
    assert validator.validate_callable(fn, "add a handler") is fn
    with pytest.raises(ValidationError, match="function.*add a handler"):
        validator.validate_callable("nope", "add a handler")


@pytest.mark.parametrize(
    "value,expected",
    [("none", CopyMode.NONE), ("shallow", CopyMode.SHALLOW), (CopyMode.DEEP, CopyMode.DEEP)],
)
def test_validate_copy_mode(validator, value, expected):
    assert validator.validate_copy_mode(value) is expected


def test_validate_copy_mode_unknown(validator):
    with pytest.raises(ValidationError, match="Unknown copy mode"):
        validator.validate_copy_mode("sideways")


def test_validate_handlers(validator):
    h = lambda v, i, e: v  # noqa: E731
    assert validator.validate_handlers(None, "x") is None
    assert validator.validate_handlers([], "x") is None
    assert validator.validate_handlers(h, "x") == [h]
    assert validator.validate_handlers((h, h), "x") == [h, h]


def test_validate_handlers_rejects_non_callables(validator):
    with pytest.raises(ValidationError):
        validator.validate_handlers([1], "handle attribute 'a'")
    with pytest.raises(ValidationError, match="list of functions"):
        validator.validate_handlers(5, "handle attribute 'a'")
