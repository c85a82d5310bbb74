# keylime/core/cloning.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import copy
import datetime
import decimal
import logging
import re
import types
from collections.abc import Mapping
from typing import Any, Dict, Optional

from keylime.core.attributes import CopyMode

logger = logging.getLogger(__name__)

_PASS_THROUGH = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    decimal.Decimal,
    range,
    type,
    re.Pattern,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
)

_VALUE_OBJECTS = (datetime.date, datetime.time, datetime.timedelta, bytearray)


def clone(value: Any, deep: bool = False, memo: Optional[Dict[int, Any]] = None) -> Any:
    """
    Copy a value so that instances never alias each other's defaults.

    Scalars, callables and classes are returned unchanged. Value objects (dates,
    times, bytearrays) come back as a new object with an equal value. Lists, dicts, sets and
    tuples always get a new top-level container; with ``deep`` their contents are
    cloned recursively. Anything else is copied with ``copy.copy`` and, with
    ``deep``, its instance dict is cloned as well.

    Deep clones keep shared and cyclic references intact: ``memo`` maps the id of
    each value already cloned to its clone, as ``copy.deepcopy`` does.

    Never raises: objects that refuse to be copied are returned as-is.
    """
    if isinstance(value, _PASS_THROUGH) or callable(value):
        return value
    if deep:
        if memo is None:
            memo = {}
        if id(value) in memo:
            return memo[id(value)]
    if isinstance(value, _VALUE_OBJECTS):
        cloned = _copy_value_object(value)
    elif isinstance(value, dict):
        cloned = _clone_dict(value, deep, memo)
    elif isinstance(value, list):
        cloned = _clone_list(value, deep, memo)
    elif isinstance(value, tuple):
        cloned = _clone_tuple(value, deep, memo)
    elif isinstance(value, (set, frozenset)):
        cloned = _clone_set(value, deep, memo)
    else:
        cloned = _clone_object(value, deep, memo)
    if deep:
        memo[id(value)] = cloned
    return cloned


def clone_for_mode(value: Any, copy_mode: CopyMode) -> Any:
    """Clone a value according to an attribute's copy mode."""
    if copy_mode is CopyMode.DEEP:
        return clone(value, deep=True)
    if copy_mode is CopyMode.SHALLOW:
        return clone(value, deep=False)
    return value


def extend(target: Any, *sources: Any) -> Dict[str, Any]:
    """
    Copy keys from each source mapping onto target, left to right. A target that is
    not a dict is replaced by a new dict; sources that are not mappings are skipped.
    """
    if not isinstance(target, dict):
        target = {}
    for source in sources:
        if isinstance(source, Mapping):
            target.update(source)
    return target


def _copy_value_object(value: Any) -> Any:
    kind = type(value)
    if kind not in _VALUE_OBJECTS and kind is not datetime.datetime:
        return _shallow_copy(value)
    if isinstance(value, bytearray):
        return kind(value)
    if isinstance(value, datetime.datetime):
        return kind(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            value.microsecond,
            value.tzinfo,
            fold=value.fold,
        )
    if isinstance(value, datetime.date):
        return kind(value.year, value.month, value.day)
    if isinstance(value, datetime.time):
        return kind(value.hour, value.minute, value.second, value.microsecond, value.tzinfo, fold=value.fold)
    return kind(value.days, value.seconds, value.microseconds)


def _clone_dict(value: dict, deep: bool, memo: Optional[Dict[int, Any]]) -> dict:
    cloned = _shallow_copy(value)
    if cloned is value:
        cloned = dict(value)
    if deep:
        # registered before the children so cycles resolve to the new container
        memo[id(value)] = cloned
        for key, item in value.items():
            cloned[key] = clone(item, deep=True, memo=memo)
    return cloned


def _clone_list(value: list, deep: bool, memo: Optional[Dict[int, Any]]) -> list:
    cloned = _shallow_copy(value)
    if cloned is value:
        cloned = list(value)
    if deep:
        memo[id(value)] = cloned
        for i, item in enumerate(value):
            cloned[i] = clone(item, deep=True, memo=memo)
    return cloned


def _clone_tuple(value: tuple, deep: bool, memo: Optional[Dict[int, Any]]) -> tuple:
    items = [clone(item, deep=True, memo=memo) for item in value] if deep else list(value)
    if deep and id(value) in memo:
        # reached again through one of its own items
        return memo[id(value)]
    try:
        if hasattr(value, "_fields"):
            return type(value)._make(items)
        # built from a fresh list; tuple(value) would hand back the same object
        return type(value)(items)
    except TypeError as e:
        logger.debug("Cannot rebuild %s from its items, copying instead: %s", type(value).__name__, e)
        return _shallow_copy(value)


def _clone_set(value: Any, deep: bool, memo: Optional[Dict[int, Any]]) -> Any:
    if isinstance(value, frozenset) and not deep:
        return value
    items = [clone(item, deep=True, memo=memo) for item in value] if deep else value
    if deep and id(value) in memo:
        return memo[id(value)]
    try:
        return type(value)(items)
    except TypeError as e:
        logger.debug("Cannot rebuild %s from its items, copying instead: %s", type(value).__name__, e)
        return _shallow_copy(value)


def _clone_object(value: Any, deep: bool, memo: Optional[Dict[int, Any]]) -> Any:
    cloned = _shallow_copy(value)
    if deep and cloned is not value and isinstance(getattr(cloned, "__dict__", None), dict):
        memo[id(value)] = cloned
        for key, item in vars(value).items():
            cloned.__dict__[key] = clone(item, deep=True, memo=memo)
    return cloned


def _shallow_copy(value: Any) -> Any:
    try:
        return copy.copy(value)
    except (TypeError, copy.Error) as e:
        logger.debug("Value of type %s cannot be copied, sharing it instead: %s", type(value).__name__, e)
        return value
