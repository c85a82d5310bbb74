# keylime/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Dict, Mapping

AttrName = str
EventName = str

Overrides = Mapping[str, Any]
Metadata = Dict[str, Any]

# Callback Types
ValueHandlerFunc = Callable[[Any, Any, Any], Any]
InitHandlerFunc = Callable[..., None]
MixinFunc = Callable[..., None]
ExtensionFunc = Callable[..., None]
AttrHelperFunc = Callable[..., None]
