# keylime/plugins/timestamps.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from datetime import datetime, timezone

from keylime.core.attributes import CopyMode
from keylime.core.model import ModelType


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def timestamps(model: ModelType, field: str = "created_at") -> None:
    """
    Plugin declaring a creation timestamp attribute computed when each instance is built.
    """
    model.attr(field, utcnow, copy_mode=CopyMode.NONE)
