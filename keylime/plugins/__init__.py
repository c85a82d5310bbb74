"""
Bundled plugins. Apply them with ``Constructor.use(plugin)`` or, through the
default registry, by name: ``Constructor.use("secure_attrs")``.
"""

from .secure_attrs import LockedAttributeError, secure_attrs
from .timestamps import timestamps

__all__ = ["LockedAttributeError", "secure_attrs", "timestamps"]
