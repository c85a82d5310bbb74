"""
Runtime package holding process-wide state: the extension and plugin registry.
"""

from .registry import ExtensionRegistry

__all__ = ["ExtensionRegistry"]
