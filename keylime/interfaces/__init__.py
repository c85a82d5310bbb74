"""
Interface definitions shared by the core and plugins: handler protocols and
callback type aliases.
"""

from .protocols import InitHandler, ValueHandler

__all__ = ["InitHandler", "ValueHandler"]
