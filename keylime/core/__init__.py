"""
Core package: attribute descriptors, the instantiation engine and the model
constructor surface.

Architecture:
- AttributeDescriptor stores per-constructor attribute metadata and init handlers
- InstantiationEngine turns a descriptor plus overrides into a populated instance
- ModelType carries the chainable configuration verbs of every constructor
- ModelFactory creates named constructors or adapts existing classes
"""

# Import order matters to avoid circular dependencies
from .attributes import DEFAULT_COPY_MODE, AttributeEntry, CopyMode
from .cloning import clone, clone_for_mode, extend
from .errors import ConflictError, ExtensionNotFoundError, KeylimeError, NotFoundError, ValidationError
from .instantiation import InstantiationEngine
from .descriptor import AttributeDescriptor
from .events import ATTR_EVENT, INIT_EVENT, EventDispatcher
from .model import Model, ModelType, is_model
from .factory import ModelFactory

__all__ = [
    # Attribute metadata
    "AttributeEntry",
    "CopyMode",
    "DEFAULT_COPY_MODE",
    "AttributeDescriptor",
    # Cloning
    "clone",
    "clone_for_mode",
    "extend",
    # Construction
    "InstantiationEngine",
    "EventDispatcher",
    "INIT_EVENT",
    "ATTR_EVENT",
    "Model",
    "ModelType",
    "ModelFactory",
    "is_model",
    # Errors
    "KeylimeError",
    "ValidationError",
    "NotFoundError",
    "ExtensionNotFoundError",
    "ConflictError",
]
