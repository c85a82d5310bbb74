"""keylime: declarative model constructors for Python

Build named constructors with attribute schemas, value handlers and init hooks,
and share reusable configuration verbs through extensions.

Example:
    import keylime

    Jedi = keylime.model("Jedi").attr("side", "light").attr("powers", [])
    luke = Jedi(side="light")

The module-level helpers operate on a default registry and factory created at
import time. Build an ExtensionRegistry and a ModelFactory directly for isolated
configuration surfaces.

Cross-cutting Concerns:
    Thread Safety:
        - Not thread-safe; descriptors and registries are mutated in place
        - Hosts sharing constructors across threads must synchronize externally

    Error Handling:
        - KeylimeError hierarchy, raised at the point of misuse
        - Handler failures propagate unchanged

    Logging:
        - Standard library logging under the "keylime" logger namespace
"""

from typing import Any, Mapping, Optional, Union

from keylime.core import (
    AttributeDescriptor,
    AttributeEntry,
    ConflictError,
    CopyMode,
    ExtensionNotFoundError,
    KeylimeError,
    Model,
    ModelFactory,
    ModelType,
    NotFoundError,
    ValidationError,
    clone,
    extend,
    is_model,
)
from keylime.plugins import secure_attrs, timestamps
from keylime.runtime import ExtensionRegistry

__version__ = "0.1.0"

registry = ExtensionRegistry()
factory = ModelFactory(registry=registry)

registry.register_plugin("secure_attrs", secure_attrs)
registry.register_plugin("timestamps", timestamps)


def model(name_or_class: Union[str, type], initial_attrs: Optional[Mapping[str, Any]] = None) -> ModelType:
    """Create a named constructor, or adapt an existing class, with the default factory."""
    return factory(name_or_class, initial_attrs)


def create_named(name: str, parent: Optional[ModelType] = None) -> ModelType:
    return factory.create_named(name, parent=parent)


def adapt(existing: type, initial_attrs: Optional[Mapping[str, Any]] = None) -> ModelType:
    return factory.adapt(existing, initial_attrs)


register_extension = registry.register_extension
unregister_extension = registry.unregister_extension
registered_extensions = registry.registered_extensions
register_plugin = registry.register_plugin
unregister_plugin = registry.unregister_plugin
registered_plugins = registry.registered_plugins

__all__ = [
    "model",
    "create_named",
    "adapt",
    "registry",
    "factory",
    "register_extension",
    "unregister_extension",
    "registered_extensions",
    "register_plugin",
    "unregister_plugin",
    "registered_plugins",
    "AttributeDescriptor",
    "AttributeEntry",
    "CopyMode",
    "ExtensionRegistry",
    "Model",
    "ModelFactory",
    "ModelType",
    "clone",
    "extend",
    "is_model",
    "KeylimeError",
    "ValidationError",
    "NotFoundError",
    "ExtensionNotFoundError",
    "ConflictError",
]
