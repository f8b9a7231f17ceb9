"""Config modules."""

from .config_dict import (
    class_config,
    copy_and_resolve_references,
    instantiate_classes,
)

__all__ = [
    "class_config",
    "copy_and_resolve_references",
    "instantiate_classes",
]
