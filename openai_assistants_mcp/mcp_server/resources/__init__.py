"""Resource catalog."""

from .catalog import ResourceCatalog, ResourceContents, ResourceEntry, RESOURCE_DEFINITIONS

__all__ = ["ResourceCatalog", "ResourceContents", "ResourceEntry", "RESOURCE_DEFINITIONS"]
