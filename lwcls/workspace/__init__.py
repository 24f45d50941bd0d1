"""Workspace management for the LWC language server."""
from .cache import WorkspaceCache
from .tags_cache import AttributeInfo, TagInfo, TagsCache

__all__ = ['WorkspaceCache', 'TagsCache', 'TagInfo', 'AttributeInfo']
