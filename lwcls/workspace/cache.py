"""
Workspace Cache Manager for the LWC language server.

This module manages all indexed data for the workspace in memory.
Completion requests read it synchronously while indexing runs as
independent asyncio tasks.

Design Principles:
1. In-memory only (fast access, rebuilt on startup)
2. Whole-record updates (an entry is replaced, never patched)
3. Incremental updates (re-index only the component modules that change)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lsprotocol.types import FileEvent, LogMessageParams, MessageType

from lwcls.javascript.compiler import JavascriptMetadataCompiler, MetadataCompiler
from lwcls.utils.find_files import WorkspaceType

if TYPE_CHECKING:
    from lwcls.lsp.lwc_language_server import LwcLanguageServer

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    MessageType.Error: logging.ERROR,
    MessageType.Warning: logging.WARNING,
    MessageType.Info: logging.INFO,
    MessageType.Log: logging.DEBUG,
}


class CachedWorkspace(ABC):
    """Abstract base class for workspace caches."""

    def __init__(self, workspace_cache: WorkspaceCache) -> None:
        self.workspace_cache = workspace_cache
        self.server = workspace_cache.server
        self.workspace_root = workspace_cache.workspace_root
        self.workspace_type = workspace_cache.workspace_type

    def register_text_sync_hooks(self) -> None:
        """
        Register text sync hooks to keep cache up-to-date.

        Override in subclasses to register hooks with TextSyncManager
        that update the cache when relevant files change.
        """
        pass

    def log(self, message: str, message_type: MessageType = MessageType.Info) -> None:
        """Report to the client log when running in a server, else to logging."""
        logger.log(_LOG_LEVELS.get(message_type, logging.INFO), message)
        if self.server:
            self.server.window_log_message(LogMessageParams(type=message_type, message=message))

    @abstractmethod
    async def initialize(self):
        pass

    @abstractmethod
    def get(self, id: str) -> Any | None:
        pass

    @abstractmethod
    def get_all(self) -> Mapping[str, Any]:
        pass

    @abstractmethod
    async def scan(self):
        pass

    @abstractmethod
    def reset(self) -> None:
        pass

    @abstractmethod
    async def handle_file_events(self, events: Sequence[FileEvent]) -> None:
        """
        Apply workspace file events to the cache.

        Call this when the client reports watched file changes.
        """
        pass


class WorkspaceCache:
    """
    Central cache for all indexed workspace data.

    This stores:
    - Standard lightning-* component tags
    - Custom component tags from the workspace modules

    Usage:
        cache = WorkspaceCache(workspace_root, WorkspaceType.SFDX)
        await cache.initialize()

        # Get tags
        tags = cache.caches["tags"].get_all()

        # Apply file events from the client
        await cache.handle_file_events(params.changes)
    """

    def __init__(
        self,
        workspace_root: Path,
        workspace_type: WorkspaceType = WorkspaceType.SFDX,
        caches: dict[str, CachedWorkspace] | None = None,
        compiler: MetadataCompiler | None = None,
        server: LwcLanguageServer | None = None,
    ):
        from lwcls.workspace.tags_cache import TagsCache

        self.workspace_root = workspace_root
        self.workspace_type = workspace_type
        self.server = server
        self.compiler = compiler or JavascriptMetadataCompiler()

        # In-memory caches
        self.caches = caches or {
            "tags": TagsCache(self),
        }

        # State
        self._initialized = False

    @property
    def is_sfdx_project(self) -> bool:
        return self.workspace_type == WorkspaceType.SFDX

    async def initialize(self):
        """
        Initialize the cache by scanning the workspace.

        This is called once when the workspace is opened.
        """
        if self._initialized:
            return

        # Register hooks for all caches
        self._register_text_sync_hooks()

        for c in self.caches.values():
            if isinstance(c, CachedWorkspace):
                await c.initialize()

        self._initialized = True

    def _register_text_sync_hooks(self) -> None:
        """Register text sync hooks for all caches."""
        for cache in self.caches.values():
            if isinstance(cache, CachedWorkspace):
                cache.register_text_sync_hooks()

    async def handle_file_events(self, events: Sequence[FileEvent]) -> None:
        for c in self.caches.values():
            if isinstance(c, CachedWorkspace):
                await c.handle_file_events(events)

    def reset(self) -> None:
        """Drop all indexed data; initialize() may be called again."""
        for c in self.caches.values():
            if isinstance(c, CachedWorkspace):
                c.reset()
        self._initialized = False
