"""
Text Synchronization Manager

Manages LSP document and file watching events and provides hook extension
points for caches and capabilities to react to them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_SAVE,
    WORKSPACE_DID_CHANGE_WATCHED_FILES,
    DidChangeTextDocumentParams,
    DidChangeWatchedFilesParams,
    DidCloseTextDocumentParams,
    DidSaveTextDocumentParams,
    LogMessageParams,
    MessageType,
)

if TYPE_CHECKING:
    from lwcls.lsp.lwc_language_server import LwcLanguageServer


# Type aliases for hook signatures
OnChangeHook = Callable[[DidChangeTextDocumentParams], Awaitable[None]]
OnSaveHook = Callable[[DidSaveTextDocumentParams], Awaitable[None]]
OnCloseHook = Callable[[DidCloseTextDocumentParams], Awaitable[None]]
OnWatchedFilesHook = Callable[[DidChangeWatchedFilesParams], Awaitable[None]]


class TextSyncManager:
    """
    Manages document synchronization and hook broadcasting.

    This is core LSP infrastructure that allows caches and capabilities
    to register hooks for document and file lifecycle events.

    Design Principles:
    - Text sync is infrastructure, NOT a capability
    - Errors are isolated (one hook failure doesn't affect others)
    - Hooks run in registration order

    Usage:
        # During server initialization (before caches/capabilities)
        text_sync = TextSyncManager(server)
        text_sync.register_handlers()
        server.text_sync_manager = text_sync

        # Caches register hooks to keep themselves up-to-date
        class TagsCache(CachedWorkspace):
            def register_text_sync_hooks(self):
                text_sync = self.server.text_sync_manager
                text_sync.add_on_save_hook(self._on_component_saved)
                text_sync.add_on_watched_files_hook(self._on_watched_files_changed)
    """

    def __init__(self, server: LwcLanguageServer) -> None:
        self.server = server

        # Hook registries for each event type
        self._on_change_hooks: list[OnChangeHook] = []
        self._on_save_hooks: list[OnSaveHook] = []
        self._on_close_hooks: list[OnCloseHook] = []
        self._on_watched_files_hooks: list[OnWatchedFilesHook] = []

    def add_on_change_hook(self, hook: OnChangeHook) -> None:
        """
        Register a hook for document change events.

        Change hooks run on every keystroke. Only use them for
        invalidating cache entries.
        """
        self._on_change_hooks.append(hook)

    def add_on_save_hook(self, hook: OnSaveHook) -> None:
        """
        Register a hook for document save events.

        The saved content is on disk when the hook runs, so caches that
        read files can re-index from it.
        """
        self._on_save_hooks.append(hook)

    def add_on_close_hook(self, hook: OnCloseHook) -> None:
        """Register a hook for document close events."""
        self._on_close_hooks.append(hook)

    def add_on_watched_files_hook(self, hook: OnWatchedFilesHook) -> None:
        """
        Register a hook for workspace file events.

        Example:
            async def on_files(params: DidChangeWatchedFilesParams):
                await self.handle_file_events(params.changes)

            text_sync.add_on_watched_files_hook(on_files)
        """
        self._on_watched_files_hooks.append(hook)

    async def _broadcast(self, event: str, hooks: list, params) -> None:
        """
        Call every hook with params.

        Hooks are called in registration order. Errors are caught
        and logged to prevent one hook from breaking others.
        """
        for hook in hooks:
            try:
                await hook(params)
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Error in {event} hook {getattr(hook, '__name__', hook)}: "
                                f"{type(e).__name__}: {e}"
                    )
                )

    async def _broadcast_on_change(self, params: DidChangeTextDocumentParams) -> None:
        await self._broadcast("on_change", self._on_change_hooks, params)

    async def _broadcast_on_save(self, params: DidSaveTextDocumentParams) -> None:
        await self._broadcast("on_save", self._on_save_hooks, params)

    async def _broadcast_on_close(self, params: DidCloseTextDocumentParams) -> None:
        await self._broadcast("on_close", self._on_close_hooks, params)

    async def _broadcast_on_watched_files(self, params: DidChangeWatchedFilesParams) -> None:
        await self._broadcast("on_watched_files", self._on_watched_files_hooks, params)

    def register_handlers(self) -> None:
        """
        Register LSP synchronization handlers with the server.

        This should be called once during server initialization,
        BEFORE caches and capabilities add their hooks.

        Registers handlers for:
        - textDocument/didChange
        - textDocument/didSave
        - textDocument/didClose
        - workspace/didChangeWatchedFiles
        """

        @self.server.feature(TEXT_DOCUMENT_DID_CHANGE)
        async def did_change(
            ls: LwcLanguageServer,
            params: DidChangeTextDocumentParams,
        ) -> None:
            # pygls updates the workspace document before this handler runs
            await self._broadcast_on_change(params)

        @self.server.feature(TEXT_DOCUMENT_DID_SAVE)
        async def did_save(
            ls: LwcLanguageServer,
            params: DidSaveTextDocumentParams,
        ) -> None:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Log,
                    message=f"Document saved: {params.text_document.uri}"
                )
            )
            await self._broadcast_on_save(params)

        @self.server.feature(TEXT_DOCUMENT_DID_CLOSE)
        async def did_close(
            ls: LwcLanguageServer,
            params: DidCloseTextDocumentParams,
        ) -> None:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Log,
                    message=f"Document closed: {params.text_document.uri}"
                )
            )
            await self._broadcast_on_close(params)

        @self.server.feature(WORKSPACE_DID_CHANGE_WATCHED_FILES)
        async def did_change_watched_files(
            ls: LwcLanguageServer,
            params: DidChangeWatchedFilesParams,
        ) -> None:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Log,
                    message=f"Watched files changed: {len(params.changes)} events"
                )
            )
            await self._broadcast_on_watched_files(params)
