"""
Template feature handlers.

Each LSP request the server answers for templates is delegated to the
capabilities that accept it; a failing capability is reported to the client
and skipped.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from lsprotocol.types import (
    CompletionList,
    CompletionParams,
    LogMessageParams,
    MessageType,
    TextDocumentPositionParams,
)

if TYPE_CHECKING:
    from lwcls.lsp.lwc_language_server import LwcLanguageServer


class Capability(ABC):
    def __init__(self, server: LwcLanguageServer) -> None:
        self.server = server
        self.workspace_cache = server.workspace_cache

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def can_handle(self, params) -> bool:
        pass


class CompletionCapability(Capability):
    @abstractmethod
    async def complete(self, params: CompletionParams) -> CompletionList:
        """Only called if can_handle() returned True."""
        pass


class TagCompleteCapability(Capability):
    """Closing-tag insertion after '>' or '/'."""

    @abstractmethod
    async def tag_complete(self, params: TextDocumentPositionParams) -> str | None:
        """Return the snippet to insert at the position, or None."""
        pass


class CapabilityManager:
    """Dispatches completion and lwc/tagComplete requests to capabilities."""

    def __init__(
        self,
        server: LwcLanguageServer,
        capabilities: dict[str, Capability] | None = None,
    ):
        self.server = server

        if capabilities is None:
            from lwcls.lsp.capabilities.template_capabilities import (
                TemplateCompletionCapability,
                TemplateTagCompleteCapability,
            )

            capabilities = {
                "template_completion": TemplateCompletionCapability(server),
                "template_tag_complete": TemplateTagCompleteCapability(server),
            }

        self.capabilities = capabilities

    def get_capabilities_by_type(self, capability_type: type) -> list[Capability]:
        return [cap for cap in self.capabilities.values() if isinstance(cap, capability_type)]

    def _log_error(self, message: str) -> None:
        self.server.window_log_message(
            LogMessageParams(type=MessageType.Error, message=message)
        )

    async def handle_completion(self, params: CompletionParams) -> CompletionList:
        """Merge the items of every completion capability that accepts the request."""
        all_items = []

        for capability in self.get_capabilities_by_type(CompletionCapability):
            try:
                if await capability.can_handle(params):
                    result = await capability.complete(params)  # pyright: ignore
                    all_items.extend(result.items)
            except Exception as e:
                self._log_error(f"Completion error in {capability.name}: {e}")

        return CompletionList(is_incomplete=False, items=all_items)

    async def handle_tag_complete(self, params: TextDocumentPositionParams) -> str | None:
        """Return the first closing-tag snippet offered by a capable handler."""
        for capability in self.get_capabilities_by_type(TagCompleteCapability):
            try:
                if await capability.can_handle(params):
                    result = await capability.tag_complete(params)  # pyright: ignore
                    if result:
                        return result
            except Exception as e:
                self._log_error(f"Tag completion error in {capability.name}: {e}")

        return None
