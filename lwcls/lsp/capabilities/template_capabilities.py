"""
Template-related LSP capabilities.

Provides tag, attribute, value and expression completion for component
templates, and closing-tag insertion after '>' or '/'.
"""

from __future__ import annotations

from lsprotocol.types import CompletionList, CompletionParams, TextDocumentPositionParams

from lwcls.config import CompletionConfiguration
from lwcls.lsp.capabilities.capabilities import CompletionCapability, TagCompleteCapability
from lwcls.lsp.html_completion import do_complete, do_tag_complete
from lwcls.lsp.tag_providers import TagProvider, all_tag_providers
from lwcls.workspace.tags_cache import TagsCache


def _is_template(uri: str) -> bool:
    return uri.endswith(".html")


class TemplateCompletionCapability(CompletionCapability):
    """Completion inside component .html templates."""

    @property
    def name(self) -> str:
        return "template_completion"

    @property
    def config(self) -> CompletionConfiguration:
        return self.server.config or CompletionConfiguration()

    def get_tag_providers(self, language_id: str) -> list[TagProvider]:
        tags_cache = None
        if self.workspace_cache:
            tags_cache = self.workspace_cache.caches.get("tags")
        if not isinstance(tags_cache, TagsCache):
            tags_cache = None

        return [
            provider
            for provider in all_tag_providers(tags_cache)
            if provider.is_applicable(language_id)
            and self.config.is_provider_enabled(provider.get_id())
        ]

    async def can_handle(self, params: CompletionParams) -> bool:
        return _is_template(params.text_document.uri)

    async def complete(self, params: CompletionParams) -> CompletionList:
        document, html_document = self.server.template_documents.get(params.text_document.uri)
        sfdx = self.workspace_cache.is_sfdx_project if self.workspace_cache else True

        return do_complete(
            document,
            params.position,
            html_document,
            self.get_tag_providers(document.language_id),
            settings=self.config,
            sfdx_workspace=sfdx,
        )


class TemplateTagCompleteCapability(TagCompleteCapability):
    """Closing-tag insertion inside component .html templates."""

    @property
    def name(self) -> str:
        return "template_tag_complete"

    async def can_handle(self, params: TextDocumentPositionParams) -> bool:
        if not _is_template(params.text_document.uri):
            return False
        config = self.server.config or CompletionConfiguration()
        return config.auto_closing_tags

    async def tag_complete(self, params: TextDocumentPositionParams) -> str | None:
        document, html_document = self.server.template_documents.get(params.text_document.uri)
        return do_tag_complete(document, params.position, html_document)
