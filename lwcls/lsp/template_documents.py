"""
Parsed template documents.

Completion needs both the text snapshot and its parse tree. Both are built
from the document pygls keeps in sync and are reused until the document
changes or closes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lsprotocol.types import DidChangeTextDocumentParams, DidCloseTextDocumentParams

from lwcls.parser.document import TemplateDocument
from lwcls.parser.html_parser import HTMLDocument, parse

if TYPE_CHECKING:
    from lwcls.lsp.lwc_language_server import LwcLanguageServer


class TemplateDocuments:
    """Per-URI cache of (TemplateDocument, HTMLDocument)."""

    def __init__(self, server: LwcLanguageServer) -> None:
        self.server = server
        self._documents: dict[str, tuple[TemplateDocument, HTMLDocument]] = {}

    def register_text_sync_hooks(self) -> None:
        text_sync = self.server.text_sync_manager
        if text_sync is None:
            return
        text_sync.add_on_change_hook(self._on_change)
        text_sync.add_on_close_hook(self._on_close)

    async def _on_change(self, params: DidChangeTextDocumentParams) -> None:
        self.invalidate(params.text_document.uri)

    async def _on_close(self, params: DidCloseTextDocumentParams) -> None:
        self.invalidate(params.text_document.uri)

    def invalidate(self, uri: str) -> None:
        self._documents.pop(uri, None)

    def get(self, uri: str) -> tuple[TemplateDocument, HTMLDocument]:
        doc = self.server.workspace.get_text_document(uri)
        source = doc.source

        cached = self._documents.get(uri)
        if cached and cached[0].text == source:
            return cached

        document = TemplateDocument(
            uri=uri,
            text=source,
            language_id=doc.language_id or "html",
            version=doc.version,
            position_codec=doc.position_codec,
        )
        entry = (document, parse(source))
        self._documents[uri] = entry
        return entry
