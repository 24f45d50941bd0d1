"""
Template completion engine.

do_complete() classifies the cursor against the tokens of the node that
precedes it (tag name, attribute name, attribute value, end tag, {expression})
and asks the tag providers for suggestions in exactly one of those contexts.
do_tag_complete() answers the narrower question of whether a just-typed
``>`` or ``/`` should be completed with a closing tag.

Both are synchronous and only re-scan the text from the anchor node to the
cursor; the scanner cannot seek, so every look-ahead uses a fresh scanner.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    InsertTextFormat,
    Position,
    Range,
    TextEdit,
)
from pygls.uris import to_fs_path

from lwcls.config import CompletionConfiguration
from lwcls.lsp.tag_providers import CompletionInfo, TagProvider
from lwcls.parser.html_parser import HTMLDocument, Node
from lwcls.parser.html_tags import is_void_element
from lwcls.parser.scanner import WHITESPACE_CHARS, ScannerState, TokenType, create_scanner
from lwcls.workspace.utils import tag_from_file

logger = logging.getLogger(__name__)


class CompletionDocument(Protocol):
    uri: str

    def get_text(self) -> str: ...

    def offset_at(self, position: Position) -> int: ...

    def position_at(self, offset: int) -> Position: ...


def is_whitespace(s: str) -> bool:
    return all(ch in WHITESPACE_CHARS for ch in s)


def is_followed_by(text: str, offset: int, initial_state: ScannerState, expected_token: TokenType) -> bool:
    """Check if the next non-whitespace token after offset is expected_token."""
    scanner = create_scanner(text, offset, initial_state)
    token = scanner.scan()
    while token == TokenType.Whitespace:
        token = scanner.scan()
    return token == expected_token


def get_word_start(text: str, offset: int, limit: int) -> int:
    while offset > limit and not is_whitespace(text[offset - 1]):
        offset -= 1
    return offset


def get_word_end(text: str, offset: int, limit: int) -> int:
    while offset < limit and not is_whitespace(text[offset]):
        offset += 1
    return offset


class HTMLCompletion:
    """
    Completion state for a single request.

    The collect_* methods append to self.result and return it so the scan
    loop can return the first context that matches.
    """

    def __init__(
        self,
        document: CompletionDocument,
        offset: int,
        node: Node,
        tag_providers: list[TagProvider],
        settings: CompletionConfiguration | None = None,
        sfdx_workspace: bool = True,
    ) -> None:
        self.document = document
        self.text = document.get_text()
        self.offset = offset
        self.node = node
        self.tag_providers = tag_providers
        self.settings = settings
        self.sfdx_workspace = sfdx_workspace
        self.result = CompletionList(is_incomplete=False, items=[])
        self.current_tag = ""
        self.current_attribute_name = ""

    # ===== Helpers =====

    def _provider_call(self, provider: TagProvider, collect: Callable[..., None], *args) -> None:
        """Run one provider collection; a failing provider doesn't affect the others."""
        try:
            collect(*args)
        except Exception:
            logger.exception("Tag provider %s failed during %s", provider.get_id(), collect.__name__)

    def get_replace_range(self, replace_start: int, replace_end: int | None = None) -> Range:
        if replace_end is None:
            replace_end = self.offset
        if replace_start > self.offset:
            replace_start = self.offset
        return Range(
            start=self.document.position_at(replace_start),
            end=self.document.position_at(replace_end),
        )

    def get_line_indent(self, offset: int) -> str | None:
        """The whitespace between the line start and offset, or None if not all whitespace."""
        start = offset
        while start > 0:
            ch = self.text[start - 1]
            if ch in "\n\r":
                return self.text[start:offset]
            if not is_whitespace(ch):
                return None
            start -= 1
        return self.text[:offset]

    # ===== Suggestion strategies =====

    def collect_open_tag_suggestions(self, after_open_bracket: int, tag_name_end: int | None = None) -> CompletionList:
        replace_range = self.get_replace_range(after_open_bracket, tag_name_end)

        for provider in self.tag_providers:
            detail = "LWC tag" if provider.get_id() == "lwc" else None

            def collector(tag: str, info: CompletionInfo, detail: str | None = detail) -> None:
                self.result.items.append(
                    CompletionItem(
                        label=tag,
                        kind=CompletionItemKind.Property,
                        detail=detail,
                        documentation=info.documentation,
                        text_edit=TextEdit(range=replace_range, new_text=tag),
                        insert_text_format=InsertTextFormat.PlainText,
                    )
                )

            self._provider_call(provider, provider.collect_tags, collector)

        return self.result

    def collect_close_tag_suggestions(
        self, after_open_bracket: int, in_open_tag: bool, tag_name_end: int | None = None
    ) -> CompletionList:
        if tag_name_end is None:
            tag_name_end = self.offset
        replace_range = self.get_replace_range(after_open_bracket, tag_name_end)
        close_tag = (
            ""
            if is_followed_by(self.text, tag_name_end, ScannerState.WithinEndTag, TokenType.EndTagClose)
            else ">"
        )

        curr: Node | None = self.node
        if in_open_tag:
            # the tag being opened is not a candidate for its own end tag
            curr = curr.parent

        while curr:
            tag = curr.tag
            if tag and (not curr.closed or (curr.end_tag_start is not None and curr.end_tag_start > self.offset)):
                item = CompletionItem(
                    label="/" + tag,
                    kind=CompletionItemKind.Property,
                    filter_text="/" + tag + close_tag,
                    text_edit=TextEdit(range=replace_range, new_text="/" + tag + close_tag),
                    insert_text_format=InsertTextFormat.PlainText,
                )
                start_indent = self.get_line_indent(curr.start)
                end_indent = self.get_line_indent(after_open_bracket - 1)
                if start_indent is not None and end_indent is not None and start_indent != end_indent:
                    insert_text = start_indent + "</" + tag + close_tag
                    item.text_edit = TextEdit(
                        range=self.get_replace_range(after_open_bracket - 1 - len(end_indent)),
                        new_text=insert_text,
                    )
                    item.filter_text = end_indent + "</" + tag + close_tag
                self.result.items.append(item)
                return self.result
            curr = curr.parent

        if in_open_tag:
            return self.result

        for provider in self.tag_providers:

            def collector(tag: str, info: CompletionInfo) -> None:
                self.result.items.append(
                    CompletionItem(
                        label="/" + tag,
                        kind=CompletionItemKind.Property,
                        documentation=info.documentation,
                        filter_text="/" + tag + close_tag,
                        text_edit=TextEdit(range=replace_range, new_text="/" + tag + close_tag),
                        insert_text_format=InsertTextFormat.PlainText,
                    )
                )

            self._provider_call(provider, provider.collect_tags, collector)

        return self.result

    def collect_auto_close_tag_suggestion(self, tag_close_end: int, tag: str) -> CompletionList:
        if self.settings and self.settings.hide_auto_complete_proposals:
            return self.result
        if not is_void_element(tag):
            position = self.document.position_at(tag_close_end)
            self.result.items.append(
                CompletionItem(
                    label="</" + tag + ">",
                    kind=CompletionItemKind.Property,
                    filter_text="</" + tag + ">",
                    text_edit=TextEdit(range=Range(start=position, end=position), new_text="$0</" + tag + ">"),
                    insert_text_format=InsertTextFormat.Snippet,
                )
            )
        return self.result

    def collect_tag_suggestions(self, tag_start: int, tag_end: int) -> CompletionList:
        self.collect_open_tag_suggestions(tag_start, tag_end)
        self.collect_close_tag_suggestions(tag_start, True, tag_end)
        return self.result

    def collect_attribute_name_suggestions(self, name_start: int, name_end: int | None = None) -> CompletionList:
        if name_end is None:
            name_end = self.offset

        replace_end = self.offset
        # '<' is a valid attribute name character, but here it most likely starts the next tag
        while replace_end < name_end and self.text[replace_end] != "<":
            replace_end += 1
        replace_range = self.get_replace_range(name_start, replace_end)

        has_assign = is_followed_by(self.text, name_end, ScannerState.AfterAttributeName, TokenType.DelimiterAssign)
        value = "" if has_assign else '="$1"'
        tag = self.current_tag.lower()

        def collector(attribute: str, info: CompletionInfo, kind: str | None = None) -> None:
            snippet = attribute
            if kind != "v" and value:
                snippet += value
            self.result.items.append(
                CompletionItem(
                    label=attribute,
                    kind=CompletionItemKind.Function if kind == "handler" else CompletionItemKind.Value,
                    detail=info.detail,
                    documentation=info.documentation,
                    text_edit=TextEdit(range=replace_range, new_text=snippet),
                    insert_text_format=InsertTextFormat.Snippet,
                )
            )

        for provider in self.tag_providers:
            self._provider_call(provider, provider.collect_attributes, tag, collector)

        return self.result

    def collect_expression_suggestions(self, value_start: int) -> bool:
        """
        Suggest component members when the cursor closes a {expression}.

        Returns True if expression suggestions were provided.
        """
        if not (
            value_start >= 0
            and self.offset < len(self.text)
            and self.text[self.offset] in ("}", ">")
        ):
            return False

        for i in range(self.offset - 1, value_start - 1, -1):
            if self.text[i] == "}":
                # the closest brace is already matched
                break
            if self.text[i] != "{":
                continue

            template_tag = self._template_tag()
            if not template_tag:
                continue

            replace_range = self.get_replace_range(i + 1, self.offset)
            closing = "" if self.text[self.offset] == "}" else "}"

            def collector(value: str) -> None:
                self.result.items.append(
                    CompletionItem(
                        label=value,
                        kind=CompletionItemKind.Reference,
                        text_edit=TextEdit(range=replace_range, new_text=value + closing),
                        insert_text_format=InsertTextFormat.PlainText,
                    )
                )

            for provider in self.tag_providers:
                self._provider_call(provider, provider.collect_expression_values, template_tag, collector)
            return True

        return False

    def _template_tag(self) -> str | None:
        fs_path = to_fs_path(self.document.uri)
        if not fs_path:
            return None
        return tag_from_file(Path(fs_path), self.sfdx_workspace)

    def collect_attribute_value_suggestions(self, value_start: int, value_end: int | None = None) -> CompletionList:
        if value_end is None:
            value_end = self.offset

        if self.collect_expression_suggestions(value_start):
            return self.result

        if value_start < self.offset <= value_end and self.text[value_start] == '"':
            # inside a quoted value: replace the word under the cursor only
            if value_end > self.offset and self.text[value_end - 1] == '"':
                value_end -= 1
            ws_before = get_word_start(self.text, self.offset, value_start + 1)
            ws_after = get_word_end(self.text, self.offset, value_end)
            replace_range = self.get_replace_range(ws_before, ws_after)
            add_quotes = False
        else:
            replace_range = self.get_replace_range(value_start, value_end)
            add_quotes = True

        tag = self.current_tag.lower()
        attribute = self.current_attribute_name.lower()

        def collector(value: str) -> None:
            insert_text = '"' + value + '"' if add_quotes else value
            self.result.items.append(
                CompletionItem(
                    label=value,
                    filter_text=insert_text,
                    kind=CompletionItemKind.Unit,
                    text_edit=TextEdit(range=replace_range, new_text=insert_text),
                    insert_text_format=InsertTextFormat.PlainText,
                )
            )

        for provider in self.tag_providers:
            self._provider_call(provider, provider.collect_values, tag, attribute, collector)

        return self.result

    # ===== Context resolution =====

    def _scan_next_for_end_pos(self, scanner, next_token: TokenType) -> int:
        if self.offset == scanner.get_token_end():
            token = scanner.scan()
            if token == next_token and scanner.get_token_offset() == self.offset:
                return scanner.get_token_end()
        return self.offset

    def complete(self) -> CompletionList:
        offset = self.offset
        scanner = create_scanner(self.text, self.node.start)

        token = scanner.scan()
        while token != TokenType.EOS and scanner.get_token_offset() <= offset:
            token_offset = scanner.get_token_offset()
            token_end = scanner.get_token_end()

            if token == TokenType.StartTagOpen:
                if token_end == offset:
                    end_pos = self._scan_next_for_end_pos(scanner, TokenType.StartTag)
                    return self.collect_tag_suggestions(offset, end_pos)

            elif token == TokenType.StartTag:
                if token_offset <= offset <= token_end:
                    return self.collect_open_tag_suggestions(token_offset, token_end)
                self.current_tag = scanner.get_token_text()

            elif token == TokenType.AttributeName:
                if token_offset <= offset <= token_end:
                    return self.collect_attribute_name_suggestions(token_offset, token_end)
                self.current_attribute_name = scanner.get_token_text()

            elif token == TokenType.DelimiterAssign:
                if token_end == offset:
                    return self.collect_attribute_value_suggestions(token_end)

            elif token == TokenType.AttributeValue:
                if token_offset <= offset <= token_end:
                    return self.collect_attribute_value_suggestions(token_offset, token_end)

            elif token == TokenType.Whitespace:
                if offset <= token_end:
                    state = scanner.get_scanner_state()
                    if state == ScannerState.AfterOpeningStartTag:
                        end_tag_pos = self._scan_next_for_end_pos(scanner, TokenType.StartTag)
                        return self.collect_tag_suggestions(token_offset, end_tag_pos)
                    if state in (ScannerState.WithinTag, ScannerState.AfterAttributeName):
                        return self.collect_attribute_name_suggestions(token_end)
                    if state == ScannerState.BeforeAttributeValue:
                        return self.collect_attribute_value_suggestions(token_end)
                    if state == ScannerState.AfterOpeningEndTag:
                        return self.collect_close_tag_suggestions(token_offset - 1, False)

            elif token == TokenType.EndTagOpen:
                if offset <= token_end:
                    after_open_bracket = token_offset + 1
                    end_offset = self._scan_next_for_end_pos(scanner, TokenType.EndTag)
                    return self.collect_close_tag_suggestions(after_open_bracket, False, end_offset)

            elif token == TokenType.EndTag:
                if offset <= token_end:
                    start = token_offset - 1
                    while start >= 0:
                        ch = self.text[start]
                        if ch == "/":
                            return self.collect_close_tag_suggestions(start, False, token_end)
                        if not is_whitespace(ch):
                            break
                        start -= 1

            elif token == TokenType.StartTagClose:
                if offset <= token_end and self.current_tag:
                    return self.collect_auto_close_tag_suggestion(token_end, self.current_tag)

            else:
                if self.collect_expression_suggestions(scanner.get_token_length()):
                    return self.result
                if offset <= token_end:
                    return self.result

            token = scanner.scan()

        return self.result


def _to_offset(document: CompletionDocument, position: Position | int) -> int:
    if isinstance(position, int):
        return position
    return document.offset_at(position)


def do_complete(
    document: CompletionDocument,
    position: Position | int,
    html_document: HTMLDocument,
    tag_providers: list[TagProvider],
    settings: CompletionConfiguration | None = None,
    sfdx_workspace: bool = True,
) -> CompletionList:
    """Compute the completion list at a cursor position of a template."""
    offset = _to_offset(document, position)
    node = html_document.find_node_before(offset)
    if not node:
        return CompletionList(is_incomplete=False, items=[])

    completion = HTMLCompletion(document, offset, node, tag_providers, settings, sfdx_workspace)
    return completion.complete()


def do_tag_complete(
    document: CompletionDocument,
    position: Position | int,
    html_document: HTMLDocument,
) -> str | None:
    """
    Return the snippet to insert after a just-typed '>' or '/', if any.

    '>' closing a start tag yields ``$0</tag>``; '/' right after '<' yields
    ``tag>`` for the nearest open element.
    """
    offset = _to_offset(document, position)
    if offset <= 0:
        return None

    text = document.get_text()
    char = text[offset - 1]

    if char == ">":
        node = html_document.find_node_before(offset)
        if (
            node
            and node.tag
            and not is_void_element(node.tag)
            and node.start < offset
            and (node.end_tag_start is None or node.end_tag_start > offset)
        ):
            scanner = create_scanner(text, node.start)
            token = scanner.scan()
            while token != TokenType.EOS and scanner.get_token_end() <= offset:
                if token == TokenType.StartTagClose and scanner.get_token_end() == offset:
                    return f"$0</{node.tag}>"
                token = scanner.scan()

    elif char == "/":
        node = html_document.find_node_before(offset)
        while node and node.closed:
            node = node.parent
        if node and node.tag:
            scanner = create_scanner(text, node.start)
            token = scanner.scan()
            while token != TokenType.EOS and scanner.get_token_end() <= offset:
                if token == TokenType.EndTagOpen and scanner.get_token_end() == offset:
                    return f"{node.tag}>"
                token = scanner.scan()

    return None
