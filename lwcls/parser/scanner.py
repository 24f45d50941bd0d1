"""
HTML template scanner.

A forward-only tokenizer for LWC templates. A scanner can only be created at
an offset (optionally in a given state) and scanned forward; callers that need
to look ahead or behind simply create a new one.

Usage:
    scanner = create_scanner(text, node.start)
    token = scanner.scan()
    while token != TokenType.EOS:
        ...
        token = scanner.scan()
"""

from __future__ import annotations

import logging
import re
from enum import Enum, auto

logger = logging.getLogger(__name__)


class TokenType(Enum):
    StartCommentTag = auto()
    Comment = auto()
    EndCommentTag = auto()
    StartTagOpen = auto()
    StartTagClose = auto()
    StartTagSelfClose = auto()
    StartTag = auto()
    EndTagOpen = auto()
    EndTagClose = auto()
    EndTag = auto()
    DelimiterAssign = auto()
    AttributeName = auto()
    AttributeValue = auto()
    StartDoctypeTag = auto()
    Doctype = auto()
    EndDoctypeTag = auto()
    Content = auto()
    Whitespace = auto()
    Unknown = auto()
    Script = auto()
    Styles = auto()
    EOS = auto()


class ScannerState(Enum):
    WithinContent = auto()
    AfterOpeningStartTag = auto()
    AfterOpeningEndTag = auto()
    WithinDoctype = auto()
    WithinTag = auto()
    WithinEndTag = auto()
    WithinComment = auto()
    WithinScriptContent = auto()
    WithinStyleContent = auto()
    AfterAttributeName = auto()
    BeforeAttributeValue = auto()


WHITESPACE_CHARS = " \t\n\f\r"

_ELEMENT_NAME = re.compile(r"[_:\w][_:\w\-.\d]*")
_ATTRIBUTE_NAME = re.compile(r"[^\s\"'>/=\x00-\x0F\x7F\x80-\x9F]*")
_UNQUOTED_VALUE = re.compile(r"[^\s\"'`=<>/]+")
_DOCTYPE = re.compile(r"!doctype", re.IGNORECASE)
_SCRIPT_BOUNDARY = re.compile(r"<!--|-->|</?script\s*/?>?", re.IGNORECASE)
_STYLE_END = re.compile(r"</style", re.IGNORECASE)


class _Stream:
    """Character stream over the source text with a movable position."""

    def __init__(self, source: str, position: int) -> None:
        self.source = source
        self.length = len(source)
        self.position = position

    def eos(self) -> bool:
        return self.length <= self.position

    def pos(self) -> int:
        return self.position

    def go_back(self, n: int) -> None:
        self.position -= n

    def advance(self, n: int) -> None:
        self.position += n

    def go_to_end(self) -> None:
        self.position = self.length

    def peek_char(self, n: int = 0) -> str:
        index = self.position + n
        if 0 <= index < self.length:
            return self.source[index]
        return ""

    def advance_if_char(self, ch: str) -> bool:
        if self.peek_char() == ch:
            self.position += 1
            return True
        return False

    def advance_if_chars(self, chars: str) -> bool:
        if self.source.startswith(chars, self.position):
            self.position += len(chars)
            return True
        return False

    def advance_if_match(self, pattern: re.Pattern[str]) -> str:
        """Consume the pattern if it matches exactly at the current position."""
        match = pattern.match(self.source, self.position)
        if match:
            self.position = match.end()
            return match.group(0)
        return ""

    def advance_past_search(self, pattern: re.Pattern[str]) -> str:
        """Move past the next occurrence of the pattern, if any."""
        match = pattern.search(self.source, self.position)
        if match:
            self.position = match.end()
            return match.group(0)
        return ""

    def advance_until_search(self, pattern: re.Pattern[str]) -> str:
        """Move to the start of the next occurrence, or to the end."""
        match = pattern.search(self.source, self.position)
        if match:
            self.position = match.start()
            return match.group(0)
        self.go_to_end()
        return ""

    def advance_until_char(self, ch: str) -> bool:
        index = self.source.find(ch, self.position)
        if index >= 0:
            self.position = index
            return True
        self.go_to_end()
        return False

    def advance_until_chars(self, chars: str) -> bool:
        index = self.source.find(chars, self.position)
        if index >= 0:
            self.position = index
            return True
        self.go_to_end()
        return False

    def skip_whitespace(self) -> bool:
        start = self.position
        while self.position < self.length and self.source[self.position] in WHITESPACE_CHARS:
            self.position += 1
        return self.position > start


class Scanner:
    """
    Restart-only HTML scanner.

    Each call to scan() produces the next token; token boundaries and the
    scanner state after the token are exposed through the getters.
    """

    def __init__(
        self,
        text: str,
        initial_offset: int = 0,
        initial_state: ScannerState = ScannerState.WithinContent,
        emit_pseudo_close_tags: bool = False,
    ) -> None:
        self._stream = _Stream(text, initial_offset)
        self._state = initial_state
        self._emit_pseudo_close_tags = emit_pseudo_close_tags
        self._token_offset = 0
        self._token_type = TokenType.Unknown
        self._token_error: str | None = None
        self._has_space_after_tag = False
        self._last_tag = ""
        self._last_attribute_name: str | None = None

    # ===== Accessors =====

    def get_token_type(self) -> TokenType:
        return self._token_type

    def get_token_offset(self) -> int:
        return self._token_offset

    def get_token_length(self) -> int:
        return self._stream.pos() - self._token_offset

    def get_token_end(self) -> int:
        return self._stream.pos()

    def get_token_text(self) -> str:
        return self._stream.source[self._token_offset:self._stream.pos()]

    def get_scanner_state(self) -> ScannerState:
        return self._state

    def get_token_error(self) -> str | None:
        return self._token_error

    # ===== Scanning =====

    def scan(self) -> TokenType:
        offset = self._stream.pos()
        token = self._internal_scan()
        pseudo_close = self._emit_pseudo_close_tags and token in (
            TokenType.StartTagClose,
            TokenType.EndTagClose,
        )
        if token != TokenType.EOS and offset == self._stream.pos() and not pseudo_close:
            logger.debug("Scanner did not advance at offset %d (%s)", offset, token)
            self._stream.advance(1)
            return self._finish_token(offset, TokenType.Unknown)
        return token

    def _finish_token(
        self, offset: int, token_type: TokenType, error: str | None = None
    ) -> TokenType:
        self._token_type = token_type
        self._token_offset = offset
        self._token_error = error
        return token_type

    def _next_element_name(self) -> str:
        return self._stream.advance_if_match(_ELEMENT_NAME).lower()

    def _next_attribute_name(self) -> str:
        return self._stream.advance_if_match(_ATTRIBUTE_NAME).lower()

    def _internal_scan(self) -> TokenType:
        stream = self._stream
        offset = stream.pos()
        if stream.eos():
            return self._finish_token(offset, TokenType.EOS)

        state = self._state
        error: str | None = None

        if state == ScannerState.WithinComment:
            if stream.advance_if_chars("-->"):
                self._state = ScannerState.WithinContent
                return self._finish_token(offset, TokenType.EndCommentTag)
            stream.advance_until_chars("-->")
            return self._finish_token(offset, TokenType.Comment)

        if state == ScannerState.WithinDoctype:
            if stream.advance_if_char(">"):
                self._state = ScannerState.WithinContent
                return self._finish_token(offset, TokenType.EndDoctypeTag)
            stream.advance_until_char(">")
            return self._finish_token(offset, TokenType.Doctype)

        if state == ScannerState.WithinContent:
            if stream.advance_if_char("<"):
                if not stream.eos() and stream.peek_char() == "!":
                    if stream.advance_if_chars("!--"):
                        self._state = ScannerState.WithinComment
                        return self._finish_token(offset, TokenType.StartCommentTag)
                    if stream.advance_if_match(_DOCTYPE):
                        self._state = ScannerState.WithinDoctype
                        return self._finish_token(offset, TokenType.StartDoctypeTag)
                if stream.advance_if_char("/"):
                    self._state = ScannerState.AfterOpeningEndTag
                    return self._finish_token(offset, TokenType.EndTagOpen)
                self._state = ScannerState.AfterOpeningStartTag
                return self._finish_token(offset, TokenType.StartTagOpen)
            stream.advance_until_char("<")
            return self._finish_token(offset, TokenType.Content)

        if state == ScannerState.AfterOpeningEndTag:
            if self._next_element_name():
                self._state = ScannerState.WithinEndTag
                return self._finish_token(offset, TokenType.EndTag)
            if stream.skip_whitespace():
                return self._finish_token(
                    offset, TokenType.Whitespace, "Tag name must directly follow the open bracket."
                )
            self._state = ScannerState.WithinEndTag
            stream.advance_until_char(">")
            if offset < stream.pos():
                return self._finish_token(offset, TokenType.Unknown, "End tag name expected.")
            return self._internal_scan()

        if state == ScannerState.WithinEndTag:
            if stream.skip_whitespace():
                return self._finish_token(offset, TokenType.Whitespace)
            if stream.advance_if_char(">"):
                self._state = ScannerState.WithinContent
                return self._finish_token(offset, TokenType.EndTagClose)
            if self._emit_pseudo_close_tags and stream.peek_char() == "<":
                self._state = ScannerState.WithinContent
                return self._finish_token(offset, TokenType.EndTagClose, "Closing bracket missing.")
            error = "Closing bracket expected."

        elif state == ScannerState.AfterOpeningStartTag:
            self._last_tag = self._next_element_name()
            self._last_attribute_name = None
            if self._last_tag:
                self._has_space_after_tag = False
                self._state = ScannerState.WithinTag
                return self._finish_token(offset, TokenType.StartTag)
            if stream.skip_whitespace():
                return self._finish_token(
                    offset, TokenType.Whitespace, "Tag name must directly follow the open bracket."
                )
            self._state = ScannerState.WithinTag
            stream.advance_until_char(">")
            if offset < stream.pos():
                return self._finish_token(offset, TokenType.Unknown, "Start tag name expected.")
            return self._internal_scan()

        elif state == ScannerState.WithinTag:
            if stream.skip_whitespace():
                self._has_space_after_tag = True
                return self._finish_token(offset, TokenType.Whitespace)
            if self._has_space_after_tag:
                self._last_attribute_name = self._next_attribute_name()
                if self._last_attribute_name:
                    self._state = ScannerState.AfterAttributeName
                    self._has_space_after_tag = False
                    return self._finish_token(offset, TokenType.AttributeName)
            if stream.advance_if_chars("/>"):
                self._state = ScannerState.WithinContent
                return self._finish_token(offset, TokenType.StartTagSelfClose)
            if stream.advance_if_char(">"):
                if self._last_tag == "script":
                    self._state = ScannerState.WithinScriptContent
                elif self._last_tag == "style":
                    self._state = ScannerState.WithinStyleContent
                else:
                    self._state = ScannerState.WithinContent
                return self._finish_token(offset, TokenType.StartTagClose)
            if self._emit_pseudo_close_tags and stream.peek_char() == "<":
                self._state = ScannerState.WithinContent
                return self._finish_token(offset, TokenType.StartTagClose, "Closing bracket missing.")
            stream.advance(1)
            return self._finish_token(offset, TokenType.Unknown, "Unexpected character in tag.")

        elif state == ScannerState.AfterAttributeName:
            if stream.skip_whitespace():
                self._has_space_after_tag = True
                return self._finish_token(offset, TokenType.Whitespace)
            if stream.advance_if_char("="):
                self._state = ScannerState.BeforeAttributeValue
                return self._finish_token(offset, TokenType.DelimiterAssign)
            self._state = ScannerState.WithinTag
            return self._internal_scan()

        elif state == ScannerState.BeforeAttributeValue:
            if stream.skip_whitespace():
                return self._finish_token(offset, TokenType.Whitespace)
            if stream.advance_if_match(_UNQUOTED_VALUE):
                self._state = ScannerState.WithinTag
                self._has_space_after_tag = False
                return self._finish_token(offset, TokenType.AttributeValue)
            quote = stream.peek_char()
            if quote in ("'", '"'):
                stream.advance(1)
                if stream.advance_until_char(quote):
                    stream.advance(1)
                self._state = ScannerState.WithinTag
                self._has_space_after_tag = False
                return self._finish_token(offset, TokenType.AttributeValue)
            self._state = ScannerState.WithinTag
            self._has_space_after_tag = False
            return self._internal_scan()

        elif state == ScannerState.WithinScriptContent:
            # A script ends at the first </script> that is not inside <!-- <script> -->.
            script_state = 1
            while not stream.eos():
                match = stream.advance_past_search(_SCRIPT_BOUNDARY)
                if not match:
                    stream.go_to_end()
                    return self._finish_token(offset, TokenType.Script)
                if match == "<!--":
                    if script_state == 1:
                        script_state = 2
                elif match == "-->":
                    script_state = 1
                elif match[1] != "/":
                    if script_state == 2:
                        script_state = 3
                else:
                    if script_state == 3:
                        script_state = 2
                    else:
                        stream.go_back(len(match))
                        break
            self._state = ScannerState.WithinContent
            if offset < stream.pos():
                return self._finish_token(offset, TokenType.Script)
            return self._internal_scan()

        elif state == ScannerState.WithinStyleContent:
            stream.advance_until_search(_STYLE_END)
            self._state = ScannerState.WithinContent
            if offset < stream.pos():
                return self._finish_token(offset, TokenType.Styles)
            return self._internal_scan()

        stream.advance(1)
        return self._finish_token(offset, TokenType.Unknown, error)


def create_scanner(
    text: str,
    initial_offset: int = 0,
    initial_state: ScannerState = ScannerState.WithinContent,
    emit_pseudo_close_tags: bool = False,
) -> Scanner:
    """Create a fresh scanner positioned at initial_offset."""
    return Scanner(text, initial_offset, initial_state, emit_pseudo_close_tags)
