"""
Component metadata compiler.

Extracts the metadata the completion engine needs from an LWC JavaScript
module: the class declaration location, its JSDoc and the class members
(decorated or not). This is a lexical extraction, not a full JavaScript
parse: comments and string literals are masked, the class body is flattened
to its top-level members, and each member line is matched with a regex.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from lsprotocol.types import Position, Range

logger = logging.getLogger(__name__)

_CLASS_DECLARATION = re.compile(
    r"export\s+default\s+class\s+(?P<name>[A-Za-z_$][\w$]*)?\s*extends\s+(?P<base>[\w$.]+(?:\([^)]*\))?)"
)

_MEMBER = re.compile(
    r"""
    ^(?P<decorator>@(?P<decorator_name>[A-Za-z_$][\w$]*)(?:\s*\([^)]*\))?\s*)?
    (?:(?:static|async)\s+)*
    (?:(?P<accessor>get|set)\s+)?
    (?P<name>\#?[A-Za-z_$][\w$]*)\s*
    (?P<terminator>\(|=|;|$)
    """,
    re.VERBOSE,
)

_LONE_DECORATOR = re.compile(r"^@(?P<decorator_name>[A-Za-z_$][\w$]*)(?:\s*\([^)]*\))?\s*$")

_JSDOC_BEFORE = re.compile(r"/\*\*(?P<body>(?:(?!\*/).)*)\*/\s*(?:@[\w$]+(?:\([^)]*\))?\s*)*$", re.DOTALL)

_NOT_MEMBERS = {"constructor", "static", "async", "get", "set", "return", "if", "for", "while", "switch"}


@dataclass
class SourceLocation:
    """Zero-based line/column span in a source file."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass
class ClassMember:
    name: str
    type: str  # "property" or "method"
    decorator: str | None = None
    doc: str | None = None
    loc: SourceLocation | None = None

    @property
    def is_public(self) -> bool:
        return self.decorator == "api"


@dataclass
class ComponentMetadata:
    doc: str | None = None
    declaration_loc: SourceLocation | None = None
    class_members: list[ClassMember] = field(default_factory=list)


@dataclass
class CompileResult:
    metadata: ComponentMetadata | None
    diagnostics: list[str] = field(default_factory=list)


class MetadataCompiler(ABC):
    """Turns a component source file into structured metadata."""

    @abstractmethod
    async def compile(self, file_path: Path) -> CompileResult:
        pass


class JavascriptMetadataCompiler(MetadataCompiler):
    """Lexical metadata extraction for LWC JavaScript modules."""

    async def compile(self, file_path: Path) -> CompileResult:
        try:
            source = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Cannot read component module %s: %s", file_path, e)
            return CompileResult(metadata=None, diagnostics=[f"Unable to read {file_path}: {e}"])

        return compile_source(source)


def compile_source(source: str) -> CompileResult:
    """Extract component metadata from JavaScript source text."""
    masked, error = _mask_source(source)
    if error:
        return CompileResult(metadata=None, diagnostics=[error])

    metadata = ComponentMetadata()

    declaration = _CLASS_DECLARATION.search(masked)
    if not declaration:
        # A module that doesn't extend LightningElement yet still yields a tag.
        return CompileResult(metadata=metadata, diagnostics=[])

    metadata.declaration_loc = _location(source, declaration.start(), declaration.end())
    metadata.doc = _jsdoc_before(source, declaration.start())

    body_start = masked.find("{", declaration.end())
    if body_start < 0:
        return CompileResult(metadata=metadata, diagnostics=["Class body expected."])

    body_end = _matching_brace(masked, body_start)
    flat_body = _flatten_members(masked, body_start + 1, body_end)
    metadata.class_members = _extract_members(source, flat_body, body_start + 1)

    return CompileResult(metadata=metadata, diagnostics=[])


def _mask_source(source: str) -> tuple[str, str | None]:
    """
    Blank out comments and string literals, keeping offsets and newlines.

    Returns the masked text and an error for unbalanced braces.
    """
    chars = list(source)
    length = len(source)
    depth = 0
    i = 0

    def blank(start: int, end: int) -> None:
        for j in range(start, min(end, length)):
            if chars[j] != "\n":
                chars[j] = " "

    while i < length:
        ch = source[i]
        if source.startswith("//", i):
            end = source.find("\n", i)
            end = length if end < 0 else end
            blank(i, end)
            i = end
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end < 0:
                return "".join(chars), "Unterminated comment."
            blank(i, end + 2)
            i = end + 2
        elif ch in "'\"`":
            j = i + 1
            while j < length and source[j] != ch:
                if source[j] == "\\":
                    j += 1
                elif source[j] == "\n" and ch != "`":
                    break
                j += 1
            if j >= length:
                return "".join(chars), "Unterminated string literal."
            blank(i + 1, j)
            i = j + 1
        else:
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth < 0:
                    return "".join(chars), f"Unexpected token '}}' at offset {i}."
            i += 1

    if depth != 0:
        return "".join(chars), "Unexpected end of input: unbalanced braces."

    return "".join(chars), None


def _matching_brace(masked: str, open_index: int) -> int:
    depth = 0
    for i in range(open_index, len(masked)):
        if masked[i] == "{":
            depth += 1
        elif masked[i] == "}":
            depth -= 1
            if depth == 0:
                return i
    return len(masked)


def _flatten_members(masked: str, start: int, end: int) -> str:
    """
    Keep only the top level of the class body.

    Anything nested in braces, parentheses or brackets is blanked; the
    outermost delimiters stay so member signatures remain recognizable.
    """
    out = []
    depth = 0
    for ch in masked[start:end]:
        if ch in "{([":
            out.append(ch if depth == 0 else " ")
            depth += 1
        elif ch in "})]":
            depth = max(depth - 1, 0)
            out.append(ch if depth == 0 else " ")
        elif ch == "\n":
            out.append(ch)
        else:
            out.append(ch if depth == 0 else " ")
    return "".join(out)


def _extract_members(source: str, flat_body: str, body_offset: int) -> list[ClassMember]:
    members: dict[str, ClassMember] = {}
    pending_decorator: str | None = None

    line_offset = body_offset
    for line in flat_body.split("\n"):
        stripped = line.strip()
        line_start = line_offset + len(line) - len(line.lstrip())
        line_offset += len(line) + 1
        if not stripped:
            continue

        lone = _LONE_DECORATOR.match(stripped)
        if lone:
            pending_decorator = lone.group("decorator_name")
            continue

        match = _MEMBER.match(stripped)
        if not match or match.group("name") in _NOT_MEMBERS:
            pending_decorator = None
            continue

        name = match.group("name")
        decorator = match.group("decorator_name") or pending_decorator
        pending_decorator = None

        if match.group("terminator") == "(" and not match.group("accessor"):
            member_type = "method"
        else:
            member_type = "property"

        name_start = line_start + match.start("name")
        member = ClassMember(
            name=name,
            type=member_type,
            decorator=decorator,
            doc=_jsdoc_before(source, line_start),
            loc=_location(source, name_start, name_start + len(name)),
        )

        existing = members.get(name)
        if existing and existing.decorator and not member.decorator:
            # setter/getter pairs: keep the decorated half
            continue
        members[name] = member

    return list(members.values())


def _jsdoc_before(source: str, offset: int) -> str | None:
    match = _JSDOC_BEFORE.search(source[:offset])
    if not match:
        return None

    lines = []
    for line in match.group("body").splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        if line:
            lines.append(line)

    return "\n".join(lines) or None


def _location(source: str, start: int, end: int) -> SourceLocation:
    start_line = source.count("\n", 0, start)
    end_line = source.count("\n", 0, end)
    start_column = start - (source.rfind("\n", 0, start) + 1)
    end_column = end - (source.rfind("\n", 0, end) + 1)
    return SourceLocation(start_line, start_column, end_line, end_column)


# ===== Metadata accessors =====


def to_lsp_range(loc: SourceLocation | None) -> Range:
    """Missing locations, e.g. a class that does not extend LightningElement yet, map to 0:0."""
    if loc is None:
        return Range(start=Position(line=0, character=0), end=Position(line=0, character=0))
    return Range(
        start=Position(line=loc.start_line, character=loc.start_column),
        end=Position(line=loc.end_line, character=loc.end_column),
    )


def get_public_properties(metadata: ComponentMetadata) -> list[ClassMember]:
    """Properties exposed to the template as attributes (@api)."""
    return [m for m in metadata.class_members if m.is_public and m.type == "property"]


def get_properties(metadata: ComponentMetadata) -> list[ClassMember]:
    return [m for m in metadata.class_members if m.type == "property"]


def get_methods(metadata: ComponentMetadata) -> list[ClassMember]:
    return [m for m in metadata.class_members if m.type == "method"]
