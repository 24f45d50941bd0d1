"""
HTML template parser.

Builds a lightweight element tree from the scanner tokens. Nodes keep a back
reference to their parent for upward traversal; the tree is owned by the
HTMLDocument through the children lists.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field

from lwcls.parser.html_tags import is_void_element
from lwcls.parser.scanner import TokenType, create_scanner


@dataclass(eq=False)
class Node:
    """A parsed element. The root node has no tag and no parent."""

    start: int
    end: int
    children: list[Node] = field(default_factory=list)
    parent: Node | None = field(default=None, repr=False)
    tag: str | None = None
    closed: bool = False
    start_tag_end: int | None = None
    end_tag_start: int | None = None
    attributes: dict[str, str | None] | None = None

    @property
    def first_child(self) -> Node | None:
        return self.children[0] if self.children else None

    @property
    def last_child(self) -> Node | None:
        return self.children[-1] if self.children else None

    def is_same_tag(self, tag_in_lowercase: str | None) -> bool:
        return (
            bool(self.tag)
            and bool(tag_in_lowercase)
            and len(self.tag) == len(tag_in_lowercase)
            and self.tag.lower() == tag_in_lowercase
        )

    def find_node_before(self, offset: int) -> Node:
        """Find the innermost node that starts before offset."""
        index = bisect_left([c.start for c in self.children], offset) - 1
        if index >= 0:
            child = self.children[index]
            if offset > child.start:
                if offset < child.end:
                    return child.find_node_before(offset)
                last_child = child.last_child
                if last_child and last_child.end == child.end:
                    return child.find_node_before(offset)
                return child
        return self

    def find_node_at(self, offset: int) -> Node:
        """Find the innermost node whose span contains offset."""
        index = bisect_left([c.start for c in self.children], offset) - 1
        if index >= 0:
            child = self.children[index]
            if child.start < offset <= child.end:
                return child.find_node_at(offset)
        return self


@dataclass
class HTMLDocument:
    roots: list[Node]
    root: Node = field(repr=False)

    def find_node_before(self, offset: int) -> Node:
        return self.root.find_node_before(offset)

    def find_node_at(self, offset: int) -> Node:
        return self.root.find_node_at(offset)


def parse(text: str) -> HTMLDocument:
    """Parse a template into an HTMLDocument."""
    scanner = create_scanner(text, emit_pseudo_close_tags=True)

    root = Node(0, len(text))
    curr = root
    end_tag_start = -1
    end_tag_name: str | None = None
    pending_attribute: str | None = None

    token = scanner.scan()
    while token != TokenType.EOS:
        if token == TokenType.StartTagOpen:
            child = Node(scanner.get_token_offset(), len(text), parent=curr)
            curr.children.append(child)
            curr = child
        elif token == TokenType.StartTag:
            curr.tag = scanner.get_token_text()
        elif token == TokenType.StartTagClose:
            if curr.parent:
                curr.end = scanner.get_token_end()
                if scanner.get_token_length():
                    curr.start_tag_end = scanner.get_token_end()
                    if is_void_element(curr.tag):
                        curr.closed = True
                        curr = curr.parent
                else:
                    # pseudo close emitted for an incomplete start tag
                    curr = curr.parent
        elif token == TokenType.StartTagSelfClose:
            if curr.parent:
                curr.closed = True
                curr.end = scanner.get_token_end()
                curr.start_tag_end = scanner.get_token_end()
                curr = curr.parent
        elif token == TokenType.EndTagOpen:
            end_tag_start = scanner.get_token_offset()
            end_tag_name = None
        elif token == TokenType.EndTag:
            end_tag_name = scanner.get_token_text().lower()
        elif token == TokenType.EndTagClose:
            node = curr
            while not node.is_same_tag(end_tag_name) and node.parent:
                node = node.parent
            if node.parent:
                while curr is not node:
                    curr.end = end_tag_start
                    curr.closed = False
                    curr = curr.parent
                curr.closed = True
                curr.end_tag_start = end_tag_start
                curr.end = scanner.get_token_end()
                curr = curr.parent
        elif token == TokenType.AttributeName:
            pending_attribute = scanner.get_token_text()
            if curr.attributes is None:
                curr.attributes = {}
            curr.attributes[pending_attribute] = None
        elif token == TokenType.AttributeValue:
            value = scanner.get_token_text()
            if curr.attributes is not None and pending_attribute:
                curr.attributes[pending_attribute] = value
                pending_attribute = None
        token = scanner.scan()

    while curr.parent:
        curr.end = len(text)
        curr.closed = False
        curr = curr.parent

    return HTMLDocument(roots=root.children, root=root)
