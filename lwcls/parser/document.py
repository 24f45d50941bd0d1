"""Read-only template text with offset <-> position mapping."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field

from lsprotocol.types import Position
from pygls.workspace import PositionCodec


@dataclass
class TemplateDocument:
    """
    Immutable snapshot of a template document.

    Offsets index code points in ``text``. Position characters are in the
    client's units (UTF-16 unless the client negotiated another encoding),
    converted with the pygls position codec of the synced document.
    """

    uri: str
    text: str
    language_id: str = "html"
    version: int | None = None
    position_codec: PositionCodec = field(default_factory=PositionCodec, repr=False)
    _line_offsets: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        offsets = [0]
        for index, ch in enumerate(self.text):
            if ch == "\r":
                if index + 1 < len(self.text) and self.text[index + 1] == "\n":
                    continue
                offsets.append(index + 1)
            elif ch == "\n":
                offsets.append(index + 1)
        self._line_offsets = offsets

    def get_text(self) -> str:
        return self.text

    def offset_at(self, position: Position) -> int:
        if position.line >= len(self._line_offsets):
            return len(self.text)
        if position.line < 0:
            return 0
        line_offset = self._line_offsets[position.line]
        if position.line + 1 < len(self._line_offsets):
            next_line_offset = self._line_offsets[position.line + 1]
        else:
            next_line_offset = len(self.text)

        offset = line_offset
        units = 0
        while offset < next_line_offset and units < position.character:
            units += self.position_codec.client_num_units(self.text[offset])
            offset += 1
        return offset

    def position_at(self, offset: int) -> Position:
        offset = max(min(offset, len(self.text)), 0)
        line = bisect_right(self._line_offsets, offset) - 1
        line_offset = self._line_offsets[line]
        character = self.position_codec.client_num_units(self.text[line_offset:offset])
        return Position(line=line, character=character)
