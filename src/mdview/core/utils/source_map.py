"""Byte offset bookkeeping between parser locations, UTF-8 offsets and str indices

All offsets in mdview are UTF-8 byte offsets into the original source text.
Parser locations use 1-based lines and 1-based UTF-8 byte columns.
"""

from mdview.core.nodes import SourceLocation


class SourceMapper:
    """Maps (line, column) parser locations to absolute byte offsets in one source string."""

    def __init__(self, source: str):
        offsets = [0]
        for i, byte in enumerate(source.encode('utf-8')):
            if byte == 0x0A:
                offsets.append(i + 1)
        self._line_starts = offsets

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def offset(self, location: SourceLocation) -> int | None:
        """Return the byte offset for location, or None if its line is out of range."""
        if location.line < 1 or location.line > len(self._line_starts):
            return None
        return self._line_starts[location.line - 1] + max(0, location.column - 1)


def byte_length(text: str) -> int:
    return len(text.encode('utf-8'))


def char_index_for_byte_offset(text: str, offset: int) -> int:
    """Convert a UTF-8 byte offset into a str index.

    Raises ValueError when the offset is negative, beyond the end of text, or
    falls inside a multi-byte sequence. Offsets are never clamped.
    """
    data = text.encode('utf-8')
    if offset < 0 or offset > len(data):
        raise ValueError(f"Byte offset {offset} out of range (0..{len(data)})")
    if offset < len(data) and (data[offset] & 0xC0) == 0x80:
        raise ValueError(f"Byte offset {offset} is not on a UTF-8 character boundary")
    return len(data[:offset].decode('utf-8'))

