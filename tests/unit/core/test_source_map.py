"""Unit tests for core/utils/source_map.py"""

import pytest

from mdview.core.nodes import SourceLocation
from mdview.core.utils.source_map import SourceMapper, byte_length, char_index_for_byte_offset


def test_mapper_line_starts():
    """Locations on later lines add the byte length of every preceding line."""
    mapper = SourceMapper("ab\ncd\n\nef")
    assert mapper.line_count == 4
    assert mapper.offset(SourceLocation(1, 1)) == 0
    assert mapper.offset(SourceLocation(2, 2)) == 4
    assert mapper.offset(SourceLocation(4, 1)) == 7


def test_mapper_counts_utf8_bytes():
    """Multi-byte characters on earlier lines shift later offsets by their byte width."""
    mapper = SourceMapper("héllo\nworld")
    # "héllo\n" is 7 bytes
    assert mapper.offset(SourceLocation(2, 1)) == 7


@pytest.mark.parametrize("line", [0, 3, 10])
def test_mapper_out_of_range_line(line):
    """Lines outside the source map to None."""
    assert SourceMapper("one\ntwo").offset(SourceLocation(line, 1)) is None


def test_byte_length():
    """byte_length counts UTF-8 bytes, not characters."""
    assert byte_length("abc") == 3
    assert byte_length("é") == 2
    assert byte_length("日本") == 6


def test_char_index_for_byte_offset():
    """Byte offsets on character boundaries convert to str indices."""
    text = "aé日b"
    assert char_index_for_byte_offset(text, 0) == 0
    assert char_index_for_byte_offset(text, 1) == 1
    assert char_index_for_byte_offset(text, 3) == 2
    assert char_index_for_byte_offset(text, 6) == 3
    assert char_index_for_byte_offset(text, 7) == 4


@pytest.mark.parametrize("offset", [2, 4, 5])
def test_char_index_rejects_mid_character(offset):
    """An offset inside a multi-byte sequence is an error, never clamped."""
    with pytest.raises(ValueError, match="boundary"):
        char_index_for_byte_offset("aé日b", offset)


@pytest.mark.parametrize("offset", [-1, 8])
def test_char_index_rejects_out_of_range(offset):
    """Offsets before the start or past the end raise ValueError."""
    with pytest.raises(ValueError, match="out of range"):
        char_index_for_byte_offset("aé日b", offset)
