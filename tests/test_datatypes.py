"""Tests for the primitive datatype codecs."""

import struct

import pytest
from s7link.core.config import S7Type, WordLen
from s7link.core.datatypes import DATATYPES, decode, encode, get_codec
from s7link.core.exceptions import (
    S7InvalidDescriptorError,
    S7TransportError,
    S7UnsupportedTypeError,
)


class TestRegistry:
    """Tests for the codec registry."""

    @pytest.mark.parametrize(
        "type_,size,word_len",
        [
            (S7Type.BOOL, 1, WordLen.BIT),
            (S7Type.BYTE, 1, WordLen.BYTE),
            (S7Type.CHAR, 1, WordLen.BYTE),
            (S7Type.WORD, 2, WordLen.WORD),
            (S7Type.INT, 2, WordLen.WORD),
            (S7Type.DWORD, 4, WordLen.DWORD),
            (S7Type.DINT, 4, WordLen.DWORD),
            (S7Type.REAL, 4, WordLen.DWORD),
        ],
    )
    def test_sizes_and_word_lengths(self, type_, size, word_len):
        """Test fixed width and word length per type."""
        codec = get_codec(type_)
        assert codec.size == size
        assert codec.word_len == word_len

    def test_all_types_registered(self):
        """Test every S7Type has a codec."""
        assert set(DATATYPES) == set(S7Type)

    def test_lookup_by_name(self):
        """Test lookup by case-insensitive type name."""
        assert get_codec("real") is DATATYPES[S7Type.REAL]
        assert get_codec("INT") is DATATYPES[S7Type.INT]

    def test_unknown_type(self):
        """Test unknown type raises UnsupportedType."""
        with pytest.raises(S7UnsupportedTypeError) as exc_info:
            get_codec("LREAL")
        assert exc_info.value.type_name == "LREAL"

    def test_codec_is_immutable(self):
        """Test codecs cannot be modified."""
        with pytest.raises(AttributeError):
            DATATYPES[S7Type.INT].size = 4


class TestBool:
    """Tests for BOOL decoding and encoding."""

    def test_decode_bits(self):
        """Test each bit of a byte is read independently."""
        buffer = bytes([0b10100100])
        values = [decode(S7Type.BOOL, buffer, 0, bit) for bit in range(8)]
        assert values == [False, False, True, False, False, True, False, True]

    def test_decode_with_offset(self):
        """Test BOOL decode at a byte offset."""
        buffer = bytes([0x00, 0x00, 0x08])
        assert decode(S7Type.BOOL, buffer, 2, 3) is True
        assert decode(S7Type.BOOL, buffer, 1, 3) is False

    def test_encode_full_byte(self):
        """Test BOOL always encodes a whole byte."""
        assert encode(S7Type.BOOL, True) == b"\x01"
        assert encode(S7Type.BOOL, False) == b"\x00"

    def test_round_trip_targeted_bit_only(self):
        """Test only bit 0 survives a BOOL round trip."""
        assert decode(S7Type.BOOL, encode(S7Type.BOOL, True)) is True
        assert decode(S7Type.BOOL, encode(S7Type.BOOL, True), 0, 1) is False


class TestNumeric:
    """Tests for big-endian numeric codecs."""

    def test_decode_big_endian(self):
        """Test multi-byte values are decoded big-endian."""
        buffer = bytes([0x12, 0x34, 0x56, 0x78])
        assert decode(S7Type.WORD, buffer) == 0x1234
        assert decode(S7Type.WORD, buffer, 2) == 0x5678
        assert decode(S7Type.DWORD, buffer) == 0x12345678
        assert decode(S7Type.BYTE, buffer, 3) == 0x78

    def test_signed_types(self):
        """Test signed types decode two's complement values."""
        assert decode(S7Type.INT, b"\xff\xfe") == -2
        assert decode(S7Type.DINT, b"\x80\x00\x00\x00") == -2147483648

    def test_encode(self):
        """Test encodings match the controller byte order."""
        assert encode(S7Type.WORD, 0x1234) == b"\x12\x34"
        assert encode(S7Type.INT, -1) == b"\xff\xff"
        assert encode(S7Type.DINT, 1) == b"\x00\x00\x00\x01"
        assert encode(S7Type.REAL, 1.0) == struct.pack(">f", 1.0)

    @pytest.mark.parametrize(
        "type_,value",
        [
            (S7Type.BYTE, 255),
            (S7Type.WORD, 65535),
            (S7Type.DWORD, 4294967295),
            (S7Type.INT, -32768),
            (S7Type.DINT, 2147483647),
            (S7Type.REAL, -12.375),
            (S7Type.CHAR, "A"),
        ],
    )
    def test_round_trip(self, type_, value):
        """Test decode(encode(v)) == v for representable values."""
        assert decode(type_, encode(type_, value)) == value

    @pytest.mark.parametrize(
        "type_,value",
        [
            (S7Type.BYTE, 256),
            (S7Type.WORD, -1),
            (S7Type.INT, 40000),
            (S7Type.DINT, 2**31),
            (S7Type.INT, 1.5),
            (S7Type.REAL, "1.0"),
        ],
    )
    def test_encode_out_of_range(self, type_, value):
        """Test unrepresentable values are rejected before any I/O."""
        with pytest.raises(S7InvalidDescriptorError):
            encode(type_, value)

    def test_decode_short_buffer(self):
        """Test decoding past the end of the buffer fails."""
        with pytest.raises(S7TransportError):
            decode(S7Type.DINT, b"\x00\x01")


class TestChar:
    """Tests for CHAR codec."""

    def test_decode(self):
        """Test CHAR decodes one ASCII byte."""
        assert decode(S7Type.CHAR, b"xyz", 1) == "y"

    def test_encode_rejects_multiple_chars(self):
        """Test CHAR encode requires exactly one character."""
        with pytest.raises(S7InvalidDescriptorError):
            encode(S7Type.CHAR, "ab")

    def test_encode_rejects_non_ascii(self):
        """Test CHAR encode requires ASCII."""
        with pytest.raises(S7InvalidDescriptorError):
            encode(S7Type.CHAR, "é")
