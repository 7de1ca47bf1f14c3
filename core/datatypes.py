"""
S7 primitive datatype codecs.

Maps each primitive type to its byte width, transport word length and
the functions converting between raw controller bytes and Python values.
All multi-byte types use big-endian byte order, as the controller stores
them.

    Type    Bytes  Word length  Python value
    BOOL    1      BIT          bool
    BYTE    1      BYTE         int (0..255)
    CHAR    1      BYTE         str (1 ASCII char)
    WORD    2      WORD         int (0..65535)
    INT     2      WORD         int (-32768..32767)
    DWORD   4      DWORD        int (0..2**32-1)
    DINT    4      DWORD        int (-2**31..2**31-1)
    REAL    4      DWORD        float (IEEE-754 single)

BOOL values are encoded as a full byte (0x00 or 0x01). Writing a BOOL
therefore does not preserve the other bits of the addressed byte unless the
transport performs a bit-granular write.
"""

from dataclasses import dataclass
import struct
from typing import Callable, Dict, Union

from s7link.core.config import S7Type, WordLen
from s7link.core.exceptions import (
    S7InvalidDescriptorError,
    S7TransportError,
    S7UnsupportedTypeError,
)

Value = Union[bool, int, float, str]


@dataclass(frozen=True)
class PrimitiveCodec:
    """Codec for one primitive type."""

    size: int
    decode: Callable[[bytes, int, int], Value]
    encode: Callable[[Value], bytes]
    word_len: WordLen


def _check_bounds(buffer: bytes, offset: int, size: int) -> None:
    if offset < 0 or offset + size > len(buffer):
        raise S7TransportError(
            f"Buffer too short: need {size} byte(s) at offset {offset}, got {len(buffer)}"
        )


def _struct_codec(fmt: str, word_len: WordLen) -> PrimitiveCodec:
    packer = struct.Struct(fmt)

    def decode(buffer: bytes, offset: int = 0, bit: int = 0) -> Value:
        _check_bounds(buffer, offset, packer.size)
        return packer.unpack_from(buffer, offset)[0]

    def encode(value: Value) -> bytes:
        if isinstance(value, (str, bytes)) or value is None:
            raise S7InvalidDescriptorError(f"Cannot encode {value!r} as {fmt!r}")
        try:
            return packer.pack(value)
        except struct.error as e:
            raise S7InvalidDescriptorError(f"Cannot encode {value!r}: {e}") from e

    return PrimitiveCodec(size=packer.size, decode=decode, encode=encode, word_len=word_len)


def _decode_bool(buffer: bytes, offset: int = 0, bit: int = 0) -> bool:
    _check_bounds(buffer, offset, 1)
    return (buffer[offset] >> (bit or 0)) & 1 == 1


def _encode_bool(value: Value) -> bytes:
    return b"\x01" if value else b"\x00"


def _decode_char(buffer: bytes, offset: int = 0, bit: int = 0) -> str:
    _check_bounds(buffer, offset, 1)
    return bytes(buffer[offset:offset + 1]).decode("ascii", errors="replace")


def _encode_char(value: Value) -> bytes:
    if not isinstance(value, str) or len(value) != 1:
        raise S7InvalidDescriptorError(f"CHAR value must be a single character, got {value!r}")
    try:
        return value.encode("ascii")
    except UnicodeEncodeError as e:
        raise S7InvalidDescriptorError(f"CHAR value must be ASCII, got {value!r}") from e


DATATYPES: Dict[S7Type, PrimitiveCodec] = {
    S7Type.BOOL: PrimitiveCodec(
        size=1, decode=_decode_bool, encode=_encode_bool, word_len=WordLen.BIT
    ),
    S7Type.BYTE: _struct_codec(">B", WordLen.BYTE),
    S7Type.WORD: _struct_codec(">H", WordLen.WORD),
    S7Type.DWORD: _struct_codec(">I", WordLen.DWORD),
    S7Type.CHAR: PrimitiveCodec(
        size=1, decode=_decode_char, encode=_encode_char, word_len=WordLen.BYTE
    ),
    S7Type.INT: _struct_codec(">h", WordLen.WORD),
    S7Type.DINT: _struct_codec(">i", WordLen.DWORD),
    S7Type.REAL: _struct_codec(">f", WordLen.DWORD),
}


def resolve_type(type_: Union[S7Type, str]) -> S7Type:
    """
    Resolve a type tag or type name to an S7Type.

    Raises:
        S7UnsupportedTypeError: If the name is not a registered type.
    """
    if isinstance(type_, S7Type):
        return type_
    if isinstance(type_, str):
        try:
            return S7Type(type_.strip().upper())
        except ValueError:
            pass
    raise S7UnsupportedTypeError(f"Unsupported datatype: {type_!r}", type_name=str(type_))


def get_codec(type_: Union[S7Type, str]) -> PrimitiveCodec:
    """Return the codec registered for a type."""
    return DATATYPES[resolve_type(type_)]


def decode(type_: Union[S7Type, str], buffer: bytes, offset: int = 0, bit: int = 0) -> Value:
    """
    Decode a value from a buffer.

    Args:
        type_: Primitive type
        buffer: Raw bytes from the controller
        offset: Byte offset of the value inside buffer
        bit: Bit position (BOOL only)

    Returns:
        Decoded Python value
    """
    return get_codec(type_).decode(buffer, offset, bit)


def encode(type_: Union[S7Type, str], value: Value) -> bytes:
    """Encode a value into the controller's byte representation."""
    return get_codec(type_).encode(value)
