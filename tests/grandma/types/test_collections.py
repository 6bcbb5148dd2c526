"""Tests for the ScaleVec, ScaleTuple and Struct types."""

import io

import pytest

from grandma.types import (
    Bytes32,
    Compact,
    DecodeError,
    ScaleTuple,
    ScaleTypeError,
    ScaleValueError,
    ScaleVec,
    Struct,
    UnexpectedEndError,
    Uint8,
    Uint16,
    Uint32,
)


class Uint16Vec(ScaleVec[Uint16]):
    """A vector of Uint16 values."""

    ELEMENT_TYPE = Uint16


class Bytes32Vec(ScaleVec[Bytes32]):
    """A vector of 32-byte arrays."""

    ELEMENT_TYPE = Bytes32


class CompactVec(ScaleVec[Compact]):
    """A vector of variable-size elements."""

    ELEMENT_TYPE = Compact


class Pair(ScaleTuple):
    """A (u8, u16) tuple."""

    ELEMENT_TYPES = (Uint8, Uint16)


class Inner(Struct):
    """A fixed-size struct."""

    a: Uint8
    b: Uint32


class Outer(Struct):
    """A variable-size struct nesting a struct and a vector."""

    inner: Inner
    values: Uint16Vec


class TestScaleVec:
    """Compact-length-prefixed sequences."""

    def test_encoding(self) -> None:
        """The element count comes first, then each element."""
        vec = Uint16Vec(data=[1, 2, 3])
        assert vec.encode_bytes().hex() == "0c" + "0100" + "0200" + "0300"

    def test_empty(self) -> None:
        assert Uint16Vec(data=[]).encode_bytes() == b"\x00"
        assert len(Uint16Vec.decode_bytes(b"\x00")) == 0

    def test_decode(self) -> None:
        vec = Uint16Vec.decode_bytes(bytes.fromhex("08" + "0a00" + "0b00"))
        assert list(vec) == [10, 11]
        assert vec[1] == Uint16(11)
        assert isinstance(vec[0], Uint16)

    def test_elements_are_coerced(self) -> None:
        """Plain values are converted to the element type."""
        vec = Uint16Vec(data=(5, 6))
        assert all(isinstance(element, Uint16) for element in vec)

    def test_declared_length_beyond_buffer(self) -> None:
        """A count needing more bytes than remain fails before reading elements."""
        with pytest.raises(DecodeError, match="declared 3 elements need 6 bytes, only 4 left"):
            Uint16Vec.decode_bytes(bytes.fromhex("0c" + "0100" + "0200"))

    def test_huge_declared_length(self) -> None:
        """An absurd count is rejected up front, not allocated."""
        data = bytes.fromhex("03000000ff") + b"\x00" * 64
        with pytest.raises(DecodeError):
            Bytes32Vec.decode_bytes(data)

    def test_variable_size_elements_need_a_byte_each(self) -> None:
        """Variable-size elements are checked against the remaining byte count."""
        with pytest.raises(DecodeError):
            CompactVec.decode_bytes(bytes.fromhex("0c0404"))

        vec = CompactVec.decode_bytes(bytes.fromhex("0c" + "04" + "0101" + "08"))
        assert list(vec) == [1, 64, 2]

    def test_truncated_element(self) -> None:
        """A variable-size element running past the end is an unexpected end."""
        with pytest.raises(UnexpectedEndError):
            CompactVec.decode_bytes(bytes.fromhex("0401"))

    def test_variable_size(self) -> None:
        assert not Uint16Vec.is_fixed_size()
        with pytest.raises(ScaleTypeError):
            Uint16Vec.get_byte_length()

    def test_missing_element_type(self) -> None:
        class Untyped(ScaleVec[Uint8]):
            pass

        with pytest.raises(ScaleTypeError):
            Untyped(data=[1])

    def test_indexing_and_len(self) -> None:
        vec = Uint16Vec(data=[4, 5, 6])
        assert len(vec) == 3
        assert vec[1] == 5
        assert list(vec[1:]) == [5, 6]
        assert repr(vec) == "Uint16Vec(data=[Uint16(4), Uint16(5), Uint16(6)])"


class TestScaleTuple:
    """Positional, unprefixed tuples."""

    def test_decode(self) -> None:
        pair = Pair.decode_bytes(bytes.fromhex("01" + "0200"))
        first, second = pair
        assert (first, second) == (1, 2)
        assert isinstance(second, Uint16)

    def test_encoding_has_no_prefix(self) -> None:
        assert Pair(data=(1, 2)).encode_bytes().hex() == "010200"

    def test_fixed_size(self) -> None:
        assert Pair.is_fixed_size()
        assert Pair.get_byte_length() == 3

    def test_positional_access(self) -> None:
        pair = Pair(data=(1, 2))
        assert len(pair) == 2
        assert pair[0] == 1
        assert isinstance(pair[1], Uint16)
        assert repr(pair) == "Pair(data=[Uint8(1), Uint16(2)])"

    def test_wrong_arity(self) -> None:
        with pytest.raises(ScaleValueError):
            Pair(data=(1,))

    def test_truncated(self) -> None:
        with pytest.raises(UnexpectedEndError):
            Pair.decode_bytes(b"\x01\x02")


class TestStruct:
    """Structs decode their fields in declaration order."""

    def test_field_order(self) -> None:
        inner = Inner.decode_bytes(bytes.fromhex("07" + "2a000000"))
        assert inner.a == 7
        assert inner.b == 42

    def test_fixed_size(self) -> None:
        assert Inner.is_fixed_size()
        assert Inner.get_byte_length() == 5
        assert not Outer.is_fixed_size()

    def test_nested(self) -> None:
        outer = Outer(inner=Inner(a=Uint8(1), b=Uint32(2)), values=Uint16Vec(data=[3]))
        encoded = outer.encode_bytes()
        assert encoded.hex() == "01" + "02000000" + "04" + "0300"
        assert Outer.decode_bytes(encoded) == outer

    def test_truncated_field_aborts(self) -> None:
        """A struct missing its last bytes is not partially returned."""
        with pytest.raises(UnexpectedEndError) as exc_info:
            Inner.decode_bytes(bytes.fromhex("07" + "2a00"))
        assert exc_info.value.offset == 1


class TestTrailingBytes:
    """Lenient and strict top-level decoding."""

    def test_decode_bytes_ignores_trailing(self) -> None:
        assert Inner.decode_bytes(bytes.fromhex("07" + "2a000000" + "ffff")).b == 42

    def test_decode_all_bytes_rejects_trailing(self) -> None:
        with pytest.raises(DecodeError, match="2 trailing bytes"):
            Inner.decode_all_bytes(bytes.fromhex("07" + "2a000000" + "ffff"))

    def test_decode_prefix_reports_consumed(self) -> None:
        value, consumed = Inner.decode_prefix(bytes.fromhex("07" + "2a000000" + "ff"))
        assert value.a == 7
        assert consumed == 5

    def test_stream_cursor(self) -> None:
        stream = io.BytesIO(bytes.fromhex("04" + "0100" + "ee"))
        Uint16Vec.deserialize(stream)
        assert stream.read() == b"\xee"
