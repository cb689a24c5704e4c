"""
Tests for the byte codec

Varint boundaries, varbytes bounds, and the failure modes of the reader.
"""

import pytest

from otsproto.codec import StreamReader, StreamWriter, encode_varint, decode_varint
from otsproto.errors import (
    DeserializationError,
    TruncatedStream,
    MalformedVarint,
    PayloadTooLarge,
    TrailingGarbage,
)
from otsproto.params import ProtocolParams


class TestVarint:
    """Continuation-bit integer encoding."""

    @pytest.mark.parametrize("value,encoded", [
        (0, b'\x00'),
        (1, b'\x01'),
        (127, b'\x7f'),
        (128, b'\x80\x01'),
        (300, b'\xac\x02'),
        (16383, b'\xff\x7f'),
        (16384, b'\x80\x80\x01'),
    ])
    def test_known_encodings(self, value, encoded):
        assert encode_varint(value) == encoded
        assert decode_varint(encoded) == (value, len(encoded))

    def test_128_sets_continuation_bit(self):
        """128 needs two bytes, the first with the high bit set."""
        encoded = encode_varint(128)
        assert len(encoded) == 2
        assert encoded[0] & 0x80
        assert not encoded[1] & 0x80

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            encode_varint(-1)

    def test_truncated_multibyte(self):
        """A continuation byte at end of buffer is malformed."""
        with pytest.raises(MalformedVarint):
            StreamReader(b'\x80').read_varint()
        with pytest.raises(MalformedVarint):
            StreamReader(b'\xff\xff').read_varint()

    def test_empty_buffer(self):
        with pytest.raises(MalformedVarint):
            StreamReader(b'').read_varint()

    def test_max_uint64(self):
        value = 2**64 - 1
        r = StreamReader(encode_varint(value))
        assert r.read_varint() == value
        assert r.at_end()

    def test_overflow(self):
        """2**64 does not fit the default 64-bit width."""
        with pytest.raises(MalformedVarint):
            StreamReader(encode_varint(2**64)).read_varint()

    def test_narrower_width_from_params(self):
        params = ProtocolParams(varint_max_bits=16)
        assert StreamReader(encode_varint(65535), params).read_varint() == 65535
        with pytest.raises(MalformedVarint):
            StreamReader(encode_varint(65536), params).read_varint()

    def test_failed_read_does_not_move_cursor(self):
        r = StreamReader(b'\x80')
        with pytest.raises(MalformedVarint):
            r.read_varint()
        assert r.position == 0

    @pytest.mark.parametrize("encoded", [
        b'\x81\x00',
        b'\x80\x00',
        b'\xff\x80\x00',
        b'\x80' * 500 + b'\x00',
    ])
    def test_overlong_rejected(self, encoded):
        """A zero final group after continuation bytes is not minimal."""
        with pytest.raises(MalformedVarint):
            StreamReader(encoded).read_varint()

    def test_overlong_length_prefix_rejected(self):
        """An overlong record length would re-encode to different bytes."""
        data = b'\x11' * 8 + b'\x81\x00' + b'X'
        r = StreamReader(data)
        r.read_bytes(8)
        with pytest.raises(MalformedVarint):
            r.read_varbytes(8192)

    def test_decode_at_offset(self):
        assert decode_varint(b'\xff\xac\x02', 1) == (300, 3)


class TestBytes:
    """Fixed-length reads."""

    def test_read_exact(self):
        r = StreamReader(b'abcdef')
        assert r.read_bytes(2) == b'ab'
        assert r.read_bytes(4) == b'cdef'
        assert r.at_end()

    def test_read_zero(self):
        assert StreamReader(b'').read_bytes(0) == b''

    def test_truncated(self):
        r = StreamReader(b'abc')
        with pytest.raises(TruncatedStream) as exc:
            r.read_bytes(4)
        assert exc.value.wanted == 4
        assert exc.value.available == 3
        assert r.position == 0

    def test_uint8(self):
        w = StreamWriter()
        w.write_uint8(0x67)
        r = StreamReader(w.getvalue())
        assert r.read_uint8() == 0x67
        with pytest.raises(TruncatedStream):
            r.read_uint8()

    def test_uint8_range(self):
        with pytest.raises(ValueError):
            StreamWriter().write_uint8(256)

    def test_errors_share_base(self):
        """Every codec failure is a DeserializationError and a ValueError."""
        for cls in (TruncatedStream, MalformedVarint, PayloadTooLarge, TrailingGarbage):
            assert issubclass(cls, DeserializationError)
            assert issubclass(cls, ValueError)


class TestVarbytes:
    """Length-prefixed byte strings."""

    def test_write_layout(self):
        w = StreamWriter()
        w.write_varbytes(b'hello')
        assert w.getvalue() == b'\x05hello'
        assert len(w) == 6

    def test_empty(self):
        w = StreamWriter()
        w.write_varbytes(b'')
        assert w.getvalue() == b'\x00'
        assert StreamReader(w.getvalue()).read_varbytes(0) == b''

    def test_exactly_max_len(self):
        data = b'x' * 8192
        w = StreamWriter()
        w.write_varbytes(data)
        assert StreamReader(w.getvalue()).read_varbytes(8192) == data

    def test_max_len_plus_one(self):
        w = StreamWriter()
        w.write_varbytes(b'x' * 8193)
        with pytest.raises(PayloadTooLarge) as exc:
            StreamReader(w.getvalue()).read_varbytes(8192)
        assert exc.value.length == 8193
        assert exc.value.max_len == 8192

    def test_length_checked_before_body(self):
        """An oversized declared length fails even with no body present."""
        with pytest.raises(PayloadTooLarge):
            StreamReader(encode_varint(100)).read_varbytes(10)

    def test_truncated_body(self):
        with pytest.raises(TruncatedStream):
            StreamReader(b'\x05abc').read_varbytes(100)

    def test_no_write_bound(self):
        """Writers accept anything; bounds are a read-side concern."""
        w = StreamWriter()
        w.write_varbytes(b'\x00' * 20000)
        assert len(w) == 20000 + len(encode_varint(20000))


class TestReaderState:

    def test_remaining_and_position(self):
        r = StreamReader(b'\x01\x02\x03')
        r.read_bytes(1)
        assert r.position == 1
        assert r.remaining == 2
        assert not r.at_end()

    def test_assert_eof(self):
        r = StreamReader(b'\x01\x02')
        r.read_bytes(1)
        with pytest.raises(TrailingGarbage) as exc:
            r.assert_eof()
        assert exc.value.remaining == 1
        r.read_bytes(1)
        r.assert_eof()

    def test_independent_readers(self):
        """Readers over the same buffer keep separate cursors."""
        data = b'\x01\x02'
        a, b = StreamReader(data), StreamReader(data)
        a.read_bytes(2)
        assert b.read_bytes(1) == b'\x01'
