from __future__ import annotations

import pytest

from sui_readers.gql.bcs import BcsError, BcsReader, BcsWriter


def test_reads_little_endian_integers_and_vectors() -> None:
    raw = (
        BcsWriter()
        .write_u64(7)
        .write_u128(2**100 + 3)
        .write_vec([1, 2, 3], lambda w, n: w.write_u8(n))
        .write_str("héllo")
        .write_bool(True)
        .to_bytes()
    )

    r = BcsReader(raw)
    assert r.read_u64() == 7
    assert r.read_u128() == 2**100 + 3
    assert r.read_vec(lambda r_: r_.read_u8()) == [1, 2, 3]
    assert r.read_str() == "héllo"
    assert r.read_bool() is True
    r.finish()


@pytest.mark.parametrize("value,encoded", [(0, b"\x00"), (127, b"\x7f"), (128, b"\x80\x01"), (300, b"\xac\x02")])
def test_uleb128(value: int, encoded: bytes) -> None:
    assert BcsWriter().write_uleb128(value).to_bytes() == encoded
    assert BcsReader(encoded).read_uleb128() == value


def test_rejects_non_canonical_uleb128() -> None:
    with pytest.raises(BcsError):
        BcsReader(b"\x80\x00").read_uleb128()


def test_truncated_input_and_trailing_bytes_are_errors() -> None:
    with pytest.raises(BcsError):
        BcsReader(b"\x01\x02").read_u64()

    r = BcsReader(b"\x01\x02")
    r.read_u8()
    with pytest.raises(BcsError):
        r.finish()


def test_vector_length_larger_than_payload_is_rejected() -> None:
    with pytest.raises(BcsError):
        BcsReader(b"\xff\xff\x03").read_vec(lambda r: r.read_u8())


def test_invalid_bool_byte() -> None:
    with pytest.raises(BcsError):
        BcsReader(b"\x02").read_bool()
