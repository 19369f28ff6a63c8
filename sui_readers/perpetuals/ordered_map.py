"""
Decoding of the remote ordered map's nodes.

The map's dynamic fields hold either a `Leaf<V>` (sorted key/value pairs) or a
`Branch` (separating keys and child pointers). The response does not say which
one a payload is, so a payload is decoded as a leaf and anything that fails is
taken to be a branch and skipped. A corrupted leaf is therefore dropped
silently rather than reported; keep that in mind when counts look short.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Tuple, TypeVar

from sui_readers.gql.bcs import BcsReader, BcsWriter
from sui_readers.gql.fragments import MoveValueRaw

from .constants import LEAF_STRUCT, ORDERED_MAP_MODULE

V = TypeVar("V")

ValueDecoder = Callable[[BcsReader], V]

_LEAF_TYPE = re.compile(
    r"^0x[0-9a-fA-F]{1,64}::" + ORDERED_MAP_MODULE + "::" + LEAF_STRUCT + r"<.+>$"
)


@dataclass(frozen=True)
class Order:
    """One resting order: the owning account and the remaining size in lots."""

    account_id: int
    size: int

    @staticmethod
    def from_bcs(reader: BcsReader) -> "Order":
        return Order(account_id=reader.read_u64(), size=reader.read_u64())

    def to_bcs(self, writer: BcsWriter) -> None:
        writer.write_u64(self.account_id).write_u64(self.size)


def is_leaf_type(type_repr: str) -> bool:
    return bool(_LEAF_TYPE.match(type_repr or ""))


def _read_leaf(data: bytes, value_decoder: ValueDecoder[V]) -> List[Tuple[int, V]]:
    reader = BcsReader(data)
    pairs = reader.read_vec(lambda r: (r.read_u128(), value_decoder(r)))
    reader.read_u64()  # next leaf pointer, unused here
    reader.finish()
    return pairs


def decode_as_leaf(raw: MoveValueRaw, value_decoder: ValueDecoder[V] = Order.from_bcs) -> List[Tuple[int, V]]:
    """
    Entries of `raw` if it is a leaf, in the leaf's own ascending key order.

    Never raises: a payload that is not a well-formed leaf (branch, wrong type,
    bad base64, truncated or trailing bytes, a value the decoder rejects with
    any exception) yields an empty list.
    """
    if not is_leaf_type(raw.type_repr):
        return []
    try:
        return _read_leaf(raw.bcs, value_decoder)
    except Exception:
        # Bad base64, short or trailing bytes, or whatever `value_decoder` raises.
        return []


def encode_leaf(
    pairs: List[Tuple[int, V]],
    write_value: Callable[[BcsWriter, V], None],
    *,
    next_leaf: int = 0,
) -> bytes:
    """BCS bytes of a `Leaf<V>`; the inverse of the leaf layout read above."""
    writer = BcsWriter()

    def _pair(w: BcsWriter, pair: Tuple[int, V]) -> None:
        w.write_u128(pair[0])
        write_value(w, pair[1])

    writer.write_vec(pairs, _pair)
    writer.write_u64(next_leaf)
    return writer.to_bytes()
