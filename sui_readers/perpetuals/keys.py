from __future__ import annotations

from sui_readers.gql.bcs import BcsWriter
from sui_readers.gql.fragments import DynamicFieldName, normalize_address

from .constants import ASKS_MAP_KEY, BIDS_MAP_KEY, KEYS_MODULE, ORDERBOOK_KEY


def _empty_struct_bcs() -> bytes:
    # Move gives field-less structs a single `dummy_field: bool`.
    return BcsWriter().write_bool(False).to_bytes()


def field_name(package: str, struct: str) -> DynamicFieldName:
    """Dynamic field name for a field-less key struct `<package>::keys::<struct>`."""
    return DynamicFieldName(
        type_repr=f"{normalize_address(package)}::{KEYS_MODULE}::{struct}",
        bcs=_empty_struct_bcs(),
    )


def orderbook(package: str) -> DynamicFieldName:
    return field_name(package, ORDERBOOK_KEY)


def asks_map(package: str) -> DynamicFieldName:
    return field_name(package, ASKS_MAP_KEY)


def bids_map(package: str) -> DynamicFieldName:
    return field_name(package, BIDS_MAP_KEY)


def side_map(package: str, *, asks: bool) -> DynamicFieldName:
    return asks_map(package) if asks else bids_map(package)
