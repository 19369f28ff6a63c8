from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .constants import MOVE_VALUE
from .extract import extract

# Selection sets shared by the paged queries.
PAGE_INFO_FIELDS = """
          pageInfo {
            hasNextPage
            endCursor
          }"""

MOVE_VALUE_FIELDS = """
              __typename
              ... on MoveValue {
                type {
                  repr
                }
                bcs
              }"""

_HEX_ADDRESS = re.compile(r"^(0x)?[0-9a-fA-F]{1,64}$")


def normalize_address(addr: str) -> str:
    """Lower-case, `0x`-prefixed, zero-padded to 32 bytes."""
    s = str(addr or "").strip()
    if not _HEX_ADDRESS.match(s):
        raise ValueError(f"not a Sui address: {addr!r}")
    if s[:2].lower() == "0x":
        s = s[2:]
    return "0x" + s.lower().rjust(64, "0")


@dataclass(frozen=True)
class PageInfo:
    has_next_page: bool
    end_cursor: Optional[str] = None

    @staticmethod
    def from_json(obj: Any, *, root: str = "pageInfo", page: Optional[int] = None) -> "PageInfo":
        has_next = extract(obj, "hasNextPage", root=root, page=page)
        cursor = obj.get("endCursor")
        return PageInfo(has_next_page=bool(has_next), end_cursor=str(cursor) if cursor is not None else None)


@dataclass(frozen=True)
class MoveValueRaw:
    """One untyped Move value: its type tag and base64 BCS payload."""

    type_repr: str
    bcs_b64: str

    @property
    def bcs(self) -> bytes:
        return base64.b64decode(self.bcs_b64, validate=True)

    @staticmethod
    def from_value(value: Any) -> Optional["MoveValueRaw"]:
        """Parse a DynamicFieldValue; anything but a MoveValue yields None."""
        if not isinstance(value, dict) or value.get("__typename") != MOVE_VALUE:
            return None
        type_repr = (value.get("type") or {}).get("repr")
        bcs = value.get("bcs")
        if not isinstance(type_repr, str) or not isinstance(bcs, str):
            return None
        return MoveValueRaw(type_repr=type_repr, bcs_b64=bcs)


@dataclass(frozen=True)
class DynamicFieldName:
    """The `(type, bcs)` pair the server expects as a dynamic field name argument."""

    type_repr: str
    bcs: bytes

    def to_json(self) -> Dict[str, str]:
        return {"type": self.type_repr, "bcs": base64.b64encode(self.bcs).decode("ascii")}
