from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from .errors import MissingDataError


@dataclass(frozen=True)
class Variant:
    """Path step that requires the current value to be a given union member."""

    typename: str

    def __str__(self) -> str:
        return f"as_variant({self.typename})"


def as_variant(typename: str) -> Variant:
    return Variant(typename)


_PathKey = Union[str, int, Variant]


def _step(cur: Any, key: Union[str, int]) -> Any:
    if isinstance(cur, dict):
        return cur.get(key)
    if isinstance(cur, list) and isinstance(key, int):
        return cur[key] if 0 <= key < len(cur) else None
    return None


def extract(obj: Any, *path: _PathKey, root: str = "data", page: Optional[int] = None) -> Any:
    """
    Follow a required path through a GraphQL response.

    Every hop must be present; `Variant` steps check `__typename`. On failure the
    raised MissingDataError carries the path walked so far, e.g.
    `data.clearing_house.orderbook_dof.orderbook.as_variant(MoveObject)`.
    """
    trail = [root]
    if obj is None:
        raise MissingDataError(root, page=page)

    cur: Any = obj
    for key in path:
        trail.append(str(key))
        if isinstance(key, Variant):
            if not isinstance(cur, dict) or cur.get("__typename") != key.typename:
                raise MissingDataError(".".join(trail), page=page)
            continue

        cur = _step(cur, key)
        if cur is None:
            raise MissingDataError(".".join(trail), page=page)

    return cur


def get_nested(obj: Any, path: Sequence[Union[str, int]], default: Any = None) -> Any:
    """
    Safely traverse nested dict/list structures for optional values.

    Supports dict keys (str/int) and list indices.
    """
    cur: Any = obj
    for key in path:
        if cur is None:
            return default
        cur = _step(cur, key)

    return cur if cur is not None else default
