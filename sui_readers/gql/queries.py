"""Single-shot lookups shared by the paged readers."""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .anchor import Anchor
from .client import GraphQlClient
from .constants import FALLBACK_PAGE_SIZE, MOVE_OBJECT
from .errors import MissingDataError
from .events import debug
from .extract import as_variant, extract, get_nested
from .fragments import normalize_address

MAX_PAGE_SIZE_QUERY = """
query Limits {
  serviceConfig {
    maxPageSize
  }
}
"""

OBJECT_VERSION_QUERY = """
query ObjectVersion($object: SuiAddress!) {
  object(address: $object) {
    version
  }
}
"""

OBJECT_TYPE_QUERY = """
query ObjectType($object: SuiAddress!, $version: UInt53) {
  object(address: $object, version: $version) {
    version
    asMoveObject {
      __typename
      contents {
        type {
          repr
        }
      }
    }
  }
}
"""


def _data(client: GraphQlClient, document: str, variables: Dict[str, Any], *, op: str) -> Dict[str, Any]:
    data = client.query(document, variables, op=op).try_into_data()
    if data is None:
        raise MissingDataError("data")
    return data


def max_page_size(client: GraphQlClient) -> int:
    """Largest `first` the server accepts for connections."""
    data = _data(client, MAX_PAGE_SIZE_QUERY, {}, op="max_page_size")
    limit = get_nested(data, ["serviceConfig", "maxPageSize"])
    if limit is None:
        debug("page_size.fallback", page_size=FALLBACK_PAGE_SIZE)
        return FALLBACK_PAGE_SIZE
    return int(limit)


def resolve_page_size(client: GraphQlClient, page_size: Optional[int] = None) -> int:
    """
    Page size for a traversal.

    Order: the caller's value, the transport's configured `page_size`
    (SUI_GQL_PAGE_SIZE), then the server's own limit.
    """
    if page_size is None:
        config = getattr(client, "config", None)
        page_size = getattr(config, "page_size", None)
    if page_size is not None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        return int(page_size)
    return max_page_size(client)


def latest_object_version(client: GraphQlClient, object_id: str) -> int:
    data = _data(client, OBJECT_VERSION_QUERY, {"object": normalize_address(object_id)}, op="object_version")
    return int(extract(data, "object", "version"))


def pin_to_latest(client: GraphQlClient, object_id: str) -> Anchor:
    """Strong anchor at the object's current version, fetched once up front."""
    return Anchor.pinned(latest_object_version(client, object_id))


def object_type(client: GraphQlClient, object_id: str, anchor: Optional[Anchor] = None) -> Tuple[str, int]:
    """The Move type repr of an object and the version it was read at."""
    variables: Dict[str, Any] = {"object": normalize_address(object_id)}
    if anchor is not None and anchor.strong:
        variables["version"] = anchor.version
    data = _data(client, OBJECT_TYPE_QUERY, variables, op="object_type")
    obj = extract(data, "object")
    type_repr = extract(obj, "asMoveObject", as_variant(MOVE_OBJECT), "contents", "type", "repr", root="data.object")
    version = extract(obj, "version", root="data.object")
    return str(type_repr), int(version)


def object_package(client: GraphQlClient, object_id: str, anchor: Optional[Anchor] = None) -> str:
    """Address of the package that defines the object's type."""
    type_repr, _ = object_type(client, object_id, anchor)
    return normalize_address(type_repr.split("::", 1)[0])
