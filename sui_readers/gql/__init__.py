from __future__ import annotations

# Generic GraphQL plumbing shared by every paginated read:
# transport, error taxonomy, paged driver, streaming traversal, anchors and merge.

from .anchor import Anchor, resolve
from .client import GraphQlClient, GraphQlResponse, RequestsClient
from .config import GqlConfig
from .errors import ClientError, GqlError, MissingDataError, PaginationInvariantError, ServerError
from .fragments import DynamicFieldName, MoveValueRaw, PageInfo, normalize_address
from .merge import merge
from .paged import Pages, fetch_page, next_variables, query_paged, successor
from .queries import latest_object_version, max_page_size, object_package, pin_to_latest, resolve_page_size
from .streaming import CursorTraversal, stream_units

__all__ = [
    "Anchor",
    "ClientError",
    "CursorTraversal",
    "DynamicFieldName",
    "GqlConfig",
    "GqlError",
    "GraphQlClient",
    "GraphQlResponse",
    "MissingDataError",
    "MoveValueRaw",
    "PageInfo",
    "Pages",
    "PaginationInvariantError",
    "RequestsClient",
    "ServerError",
    "fetch_page",
    "latest_object_version",
    "max_page_size",
    "merge",
    "next_variables",
    "normalize_address",
    "object_package",
    "pin_to_latest",
    "query_paged",
    "resolve",
    "resolve_page_size",
    "stream_units",
    "successor",
]
