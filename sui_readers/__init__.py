"""
Public convenience exports for sui_readers.

Generic GraphQL paging lives in `sui_readers.gql`.
Order book readers live in `sui_readers.perpetuals`.

  from sui_readers import Anchor, RequestsClient, traverse_book
"""
from __future__ import annotations

from sui_readers.gql import (  # noqa: F401
    Anchor,
    ClientError,
    GqlConfig,
    GqlError,
    MissingDataError,
    RequestsClient,
    ServerError,
    pin_to_latest,
)
from sui_readers.perpetuals import Order, traverse, traverse_book  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "Anchor",
    "ClientError",
    "GqlConfig",
    "GqlError",
    "MissingDataError",
    "Order",
    "RequestsClient",
    "ServerError",
    "pin_to_latest",
    "traverse",
    "traverse_book",
]
