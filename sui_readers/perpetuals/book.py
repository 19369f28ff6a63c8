from __future__ import annotations

from typing import Any, Callable, Dict, Generator, Iterable, List, Optional, Tuple, TypeVar

from sui_readers.gql.anchor import Anchor, resolve
from sui_readers.gql.client import GraphQlClient
from sui_readers.gql.errors import GqlError
from sui_readers.gql.events import info
from sui_readers.gql.merge import merge
from sui_readers.gql.paged import query_paged
from sui_readers.gql.queries import object_package, resolve_page_size
from sui_readers.gql.streaming import stream_units

from .constants import ASKS_STREAM, BIDS_STREAM
from .order_ids import Side, order_side
from .ordered_map import Order, ValueDecoder
from .queries import ClearingHouseOrdersQuery, MapOrdersQuery

Entry = Tuple[int, Any]
T = TypeVar("T")


def _check_anchor(anchor: Anchor) -> None:
    if not isinstance(anchor, Anchor):
        raise TypeError("pass an explicit Anchor (Anchor.pinned(version) or Anchor.current())")


def _require_anchor(anchor: Anchor, *, stream: Optional[str] = None) -> Anchor:
    _check_anchor(anchor)
    return resolve(anchor.version, stream=stream)


def _lookup(fn: Callable[..., T], *args: Any) -> T:
    # One-off lookups run as part of the first page of a traversal.
    try:
        return fn(*args)
    except GqlError as e:
        if e.page is None:
            e.page = 0
        raise


def traverse(
    client: GraphQlClient,
    map_id: str,
    anchor: Anchor,
    *,
    value_decoder: ValueDecoder[Any] = Order.from_bcs,
    page_size: Optional[int] = None,
    stream: Optional[str] = None,
) -> Generator[Entry, None, None]:
    """
    Lazily yield every `(key, value)` of a remote ordered map.

    With a strong anchor all pages are read at the anchor's version (the
    version of the map's root object, usually its clearing house). Entries
    keep leaf order within a page and page arrival order across pages; there
    is no global key order.

    Nothing is requested until the first entry is asked for, including the
    page size lookup when `page_size` is not given.
    """
    _require_anchor(anchor, stream=stream)

    def _entries() -> Generator[Entry, None, None]:
        variables = MapOrdersQuery(
            map=map_id,
            ch_version=anchor.version,
            first=_lookup(resolve_page_size, client, page_size),
        )
        yield from stream_units(client, variables, lambda page: page.entries(value_decoder), stream=stream)

    return _entries()


def map_orders(
    client: GraphQlClient,
    map_id: str,
    anchor: Anchor,
    *,
    page_size: Optional[int] = None,
    stream: Optional[str] = None,
) -> Generator[Tuple[int, Order], None, None]:
    """Orders of one side, rooted at the map id. Cheaper than going through the clearing house."""
    return traverse(client, map_id, anchor, page_size=page_size, stream=stream)


def clearing_house_orders(
    client: GraphQlClient,
    package: str,
    ch: str,
    anchor: Anchor,
    *,
    asks: bool,
    page_size: Optional[int] = None,
) -> Generator[Tuple[int, Order], None, None]:
    """Orders of one side, rooted at the clearing house id (and version, for strong anchors)."""
    stream = ASKS_STREAM if asks else BIDS_STREAM
    _require_anchor(anchor, stream=stream)

    def _orders() -> Generator[Tuple[int, Order], None, None]:
        variables = ClearingHouseOrdersQuery.for_side(
            package,
            ch,
            asks=asks,
            anchor=anchor,
            first=_lookup(resolve_page_size, client, page_size),
        )
        yield from stream_units(
            client,
            variables,
            lambda page: page.entries(Order.from_bcs),
            stream=stream,
        )

    return _orders()


def traverse_book(
    client: GraphQlClient,
    clearing_house: str,
    anchor: Anchor,
    *,
    package: Optional[str] = None,
    page_size: Optional[int] = None,
) -> Generator[Tuple[int, Order], None, None]:
    """
    Both sides of a clearing house's order book as one lazy sequence.

    The two sides are read independently and interleaved as their pages
    arrive. Use `order_side(order_id)` to tell them apart, never position.
    `package` defaults to the package of the clearing house's type; that
    lookup and the page size lookup run on the first request for an entry.
    """
    _check_anchor(anchor)

    def _book() -> Generator[Tuple[int, Order], None, None]:
        pkg = package if package is not None else _lookup(object_package, client, clearing_house, anchor)
        first = _lookup(resolve_page_size, client, page_size)

        info("book.traverse.start", ch=clearing_house, version=anchor.version, strong=anchor.strong)
        asks = clearing_house_orders(client, pkg, clearing_house, anchor, asks=True, page_size=first)
        bids = clearing_house_orders(client, pkg, clearing_house, anchor, asks=False, page_size=first)
        yield from merge(asks, bids, names=(ASKS_STREAM, BIDS_STREAM))

    return _book()


def collect_map_orders(
    client: GraphQlClient,
    map_id: str,
    anchor: Anchor,
    *,
    value_decoder: ValueDecoder[Any] = Order.from_bcs,
    page_size: Optional[int] = None,
) -> List[Entry]:
    """Every entry of a map, materialized through the paged driver: all pages or an error."""
    _require_anchor(anchor)
    variables = MapOrdersQuery(
        map=map_id,
        ch_version=anchor.version,
        first=_lookup(resolve_page_size, client, page_size),
    )
    pages = query_paged(client, variables)
    return [entry for page in pages for entry in page.entries(value_decoder)]


def split_sides(entries: Iterable[Tuple[int, Order]]) -> Tuple[Dict[int, int], Dict[int, int]]:
    """Fold a (merged) order stream into `{order_id: size}` maps for asks and bids."""
    asks: Dict[int, int] = {}
    bids: Dict[int, int] = {}
    for oid, order in entries:
        side = asks if order_side(oid) is Side.ASK else bids
        side[oid] = side.get(oid, 0) + order.size
    return asks, bids
