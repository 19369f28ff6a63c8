from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple

from sui_readers.gql.anchor import Anchor
from sui_readers.gql.client import GraphQlClient
from sui_readers.gql.constants import MOVE_OBJECT
from sui_readers.gql.errors import MissingDataError
from sui_readers.gql.extract import as_variant, extract, get_nested
from sui_readers.gql.fragments import (
    MOVE_VALUE_FIELDS,
    PAGE_INFO_FIELDS,
    DynamicFieldName,
    MoveValueRaw,
    PageInfo,
    normalize_address,
)
from sui_readers.gql.paged import next_variables

from . import keys
from .ordered_map import Order, ValueDecoder, decode_as_leaf

MAP_ORDERS_QUERY = """
query MapOrders($map: SuiAddress!, $chVersion: UInt53, $first: Int, $after: String) {
  map: owner(address: $map, rootVersion: $chVersion) {
    map_dfs: dynamicFields(first: $first, after: $after) {
      nodes {
        map_df: value {""" + MOVE_VALUE_FIELDS + """
        }
      }""" + PAGE_INFO_FIELDS + """
    }
  }
}
"""

CLEARING_HOUSE_ORDERS_QUERY = """
query ClearingHouseOrders(
  $ch: SuiAddress!
  $version: UInt53
  $orderbook: DynamicFieldName!
  $mapName: DynamicFieldName!
  $first: Int
  $after: String
) {
  clearing_house: object(address: $ch, version: $version) {
    orderbook_dof: dynamicObjectField(name: $orderbook) {
      orderbook: value {
        __typename
        ... on MoveObject {
          map_dof: dynamicObjectField(name: $mapName) {
            map: value {
              __typename
              ... on MoveObject {
                address
                map_dfs: dynamicFields(first: $first, after: $after) {
                  nodes {
                    map_df: value {""" + MOVE_VALUE_FIELDS + """
                    }
                  }""" + PAGE_INFO_FIELDS + """
                }
              }
            }
          }
        }
      }
    }
  }
}
"""

ORDER_MAPS_QUERY = """
query OrderMaps(
  $ch: SuiAddress!
  $version: UInt53
  $orderbook: DynamicFieldName!
  $asks: DynamicFieldName!
  $bids: DynamicFieldName!
) {
  ch: object(address: $ch, version: $version) {
    orderbook: dynamicObjectField(name: $orderbook) {
      value {
        __typename
        ... on MoveObject {
          address
          asks: dynamicObjectField(name: $asks) {
            value {
              __typename
              ... on MoveObject {
                address
              }
            }
          }
          bids: dynamicObjectField(name: $bids) {
            value {
              __typename
              ... on MoveObject {
                address
              }
            }
          }
        }
      }
    }
  }
}
"""

_CH_MAP_PATH = (
    "clearing_house",
    "orderbook_dof",
    "orderbook",
    as_variant(MOVE_OBJECT),
    "map_dof",
    "map",
    as_variant(MOVE_OBJECT),
)
_CH_MAP_ROOT = "data." + ".".join(str(k) for k in _CH_MAP_PATH)


def _drop_none(variables: Dict[str, Any]) -> Dict[str, Any]:
    # Absent optional arguments (anchor, cursor) are left out of the request.
    return {k: v for k, v in variables.items() if v is not None}


def _parse_connection(connection: Any, *, root: str, page: int) -> Tuple[List[MoveValueRaw], PageInfo]:
    nodes = extract(connection, "nodes", root=root, page=page)
    page_info = PageInfo.from_json(
        extract(connection, "pageInfo", root=root, page=page),
        root=f"{root}.pageInfo",
        page=page,
    )
    raws: List[MoveValueRaw] = []
    for node in nodes:
        raw = MoveValueRaw.from_value(get_nested(node, ["map_df"]))
        if raw is not None:
            raws.append(raw)
    return raws, page_info


def leaf_entries(nodes: List[MoveValueRaw], value_decoder: ValueDecoder[Any]) -> Iterator[Tuple[int, Any]]:
    """Entries of every leaf among `nodes`, page order then leaf order; branches are skipped."""
    for raw in nodes:
        yield from decode_as_leaf(raw, value_decoder)


@dataclass(frozen=True)
class MapDfsPage:
    """One page of a map's dynamic fields."""

    nodes: List[MoveValueRaw]
    page_info: PageInfo

    def next_variables(self, prev_vars: "MapOrdersQuery") -> Optional["MapOrdersQuery"]:
        return next_variables(self.page_info, prev_vars)

    def entries(self, value_decoder: ValueDecoder[Any] = Order.from_bcs) -> Iterator[Tuple[int, Any]]:
        return leaf_entries(self.nodes, value_decoder)


@dataclass(frozen=True)
class MapOrdersQuery:
    """Dynamic fields of the map object itself, optionally pinned by its root's version."""

    op: ClassVar[str] = "map_orders"

    map: str
    ch_version: Optional[int] = None
    first: Optional[int] = None
    after: Optional[str] = None

    def document(self) -> str:
        return MAP_ORDERS_QUERY

    def to_json(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "map": normalize_address(self.map),
                "chVersion": self.ch_version,
                "first": self.first,
                "after": self.after,
            }
        )

    def decode(self, data: Dict[str, Any], *, page: int) -> MapDfsPage:
        connection = extract(data, "map", "map_dfs", page=page)
        nodes, page_info = _parse_connection(connection, root="data.map.map_dfs", page=page)
        return MapDfsPage(nodes=nodes, page_info=page_info)


@dataclass(frozen=True)
class ClearingHouseMapPage:
    """First page of a map reached through its clearing house; also reveals the map's id."""

    map_id: str
    nodes: List[MoveValueRaw]
    page_info: PageInfo

    def next_variables(self, prev_vars: "ClearingHouseOrdersQuery") -> Optional[MapOrdersQuery]:
        # Later pages skip the two dynamic object field hops and go straight to the map.
        narrowed = MapOrdersQuery(
            map=self.map_id,
            ch_version=prev_vars.version,
            first=prev_vars.first,
            after=prev_vars.after,
        )
        return next_variables(self.page_info, narrowed)

    def entries(self, value_decoder: ValueDecoder[Any] = Order.from_bcs) -> Iterator[Tuple[int, Any]]:
        return leaf_entries(self.nodes, value_decoder)


@dataclass(frozen=True)
class ClearingHouseOrdersQuery:
    """One side's map, navigated from the clearing house at an optional version."""

    op: ClassVar[str] = "clearing_house_orders"

    ch: str
    orderbook: DynamicFieldName
    map_name: DynamicFieldName
    version: Optional[int] = None
    first: Optional[int] = None
    after: Optional[str] = None

    @staticmethod
    def for_side(
        package: str,
        ch: str,
        *,
        asks: bool,
        anchor: Anchor,
        first: Optional[int] = None,
    ) -> "ClearingHouseOrdersQuery":
        return ClearingHouseOrdersQuery(
            ch=ch,
            orderbook=keys.orderbook(package),
            map_name=keys.side_map(package, asks=asks),
            version=anchor.version,
            first=first,
        )

    def document(self) -> str:
        return CLEARING_HOUSE_ORDERS_QUERY

    def to_json(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "ch": normalize_address(self.ch),
                "version": self.version,
                "orderbook": self.orderbook.to_json(),
                "mapName": self.map_name.to_json(),
                "first": self.first,
                "after": self.after,
            }
        )

    def decode(self, data: Dict[str, Any], *, page: int) -> ClearingHouseMapPage:
        map_obj = extract(data, *_CH_MAP_PATH, page=page)
        map_id = extract(map_obj, "address", root=_CH_MAP_ROOT, page=page)
        connection = extract(map_obj, "map_dfs", root=_CH_MAP_ROOT, page=page)
        nodes, page_info = _parse_connection(connection, root=f"{_CH_MAP_ROOT}.map_dfs", page=page)
        return ClearingHouseMapPage(map_id=str(map_id), nodes=nodes, page_info=page_info)


@dataclass(frozen=True)
class OrderMaps:
    """Object ids of the orderbook and its asks/bids maps. These never change."""

    orderbook: str
    asks: str
    bids: str


def order_maps(client: GraphQlClient, package: str, ch: str, anchor: Optional[Anchor] = None) -> OrderMaps:
    variables = _drop_none(
        {
            "ch": normalize_address(ch),
            "version": anchor.version if anchor is not None else None,
            "orderbook": keys.orderbook(package).to_json(),
            "asks": keys.asks_map(package).to_json(),
            "bids": keys.bids_map(package).to_json(),
        }
    )
    data = client.query(ORDER_MAPS_QUERY, variables, op="order_maps").try_into_data()
    if data is None:
        raise MissingDataError("data")

    book = extract(data, "ch", "orderbook", "value", as_variant(MOVE_OBJECT))
    root = "data.ch.orderbook.value.as_variant(MoveObject)"
    return OrderMaps(
        orderbook=str(extract(book, "address", root=root)),
        asks=str(extract(book, "asks", "value", as_variant(MOVE_OBJECT), "address", root=root)),
        bids=str(extract(book, "bids", "value", as_variant(MOVE_OBJECT), "address", root=root)),
    )
