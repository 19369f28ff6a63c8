from __future__ import annotations

# Readers for the perpetuals order book: ordered-map leaves, field names,
# order ids and the side-merged book traversal.

from .book import clearing_house_orders, collect_map_orders, map_orders, split_sides, traverse, traverse_book
from .ordered_map import Order, decode_as_leaf, encode_leaf, is_leaf_type
from .order_ids import Side, counter, order_id, order_side, price, price_ask, price_bid
from .queries import OrderMaps, order_maps

__all__ = [
    "Order",
    "OrderMaps",
    "Side",
    "clearing_house_orders",
    "collect_map_orders",
    "counter",
    "decode_as_leaf",
    "encode_leaf",
    "is_leaf_type",
    "map_orders",
    "order_id",
    "order_maps",
    "order_side",
    "price",
    "price_ask",
    "price_bid",
    "split_sides",
    "traverse",
    "traverse_book",
]
