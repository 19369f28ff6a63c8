from __future__ import annotations

# Move modules / structs of the perpetuals package
KEYS_MODULE = "keys"
ORDERED_MAP_MODULE = "ordered_map"
LEAF_STRUCT = "Leaf"

ORDERBOOK_KEY = "Orderbook"
ASKS_MAP_KEY = "AsksMap"
BIDS_MAP_KEY = "BidsMap"

# Order ids below this are asks, the rest are bids.
BID_BIT = 1 << 127
U64_MASK = (1 << 64) - 1

# Stream labels used in events
ASKS_STREAM = "asks"
BIDS_STREAM = "bids"
