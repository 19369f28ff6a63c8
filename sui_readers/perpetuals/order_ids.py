from __future__ import annotations

from enum import Enum

from .constants import BID_BIT, U64_MASK


class Side(Enum):
    ASK = "ask"
    BID = "bid"


def order_side(order_id: int) -> Side:
    return Side.ASK if order_id < BID_BIT else Side.BID


def order_id(price: int, counter: int, side: Side) -> int:
    if side is Side.ASK:
        return order_id_ask(price, counter)
    return order_id_bid(price, counter)


def order_id_ask(price: int, counter: int) -> int:
    return ((price & U64_MASK) << 64) | (counter & U64_MASK)


def order_id_bid(price: int, counter: int) -> int:
    # Bids invert the price so ascending ids walk from the best (highest) bid.
    return (((price & U64_MASK) ^ U64_MASK) << 64) | (counter & U64_MASK)


def price(order_id: int) -> int:
    if order_side(order_id) is Side.ASK:
        return price_ask(order_id)
    return price_bid(order_id)


def price_ask(order_id: int) -> int:
    return (order_id >> 64) & U64_MASK


def price_bid(order_id: int) -> int:
    return ((order_id >> 64) & U64_MASK) ^ U64_MASK


def counter(order_id: int) -> int:
    return order_id & U64_MASK
