from __future__ import annotations

import pytest

from sui_readers.gql.anchor import Anchor
from sui_readers.gql.config import GqlConfig
from sui_readers.gql.errors import ServerError
from sui_readers.gql.queries import object_package, resolve_page_size
from sui_readers.perpetuals.book import (
    clearing_house_orders,
    collect_map_orders,
    map_orders,
    split_sides,
    traverse_book,
)
from sui_readers.perpetuals.order_ids import order_id_ask, order_id_bid
from sui_readers.perpetuals.ordered_map import Order
from sui_readers.perpetuals.queries import OrderMaps, order_maps

from .fakes import (
    ASKS_MAP,
    BIDS_MAP,
    CLEARING_HOUSE,
    PACKAGE,
    MapServer,
    ScriptedClient,
    branch,
    map_page,
    order_leaf,
)

ASK_1 = order_id_ask(100, 1)
ASK_2 = order_id_ask(101, 2)
ASK_3 = order_id_ask(105, 3)
BID_1 = order_id_bid(99, 4)
BID_2 = order_id_bid(95, 5)


def _book(version) -> MapServer:
    return MapServer(
        {
            (ASKS_MAP, version): [
                [order_leaf([(ASK_1, 3), (ASK_2, 4)])],
                [branch([ASK_3], [1, 2]), order_leaf([(ASK_3, 1)])],
            ],
            (BIDS_MAP, version): [[order_leaf([(BID_1, 2), (BID_2, 7)])]],
        }
    )


def test_traverse_book_reads_both_sides_at_one_version() -> None:
    server = _book(9)

    out = list(traverse_book(server, CLEARING_HOUSE, Anchor.pinned(9), package=PACKAGE, page_size=2))

    assert sorted(k for k, _ in out) == sorted([ASK_1, ASK_2, ASK_3, BID_1, BID_2])
    assert sorted(server.ops()) == ["clearing_house_orders", "clearing_house_orders", "map_orders"]
    for call in server.calls:
        version_key = "chVersion" if call["op"] == "map_orders" else "version"
        assert call["variables"][version_key] == 9
        assert call["variables"]["first"] == 2


def test_traverse_book_weak_anchor_sends_no_version() -> None:
    server = _book(None)

    out = list(traverse_book(server, CLEARING_HOUSE, Anchor.current(), package=PACKAGE, page_size=2))

    assert len(out) == 5
    assert all("version" not in c["variables"] and "chVersion" not in c["variables"] for c in server.calls)


def test_traverse_book_looks_up_the_package() -> None:
    server = _book(9)

    out = list(traverse_book(server, CLEARING_HOUSE, Anchor.pinned(9), page_size=2))

    assert len(out) == 5
    assert server.calls[0]["op"] == "object_type"
    assert server.calls[0]["variables"] == {"object": CLEARING_HOUSE, "version": 9}


def test_traverse_book_requires_anchor() -> None:
    with pytest.raises(TypeError):
        traverse_book(_book(None), CLEARING_HOUSE, None, package=PACKAGE, page_size=2)  # type: ignore[arg-type]


def test_split_sides_sums_sizes_per_order() -> None:
    entries = [
        (ASK_1, Order(1, 3)),
        (BID_1, Order(2, 2)),
        (ASK_1, Order(1, 1)),
        (BID_2, Order(2, 7)),
    ]

    asks, bids = split_sides(entries)

    assert asks == {ASK_1: 4}
    assert bids == {BID_1: 2, BID_2: 7}


def test_split_sides_of_a_merged_book() -> None:
    server = _book(9)
    asks, bids = split_sides(traverse_book(server, CLEARING_HOUSE, Anchor.pinned(9), package=PACKAGE, page_size=2))

    assert asks == {ASK_1: 3, ASK_2: 4, ASK_3: 1}
    assert bids == {BID_1: 2, BID_2: 7}


def test_collect_map_orders_materializes_every_page() -> None:
    client = ScriptedClient(
        [
            map_page([order_leaf([(ASK_1, 3)])], has_next=True, cursor="c1"),
            map_page([order_leaf([(ASK_2, 4)])]),
        ]
    )

    out = collect_map_orders(client, ASKS_MAP, Anchor.pinned(2), page_size=1)

    assert out == [(ASK_1, Order(1, 3)), (ASK_2, Order(1, 4))]


def test_collect_map_orders_is_all_or_nothing() -> None:
    client = ScriptedClient(
        [
            map_page([order_leaf([(ASK_1, 3)])], has_next=True, cursor="c1"),
            {"errors": [{"message": "boom"}]},
        ]
    )
    with pytest.raises(ServerError):
        collect_map_orders(client, ASKS_MAP, Anchor.current(), page_size=1)


def test_page_size_defaults_to_server_maximum() -> None:
    client = ScriptedClient(
        [
            {"data": {"serviceConfig": {"maxPageSize": 50}}},
            map_page([order_leaf([(ASK_1, 3)])]),
        ]
    )

    collect_map_orders(client, ASKS_MAP, Anchor.current())

    assert client.calls[0]["op"] == "max_page_size"
    assert client.calls[1]["variables"]["first"] == 50


def test_page_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        resolve_page_size(ScriptedClient([]), 0)


def test_object_package() -> None:
    client = ScriptedClient(
        [
            {
                "data": {
                    "object": {
                        "version": 17,
                        "asMoveObject": {
                            "__typename": "MoveObject",
                            "contents": {"type": {"repr": "0xab::clearing_house::ClearingHouse<0x2::sui::SUI>"}},
                        },
                    }
                }
            }
        ]
    )

    assert object_package(client, CLEARING_HOUSE) == "0x" + "0" * 62 + "ab"
    assert client.calls[0]["variables"] == {"object": CLEARING_HOUSE}


def test_order_maps() -> None:
    asks_obj = {"__typename": "MoveObject", "address": ASKS_MAP}
    bids_obj = {"__typename": "MoveObject", "address": BIDS_MAP}
    client = ScriptedClient(
        [
            {
                "data": {
                    "ch": {
                        "orderbook": {
                            "value": {
                                "__typename": "MoveObject",
                                "address": "0x" + "0b" * 32,
                                "asks": {"value": asks_obj},
                                "bids": {"value": bids_obj},
                            }
                        }
                    }
                }
            }
        ]
    )

    maps = order_maps(client, PACKAGE, CLEARING_HOUSE, Anchor.pinned(3))

    assert maps == OrderMaps(orderbook="0x" + "0b" * 32, asks=ASKS_MAP, bids=BIDS_MAP)
    variables = client.calls[0]["variables"]
    assert variables["version"] == 3
    assert variables["asks"]["type"] == f"{PACKAGE}::keys::AsksMap"
    assert variables["bids"]["bcs"] == "AA=="


def test_page_size_falls_back_when_server_has_no_limit() -> None:
    client = ScriptedClient([{"data": {"serviceConfig": {"maxPageSize": None}}}])
    assert resolve_page_size(client) == 50


def test_configured_page_size_skips_the_lookup() -> None:
    class ConfiguredClient(ScriptedClient):
        config = GqlConfig(page_size=7)

    client = ConfiguredClient([map_page([order_leaf([(ASK_1, 3)])])])

    collect_map_orders(client, ASKS_MAP, Anchor.current())

    assert [c["op"] for c in client.calls] == ["map_orders"]
    assert client.calls[0]["variables"]["first"] == 7


def test_map_orders_reads_one_side_from_its_map() -> None:
    server = _book(9)

    out = list(map_orders(server, BIDS_MAP, Anchor.pinned(9), page_size=2))

    assert out == [(BID_1, Order(1, 2)), (BID_2, Order(1, 7))]
    assert server.calls[0]["variables"] == {"map": BIDS_MAP, "chVersion": 9, "first": 2}


def test_traverse_book_defers_every_lookup_to_iteration() -> None:
    server = _book(9)

    book = traverse_book(server, CLEARING_HOUSE, Anchor.pinned(9))
    assert server.calls == []

    assert len(list(book)) == 5
    assert server.ops()[:2] == ["object_type", "max_page_size"]
    paged = [c for c in server.calls if c["op"] in ("clearing_house_orders", "map_orders")]
    assert all(c["variables"]["first"] == 2 for c in paged)


def test_clearing_house_orders_is_lazy() -> None:
    server = _book(9)

    side = clearing_house_orders(server, PACKAGE, CLEARING_HOUSE, Anchor.pinned(9), asks=False)
    assert server.calls == []

    assert list(side) == [(BID_1, Order(1, 2)), (BID_2, Order(1, 7))]
    assert server.ops() == ["max_page_size", "clearing_house_orders"]
