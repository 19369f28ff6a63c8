from __future__ import annotations

import pytest

from sui_readers.gql.anchor import Anchor, resolve
from sui_readers.gql.queries import pin_to_latest
from sui_readers.perpetuals.book import traverse
from sui_readers.perpetuals.ordered_map import Order

from .fakes import ASKS_MAP, CLEARING_HOUSE, MapServer, ScriptedClient, order_leaf


def _server() -> MapServer:
    return MapServer(
        {
            (ASKS_MAP, 5): [[order_leaf([(1, 10)])], [order_leaf([(2, 20)])]],
            (ASKS_MAP, None): [[order_leaf([(1, 10)])], [order_leaf([(2, 20)])]],
        }
    )


def test_strong_anchor_pins_every_page() -> None:
    server = _server()
    gen = traverse(server, ASKS_MAP, Anchor.pinned(5), page_size=1)

    assert next(gen) == (1, Order(1, 10))
    # The map changes after the first page was read.
    server.pages[(ASKS_MAP, None)] = [[order_leaf([(1, 10)])], [order_leaf([(3, 99)])]]
    rest = list(gen)

    assert rest == [(2, Order(1, 20))]
    assert [c["variables"]["chVersion"] for c in server.calls] == [5, 5]


def test_weak_anchor_omits_version_and_sees_current_state() -> None:
    server = _server()
    gen = traverse(server, ASKS_MAP, Anchor.current(), page_size=1)

    assert next(gen) == (1, Order(1, 10))
    server.pages[(ASKS_MAP, None)] = [[order_leaf([(1, 10)])], [order_leaf([(3, 99)])]]
    rest = list(gen)

    assert rest == [(3, Order(1, 99))]
    assert all("chVersion" not in c["variables"] for c in server.calls)


def test_strong_and_weak_agree_on_a_quiet_map() -> None:
    strong = list(traverse(_server(), ASKS_MAP, Anchor.pinned(5), page_size=1))
    weak = list(traverse(_server(), ASKS_MAP, Anchor.current(), page_size=1))
    assert strong == weak


@pytest.mark.parametrize("bad", [True, "5", 1.5])
def test_version_must_be_an_int(bad) -> None:
    with pytest.raises(TypeError):
        Anchor(bad)


@pytest.mark.parametrize("bad", [-1, 2**53])
def test_version_must_fit_uint53(bad) -> None:
    with pytest.raises(ValueError):
        Anchor.pinned(bad)


def test_anchor_kinds() -> None:
    assert Anchor.pinned(0).strong
    assert Anchor.pinned(0).version == 0
    assert not Anchor.current().strong
    assert Anchor.current() == Anchor()


def test_resolve_warns_on_weak_anchor(events) -> None:
    assert resolve(None, stream="asks") == Anchor.current()
    assert resolve(12) == Anchor.pinned(12)

    assert [(e.message, e.level) for e in events] == [("anchor.weak", "warn"), ("anchor.pinned", "debug")]
    assert events[0].stream == "asks"
    assert events[1].fields["version"] == 12


def test_pin_to_latest_reads_the_version_once() -> None:
    client = ScriptedClient([{"data": {"object": {"version": 42}}}])

    anchor = pin_to_latest(client, CLEARING_HOUSE)

    assert anchor == Anchor.pinned(42)
    assert client.calls[0]["op"] == "object_version"
    assert client.calls[0]["variables"] == {"object": CLEARING_HOUSE}


def test_pinned_reads_repeat_while_current_reads_follow_updates() -> None:
    server = MapServer(
        {
            (ASKS_MAP, 5): [[order_leaf([(1, 10)])], [order_leaf([(2, 20)])]],
            (ASKS_MAP, None): [[order_leaf([(1, 10)])], [order_leaf([(2, 20)])]],
        }
    )
    anchor = Anchor.pinned(5)

    first = list(traverse(server, ASKS_MAP, anchor, page_size=1))
    # The map moves on past version 5.
    server.pages[(ASKS_MAP, None)] = [[order_leaf([(1, 4)])], [order_leaf([(2, 20), (3, 8)])]]
    second = list(traverse(server, ASKS_MAP, anchor, page_size=1))
    current = list(traverse(server, ASKS_MAP, Anchor.current(), page_size=1))

    assert first == second == [(1, Order(1, 10)), (2, Order(1, 20))]
    assert current == [(1, Order(1, 4)), (2, Order(1, 20)), (3, Order(1, 8))]
    assert current != first
