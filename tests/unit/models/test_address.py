"""
Unit tests for models.address module.

Tests:
- SocketAddress parsing and display
- WeightedSet selection, comparison and equality
- Address factories, priority access, equality
- AddressBuilder level handling
- union_addresses() merging
"""

import random
from collections import Counter
from ipaddress import IPv4Address, IPv6Address

import pytest

from nsrouter.models import (
    Address,
    AddressBuilder,
    SocketAddress,
    WeightedSet,
    seed_default_rng,
    union_addresses,
)


def sa(text: str) -> SocketAddress:
    return SocketAddress.parse(text)


# =============================================================================
# SocketAddress
# =============================================================================


class TestSocketAddress:
    """Tests for SocketAddress."""

    def test_parse_ipv4(self) -> None:
        addr = sa("127.0.0.1:80")
        assert addr.ip == IPv4Address("127.0.0.1")
        assert addr.port == 80

    def test_parse_ipv6(self) -> None:
        addr = sa("[::1]:443")
        assert addr.ip == IPv6Address("::1")
        assert str(addr) == "[::1]:443"

    def test_string_ip_is_converted(self) -> None:
        assert SocketAddress("10.0.0.1", 1).ip == IPv4Address("10.0.0.1")  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "text", ["127.0.0.1", "127.0.0.1:http", "::1:80", "[127.0.0.1]:80", "host:80"]
    )
    def test_parse_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            sa(text)

    def test_port_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            sa("127.0.0.1:65536")

    def test_to_tuple(self) -> None:
        assert sa("[2001:db8::1]:53").to_tuple() == ("2001:db8::1", 53)

    def test_hashable(self) -> None:
        assert len({sa("127.0.0.1:80"), sa("127.0.0.1:80")}) == 1


# =============================================================================
# WeightedSet
# =============================================================================


class TestWeightedSetPick:
    """Tests for WeightedSet.pick_one()."""

    def test_empty(self) -> None:
        assert WeightedSet().pick_one() is None

    def test_single_entry(self, rng: random.Random) -> None:
        only = sa("127.0.0.1:80")
        ws = WeightedSet(((5, only),))
        assert all(ws.pick_one(rng) == only for _ in range(50))

    def test_all_zero_weights_are_uniform(self, rng: random.Random) -> None:
        a, b = sa("10.0.0.1:1"), sa("10.0.0.2:1")
        ws = WeightedSet(((0, a), (0, b)))
        counts = Counter(ws.pick_one(rng) for _ in range(2000))
        assert set(counts) == {a, b}
        assert 800 < counts[a] < 1200

    def test_weights_are_proportional(self, rng: random.Random) -> None:
        a, b = sa("10.0.0.1:1"), sa("10.0.0.2:1")
        ws = WeightedSet(((1, a), (3, b)))
        counts = Counter(ws.pick_one(rng) for _ in range(8000))
        ratio = counts[b] / counts[a]
        assert 2.5 < ratio < 3.5

    def test_zero_weight_never_picked_when_others_weighted(self, rng: random.Random) -> None:
        a, b = sa("10.0.0.1:1"), sa("10.0.0.2:1")
        ws = WeightedSet(((0, a), (7, b)))
        assert {ws.pick_one(rng) for _ in range(200)} == {b}

    def test_default_rng_is_seedable(self) -> None:
        ws = WeightedSet(tuple((1, sa(f"10.0.0.{i}:1")) for i in range(1, 20)))
        seed_default_rng(7)
        first = [ws.pick_one() for _ in range(10)]
        seed_default_rng(7)
        assert [ws.pick_one() for _ in range(10)] == first


class TestWeightedSetCompare:
    """Tests for WeightedSet.compare_addresses()."""

    def test_removed_and_added(self) -> None:
        old = WeightedSet(((0, sa("127.0.0.1:1234")), (0, sa("10.0.0.1:3456"))))
        new = WeightedSet(((0, sa("127.0.0.2:1234")), (0, sa("10.0.0.1:3456"))))
        removed, added = old.compare_addresses(new)
        assert removed == [sa("127.0.0.1:1234")]
        assert added == [sa("127.0.0.2:1234")]

    def test_weights_ignored(self) -> None:
        old = WeightedSet(((1, sa("10.0.0.1:1")),))
        new = WeightedSet(((9, sa("10.0.0.1:1")),))
        assert old.compare_addresses(new) == ([], [])

    def test_no_duplicates_and_stable_order(self) -> None:
        old = WeightedSet(((0, sa("10.0.0.3:1")), (1, sa("10.0.0.3:1")), (0, sa("10.0.0.1:1"))))
        new = WeightedSet(((0, sa("10.0.0.9:1")), (0, sa("10.0.0.8:1")), (0, sa("10.0.0.9:1"))))
        removed, added = old.compare_addresses(new)
        assert removed == [sa("10.0.0.3:1"), sa("10.0.0.1:1")]
        assert added == [sa("10.0.0.9:1"), sa("10.0.0.8:1")]


class TestWeightedSetEquality:
    """Tests for order-independent WeightedSet equality."""

    def test_order_independent(self) -> None:
        a = WeightedSet(((1, sa("10.0.0.1:1")), (2, sa("10.0.0.2:1"))))
        b = WeightedSet(((2, sa("10.0.0.2:1")), (1, sa("10.0.0.1:1"))))
        assert a == b
        assert hash(a) == hash(b)

    def test_weight_matters(self) -> None:
        a = WeightedSet(((1, sa("10.0.0.1:1")),))
        b = WeightedSet(((2, sa("10.0.0.1:1")),))
        assert a != b

    def test_multiplicity_matters(self) -> None:
        entry = (0, sa("10.0.0.1:1"))
        assert WeightedSet((entry,)) != WeightedSet((entry, entry))

    def test_container_protocol(self) -> None:
        ws = WeightedSet(((0, sa("10.0.0.1:1")),))
        assert len(ws) == 1
        assert sa("10.0.0.1:1") in ws
        assert list(ws) == [sa("10.0.0.1:1")]


# =============================================================================
# Address
# =============================================================================


class TestAddressFactories:
    """Tests for Address construction helpers."""

    def test_empty(self) -> None:
        addr = Address.empty()
        assert len(addr) == 0
        assert not addr
        assert addr.pick_one() is None

    def test_from_socket_address(self) -> None:
        addr = Address.from_socket_address(sa("127.0.0.1:80"))
        assert list(addr.at(0).items()) == [(0, sa("127.0.0.1:80"))]

    def test_from_ip(self) -> None:
        assert Address.from_ip("127.0.0.1", 80) == Address.parse_list(["127.0.0.1:80"])

    def test_from_addresses_empty_has_no_level(self) -> None:
        assert len(Address.from_addresses([])) == 0

    def test_parse_list(self) -> None:
        addr = Address.parse_list(["127.0.0.1:80", "[::1]:80"])
        assert len(addr) == 1
        assert list(addr.addresses_at(0)) == [sa("127.0.0.1:80"), sa("[::1]:80")]

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(ValueError):
            Address((((-1, sa("127.0.0.1:80")),),))

    def test_wrong_item_type_rejected(self) -> None:
        with pytest.raises(TypeError):
            Address((((0, "127.0.0.1:80"),),))  # type: ignore[arg-type]


class TestAddressAccess:
    """Tests for priority access and selection."""

    def test_pick_one_single_entry(self, rng: random.Random) -> None:
        addr = Address.parse_list(["127.0.0.1:80"])
        assert all(addr.pick_one(rng) == sa("127.0.0.1:80") for _ in range(20))

    def test_pick_one_uses_level_zero_only(self, rng: random.Random) -> None:
        addr = (
            AddressBuilder()
            .add_addresses([(0, sa("10.0.0.1:1"))])
            .add_addresses([(100, sa("10.0.0.2:1"))])
            .build()
        )
        assert {addr.pick_one(rng) for _ in range(50)} == {sa("10.0.0.1:1")}

    def test_at_out_of_range(self) -> None:
        addr = Address.parse_list(["127.0.0.1:80"])
        assert len(addr.at(1)) == 0
        assert len(addr.at(-1)) == 0

    def test_iteration_yields_levels(self) -> None:
        addr = (
            AddressBuilder()
            .add_addresses([(0, sa("10.0.0.1:1"))])
            .add_addresses([(0, sa("10.0.0.2:1"))])
            .build()
        )
        levels = list(addr)
        assert len(levels) == 2
        assert all(isinstance(level, WeightedSet) for level in levels)
        assert list(levels[1]) == [sa("10.0.0.2:1")]


class TestAddressEquality:
    """Tests for Address equality and hashing."""

    def test_order_within_level_ignored(self) -> None:
        a = Address.parse_list(["10.0.0.1:1", "10.0.0.2:1"])
        b = Address.parse_list(["10.0.0.2:1", "10.0.0.1:1"])
        assert a == b
        assert hash(a) == hash(b)

    def test_level_order_matters(self) -> None:
        x, y = sa("10.0.0.1:1"), sa("10.0.0.2:1")
        a = AddressBuilder().add_addresses([(0, x)]).add_addresses([(0, y)]).build()
        b = AddressBuilder().add_addresses([(0, y)]).add_addresses([(0, x)]).build()
        assert a != b

    def test_level_count_matters(self) -> None:
        x = sa("10.0.0.1:1")
        a = Address.from_socket_address(x)
        b = AddressBuilder().add_addresses([(0, x)]).add_addresses([(0, x)]).build()
        assert a != b

    def test_not_equal_to_other_types(self) -> None:
        assert Address.empty() != ()


# =============================================================================
# AddressBuilder
# =============================================================================


class TestAddressBuilder:
    """Tests for AddressBuilder."""

    def test_chaining_returns_builder(self) -> None:
        builder = AddressBuilder()
        assert builder.add_addresses([]) is builder

    def test_empty_levels_dropped(self) -> None:
        addr = (
            AddressBuilder()
            .add_addresses([])
            .add_addresses([(1, sa("10.0.0.1:1"))])
            .add_addresses([])
            .build()
        )
        assert len(addr) == 1
        assert list(addr.at(0).items()) == [(1, sa("10.0.0.1:1"))]

    def test_reuse_after_build(self) -> None:
        builder = AddressBuilder().add_addresses([(0, sa("10.0.0.1:1"))])
        first = builder.build()
        builder.add_addresses([(0, sa("10.0.0.2:1"))])
        assert len(first) == 1
        assert len(builder.build()) == 2

    def test_accepts_generators(self) -> None:
        pairs = ((i, sa(f"10.0.0.{i}:1")) for i in range(1, 4))
        addr = AddressBuilder().add_addresses(pairs).build()
        assert len(addr.at(0)) == 3


# =============================================================================
# union_addresses()
# =============================================================================


class TestUnionAddresses:
    """Tests for union_addresses()."""

    def test_union_deduplicates(self) -> None:
        a = Address.parse_list(["127.0.0.1:1234", "10.0.0.1:3456"])
        b = Address.parse_list(["127.0.0.2:1234", "10.0.0.1:3456"])
        result = union_addresses([a, b])
        assert len(result) == 1
        assert list(result.addresses_at(0)) == [
            sa("127.0.0.1:1234"),
            sa("10.0.0.1:3456"),
            sa("127.0.0.2:1234"),
        ]

    def test_union_weights_are_zero(self) -> None:
        a = AddressBuilder().add_addresses([(5, sa("10.0.0.1:1"))]).build()
        result = union_addresses([a])
        assert list(result.at(0).items()) == [(0, sa("10.0.0.1:1"))]

    def test_union_ignores_lower_levels(self) -> None:
        a = (
            AddressBuilder()
            .add_addresses([(0, sa("10.0.0.1:1"))])
            .add_addresses([(0, sa("10.0.0.2:1"))])
            .build()
        )
        assert list(union_addresses([a]).addresses_at(0)) == [sa("10.0.0.1:1")]

    def test_union_of_nothing(self) -> None:
        assert union_addresses([]) == Address.empty()
        assert union_addresses([Address.empty()]) == Address.empty()
