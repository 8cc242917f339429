"""
Unit tests for the chain simulator.

Tests cover:
1. Clock
2. Address allocation and registry
3. Snapshots and revert
4. Atomic call scopes
"""

import pytest

from feeauction.core.chain import Chain, Contract
from feeauction.core.tokens import ERC20Token


class Counter(Contract):
    _state_fields = ("value", "history")

    def __init__(self, chain):
        super().__init__(chain, label="counter")
        self.value = 0
        self.history = []
        self.scratch = 0

    def bump(self):
        self.value += 1
        self.history.append(self.value)


class TestClock:
    """Tests for the manual clock."""

    def test_initial_timestamp(self):
        assert Chain(timestamp=1000).now == 1000

    def test_increase_time(self):
        chain = Chain(timestamp=1000)
        assert chain.increase_time(50) == 1050
        assert chain.now == 1050

    def test_cannot_go_backwards(self):
        chain = Chain(timestamp=1000)
        with pytest.raises(ValueError):
            chain.increase_time(-1)
        with pytest.raises(ValueError):
            chain.set_time(999)

    def test_set_time(self):
        chain = Chain(timestamp=1000)
        chain.set_time(5000)
        assert chain.now == 5000


class TestRegistry:
    """Tests for address allocation."""

    def test_addresses_unique_and_sized(self):
        chain = Chain(timestamp=0)
        a = chain.new_address("x")
        b = chain.new_address("x")
        assert len(a) == 20
        assert a != b

    def test_addresses_deterministic(self):
        assert Chain(timestamp=0).new_address("x") == Chain(timestamp=0).new_address("x")

    def test_register_and_lookup(self):
        chain = Chain(timestamp=0)
        counter = Counter(chain)
        assert chain.get_contract(counter.address) is counter
        assert chain.get_contract(bytes(20)) is None

    def test_duplicate_address_rejected(self):
        chain = Chain(timestamp=0)
        token = ERC20Token(chain, "A", "A")
        with pytest.raises(ValueError, match="already in use"):
            ERC20Token(chain, "B", "B", address=token.address)


class TestSnapshots:
    """Tests for snapshot / revert."""

    def test_revert_restores_state_and_clock(self):
        chain = Chain(timestamp=100)
        counter = Counter(chain)
        sid = chain.snapshot()

        counter.bump()
        chain.increase_time(10)
        chain.revert(sid)

        assert counter.value == 0
        assert counter.history == []
        assert chain.now == 100

    def test_only_state_fields_restored(self):
        chain = Chain(timestamp=0)
        counter = Counter(chain)
        sid = chain.snapshot()
        counter.scratch = 5
        chain.revert(sid)
        assert counter.scratch == 5

    def test_revert_removes_new_contracts(self):
        chain = Chain(timestamp=0)
        sid = chain.snapshot()
        counter = Counter(chain)
        chain.revert(sid)
        assert chain.get_contract(counter.address) is None

    def test_revert_discards_later_snapshots(self):
        chain = Chain(timestamp=0)
        first = chain.snapshot()
        second = chain.snapshot()
        chain.revert(first)
        with pytest.raises(KeyError):
            chain.revert(second)

    def test_snapshot_is_deep(self):
        chain = Chain(timestamp=0)
        counter = Counter(chain)
        counter.bump()
        sid = chain.snapshot()
        counter.history.append(99)
        chain.revert(sid)
        assert counter.history == [1]


class TestAtomic:
    """Tests for all-or-nothing scopes."""

    def test_commit_on_success(self):
        chain = Chain(timestamp=0)
        counter = Counter(chain)
        with chain.atomic():
            counter.bump()
        assert counter.value == 1

    def test_revert_on_error(self):
        chain = Chain(timestamp=0)
        counter = Counter(chain)
        with pytest.raises(RuntimeError):
            with chain.atomic():
                counter.bump()
                raise RuntimeError("boom")
        assert counter.value == 0

    def test_nested_failure_unwinds_outer(self):
        chain = Chain(timestamp=0)
        counter = Counter(chain)
        with pytest.raises(RuntimeError):
            with chain.atomic():
                counter.bump()
                with chain.atomic():
                    counter.bump()
                    raise RuntimeError("inner")
        assert counter.value == 0

    def test_nested_error_caught_inside_outer(self):
        """Inner scopes join the outer one; a caught inner error keeps its effects."""
        chain = Chain(timestamp=0)
        counter = Counter(chain)
        with chain.atomic():
            try:
                with chain.atomic():
                    counter.bump()
                    raise RuntimeError("inner")
            except RuntimeError:
                pass
            counter.bump()
        assert counter.value == 2

    def test_scope_usable_after_failure(self):
        chain = Chain(timestamp=0)
        counter = Counter(chain)
        with pytest.raises(RuntimeError):
            with chain.atomic():
                raise RuntimeError("boom")
        with chain.atomic():
            counter.bump()
        assert counter.value == 1
