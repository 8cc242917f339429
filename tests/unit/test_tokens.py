"""
Unit tests for the token ledger and the custody adapter.
"""

import pytest

from feeauction.core.chain import Chain
from feeauction.core.errors import InsufficientAllowance, InsufficientBalance, UnknownToken
from feeauction.core.tokens import MAX_UINT256, ERC20Token, TokenAdapter
from feeauction.crypto import ZERO_ADDRESS


@pytest.fixture
def token(chain, accounts):
    token = ERC20Token(chain, "Test", "TST")
    token.mint(accounts[0], 1_000)
    return token


class TestERC20:
    """Tests for balances, transfers and allowances."""

    def test_mint_updates_supply(self, token, accounts):
        assert token.balance_of(accounts[0]) == 1_000
        assert token.total_supply == 1_000

    def test_transfer(self, token, accounts):
        token.transfer(accounts[0], accounts[1], 300)
        assert token.balance_of(accounts[0]) == 700
        assert token.balance_of(accounts[1]) == 300
        assert token.total_supply == 1_000

    def test_transfer_exceeds_balance(self, token, accounts):
        with pytest.raises(InsufficientBalance, match="exceeds balance"):
            token.transfer(accounts[1], accounts[0], 1)

    def test_transfer_to_zero_address(self, token, accounts):
        with pytest.raises(ValueError):
            token.transfer(accounts[0], ZERO_ADDRESS, 1)

    def test_transfer_from_spends_allowance(self, token, accounts):
        owner, spender, to = accounts[0], accounts[1], accounts[2]
        token.approve(owner, spender, 500)
        token.transfer_from(spender, owner, to, 200)

        assert token.allowance(owner, spender) == 300
        assert token.balance_of(to) == 200

    def test_transfer_from_without_allowance(self, token, accounts):
        with pytest.raises(InsufficientAllowance):
            token.transfer_from(accounts[1], accounts[0], accounts[1], 1)

    def test_infinite_allowance_not_decremented(self, token, accounts):
        token.approve(accounts[0], accounts[1], MAX_UINT256)
        token.transfer_from(accounts[1], accounts[0], accounts[2], 10)
        assert token.allowance(accounts[0], accounts[1]) == MAX_UINT256

    def test_burn(self, token, accounts):
        token.burn(accounts[0], 400)
        assert token.total_supply == 600
        with pytest.raises(InsufficientBalance):
            token.burn(accounts[0], 601)

    def test_negative_amount_rejected(self, token, accounts):
        with pytest.raises(ValueError):
            token.transfer(accounts[0], accounts[1], -1)

    def test_transfer_hook_runs_after_balances_move(self, token, accounts):
        seen = []
        token.transfer_hook = lambda sender, to, amount: seen.append(token.balance_of(to))
        token.transfer(accounts[0], accounts[1], 5)
        assert seen == [5]

    def test_state_reverted_with_chain(self, chain, token, accounts):
        sid = chain.snapshot()
        token.transfer(accounts[0], accounts[1], 100)
        chain.revert(sid)
        assert token.balance_of(accounts[1]) == 0


class TestTokenAdapter:
    """Tests for custody pull / push."""

    def test_pull_requires_allowance(self, chain, token, accounts):
        adapter = TokenAdapter(chain, accounts[3])
        with pytest.raises(InsufficientAllowance):
            adapter.pull(token.address, accounts[0], 10)

        token.approve(accounts[0], accounts[3], 10)
        adapter.pull(token.address, accounts[0], 10)
        assert adapter.balance(token.address) == 10

    def test_push(self, chain, token, accounts):
        adapter = TokenAdapter(chain, accounts[0])
        adapter.push(token.address, accounts[1], 25)
        assert token.balance_of(accounts[1]) == 25
        assert adapter.balance(token.address) == 975

    def test_zero_amounts_are_noops(self, chain, token, accounts):
        adapter = TokenAdapter(chain, accounts[3])
        adapter.pull(token.address, accounts[0], 0)
        adapter.push(token.address, accounts[0], 0)
        assert adapter.balance(token.address) == 0

    def test_unknown_token(self, chain, accounts):
        adapter = TokenAdapter(chain, accounts[0])
        with pytest.raises(UnknownToken):
            adapter.balance(accounts[1])
