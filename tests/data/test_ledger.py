"""Tests for the in-memory token collaborators."""

import pytest

from lendcore.data.constants import RAY, SECONDS_PER_YEAR, WAD, WETH
from lendcore.data.ledger import TREASURY, Clock, InMemoryStableDebtToken
from lendcore.errors import ArithmeticUnderflowError, InvalidConfigurationError


class TestClock:
    def test_advance(self) -> None:
        clock = Clock(now=100)
        assert clock.advance(50) == 150
        assert clock.now == 150

    def test_cannot_go_backwards(self) -> None:
        with pytest.raises(ValueError):
            Clock().advance(-1)


class TestDepositToken:
    def test_balances_follow_liquidity_index(self, weth_reserve, actions, clock) -> None:
        actions.deposit(weth_reserve, "alice", 10 * WAD)
        token = weth_reserve.deposit_token
        assert token.balance_of("alice") == 10 * WAD

        weth_reserve.liquidity_index = 2 * RAY
        assert token.balance_of("alice") == 20 * WAD
        assert token.total_supply() == 20 * WAD
        assert token.scaled_balance_of("alice") == 10 * WAD

    def test_dust_mint_rejected(self, weth_reserve) -> None:
        weth_reserve.liquidity_index = 4 * RAY
        with pytest.raises(InvalidConfigurationError) as exc_info:
            weth_reserve.deposit_token.mint("alice", 1, weth_reserve.liquidity_index)
        assert exc_info.value.code == "56"

    def test_withdraw_beyond_liquidity(self, weth_reserve, actions) -> None:
        actions.deposit(weth_reserve, "alice", 10 * WAD)
        actions.borrow_variable(weth_reserve, "bob", 8 * WAD)
        with pytest.raises(ArithmeticUnderflowError):
            actions.withdraw(weth_reserve, "alice", 5 * WAD)
        assert weth_reserve.deposit_token.available_liquidity() == 2 * WAD

    def test_withdraw_more_than_owned(self, weth_reserve, actions) -> None:
        actions.deposit(weth_reserve, "alice", 10 * WAD)
        actions.deposit(weth_reserve, "carol", 10 * WAD)
        with pytest.raises(ArithmeticUnderflowError):
            actions.withdraw(weth_reserve, "alice", 15 * WAD)

    def test_treasury(self, weth_reserve) -> None:
        token = weth_reserve.deposit_token
        token.mint_to_treasury(0, RAY)
        assert token.scaled_balance_of(TREASURY) == 0

        token.mint_to_treasury(3 * WAD, RAY)
        token.burn_from_treasury(WAD, RAY)
        assert token.balance_of(TREASURY) == 2 * WAD

        with pytest.raises(ArithmeticUnderflowError):
            token.burn_from_treasury(5 * WAD, RAY)
        assert token.balance_of(TREASURY) == 2 * WAD


class TestVariableDebtToken:
    def test_balance_compounds(self, weth_reserve, actions, clock) -> None:
        actions.deposit(weth_reserve, "alice", 10 * WAD)
        actions.borrow_variable(weth_reserve, "bob", 5 * WAD)
        token = weth_reserve.variable_debt_token
        assert token.balance_of("bob") == 5 * WAD

        clock.advance(SECONDS_PER_YEAR)

        assert token.balance_of("bob") > 5 * WAD
        assert token.scaled_balance_of("bob") == 5 * WAD
        assert token.balance_of("nobody") == 0

    def test_repay_more_than_owed(self, weth_reserve, actions) -> None:
        actions.deposit(weth_reserve, "alice", 10 * WAD)
        actions.borrow_variable(weth_reserve, "bob", 2 * WAD)
        with pytest.raises(ArithmeticUnderflowError):
            actions.repay_variable(weth_reserve, "bob", 3 * WAD)


class TestStableDebtToken:
    @pytest.fixture
    def token(self, clock) -> InMemoryStableDebtToken:
        return InMemoryStableDebtToken(WETH, clock)

    def test_average_rate_is_debt_weighted(self, token) -> None:
        token.mint("alice", 100 * WAD, 10 * 10**25)
        token.mint("bob", 300 * WAD, 20 * 10**25)

        total, average_rate = token.get_total_supply_and_avg_rate()
        assert total == 400 * WAD
        assert average_rate == 175 * 10**24
        assert token.get_user_stable_rate("bob") == 20 * 10**25

    def test_supply_data(self, token, clock) -> None:
        token.mint("alice", 100 * WAD, 10**26)
        clock.advance(SECONDS_PER_YEAR)

        data = token.get_supply_data()
        assert data.principal_supply == 100 * WAD
        assert data.total_supply > 110 * WAD
        assert data.average_rate == 10**26
        assert data.last_updated_timestamp == clock.now - SECONDS_PER_YEAR

    def test_user_balance_compounds_at_own_rate(self, token, clock) -> None:
        token.mint("alice", 100 * WAD, 10**26)
        token.mint("bob", 100 * WAD, 3 * 10**26)
        clock.advance(SECONDS_PER_YEAR)

        assert token.balance_of("bob") > token.balance_of("alice") > 100 * WAD
        assert token.principal_balance_of("alice") == 100 * WAD

    def test_repay_updates_average(self, token) -> None:
        token.mint("alice", 100 * WAD, 10**26)
        token.mint("bob", 300 * WAD, 2 * 10**26)

        token.burn("alice", 100 * WAD)

        assert token.get_total_supply_and_avg_rate() == (300 * WAD, 2 * 10**26)
        assert token.get_user_stable_rate("alice") == 0

        token.burn("bob", 300 * WAD)
        assert token.get_total_supply_and_avg_rate() == (0, 0)

    def test_repay_more_than_owed(self, token) -> None:
        token.mint("alice", 100 * WAD, 10**26)
        with pytest.raises(ArithmeticUnderflowError):
            token.burn("alice", 101 * WAD)
        assert token.principal_balance_of("alice") == 100 * WAD
