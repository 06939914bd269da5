from datetime import datetime

import pytest

from blackjack_gui.core.errors import BetRejected
from blackjack_gui.core.ledger import Ledger, SessionStats
from blackjack_gui.core.rules import Outcome, Settlement


def settlement(bet, winnings):
    return Settlement(Outcome.WIN, winnings, "", bet)


def test_place_bet_moves_chips_onto_the_table():
    ledger = Ledger(chips=1000).place_bet(25)
    assert ledger.chips == 975
    assert ledger.current_bet == 25


def test_bet_rejected_without_chips():
    ledger = Ledger(chips=25).place_bet(25)
    with pytest.raises(BetRejected):
        ledger.place_bet(5)
    with pytest.raises(BetRejected):
        Ledger().place_bet(0)


def test_clear_bet_refunds():
    ledger = Ledger(chips=100).place_bet(40).place_bet(10).clear_bet()
    assert ledger.chips == 100
    assert ledger.current_bet == 0


def test_double_stake():
    ledger = Ledger(chips=100).place_bet(30).double_stake()
    assert ledger.chips == 40
    assert ledger.current_bet == 60
    with pytest.raises(BetRejected):
        Ledger(chips=50).place_bet(30).double_stake()


def test_previous_bet_multiplier():
    ledger = Ledger(chips=500, previous_bet=50).place_previous_bet(3)
    assert ledger.current_bet == 150
    assert ledger.chips == 350
    with pytest.raises(BetRejected):
        ledger.place_previous_bet()
    with pytest.raises(BetRejected):
        Ledger(chips=100, previous_bet=60).place_previous_bet(2)


def test_record_settlement_uses_the_stake_before_reset():
    ledger = Ledger(chips=1000).place_bet(100)
    settled = ledger.record_settlement(settlement(100, 200), datetime(2024, 1, 1))
    assert settled.chips == 1100
    assert settled.current_bet == 0
    entry = settled.betting_history[0]
    assert entry.amount == 100
    assert entry.won
    assert entry.timestamp == datetime(2024, 1, 1)


def test_history_keeps_five_newest():
    ledger = Ledger(chips=1000)
    for amount in range(1, 8):
        ledger = ledger.place_bet(amount).record_settlement(settlement(amount, 0))
    assert [entry.amount for entry in ledger.betting_history] == [7, 6, 5, 4, 3]
    assert ledger.stats.total_losses == 7


def test_stats_streaks_and_totals():
    stats = SessionStats()
    for bet, winnings in [(10, 20), (10, 25), (10, 10), (10, 0), (10, 0), (10, 0), (10, 20)]:
        stats = stats.record(bet, winnings)
    assert (stats.total_wins, stats.total_losses, stats.total_pushes) == (3, 3, 1)
    assert stats.total_hands == 7
    assert stats.total_winnings == 10 + 15 + 0 - 30 + 10
    assert stats.biggest_win == 25
    assert stats.longest_win_streak == 2
    assert stats.longest_loss_streak == 3
    assert stats.current_streak == 1


def test_reset_session_restores_starting_chips():
    ledger = Ledger(chips=0, previous_bet=20).record_settlement(settlement(20, 0))
    fresh = ledger.reset_session()
    assert fresh.chips == 1000
    assert fresh.betting_history == ()
    assert fresh.stats == SessionStats()
    assert fresh.previous_bet == 0
