"""Chip balance, wagers and session statistics."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Tuple

from .errors import BetRejected
from .rules import HISTORY_LIMIT, STARTING_CHIPS, Settlement


@dataclass(frozen=True)
class BetResult:
    amount: int
    won: bool
    timestamp: datetime


@dataclass(frozen=True)
class SessionStats:
    total_wins: int = 0
    total_losses: int = 0
    total_pushes: int = 0
    total_hands: int = 0
    total_winnings: int = 0
    biggest_win: int = 0
    current_streak: int = 0
    longest_win_streak: int = 0
    longest_loss_streak: int = 0

    def record(self, bet: int, winnings: int) -> "SessionStats":
        """Fold one settled round into the counters."""

        wins, losses, pushes = self.total_wins, self.total_losses, self.total_pushes
        streak = self.current_streak
        longest_win, longest_loss = self.longest_win_streak, self.longest_loss_streak
        if winnings > bet:
            wins += 1
            streak = streak + 1 if streak > 0 else 1
            longest_win = max(longest_win, streak)
        elif winnings == bet:
            pushes += 1
            streak = 0
        else:
            losses += 1
            streak = streak - 1 if streak < 0 else -1
            longest_loss = max(longest_loss, -streak)
        return SessionStats(
            total_wins=wins,
            total_losses=losses,
            total_pushes=pushes,
            total_hands=self.total_hands + 1,
            total_winnings=self.total_winnings + (winnings - bet),
            biggest_win=max(self.biggest_win, winnings),
            current_streak=streak,
            longest_win_streak=longest_win,
            longest_loss_streak=longest_loss,
        )


@dataclass(frozen=True)
class Ledger:
    """Session bankroll.

    Every method returns a new ``Ledger``. Chips staked on ``current_bet``
    have already left ``chips``, so neither can go negative. Validation
    failures raise :class:`BetRejected`.
    """

    chips: int = STARTING_CHIPS
    current_bet: int = 0
    previous_bet: int = 0
    betting_history: Tuple[BetResult, ...] = field(default_factory=tuple)
    stats: SessionStats = field(default_factory=SessionStats)

    def place_bet(self, amount: int) -> "Ledger":
        if amount <= 0:
            raise BetRejected(f"bet must be positive, got {amount}")
        if amount > self.chips:
            raise BetRejected(f"cannot bet {amount} with {self.chips} chips")
        return replace(self, chips=self.chips - amount, current_bet=self.current_bet + amount)

    def clear_bet(self) -> "Ledger":
        return replace(self, chips=self.chips + self.current_bet, current_bet=0)

    def place_previous_bet(self, multiplier: int = 1) -> "Ledger":
        if self.previous_bet <= 0:
            raise BetRejected("no previous bet to repeat")
        if self.current_bet > 0:
            raise BetRejected("a bet is already on the table")
        if multiplier <= 0:
            raise BetRejected(f"multiplier must be positive, got {multiplier}")
        return self.place_bet(self.previous_bet * multiplier)

    def double_stake(self) -> "Ledger":
        if self.current_bet <= 0:
            raise BetRejected("no stake to double")
        if self.chips < self.current_bet:
            raise BetRejected(f"cannot double {self.current_bet} with {self.chips} chips")
        return replace(self, chips=self.chips - self.current_bet, current_bet=self.current_bet * 2)

    def commit_bet(self) -> "Ledger":
        """Remember the opening stake for quick rebets."""

        return replace(self, previous_bet=self.current_bet)

    def record_settlement(self, settlement: Settlement, when: Optional[datetime] = None) -> "Ledger":
        amount = settlement.bet
        entry = BetResult(amount=amount, won=settlement.won, timestamp=when or datetime.now())
        history = ((entry,) + self.betting_history)[:HISTORY_LIMIT]
        return replace(
            self,
            chips=self.chips + settlement.winnings,
            current_bet=0,
            betting_history=history,
            stats=self.stats.record(amount, settlement.winnings),
        )

    @property
    def broke(self) -> bool:
        return self.chips <= 0 and self.current_bet == 0

    def reset_session(self) -> "Ledger":
        return Ledger()


__all__ = ["BetResult", "SessionStats", "Ledger"]
