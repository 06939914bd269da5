"""House rules and payout settlement."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .cards import Deck, Hand

STARTING_CHIPS = 1000
SHUFFLE_THRESHOLD = 10
DEALER_STAND_THRESHOLD = 17
HISTORY_LIMIT = 5
BLACKJACK_PAYOUT = 1.5


class GameMessage(str, Enum):
    PLACE_BET = "Place your bet!"
    DEALING = "Dealing cards..."
    YOUR_TURN = "Your turn!"
    DEALER_TURN = "Dealer's turn..."
    DEALER_BUSTS = "Dealer busts!"
    PLAYER_BUST = "Bust! Dealer wins!"
    PUSH = "Push!"
    PLAYER_WINS = "You win!"
    PLAYER_BLACKJACK = "Blackjack! You win!"
    DEALER_WINS = "Dealer wins!"
    DEALER_BLACKJACK = "Dealer Blackjack!"
    GAME_OVER = "Game Over!"


class Outcome(Enum):
    BUST = "bust"
    WIN = "win"
    PUSH = "push"
    BLACKJACK = "blackjack"
    LOSS = "loss"


@dataclass(frozen=True)
class Settlement:
    outcome: Outcome
    winnings: int
    message: str
    bet: int

    @property
    def won(self) -> bool:
        return self.winnings > self.bet

    @property
    def pushed(self) -> bool:
        return self.winnings == self.bet


def settle(dealer: Hand, player: Hand, bet: int) -> Settlement:
    """Pay out a finished round.

    Checks run in a fixed order and the first match wins: busts before
    naturals, naturals before a plain score comparison. ``winnings`` is the
    total returned to the player, stake included.
    """

    if player.is_busted:
        return Settlement(Outcome.BUST, 0, GameMessage.PLAYER_BUST.value, bet)
    if dealer.is_busted:
        return Settlement(Outcome.WIN, bet * 2, GameMessage.PLAYER_WINS.value, bet)
    if player.is_blackjack and dealer.is_blackjack:
        return Settlement(Outcome.PUSH, bet, GameMessage.PUSH.value, bet)
    if player.is_blackjack:
        bonus = int(bet * BLACKJACK_PAYOUT)
        return Settlement(Outcome.BLACKJACK, bet + bonus, GameMessage.PLAYER_BLACKJACK.value, bet)
    if dealer.is_blackjack:
        return Settlement(Outcome.LOSS, 0, GameMessage.DEALER_BLACKJACK.value, bet)
    if player.score > dealer.score:
        return Settlement(Outcome.WIN, bet * 2, GameMessage.PLAYER_WINS.value, bet)
    if dealer.score > player.score:
        return Settlement(Outcome.LOSS, 0, GameMessage.DEALER_WINS.value, bet)
    return Settlement(Outcome.PUSH, bet, GameMessage.PUSH.value, bet)


def dealer_should_hit(dealer: Hand) -> bool:
    # Stands on all 17s, soft 17 included.
    return dealer.score < DEALER_STAND_THRESHOLD


def needs_reshuffle(deck: Deck) -> bool:
    return len(deck) < SHUFFLE_THRESHOLD


def can_double_down(player: Hand, chips: int, current_bet: int) -> bool:
    return len(player) == 2 and current_bet > 0 and chips >= current_bet


__all__ = [
    "GameMessage",
    "Outcome",
    "Settlement",
    "settle",
    "dealer_should_hit",
    "needs_reshuffle",
    "can_double_down",
    "STARTING_CHIPS",
    "SHUFFLE_THRESHOLD",
    "DEALER_STAND_THRESHOLD",
    "HISTORY_LIMIT",
]
