"""Round state representation and transitions."""
from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum, auto
from typing import Dict, Optional, Tuple

from .cards import BLACKJACK, Deck, Hand, deal_one, new_shuffled_deck
from .ledger import Ledger
from .rules import GameMessage, Settlement, needs_reshuffle, settle


class RoundPhase(Enum):
    BETTING = "betting"
    DEALING = "dealing"
    PLAYING = "playing"
    DEALER_TURN = "dealerTurn"
    FINISHED = "finished"


@dataclass(frozen=True)
class RoundState:
    """Immutable snapshot of the table; every transition builds a new one."""

    phase: RoundPhase = RoundPhase.BETTING
    message: str = GameMessage.PLACE_BET.value
    player: Hand = field(default_factory=Hand)
    dealer: Hand = field(default_factory=Hand)
    deck: Deck = field(default_factory=Deck)
    reveal_index: int = -1
    ledger: Ledger = field(default_factory=Ledger)
    show_confetti: bool = False

    @property
    def game_over(self) -> bool:
        return self.phase == RoundPhase.FINISHED and self.ledger.broke


# ---------------- Follow-up table ----------------


class Checkpoint(Enum):
    DEALT = auto()
    PLAYER_DREW = auto()
    DOUBLED = auto()
    SETTLED = auto()


class Condition(Enum):
    OPEN = auto()
    PLAYER_BUST = auto()
    TWENTY_ONE = auto()
    PLAYER_BLACKJACK = auto()
    DEALER_BLACKJACK = auto()
    CHIPS_LEFT = auto()
    NO_CHIPS = auto()


class FollowUp(Enum):
    AWAIT_PLAYER = auto()
    AUTO_STAND = auto()
    DEALER_TURN = auto()
    SETTLE_BUST = auto()
    RETURN_TO_BETTING = auto()
    GAME_OVER = auto()


TRANSITIONS: Dict[Tuple[Checkpoint, Condition], FollowUp] = {
    (Checkpoint.DEALT, Condition.DEALER_BLACKJACK): FollowUp.DEALER_TURN,
    (Checkpoint.DEALT, Condition.PLAYER_BLACKJACK): FollowUp.AUTO_STAND,
    (Checkpoint.DEALT, Condition.OPEN): FollowUp.AWAIT_PLAYER,
    (Checkpoint.PLAYER_DREW, Condition.PLAYER_BUST): FollowUp.SETTLE_BUST,
    (Checkpoint.PLAYER_DREW, Condition.TWENTY_ONE): FollowUp.AUTO_STAND,
    (Checkpoint.PLAYER_DREW, Condition.OPEN): FollowUp.AWAIT_PLAYER,
    (Checkpoint.DOUBLED, Condition.PLAYER_BUST): FollowUp.SETTLE_BUST,
    (Checkpoint.DOUBLED, Condition.TWENTY_ONE): FollowUp.DEALER_TURN,
    (Checkpoint.DOUBLED, Condition.OPEN): FollowUp.DEALER_TURN,
    (Checkpoint.SETTLED, Condition.CHIPS_LEFT): FollowUp.RETURN_TO_BETTING,
    (Checkpoint.SETTLED, Condition.NO_CHIPS): FollowUp.GAME_OVER,
}


def classify(checkpoint: Checkpoint, state: RoundState) -> Condition:
    if checkpoint == Checkpoint.SETTLED:
        return Condition.NO_CHIPS if state.ledger.broke else Condition.CHIPS_LEFT
    if checkpoint == Checkpoint.DEALT:
        if state.dealer.is_blackjack:
            return Condition.DEALER_BLACKJACK
        if state.player.is_blackjack:
            return Condition.PLAYER_BLACKJACK
        return Condition.OPEN
    if state.player.is_busted:
        return Condition.PLAYER_BUST
    if state.player.score == BLACKJACK:
        return Condition.TWENTY_ONE
    return Condition.OPEN


def next_step(checkpoint: Checkpoint, state: RoundState) -> FollowUp:
    return TRANSITIONS[(checkpoint, classify(checkpoint, state))]


# ---------------- Betting ----------------


def with_ledger(state: RoundState, ledger: Ledger) -> RoundState:
    return replace(state, ledger=ledger)


def clear_table(state: RoundState, message: str = GameMessage.PLACE_BET.value) -> RoundState:
    """Return to betting with empty hands; chips are untouched."""

    return replace(
        state,
        phase=RoundPhase.BETTING,
        message=message,
        player=Hand(),
        dealer=Hand(),
        reveal_index=-1,
        show_confetti=False,
    )


def new_session(rng: Optional[random.Random] = None) -> RoundState:
    return RoundState(deck=new_shuffled_deck(rng))


# ---------------- Dealing ----------------


def begin_deal(state: RoundState, rng: Optional[random.Random] = None) -> RoundState:
    deck = new_shuffled_deck(rng) if needs_reshuffle(state.deck) else state.deck
    return replace(
        state,
        phase=RoundPhase.DEALING,
        message=GameMessage.DEALING.value,
        player=Hand(),
        dealer=Hand(),
        deck=deck,
        reveal_index=-1,
        ledger=state.ledger.commit_bet(),
        show_confetti=False,
    )


def deal_to_player(state: RoundState) -> RoundState:
    card, deck = deal_one(state.deck)
    return replace(state, player=state.player.with_card(card), deck=deck)


def deal_to_dealer(state: RoundState, face_up: bool) -> RoundState:
    card, deck = deal_one(state.deck)
    dealer = state.dealer.with_card(card)
    reveal_index = len(dealer) - 1 if face_up else state.reveal_index
    return replace(state, dealer=dealer, deck=deck, reveal_index=reveal_index)


def open_play(state: RoundState) -> RoundState:
    return replace(state, phase=RoundPhase.PLAYING, message=GameMessage.YOUR_TURN.value)


# ---------------- Player actions ----------------


def double_stake(state: RoundState) -> RoundState:
    return replace(state, ledger=state.ledger.double_stake())


def settle_bust(state: RoundState, when: Optional[datetime] = None) -> RoundState:
    """Player busted: the stake is lost without a dealer turn."""

    bet = state.ledger.current_bet
    settlement = settle(state.dealer, state.player, bet)
    return finish(state, settlement, when, dealer_score=False)


# ---------------- Dealer turn ----------------


def enter_dealer_turn(state: RoundState) -> RoundState:
    return replace(state, phase=RoundPhase.DEALER_TURN, message=GameMessage.DEALER_TURN.value)


def reveal_hole_card(state: RoundState) -> RoundState:
    return replace(state, reveal_index=len(state.dealer) - 1)


def dealer_draw(state: RoundState) -> RoundState:
    drawn = deal_to_dealer(state, face_up=True)
    if drawn.dealer.is_busted:
        message = GameMessage.DEALER_BUSTS.value
    else:
        message = f"Dealer draws: {drawn.dealer.score}"
    return replace(drawn, message=message)


def settle_round(state: RoundState, when: Optional[datetime] = None) -> RoundState:
    bet = state.ledger.current_bet
    settlement = settle(state.dealer, state.player, bet)
    return finish(state, settlement, when)


def finish(
    state: RoundState,
    settlement: Settlement,
    when: Optional[datetime] = None,
    dealer_score: bool = True,
) -> RoundState:
    ledger = state.ledger.record_settlement(settlement, when)
    message = settlement.message
    if dealer_score:
        message = f"{message} (Dealer: {state.dealer.score})"
    return replace(
        state,
        phase=RoundPhase.FINISHED,
        message=message,
        ledger=ledger,
        show_confetti=settlement.won,
    )


def game_over(state: RoundState) -> RoundState:
    return replace(state, phase=RoundPhase.FINISHED, message=GameMessage.GAME_OVER.value)


__all__ = [
    "RoundPhase",
    "RoundState",
    "Checkpoint",
    "Condition",
    "FollowUp",
    "TRANSITIONS",
    "classify",
    "next_step",
    "new_session",
    "clear_table",
    "with_ledger",
    "begin_deal",
    "deal_to_player",
    "deal_to_dealer",
    "open_play",
    "double_stake",
    "settle_bust",
    "enter_dealer_turn",
    "reveal_hole_card",
    "dealer_draw",
    "settle_round",
    "finish",
    "game_over",
]
