"""High level table orchestration."""
from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .cards import Card, Hand
from .errors import BetRejected, EmptyDeckError, InvariantViolation
from .game import (
    Checkpoint,
    FollowUp,
    RoundPhase,
    RoundState,
    begin_deal,
    clear_table,
    deal_to_dealer,
    deal_to_player,
    dealer_draw,
    double_stake,
    enter_dealer_turn,
    game_over,
    new_session,
    next_step,
    open_play,
    reveal_hole_card,
    settle_bust,
    settle_round,
    with_ledger,
)
from .ledger import BetResult, SessionStats
from .pacing import Clock, ManualClock
from .persist import DATA_PATH, JsonFileStore, KeyValueStore, SessionStore
from .rules import can_double_down, dealer_should_hit

LOGGER = logging.getLogger(__name__)


@dataclass
class PacingDelays:
    """Seconds the table waits between steps so the UI can animate."""

    deal: float = 0.5
    dealer_blackjack: float = 0.5
    auto_stand: float = 0.5
    double_down: float = 1.0
    reveal: float = 1.0
    dealer_draw: float = 1.0
    settle_display: float = 2.0


@dataclass
class TableConfig:
    name: str = "Blackjack Table"
    save_path: Path = field(default_factory=lambda: DATA_PATH / "blackjack_save.json")
    delays: PacingDelays = field(default_factory=PacingDelays)
    chip_values: Tuple[int, ...] = (5, 25, 100, 500)


def load_table_config(path: Path) -> TableConfig:
    """Read a JSON table configuration; missing keys keep their defaults."""

    data = json.loads(Path(path).read_text())
    config = TableConfig()
    if "table_name" in data:
        config.name = str(data["table_name"])
    if "save_path" in data:
        save_path = Path(data["save_path"]).expanduser()
        if not save_path.is_absolute():
            save_path = Path(path).resolve().parent / save_path
        config.save_path = save_path
    known_delays = {f.name for f in fields(PacingDelays)}
    delays = {k: float(v) for k, v in data.get("delays", {}).items() if k in known_delays}
    config.delays = PacingDelays(**delays)
    if "chip_values" in data:
        values = tuple(sorted(int(v) for v in data["chip_values"]))
        if not values or values[0] <= 0:
            raise ValueError("chip_values must be positive integers")
        config.chip_values = values
    return config


@dataclass(frozen=True)
class TableSnapshot:
    """Everything a UI needs to draw the table after a transition."""

    phase: RoundPhase
    message: str
    player_hand: Hand
    dealer_hand: Hand
    deck_remaining: int
    chips: int
    current_bet: int
    previous_bet: int
    betting_history: Tuple[BetResult, ...]
    stats: SessionStats
    reveal_index: int
    can_double_down: bool
    can_deal_cards: bool
    can_rebet: bool
    show_confetti: bool
    game_over: bool

    @classmethod
    def from_state(cls, state: RoundState) -> "TableSnapshot":
        ledger = state.ledger
        betting = state.phase == RoundPhase.BETTING
        return cls(
            phase=state.phase,
            message=state.message,
            player_hand=state.player,
            dealer_hand=state.dealer,
            deck_remaining=len(state.deck),
            chips=ledger.chips,
            current_bet=ledger.current_bet,
            previous_bet=ledger.previous_bet,
            betting_history=ledger.betting_history,
            stats=ledger.stats,
            reveal_index=state.reveal_index,
            can_double_down=state.phase == RoundPhase.PLAYING
            and can_double_down(state.player, ledger.chips, ledger.current_bet),
            can_deal_cards=betting and ledger.current_bet > 0,
            can_rebet=betting
            and ledger.current_bet == 0
            and 0 < ledger.previous_bet <= ledger.chips,
            show_confetti=state.show_confetti,
            game_over=state.game_over,
        )

    @property
    def visible_dealer_cards(self) -> Tuple[Card, ...]:
        return self.dealer_hand.cards[: self.reveal_index + 1]

    @property
    def visible_dealer_score(self) -> int:
        return Hand(self.visible_dealer_cards).score


Listener = Callable[[TableSnapshot], None]


class TableManager:
    """Runs the round lifecycle for one player against the house.

    Player actions are ignored unless the table is in a phase that accepts
    them. Deal and dealer sequences pause on the clock between cards; the
    phase is moved off ``PLAYING`` before any pause so input arriving
    mid-sequence is rejected.
    """

    def __init__(
        self,
        config: TableConfig,
        *,
        clock: Optional[Clock] = None,
        store: Optional[KeyValueStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.clock: Clock = clock or ManualClock()
        self.session_store = SessionStore(store) if store is not None else None
        self._rng = rng or random.Random()
        self._listeners: List[Listener] = []
        self._round_token = 0
        self.state = self._load_state()

    def _load_state(self) -> RoundState:
        loaded = self.session_store.load() if self.session_store else None
        if loaded is None:
            LOGGER.info("Starting a fresh session")
            loaded = new_session(self._rng)
        if loaded.ledger.broke:
            loaded = game_over(loaded)
        return loaded

    # ---------------- Observation ----------------

    @property
    def hand_number(self) -> int:
        """Number of the hand on the table, counting settled hands from the ledger."""

        settled = self.state.ledger.stats.total_hands
        in_progress = self.state.phase in {RoundPhase.DEALING, RoundPhase.PLAYING, RoundPhase.DEALER_TURN}
        return settled + 1 if in_progress else settled

    def snapshot(self) -> TableSnapshot:
        return TableSnapshot.from_state(self.state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, state: RoundState) -> TableSnapshot:
        if state.phase != self.state.phase:
            LOGGER.info("Phase %s -> %s", self.state.phase.value, state.phase.value)
        self.state = state
        if self.session_store is not None:
            self.session_store.save(state)
        snapshot = TableSnapshot.from_state(state)
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot

    def _reject(self, action: str, reason: str) -> TableSnapshot:
        LOGGER.debug("Ignoring %s: %s", action, reason)
        return self.snapshot()

    def _dealt(self, transition: Callable[[RoundState], RoundState]) -> RoundState:
        try:
            return transition(self.state)
        except EmptyDeckError as exc:
            LOGGER.error("Deck ran out mid-round (phase=%s)", self.state.phase.value)
            raise InvariantViolation("deck exhausted after reshuffle check") from exc

    # ---------------- Betting ----------------

    def place_bet(self, amount: int) -> TableSnapshot:
        if self.state.phase != RoundPhase.BETTING:
            return self._reject("place_bet", f"phase is {self.state.phase.value}")
        try:
            ledger = self.state.ledger.place_bet(amount)
        except BetRejected as exc:
            return self._reject("place_bet", str(exc))
        return self._commit(with_ledger(self.state, ledger))

    def clear_bet(self) -> TableSnapshot:
        if self.state.phase != RoundPhase.BETTING:
            return self._reject("clear_bet", f"phase is {self.state.phase.value}")
        return self._commit(with_ledger(self.state, self.state.ledger.clear_bet()))

    def place_previous_bet(self, multiplier: int = 1) -> TableSnapshot:
        if self.state.phase != RoundPhase.BETTING:
            return self._reject("place_previous_bet", f"phase is {self.state.phase.value}")
        try:
            ledger = self.state.ledger.place_previous_bet(multiplier)
        except BetRejected as exc:
            return self._reject("place_previous_bet", str(exc))
        self._commit(with_ledger(self.state, ledger))
        return self.deal_cards()

    # ---------------- Dealing ----------------

    def deal_cards(self) -> TableSnapshot:
        if self.state.phase != RoundPhase.BETTING:
            return self._reject("deal_cards", f"phase is {self.state.phase.value}")
        if self.state.ledger.current_bet <= 0:
            return self._reject("deal_cards", "no bet placed")

        self._round_token += 1
        self._commit(begin_deal(self.state, self._rng))
        LOGGER.info("Hand #%d: dealing for a bet of %d", self.hand_number, self.state.ledger.current_bet)
        # Player, dealer up card, player, dealer hole card.
        steps: List[Callable[[RoundState], RoundState]] = [
            deal_to_player,
            lambda s: deal_to_dealer(s, face_up=True),
            deal_to_player,
            lambda s: deal_to_dealer(s, face_up=False),
        ]
        for step in steps:
            self.clock.pause(self.config.delays.deal)
            self._commit(self._dealt(step))

        follow_up = next_step(Checkpoint.DEALT, self.state)
        if follow_up == FollowUp.DEALER_TURN:
            self._commit(enter_dealer_turn(self.state))
            self.clock.pause(self.config.delays.dealer_blackjack)
            return self._play_dealer()
        if follow_up == FollowUp.AUTO_STAND:
            self._commit(enter_dealer_turn(self.state))
            return self._play_dealer()
        return self._commit(open_play(self.state))

    # ---------------- Player actions ----------------

    def hit(self) -> TableSnapshot:
        if self.state.phase != RoundPhase.PLAYING:
            return self._reject("hit", f"phase is {self.state.phase.value}")
        drawn = self._dealt(deal_to_player)
        follow_up = next_step(Checkpoint.PLAYER_DREW, drawn)
        if follow_up == FollowUp.SETTLE_BUST:
            return self._settle(settle_bust(drawn))
        if follow_up == FollowUp.AUTO_STAND:
            self._commit(enter_dealer_turn(drawn))
            self.clock.pause(self.config.delays.auto_stand)
            return self._play_dealer()
        return self._commit(drawn)

    def stand_command(self) -> TableSnapshot:
        if self.state.phase != RoundPhase.PLAYING:
            return self._reject("stand", f"phase is {self.state.phase.value}")
        self._commit(enter_dealer_turn(self.state))
        return self._play_dealer()

    def double_down(self) -> TableSnapshot:
        if self.state.phase != RoundPhase.PLAYING:
            return self._reject("double_down", f"phase is {self.state.phase.value}")
        ledger = self.state.ledger
        if not can_double_down(self.state.player, ledger.chips, ledger.current_bet):
            return self._reject("double_down", "needs two cards and chips to match the bet")

        drawn = self._dealt(lambda s: deal_to_player(double_stake(s)))
        LOGGER.info("Doubled down to %d", drawn.ledger.current_bet)
        follow_up = next_step(Checkpoint.DOUBLED, drawn)
        if follow_up == FollowUp.SETTLE_BUST:
            return self._settle(settle_bust(drawn))
        self._commit(enter_dealer_turn(drawn))
        self.clock.pause(self.config.delays.double_down)
        return self._play_dealer()

    # ---------------- Dealer turn and settlement ----------------

    def _play_dealer(self) -> TableSnapshot:
        delays = self.config.delays
        self.clock.pause(delays.reveal)
        self._commit(reveal_hole_card(self.state))
        while dealer_should_hit(self.state.dealer):
            self.clock.pause(delays.dealer_draw)
            self._commit(self._dealt(dealer_draw))
        return self._settle(settle_round(self.state))

    def _settle(self, finished: RoundState) -> TableSnapshot:
        LOGGER.info("Hand #%d settled: %s, chips now %d", self.hand_number, finished.message, finished.ledger.chips)
        snapshot = self._commit(finished)
        token = self._round_token
        follow_up = next_step(Checkpoint.SETTLED, finished)
        if follow_up == FollowUp.GAME_OVER:
            self.clock.call_later(self.config.delays.settle_display, lambda: self._end_session(token))
        else:
            self.clock.call_later(self.config.delays.settle_display, lambda: self._return_to_betting(token))
        return snapshot

    def _is_current(self, token: int) -> bool:
        return token == self._round_token and self.state.phase == RoundPhase.FINISHED

    def _return_to_betting(self, token: int) -> None:
        if self._is_current(token):
            self._commit(clear_table(self.state))

    def _end_session(self, token: int) -> None:
        if self._is_current(token):
            LOGGER.info("Out of chips after %d hands", self.state.ledger.stats.total_hands)
            self._commit(game_over(self.state))

    # ---------------- Session ----------------

    def start_new_round(self) -> TableSnapshot:
        if self.state.phase not in {RoundPhase.BETTING, RoundPhase.FINISHED}:
            return self._reject("start_new_round", f"phase is {self.state.phase.value}")
        if self.state.ledger.broke:
            return self._reject("start_new_round", "no chips left")
        self._round_token += 1
        return self._commit(clear_table(self.state))

    def reset_session(self) -> TableSnapshot:
        if self.state.phase in {RoundPhase.DEALING, RoundPhase.DEALER_TURN}:
            return self._reject("reset_session", f"phase is {self.state.phase.value}")
        LOGGER.info("Resetting session")
        self._round_token += 1
        if self.session_store is not None:
            self.session_store.clear()
        fresh = new_session(self._rng)
        return self._commit(with_ledger(fresh, self.state.ledger.reset_session()))


def create_table_from_file(
    path: Path, *, clock: Optional[Clock] = None, store: Optional[KeyValueStore] = None
) -> TableManager:
    config = load_table_config(path)
    return TableManager(config, clock=clock, store=store or JsonFileStore(config.save_path))


def create_default_table(
    *, clock: Optional[Clock] = None, store: Optional[KeyValueStore] = None
) -> TableManager:
    config = TableConfig()
    return TableManager(config, clock=clock, store=store or JsonFileStore(config.save_path))


__all__ = [
    "TableManager",
    "TableConfig",
    "TableSnapshot",
    "PacingDelays",
    "load_table_config",
    "create_table_from_file",
    "create_default_table",
]
