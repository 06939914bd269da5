"""JSON persistence for the session ledger and table state."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .cards import Deck, Hand, card_code, parse_cards
from .game import RoundPhase, RoundState, clear_table, with_ledger
from .ledger import BetResult, Ledger, SessionStats

LOGGER = logging.getLogger(__name__)

DATA_PATH = Path(__file__).resolve().parent.parent / "data"
STATE_KEY = "blackjack-state"
OPTIONS_KEY = "blackjack-options"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process store, handy for tests and throwaway sessions."""

    def __init__(self) -> None:
        self.items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set(self, key: str, value: str) -> None:
        self.items[key] = value

    def delete(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStore:
    """String values kept in a single JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError as exc:
            LOGGER.warning("Ignoring unreadable store file %s: %s", self.path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Ignoring store file %s: expected a JSON object", self.path)
            return {}
        return payload

    def _write(self, payload: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        payload = self._read()
        payload[key] = value
        self._write(payload)

    def delete(self, key: str) -> None:
        payload = self._read()
        if payload.pop(key, None) is not None:
            self._write(payload)


# ---------------- Session state ----------------


def state_to_json(state: RoundState) -> Dict[str, Any]:
    ledger = state.ledger
    return {
        "phase": state.phase.value,
        "message": state.message,
        "player": [card_code(card) for card in state.player.cards],
        "dealer": [card_code(card) for card in state.dealer.cards],
        "deck": [card_code(card) for card in state.deck.cards],
        "reveal_index": state.reveal_index,
        "chips": ledger.chips,
        "current_bet": ledger.current_bet,
        "previous_bet": ledger.previous_bet,
        "betting_history": [
            {"amount": entry.amount, "won": entry.won, "timestamp": entry.timestamp.isoformat()}
            for entry in ledger.betting_history
        ],
        "stats": asdict(ledger.stats),
    }


def state_from_json(data: Dict[str, Any]) -> RoundState:
    known_stats = {f.name for f in fields(SessionStats)}
    stats = SessionStats(**{k: int(v) for k, v in data.get("stats", {}).items() if k in known_stats})
    history = tuple(
        BetResult(
            amount=int(entry["amount"]),
            won=bool(entry["won"]),
            timestamp=datetime.fromisoformat(entry["timestamp"]),
        )
        for entry in data.get("betting_history", [])
    )
    ledger = Ledger(
        chips=int(data["chips"]),
        current_bet=int(data.get("current_bet", 0)),
        previous_bet=int(data.get("previous_bet", 0)),
        betting_history=history,
        stats=stats,
    )
    if ledger.chips < 0 or ledger.current_bet < 0:
        raise ValueError("negative chip balance in saved state")
    dealer = Hand(tuple(parse_cards(data.get("dealer", []))))
    reveal_index = min(int(data.get("reveal_index", -1)), len(dealer) - 1)
    return RoundState(
        phase=RoundPhase(data.get("phase", RoundPhase.BETTING.value)),
        message=data.get("message", ""),
        player=Hand(tuple(parse_cards(data.get("player", [])))),
        dealer=dealer,
        deck=Deck(tuple(parse_cards(data.get("deck", [])))),
        reveal_index=reveal_index,
        ledger=ledger,
    )


def restore(state: RoundState) -> RoundState:
    """Bring a saved table back to a state the player can act on.

    Deal and dealer sequences cannot resume mid-way, so those rounds are
    voided and the stake refunded. A finished round with chips left goes
    straight back to betting.
    """

    if state.phase in {RoundPhase.DEALING, RoundPhase.DEALER_TURN}:
        LOGGER.info("Voiding interrupted %s round, refunding %d", state.phase.value, state.ledger.current_bet)
        return clear_table(with_ledger(state, state.ledger.clear_bet()))
    if state.phase == RoundPhase.FINISHED and not state.ledger.broke:
        return clear_table(state)
    return state


class SessionStore:
    """Best-effort load/save of the table; failures never reach the player."""

    def __init__(self, store: KeyValueStore, key: str = STATE_KEY) -> None:
        self.store = store
        self.key = key

    def load(self) -> Optional[RoundState]:
        try:
            raw = self.store.get(self.key)
            if raw is None:
                return None
            return restore(state_from_json(json.loads(raw)))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            LOGGER.warning("Discarding unreadable saved session: %s", exc)
            return None

    def save(self, state: RoundState) -> None:
        try:
            self.store.set(self.key, json.dumps(state_to_json(state)))
        except (OSError, ValueError, TypeError) as exc:
            LOGGER.warning("Could not save session: %s", exc)

    def clear(self) -> None:
        try:
            self.store.delete(self.key)
        except (OSError, ValueError) as exc:
            LOGGER.warning("Could not clear saved session: %s", exc)


# ---------------- Options ----------------


@dataclass
class GameOptions:
    show_confetti: bool = True
    show_card_count: bool = True


def load_options(store: KeyValueStore) -> GameOptions:
    try:
        raw = store.get(OPTIONS_KEY)
        if raw:
            data = json.loads(raw)
            known = {f.name for f in fields(GameOptions)}
            return GameOptions(**{k: bool(v) for k, v in data.items() if k in known})
    except (OSError, ValueError, TypeError) as exc:
        LOGGER.warning("Error loading options: %s", exc)
    return GameOptions()


def save_options(store: KeyValueStore, options: GameOptions) -> None:
    try:
        store.set(OPTIONS_KEY, json.dumps(asdict(options)))
    except (OSError, ValueError, TypeError) as exc:
        LOGGER.warning("Error saving options: %s", exc)


__all__ = [
    "DATA_PATH",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "SessionStore",
    "GameOptions",
    "load_options",
    "save_options",
    "state_to_json",
    "state_from_json",
    "restore",
]
