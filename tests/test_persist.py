import json
from dataclasses import replace
from datetime import datetime

from blackjack_gui.core.cards import Deck, Hand, parse_cards
from blackjack_gui.core.game import RoundPhase, RoundState
from blackjack_gui.core.ledger import BetResult, Ledger, SessionStats
from blackjack_gui.core.persist import (
    STATE_KEY,
    GameOptions,
    JsonFileStore,
    MemoryStore,
    SessionStore,
    load_options,
    save_options,
    state_from_json,
    state_to_json,
)


def sample_state(phase=RoundPhase.PLAYING):
    history = (
        BetResult(amount=50, won=True, timestamp=datetime(2024, 5, 1, 12, 30, 15, 250000)),
        BetResult(amount=25, won=False, timestamp=datetime(2024, 5, 1, 12, 29, 0)),
    )
    return RoundState(
        phase=phase,
        message="Your turn!",
        player=Hand(tuple(parse_cards(["10H", "6C"]))),
        dealer=Hand(tuple(parse_cards(["9S", "8D"]))),
        deck=Deck(tuple(parse_cards(["2S", "3S", "QH"]))),
        reveal_index=0,
        ledger=Ledger(
            chips=875,
            current_bet=50,
            previous_bet=50,
            betting_history=history,
            stats=SessionStats(total_wins=1, total_losses=1, total_hands=2, current_streak=1),
        ),
    )


def test_history_timestamps_come_back_as_datetimes():
    state = sample_state()
    loaded = state_from_json(json.loads(json.dumps(state_to_json(state))))
    for original, restored in zip(state.ledger.betting_history, loaded.ledger.betting_history):
        assert isinstance(restored.timestamp, datetime)
        assert restored.timestamp == original.timestamp
    assert loaded == state


def test_playing_round_resumes():
    store = SessionStore(MemoryStore())
    store.save(sample_state())
    loaded = store.load()
    assert loaded.phase == RoundPhase.PLAYING
    assert loaded.player.score == 16


def test_interrupted_dealer_turn_is_refunded():
    store = SessionStore(MemoryStore())
    store.save(sample_state(RoundPhase.DEALER_TURN))
    loaded = store.load()
    assert loaded.phase == RoundPhase.BETTING
    assert loaded.ledger.chips == 925
    assert loaded.ledger.current_bet == 0
    assert loaded.player == Hand()


def test_finished_round_with_no_chips_stays_finished():
    state = sample_state(RoundPhase.FINISHED)
    state = replace(state, ledger=replace(state.ledger, chips=0, current_bet=0))
    store = SessionStore(MemoryStore())
    store.save(state)
    assert store.load().phase == RoundPhase.FINISHED


def test_corrupt_state_falls_back_to_nothing():
    backing = MemoryStore()
    store = SessionStore(backing)
    for raw in ["{not json", "[]", json.dumps({"chips": -5}), json.dumps({"phase": "lunch", "chips": 5})]:
        backing.set(STATE_KEY, raw)
        assert store.load() is None


def test_json_file_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "save.json"
    backing = JsonFileStore(path)
    assert backing.get("missing") is None
    store = SessionStore(backing)
    store.save(sample_state())
    assert path.exists()
    assert SessionStore(JsonFileStore(path)).load() == sample_state()
    store.clear()
    assert store.load() is None


def test_unreadable_file_is_logged_not_raised(tmp_path, caplog):
    path = tmp_path / "save.json"
    path.write_text("garbage")
    assert SessionStore(JsonFileStore(path)).load() is None
    assert "Ignoring unreadable store file" in caplog.text


def test_unreadable_file_is_overwritten_by_next_save(tmp_path):
    path = tmp_path / "save.json"
    path.write_text("garbage")
    sessions = SessionStore(JsonFileStore(path))
    sessions.save(sample_state())
    assert json.loads(path.read_text())[STATE_KEY]
    assert sessions.load().ledger.chips == sample_state().ledger.chips
    assert not (tmp_path / "save.json.tmp").exists()


def test_non_object_file_is_treated_as_empty(tmp_path):
    path = tmp_path / "save.json"
    path.write_text("[1, 2, 3]")
    store = JsonFileStore(path)
    assert store.get(STATE_KEY) is None
    store.set("other", "value")
    assert json.loads(path.read_text()) == {"other": "value"}


def test_save_failure_is_swallowed(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    SessionStore(JsonFileStore(blocker / "save.json")).save(sample_state())


def test_options_round_trip():
    backing = MemoryStore()
    assert load_options(backing) == GameOptions()
    save_options(backing, GameOptions(show_confetti=False, show_card_count=True))
    assert load_options(backing) == GameOptions(show_confetti=False, show_card_count=True)
