from dataclasses import replace

from blackjack_gui.core.cards import Deck, Hand, parse_cards
from blackjack_gui.core.game import (
    TRANSITIONS,
    Checkpoint,
    Condition,
    FollowUp,
    RoundPhase,
    RoundState,
    begin_deal,
    dealer_draw,
    next_step,
    reveal_hole_card,
    settle_bust,
)
from blackjack_gui.core.ledger import Ledger


def hand(*codes):
    return Hand(tuple(parse_cards(codes)))


def test_transition_table_covers_every_checkpoint():
    checkpoints = {checkpoint for checkpoint, _ in TRANSITIONS}
    assert checkpoints == set(Checkpoint)
    assert TRANSITIONS[(Checkpoint.SETTLED, Condition.NO_CHIPS)] == FollowUp.GAME_OVER


def test_dealer_blackjack_outranks_player_blackjack_after_deal():
    state = RoundState(player=hand("AH", "KS"), dealer=hand("AD", "QC"))
    assert next_step(Checkpoint.DEALT, state) == FollowUp.DEALER_TURN
    state = replace(state, dealer=hand("9D", "QC"))
    assert next_step(Checkpoint.DEALT, state) == FollowUp.AUTO_STAND


def test_hit_follow_ups():
    assert next_step(Checkpoint.PLAYER_DREW, RoundState(player=hand("10H", "5S", "9D"))) == FollowUp.SETTLE_BUST
    assert next_step(Checkpoint.PLAYER_DREW, RoundState(player=hand("10H", "5S", "6D"))) == FollowUp.AUTO_STAND
    assert next_step(Checkpoint.PLAYER_DREW, RoundState(player=hand("10H", "5S"))) == FollowUp.AWAIT_PLAYER
    assert next_step(Checkpoint.DOUBLED, RoundState(player=hand("5H", "5S", "2D"))) == FollowUp.DEALER_TURN


def test_begin_deal_reshuffles_short_deck_and_remembers_bet():
    short = Deck(tuple(parse_cards(["2H"] * 9)))
    state = RoundState(deck=short, ledger=Ledger(chips=900, current_bet=100), player=hand("KH"))
    dealt = begin_deal(state)
    assert dealt.phase == RoundPhase.DEALING
    assert len(dealt.deck) == 52
    assert dealt.player == Hand()
    assert dealt.reveal_index == -1
    assert dealt.ledger.previous_bet == 100


def test_begin_deal_keeps_deck_at_threshold():
    deck = Deck(tuple(parse_cards(["2H"] * 10)))
    assert len(begin_deal(RoundState(deck=deck)).deck) == 10


def test_dealer_draw_reveals_new_card_and_reports():
    state = RoundState(dealer=hand("10H", "5S"), deck=Deck(tuple(parse_cards(["9C"]))), reveal_index=1)
    drawn = dealer_draw(state)
    assert drawn.reveal_index == 2
    assert drawn.message == "Dealer busts!"
    state = replace(state, deck=Deck(tuple(parse_cards(["2C"]))))
    assert dealer_draw(state).message == "Dealer draws: 17"


def test_reveal_hole_card_shows_whole_hand():
    state = RoundState(dealer=hand("10H", "5S"), reveal_index=0)
    assert reveal_hole_card(state).reveal_index == 1


def test_settle_bust_records_loss_without_dealer_score():
    state = RoundState(
        phase=RoundPhase.PLAYING,
        player=hand("10H", "5S", "9D"),
        dealer=hand("10C", "7D"),
        ledger=Ledger(chips=900, current_bet=100),
    )
    finished = settle_bust(state)
    assert finished.phase == RoundPhase.FINISHED
    assert finished.message == "Bust! Dealer wins!"
    assert finished.ledger.chips == 900
    assert finished.ledger.current_bet == 0
    assert finished.ledger.betting_history[0].amount == 100
    assert not finished.ledger.betting_history[0].won
