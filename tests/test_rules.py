from blackjack_gui.core.cards import Hand, parse_cards
from blackjack_gui.core.rules import Outcome, can_double_down, dealer_should_hit, settle


def hand(*codes):
    return Hand(tuple(parse_cards(codes)))


def test_dealer_bust_pays_double():
    result = settle(hand("10H", "6S", "6D"), hand("10C", "QD"), 100)
    assert result.outcome == Outcome.WIN
    assert result.winnings == 200
    assert "win" in result.message


def test_equal_scores_push():
    result = settle(hand("10H", "QS"), hand("KC", "JD"), 100)
    assert result.outcome == Outcome.PUSH
    assert result.winnings == 100
    assert "Push" in result.message
    assert result.pushed and not result.won


def test_player_blackjack_pays_three_to_two():
    result = settle(hand("10H", "9S"), hand("AC", "KD"), 100)
    assert result.outcome == Outcome.BLACKJACK
    assert result.winnings == 250


def test_blackjack_payout_is_floored():
    result = settle(hand("10H", "9S"), hand("AC", "KD"), 25)
    assert result.winnings == 25 + 37


def test_player_bust_beats_dealer_bust():
    result = settle(hand("10H", "6S", "9D"), hand("10C", "5D", "KS"), 50)
    assert result.outcome == Outcome.BUST
    assert result.winnings == 0


def test_both_naturals_push():
    result = settle(hand("AH", "QS"), hand("AC", "KD"), 40)
    assert result.outcome == Outcome.PUSH
    assert result.winnings == 40


def test_dealer_natural_beats_three_card_21():
    result = settle(hand("AH", "QS"), hand("7C", "7D", "7S"), 40)
    assert result.outcome == Outcome.LOSS
    assert result.message == "Dealer Blackjack!"


def test_player_natural_beats_three_card_21():
    result = settle(hand("7C", "7D", "7S"), hand("AH", "QS"), 40)
    assert result.outcome == Outcome.BLACKJACK


def test_score_comparison():
    assert settle(hand("10H", "8S"), hand("10C", "9D"), 10).winnings == 20
    lost = settle(hand("10H", "9S"), hand("10C", "8D"), 10)
    assert lost.outcome == Outcome.LOSS
    assert lost.winnings == 0


def test_dealer_stands_on_soft_17():
    assert dealer_should_hit(hand("10H", "6S"))
    assert not dealer_should_hit(hand("AH", "6S"))
    assert not dealer_should_hit(hand("10H", "7S"))


def test_can_double_down_requires_two_cards_and_chips():
    assert can_double_down(hand("5H", "6S"), chips=100, current_bet=100)
    assert not can_double_down(hand("5H", "6S", "2D"), chips=100, current_bet=100)
    assert not can_double_down(hand("5H", "6S"), chips=99, current_bet=100)
