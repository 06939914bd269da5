"""Card, deck and hand utilities."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .errors import EmptyDeckError

SUITS = ("hearts", "diamonds", "clubs", "spades")
FACES = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")
SUIT_SYMBOLS = {"hearts": "♥", "diamonds": "♦", "clubs": "♣", "spades": "♠"}
SUIT_CODES = {"H": "hearts", "D": "diamonds", "C": "clubs", "S": "spades"}

BLACKJACK = 21


@dataclass(frozen=True)
class Card:
    """Representation of a standard playing card."""

    suit: str
    face: str

    @property
    def value(self) -> int:
        if self.face == "A":
            return 1
        if self.face in {"J", "Q", "K"}:
            return 10
        return int(self.face)

    @property
    def is_ace(self) -> bool:
        return self.face == "A"

    @property
    def display(self) -> str:
        return f"{self.face}{SUIT_SYMBOLS[self.suit]}"

    def __str__(self) -> str:
        return self.display


@dataclass(frozen=True)
class Deck:
    """Remaining cards, dealt from the end like a stack."""

    cards: Tuple[Card, ...] = ()

    def __len__(self) -> int:
        return len(self.cards)


def fresh_cards() -> List[Card]:
    return [Card(suit, face) for suit in SUITS for face in FACES]


def shuffle_cards(cards: Sequence[Card], rng: random.Random | None = None) -> List[Card]:
    """Fisher-Yates shuffle returning a new list."""

    rng = rng or random.Random()
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def new_shuffled_deck(rng: random.Random | None = None) -> Deck:
    return Deck(tuple(shuffle_cards(fresh_cards(), rng)))


def deal_one(deck: Deck) -> Tuple[Card, Deck]:
    """Take the top card, returning it with the remaining deck."""

    if not deck.cards:
        raise EmptyDeckError("Cannot deal from empty deck")
    return deck.cards[-1], Deck(deck.cards[:-1])


def score(cards: Iterable[Card]) -> int:
    total = 0
    aces = 0
    for card in cards:
        if card.is_ace:
            aces += 1
        else:
            total += card.value
    for _ in range(aces):
        total += 11 if total + 11 <= BLACKJACK else 1
    return total


def is_blackjack(cards: Sequence[Card]) -> bool:
    return len(cards) == 2 and score(cards) == BLACKJACK


def is_soft(cards: Sequence[Card]) -> bool:
    """True when an ace in the hand is currently counted as 11."""

    hard_total = sum(card.value for card in cards)
    total = score(cards)
    return any(card.is_ace for card in cards) and total <= BLACKJACK and total == hard_total + 10


@dataclass(frozen=True)
class Hand:
    """Cards held by one party for the current round, in deal order."""

    cards: Tuple[Card, ...] = field(default_factory=tuple)

    @property
    def score(self) -> int:
        return score(self.cards)

    @property
    def is_busted(self) -> bool:
        return self.score > BLACKJACK

    @property
    def is_blackjack(self) -> bool:
        return is_blackjack(self.cards)

    @property
    def is_soft(self) -> bool:
        return is_soft(self.cards)

    def with_card(self, card: Card) -> "Hand":
        return Hand(self.cards + (card,))

    def __len__(self) -> int:
        return len(self.cards)


def parse_cards(repr_cards: Iterable[str]) -> List[Card]:
    """Parse codes such as ``"AS"`` or ``"10H"`` into :class:`Card` objects."""

    cards = []
    for token in repr_cards:
        face, suit_code = token[:-1].upper(), token[-1].upper()
        if face not in FACES or suit_code not in SUIT_CODES:
            raise ValueError(f"Unrecognised card code: {token!r}")
        cards.append(Card(SUIT_CODES[suit_code], face))
    return cards


def card_code(card: Card) -> str:
    return f"{card.face}{card.suit[0].upper()}"


__all__ = [
    "Card",
    "Deck",
    "Hand",
    "new_shuffled_deck",
    "deal_one",
    "score",
    "is_blackjack",
    "is_soft",
    "parse_cards",
    "card_code",
    "SUITS",
    "FACES",
    "BLACKJACK",
]
