"""Reusable Qt widgets for the blackjack UI."""
from __future__ import annotations

from typing import List, Optional, Sequence

from PyQt6 import QtCore, QtWidgets

from ..core.cards import Card

CARD_BACK = "🂠"
RED_SUITS = {"hearts", "diamonds"}


class CardLabel(QtWidgets.QLabel):
    """Label that renders a playing card, face up or face down."""

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(CARD_BACK, parent)
        self.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.setMinimumSize(56, 80)

    def show_card(self, card: Optional[Card]) -> None:
        if card is None:
            self.setText(CARD_BACK)
            colour = "#1e3a8a"
        else:
            self.setText(card.display)
            colour = "#b91c1c" if card.suit in RED_SUITS else "#111"
        self.setStyleSheet(
            "border: 1px solid #666; border-radius: 6px; padding: 6px; "
            f"background: #fff; font-weight: bold; font-size: 18px; color: {colour};"
        )


class HandRow(QtWidgets.QWidget):
    """A titled row of cards with a running score."""

    def __init__(self, title: str, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QtWidgets.QHBoxLayout(self)
        self.title = QtWidgets.QLabel(title)
        self.title.setMinimumWidth(80)
        layout.addWidget(self.title)
        self.cards_layout = QtWidgets.QHBoxLayout()
        self.cards_layout.setSpacing(8)
        layout.addLayout(self.cards_layout)
        layout.addStretch()
        self.score_label = QtWidgets.QLabel("")
        layout.addWidget(self.score_label)
        self.labels: List[CardLabel] = []

    def update_cards(self, cards: Sequence[Card], visible: int, score: Optional[int]) -> None:
        while len(self.labels) < len(cards):
            label = CardLabel()
            self.cards_layout.addWidget(label)
            self.labels.append(label)
        for idx, label in enumerate(self.labels):
            if idx < len(cards):
                label.show_card(cards[idx] if idx < visible else None)
                label.show()
            else:
                label.hide()
        self.score_label.setText("" if score is None or not cards else f"Score: {score}")


__all__ = ["CardLabel", "HandRow"]
