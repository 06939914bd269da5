"""Qt widgets representing the blackjack table."""
from __future__ import annotations

from typing import List

from PyQt6 import QtGui, QtWidgets

from ..core.game import RoundPhase
from ..core.persist import GameOptions, KeyValueStore, load_options, save_options
from ..core.table_manager import TableManager, TableSnapshot
from .widgets import HandRow


class TableWindow(QtWidgets.QMainWindow):
    def __init__(self, manager: TableManager, store: KeyValueStore, source: str | None = None) -> None:
        super().__init__()
        self.manager = manager
        self.store = store
        self.options = load_options(store)
        self.setWindowTitle("Blackjack")
        self.resize(900, 640)
        self.view = TableView(manager, self.options)
        self.setCentralWidget(self.view)
        self._build_menu()
        self.status = self.statusBar()
        self.status.showMessage(f"Loaded {source}" if source else "Welcome to Blackjack")

    def _build_menu(self) -> None:
        menu = self.menuBar().addMenu("Options")
        confetti = QtGui.QAction("Celebrate wins", self, checkable=True)
        confetti.setChecked(self.options.show_confetti)
        confetti.toggled.connect(lambda on: self._set_option("show_confetti", on))
        menu.addAction(confetti)
        card_count = QtGui.QAction("Show card count", self, checkable=True)
        card_count.setChecked(self.options.show_card_count)
        card_count.toggled.connect(lambda on: self._set_option("show_card_count", on))
        menu.addAction(card_count)

    def _set_option(self, name: str, value: bool) -> None:
        setattr(self.options, name, value)
        save_options(self.store, self.options)
        self.view.update_view(self.manager.snapshot())


class TableView(QtWidgets.QWidget):
    def __init__(self, manager: TableManager, options: GameOptions) -> None:
        super().__init__()
        self.manager = manager
        self.options = options
        self._build_ui()
        self.manager.subscribe(self.update_view)
        self.update_view(self.manager.snapshot())

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        header = QtWidgets.QHBoxLayout()
        self.table_label = QtWidgets.QLabel(self.manager.config.name)
        self.hand_label = QtWidgets.QLabel("Hand #0")
        self.deck_label = QtWidgets.QLabel()
        header.addWidget(self.table_label)
        header.addStretch()
        header.addWidget(self.deck_label)
        header.addWidget(self.hand_label)
        layout.addLayout(header)

        self.dealer_row = HandRow("Dealer")
        layout.addWidget(self.dealer_row)
        self.player_row = HandRow("You")
        layout.addWidget(self.player_row)

        self.message_label = QtWidgets.QLabel()
        self.message_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        layout.addWidget(self.message_label)
        self.bank_label = QtWidgets.QLabel()
        layout.addWidget(self.bank_label)

        betting = QtWidgets.QHBoxLayout()
        self.chip_buttons: List[tuple[int, QtWidgets.QPushButton]] = []
        for value in self.manager.config.chip_values:
            button = QtWidgets.QPushButton(f"${value}")
            button.clicked.connect(lambda _checked=False, v=value: self.manager.place_bet(v))
            betting.addWidget(button)
            self.chip_buttons.append((value, button))
        self.clear_btn = self._button(betting, "Clear", self.manager.clear_bet)
        self.deal_btn = self._button(betting, "Deal", self.manager.deal_cards)
        self.rebet_btn = self._button(betting, "Rebet", lambda: self.manager.place_previous_bet(1))
        self.rebet2_btn = self._button(betting, "Rebet x2", lambda: self.manager.place_previous_bet(2))
        betting.addStretch()
        layout.addLayout(betting)

        controls = QtWidgets.QHBoxLayout()
        self.hit_btn = self._button(controls, "Hit", self.manager.hit)
        self.stand_btn = self._button(controls, "Stand", self.manager.stand_command)
        self.double_btn = self._button(controls, "Double", self.manager.double_down)
        controls.addStretch()
        self.new_round_btn = self._button(controls, "New Round", self.manager.start_new_round)
        self.reset_btn = self._button(controls, "Reset Game", self.on_reset)
        layout.addLayout(controls)

        lower = QtWidgets.QHBoxLayout()
        self.history_list = QtWidgets.QListWidget()
        lower.addWidget(self.history_list, stretch=1)
        self.stats_label = QtWidgets.QLabel()
        lower.addWidget(self.stats_label, stretch=1)
        layout.addLayout(lower, stretch=1)

    @staticmethod
    def _button(layout: QtWidgets.QHBoxLayout, text: str, handler) -> QtWidgets.QPushButton:
        button = QtWidgets.QPushButton(text)
        button.clicked.connect(lambda _checked=False: handler())
        layout.addWidget(button)
        return button

    def on_reset(self) -> None:
        answer = QtWidgets.QMessageBox.question(self, "Reset Game", "Start over with a fresh bankroll?")
        if answer == QtWidgets.QMessageBox.StandardButton.Yes:
            self.manager.reset_session()

    def update_view(self, snapshot: TableSnapshot) -> None:
        self.hand_label.setText(f"Hand #{self.manager.hand_number}")
        self.deck_label.setText(f"Cards left: {snapshot.deck_remaining}" if self.options.show_card_count else "")
        self.dealer_row.update_cards(
            snapshot.dealer_hand.cards, snapshot.reveal_index + 1, snapshot.visible_dealer_score
        )
        self.player_row.update_cards(
            snapshot.player_hand.cards, len(snapshot.player_hand), snapshot.player_hand.score
        )
        message = snapshot.message
        if snapshot.show_confetti and self.options.show_confetti:
            message = f"🎉 {message} 🎉"
        self.message_label.setText(message)
        self.bank_label.setText(f"Chips: ${snapshot.chips}    Bet: ${snapshot.current_bet}")

        betting = snapshot.phase == RoundPhase.BETTING
        playing = snapshot.phase == RoundPhase.PLAYING
        for value, button in self.chip_buttons:
            button.setEnabled(betting and snapshot.chips >= value)
        self.clear_btn.setEnabled(betting and snapshot.current_bet > 0)
        self.deal_btn.setEnabled(snapshot.can_deal_cards)
        self.rebet_btn.setEnabled(snapshot.can_rebet)
        self.rebet2_btn.setEnabled(snapshot.can_rebet and snapshot.chips >= snapshot.previous_bet * 2)
        self.hit_btn.setEnabled(playing)
        self.stand_btn.setEnabled(playing)
        self.double_btn.setEnabled(snapshot.can_double_down)
        self.new_round_btn.setEnabled(snapshot.phase == RoundPhase.FINISHED and not snapshot.game_over)
        self.reset_btn.setEnabled(snapshot.phase not in {RoundPhase.DEALING, RoundPhase.DEALER_TURN})

        self.history_list.clear()
        for entry in snapshot.betting_history:
            outcome = "Won" if entry.won else "Lost"
            self.history_list.addItem(f"{entry.timestamp:%H:%M:%S}  ${entry.amount}  {outcome}")
        stats = snapshot.stats
        self.stats_label.setText(
            f"Wins: {stats.total_wins}  Losses: {stats.total_losses}  Pushes: {stats.total_pushes}\n"
            f"Hands: {stats.total_hands}  Net: {stats.total_winnings:+}\n"
            f"Biggest win: ${stats.biggest_win}  Best streak: {stats.longest_win_streak}"
        )


__all__ = ["TableWindow", "TableView"]
