"""Minimal Tkinter fallback UI."""
from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable

from ..core.game import RoundPhase
from ..core.persist import JsonFileStore
from ..core.table_manager import TableConfig, TableManager, TableSnapshot


class TkClock:
    def __init__(self, root: tk.Misc) -> None:
        self.root = root

    def pause(self, seconds: float) -> None:
        done = tk.IntVar(master=self.root, value=0)
        self.root.after(int(seconds * 1000), done.set, 1)
        self.root.wait_variable(done)

    def call_later(self, seconds: float, callback: Callable[[], None]) -> None:
        self.root.after(int(seconds * 1000), callback)


def _describe(snapshot: TableSnapshot) -> str:
    dealer = " ".join(card.display for card in snapshot.visible_dealer_cards)
    hidden = len(snapshot.dealer_hand) - len(snapshot.visible_dealer_cards)
    dealer += " ??" * hidden
    player = " ".join(card.display for card in snapshot.player_hand.cards)
    return (
        f"Dealer: {dealer} ({snapshot.visible_dealer_score})\n"
        f"You: {player} ({snapshot.player_hand.score})\n"
        f"{snapshot.message}\n"
        f"Chips: ${snapshot.chips}   Bet: ${snapshot.current_bet}"
    )


def launch_tk(config: TableConfig | None = None) -> int:
    config = config or TableConfig()
    root = tk.Tk()
    root.title("Blackjack (Fallback)")
    manager = TableManager(config, clock=TkClock(root), store=JsonFileStore(config.save_path))
    status = tk.StringVar()

    def render(snapshot: TableSnapshot) -> None:
        status.set(_describe(snapshot))
        playing = snapshot.phase == RoundPhase.PLAYING
        hit_btn.state(["!disabled"] if playing else ["disabled"])
        stand_btn.state(["!disabled"] if playing else ["disabled"])
        double_btn.state(["!disabled"] if snapshot.can_double_down else ["disabled"])
        deal_btn.state(["!disabled"] if snapshot.can_deal_cards else ["disabled"])

    chips = ttk.Frame(root)
    chips.pack(padx=20, pady=(20, 5))
    for value in config.chip_values:
        ttk.Button(chips, text=f"${value}", command=lambda v=value: manager.place_bet(v)).pack(side="left")
    ttk.Button(chips, text="Clear", command=manager.clear_bet).pack(side="left")
    deal_btn = ttk.Button(chips, text="Deal", command=manager.deal_cards)
    deal_btn.pack(side="left")
    ttk.Button(chips, text="Rebet", command=manager.place_previous_bet).pack(side="left")

    actions = ttk.Frame(root)
    actions.pack(padx=20, pady=5)
    hit_btn = ttk.Button(actions, text="Hit", command=manager.hit)
    hit_btn.pack(side="left")
    stand_btn = ttk.Button(actions, text="Stand", command=manager.stand_command)
    stand_btn.pack(side="left")
    double_btn = ttk.Button(actions, text="Double", command=manager.double_down)
    double_btn.pack(side="left")
    ttk.Button(actions, text="New Round", command=manager.start_new_round).pack(side="left")
    ttk.Button(actions, text="Reset", command=manager.reset_session).pack(side="left")

    ttk.Label(root, textvariable=status, justify="left").pack(padx=20, pady=10)
    manager.subscribe(render)
    render(manager.snapshot())
    root.mainloop()
    return 0


__all__ = ["launch_tk", "TkClock"]
