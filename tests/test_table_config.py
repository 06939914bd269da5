import json

import pytest

from blackjack_gui.core.pacing import ManualClock
from blackjack_gui.core.persist import MemoryStore
from blackjack_gui.core.table_manager import TableManager, create_table_from_file, load_table_config


def test_load_table_config_with_custom_values(tmp_path):
    config_path = tmp_path / "table.json"
    config_path.write_text(
        json.dumps(
            {
                "table_name": "High Rollers",
                "save_path": "saves/session.json",
                "delays": {"deal": 0.1, "settle_display": 3, "bogus": 9},
                "chip_values": [100, 25, 500],
            }
        )
    )

    config = load_table_config(config_path)
    assert config.name == "High Rollers"
    assert config.save_path == config_path.resolve().parent / "saves" / "session.json"
    assert config.delays.deal == 0.1
    assert config.delays.settle_display == 3.0
    assert config.delays.reveal == 1.0
    assert config.chip_values == (25, 100, 500)

    manager = TableManager(config, clock=ManualClock(), store=MemoryStore())
    manager.place_bet(25)
    manager.deal_cards()
    assert manager.clock.pauses[:4] == [0.1] * 4


def test_bad_chip_values_rejected(tmp_path):
    config_path = tmp_path / "table.json"
    config_path.write_text(json.dumps({"chip_values": [0, 5]}))
    with pytest.raises(ValueError):
        load_table_config(config_path)


def test_create_table_from_file_saves_next_to_config(tmp_path):
    config_path = tmp_path / "table.json"
    config_path.write_text(json.dumps({"save_path": "session.json"}))
    manager = create_table_from_file(config_path)
    manager.place_bet(5)
    assert (tmp_path / "session.json").exists()
