from __future__ import annotations

import json
import logging
from pathlib import Path

from bingo_cards.logging_setup import setup_logging


def test_json_log_file(tmp_path: Path):
    log_file = tmp_path / "run.log"
    setup_logging(level="DEBUG", log_file=str(log_file), json_format=True)
    logging.getLogger("bingo_cards.test").warning("Similar tiles [%s]", "a")
    for handler in logging.getLogger().handlers:
        handler.flush()
    record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert record["level"] == "WARNING"
    assert record["message"] == "Similar tiles [a]"
    assert record["logger"] == "bingo_cards.test"
    setup_logging(level="INFO")
