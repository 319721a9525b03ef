import json
import logging
import logging.handlers

import pytest

from sandsim.config import DEFAULT_CONFIG, load_config, merge_config, setup_logging
from sandsim.phys import Physics


def test_merge_keeps_defaults():
    config = merge_config({"grid": {"width": 10}, "extra": 5})
    assert config["grid"] == {"width": 10, "height": DEFAULT_CONFIG["grid"]["height"]}
    assert config["extra"] == 5
    assert config["physics"] == DEFAULT_CONFIG["physics"]
    # defaults are not mutated
    assert DEFAULT_CONFIG["grid"]["width"] == 120


def test_default_physics_section_is_valid():
    phys = Physics(params=merge_config(None)["physics"])
    assert phys.water_flow_distance == 2


def test_load_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"run_control": {"fps": 12}}))
    config = load_config(str(path))
    assert config["run_control"]["fps"] == 12
    assert config["run_control"]["log_throttle_steps"] == 100


def test_load_config_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))


def test_load_config_bad_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_setup_logging_with_file(tmp_path, restore_logging):
    log_file = tmp_path / "logs" / "run.log"
    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    logging.getLogger("sandsim.test").info("hello")
    for h in root.handlers:
        h.flush()
    assert "hello" in log_file.read_text()


def test_setup_logging_console_only(restore_logging):
    setup_logging({"logging": {"level": "INFO", "log_file": ""}}, console_level="warning")
    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.handlers[0].level == logging.WARNING
