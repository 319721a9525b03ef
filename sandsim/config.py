# config.py
"""
Configuration and logging setup.

The configuration is a JSON document with the sections of DEFAULT_CONFIG.
Sections found in the file replace the defaults key by key; anything the file
leaves out keeps its default.
"""
import copy
import json
import logging
import logging.handlers
import os
from typing import Any, Dict, Optional

from sandsim.phys import DEFAULT_PARAMS

DEFAULT_CONFIG: Dict[str, Any] = {
    "grid": {"width": 120, "height": 40},
    "physics": dict(DEFAULT_PARAMS),
    "run_control": {
        "fps": 30,
        "steps_per_frame": 1,
        "max_steps": 0,  # 0 runs until the user quits
        "log_throttle_steps": 100,
        "seed": None,
    },
    "visualization": {"pixel_scale": 8, "brush_size": 3, "material": "sand"},
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "log_file": "logs/sandsim.log",
    },
}


def merge_config(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Return DEFAULT_CONFIG with `overrides` applied section by section."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in (overrides or {}).items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file and merges it over the defaults."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            raw = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise
    logging.info("Configuration loaded successfully.")
    return merge_config(raw)


def setup_logging(config: Dict[str, Any], console_level: Optional[str] = None) -> None:
    """
    Configures the root logger: a console handler plus a rotating file when
    `log_file` is set. `console_level` lets the text renderer keep the
    terminal quiet while the file still gets everything.
    """
    log_config = config.get('logging', {})
    log_level = str(log_config.get('level', 'INFO')).upper()
    log_format = log_config.get('format', DEFAULT_CONFIG['logging']['format'])
    log_file_path = log_config.get('log_file')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    if console_level:
        console_handler.setLevel(console_level.upper())
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates at 1MB, keeps 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")
