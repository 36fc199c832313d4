"""Configuration loading and logging setup."""

import logging
import os
from enum import Enum

import yaml


class Direction(Enum):
    """Which way lists and record-arrays grow."""
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


def parse_direction(value) -> Direction:
    """Accept a :class:`Direction`, its name or its value (case-insensitive)."""
    if value is None:
        return Direction.VERTICAL
    if isinstance(value, Direction):
        return value
    try:
        return Direction(str(value).strip().lower())
    except ValueError:
        raise ValueError(
            f"Unknown direction '{value}', expecting 'vertical' or 'horizontal'"
        ) from None


DEFAULT_CONFIG = {
    "duplicate_all": True,
    "direction": "vertical",
    "remove_non_existent": False,
    "log_level": "INFO",
    "output": None,
}


def load_config(config_path=None) -> dict:
    """Load configuration from a YAML file on top of the defaults."""
    config = dict(DEFAULT_CONFIG)
    if config_path and os.path.exists(config_path):
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f) or {}
        config.update(user_config)
    config["direction"] = parse_direction(config["direction"])
    return config


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, str(level_str).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
