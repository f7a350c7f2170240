import json
import os
from datetime import datetime

DEFAULT_CONFIG_PATH = "config/runtime_config.json"

DEFAULT_CONFIG = {
    "max_steps": 10_000,
    "step_delay": 0.2,
    "tape_window": 10,
    "write_blank": False,
    "show_history": False,
    "machines_directory": "machines/",
    "output_directory": "logs/",
    "log_file_prefix": "turingtape_",
}

# Expected types for validation
CONFIG_SCHEMA = {
    "max_steps": int,
    "step_delay": (int, float),
    "tape_window": int,
    "write_blank": bool,
    "show_history": bool,
    "machines_directory": str,
    "output_directory": str,
    "log_file_prefix": str,
}


def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        if not isinstance(config[key], expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    # Range checks the types alone can't express
    if config["max_steps"] <= 0:
        raise ValueError("max_steps must be a positive number of steps.")
    if config["tape_window"] <= 0:
        raise ValueError("tape_window must be positive.")
    if config["step_delay"] < 0:
        raise ValueError("step_delay cannot be negative.")


def load_config(path=DEFAULT_CONFIG_PATH, verbose=False):
    config = DEFAULT_CONFIG.copy()

    if path is not None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found at: {path}")

        with open(path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        # Merge defaults with overrides
        config.update(user_config)

    validate_config(config)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config


def save_config(config, path=DEFAULT_CONFIG_PATH):
    validate_config(config)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
