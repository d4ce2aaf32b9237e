"""
claimproof: configuration

Loads config from:
  1. Defaults
  2. Global config (CLI --config or ~/.claimproof/config.json)
  3. Workspace override (<workspace>/.claimproof/config.json)
  4. Environment variables

Circuit artifacts are per-deployment, so the workspace layer usually carries
the paths and the global layer carries the snarkjs binary location.
"""
from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "circuit": {
        "wasm_path": "circuits/divine_wrath.wasm",
        "zkey_path": "circuits/divine_wrath_final.zkey",
        "vkey_uri": "circuits/verification_key.json",
    },
    "snarkjs": {
        "command": "snarkjs",
        # Seconds; None waits for the prover however long it takes.
        "timeout": None,
    },
    "fetch": {
        "timeout": 30,
    },
}

ENV_OVERRIDES = {
    "CLAIMPROOF_WASM_PATH": ("circuit", "wasm_path"),
    "CLAIMPROOF_ZKEY_PATH": ("circuit", "zkey_path"),
    "CLAIMPROOF_VKEY_URI": ("circuit", "vkey_uri"),
    "CLAIMPROOF_SNARKJS": ("snarkjs", "command"),
}


def config_home() -> Path:
    home = os.environ.get("CLAIMPROOF_HOME")
    return Path(home) if home else Path.home() / ".claimproof"


def load_config(config_path: Optional[Path] = None, workspace: Optional[Path] = None) -> dict:
    """Load claimproof config.

    `config_path` (CLI --config) is treated as the global user config layer.
    If absent, ~/.claimproof/config.json is used as the global layer.

    If `workspace` is provided, <workspace>/.claimproof/config.json is loaded
    as a workspace-specific override on top of the global layer.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    # Tests must not depend on a real ~/.claimproof/config.json.
    is_pytest = bool(os.environ.get("PYTEST_CURRENT_TEST"))

    global_path = config_path if config_path else config_home() / "config.json"
    if is_pytest and config_path is None:
        global_path = None
    if global_path is not None and global_path.exists():
        config = _merge(config, _read_json(global_path))
        LOGGER.debug("Loaded config from %s", global_path)

    if workspace:
        ws_config_path = Path(workspace) / ".claimproof" / "config.json"
        if ws_config_path.exists():
            config = _merge(config, _read_json(ws_config_path))
            LOGGER.debug("Loaded workspace config from %s", ws_config_path)

    _apply_env_overrides(config)
    return config


def _read_json(path: Path) -> dict:
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        LOGGER.warning("Could not read %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        LOGGER.warning("Ignoring %s: top-level value is not an object", path)
        return {}
    return data


def _merge(base: dict, override: dict) -> dict:
    """Deep merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict) -> None:
    """Apply explicit env var overrides after file/default loading."""
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config.setdefault(section, {})[key] = value

    timeout = os.environ.get("CLAIMPROOF_PROVER_TIMEOUT")
    if timeout:
        try:
            config.setdefault("snarkjs", {})["timeout"] = float(timeout)
        except ValueError:
            LOGGER.warning("Invalid CLAIMPROOF_PROVER_TIMEOUT=%r", timeout)


__all__ = ["DEFAULT_CONFIG", "config_home", "load_config"]
