"""Config store.

config.yaml lives in the config dir and looks like:

    defaults:
      model: gpt-3.5-turbo
      temp: 0.7

Both keys are optional; missing ones are filled with built-in defaults.
The file is created with those defaults on first run.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigError
from .logging_util import get_logger
from .types import Config

logger = get_logger(__name__)

APP_DIR_NAME = "äh"
CONFIG_FILE_NAME = "config.yaml"
HISTORY_FILE_NAME = "history.json"


def config_dir(environ: Mapping[str, str]) -> Path:
    configured = environ.get("AEH_CONFIG_DIR")
    if configured:
        return Path(configured)
    for key in ("XDG_CONFIG_HOME", "XDG_CONFIG_DIR"):
        base = environ.get(key)
        if base:
            return Path(base) / APP_DIR_NAME
    home = environ.get("HOME")
    if home:
        return Path(home) / ".config" / APP_DIR_NAME
    return Path(".") / APP_DIR_NAME


def ensure_config_dir(path: Path) -> None:
    if not path.exists():
        try:
            path.mkdir(mode=0o700, parents=True)
        except OSError as e:
            raise ConfigError(f"could not create config dir '{path}' ({e})")
    elif not path.is_dir():
        raise ConfigError(f"config dir '{path}' exists but is not a directory")


def ensure_exists(path: Path) -> bool:
    """Write a default-filled config to `path` unless something is already there.

    Returns True when the file was created.
    """
    if path.is_dir():
        raise ConfigError(
            f"config file '{path}' exists but is a directory; "
            "please remove that directory, as it is where the config file needs to go"
        )
    if path.exists():
        return False

    logger.warning("the config did not yet exist, so I am creating a default-config in this file for you to start with...")
    try:
        text = yaml.safe_dump(Config().fill_missing().to_document(), default_flow_style=False, sort_keys=False, allow_unicode=True)
    except yaml.YAMLError as e:
        raise ConfigError(f"error marshaling default config to YAML ({e})")

    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ConfigError(f"error writing default config file ({e})")

    logger.warning("filled default config at '%s'", path)
    return True


def _parse(doc: Any) -> Config:
    if doc is None:
        return Config()
    if not isinstance(doc, dict):
        raise ConfigError(f"config must be a mapping, got {type(doc).__name__}")

    defaults = doc.get("defaults")
    if defaults is None:
        return Config()
    if not isinstance(defaults, dict):
        raise ConfigError(f"'defaults' must be a mapping, got {type(defaults).__name__}")

    model = defaults.get("model")
    if model is not None and not isinstance(model, str):
        raise ConfigError(f"defaults.model must be a string, got {type(model).__name__}")

    temp = defaults.get("temp")
    if temp is not None:
        if isinstance(temp, bool) or not isinstance(temp, (int, float)):
            raise ConfigError(f"defaults.temp must be a number, got {type(temp).__name__}")
        temp = float(temp)

    return Config(model=model, temp=temp)


def load(path: Path) -> Config:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"error reading config file ({e})")

    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"error unmarshaling config file ({e})")

    return _parse(doc).fill_missing()
