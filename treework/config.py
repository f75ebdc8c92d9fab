"""Configuration handling for treework"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from treework.constants import (
    CONFIG_RELATIVE_PATH,
    DEFAULT_BASE_DIR_RELATIVE,
    ENV_BASE_DIR,
    ENV_EDITOR,
)
from treework.exceptions import ConfigError
from treework.logging_config import get_logger

logger = get_logger(__name__)


def config_path() -> Path:
    """Location of the persistent config file."""
    return Path.home() / CONFIG_RELATIVE_PATH


def load_config_file(path: Optional[Path] = None) -> dict:
    """Read the config file, returning an empty dict if it is missing or unreadable."""
    path = path or config_path()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable config file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: expected a JSON object")
        return {}
    return data


def save_config(base_dir: str, path: Optional[Path] = None) -> Path:
    """Persist the base folder, creating the config directory if needed.

    Raises:
        ConfigError: If the file cannot be written
    """
    path = path or config_path()
    data = load_config_file(path)
    data["base_dir"] = base_dir
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        raise ConfigError(f"Could not save config to {path}: {e}") from e

    logger.info(f"Saved base folder {base_dir} to {path}")
    return path


@dataclass(frozen=True)
class Config:
    """Settings resolved once at process start and passed explicitly from then on."""

    base_dir: str
    editor: Optional[str] = None
    verbose: bool = False
    debug: bool = False
    base_dir_origin: str = "default"  # env, config or default

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.base_dir or not str(self.base_dir).strip():
            raise ConfigError("base_dir cannot be empty")
        if self.base_dir_origin not in ("env", "config", "default"):
            raise ConfigError(f"unknown base_dir origin '{self.base_dir_origin}'")

    @classmethod
    def resolve(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        path: Optional[Path] = None,
        verbose: bool = False,
        debug: bool = False,
    ) -> "Config":
        """Resolve settings from the environment and config file.

        Base folder: DEV_DIR > config file > ~/Desktop/Development.
        Editor: WT_EDITOR, no default.
        """
        environ = os.environ if environ is None else environ

        if environ.get(ENV_BASE_DIR):
            base_dir, origin = environ[ENV_BASE_DIR], "env"
        else:
            stored = load_config_file(path).get("base_dir")
            if stored:
                base_dir, origin = str(stored), "config"
            else:
                base_dir, origin = str(Path.home() / DEFAULT_BASE_DIR_RELATIVE), "default"

        return cls(
            base_dir=os.path.expanduser(base_dir),
            editor=environ.get(ENV_EDITOR) or None,
            verbose=verbose,
            debug=debug,
            base_dir_origin=origin,
        )

    @staticmethod
    def has_config_file(path: Optional[Path] = None) -> bool:
        return (path or config_path()).exists()

    def base_dir_source(self) -> str:
        """Human readable origin of the base folder."""
        return {
            "env": f"from {ENV_BASE_DIR} env var",
            "config": "from config file",
            "default": "default",
        }[self.base_dir_origin]

    def to_dict(self) -> dict:
        return {
            "base_dir": self.base_dir,
            "editor": self.editor,
            "verbose": self.verbose,
            "debug": self.debug,
            "base_dir_origin": self.base_dir_origin,
        }
