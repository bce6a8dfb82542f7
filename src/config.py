"""Project configuration for Fretboard Architect.

Resolves the default config file locations, loads YAML config files with
required-key validation, and sets up logging for the CLI.
No heavy imports; nothing is read at import time.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml


# ── Project layout ────────────────────────────────────────────
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
CONFIG_DIR: Path = PROJECT_ROOT / "configs"
DEFAULT_COSTS_PATH: Path = CONFIG_DIR / "voicing_costs.yaml"
DEFAULT_TUNINGS_PATH: Path = CONFIG_DIR / "tunings.yaml"

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def load_yaml_config(
    config_path: str | Path,
    required_keys: Iterable[str] = (),
) -> dict[str, Any]:
    """Load a YAML mapping and check that every required key is present.

    Args:
        config_path: Path to the YAML file.
        required_keys: Top-level keys the file must define.

    Returns:
        The parsed mapping.

    Raises:
        FileNotFoundError: If *config_path* does not exist.
        ValueError: If the file is not a mapping or a required key is missing.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        cfg = yaml.safe_load(fh)

    if not isinstance(cfg, dict):
        raise ValueError(
            f"Config must contain a YAML mapping, got {type(cfg).__name__}: {path}"
        )

    for key in required_keys:
        if key not in cfg:
            raise ValueError(f"Missing required key '{key}' in config: {path}")

    return cfg


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging for command-line use.

    Library modules only create loggers; handlers are attached here so that
    importing the engine never prints anything by itself.
    """
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=_LOG_FORMAT)
