"""Pytest fixtures for voicing engine tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence

import pytest
import yaml

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.config import DEFAULT_COSTS_PATH  # noqa: E402
from src.voicing_engine.cost_model import ErgonomicCostModel  # noqa: E402
from src.voicing_engine.models import Voicing  # noqa: E402


STANDARD_GUITAR: list[int] = [28, 33, 38, 43, 47, 52]  # E2 A2 D3 G3 B3 E4


def make_voicing(entries: Sequence[tuple[int, int, int]], string_count: int = 6) -> Voicing:
    """Build a voicing from ``(string, semitones, fret)`` triples; others muted."""
    frets: list[Optional[int]] = [None] * string_count
    semitones: list[Optional[int]] = [None] * string_count
    for string, semi, fret in entries:
        frets[string] = fret
        semitones[string] = semi
    return Voicing(tuple(frets), tuple(semitones))


@pytest.fixture
def standard_tuning() -> list[int]:
    return list(STANDARD_GUITAR)


@pytest.fixture
def cost_model() -> ErgonomicCostModel:
    return ErgonomicCostModel()


@pytest.fixture
def base_cost_config() -> dict:
    with open(DEFAULT_COSTS_PATH, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


@pytest.fixture
def write_config(tmp_path):
    """Write a config mapping to a temp YAML file and return its path."""

    def _write(cfg: dict, name: str = "costs.yaml") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as fh:
            yaml.safe_dump(cfg, fh)
        return path

    return _write
