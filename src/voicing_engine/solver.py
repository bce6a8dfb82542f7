"""Solver — depth-first voicing search with layered pruning.

State:  the stack of candidates chosen for strings ``0..i``.
Branch: every candidate of string ``i + 1`` (muted included).
Output: complete, pitch-class-covering voicings ranked by
        :meth:`ErgonomicCostModel.score`, best first.

Design choices:
    - Cheap, optimistic bounds prune while branching; the exact barre-aware
      finger count only runs at leaves, where barres are fully known.
    - Pruning order after each push: fret span, distinct-fret finger budget,
      completeness look-ahead, minimum-sounded look-ahead.
    - Ties in total cost are broken by the fret tuple (muted = -1), so the
      ranking never depends on enumeration order.
    - The branching factor is (candidates per string + 1) ** strings before
      pruning; ``max_fret``, ``max_span``, ``max_fingers`` and ``min_sounded``
      are the only bounds on it.
    - Recursion depth equals the string count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

from src.config import load_yaml_config

from .candidate_map import (
    build_candidate_map,
    normalize_pitch_classes,
    suppliable_suffixes,
    validate_search_inputs,
)
from .cost_model import ErgonomicCostModel, count_fingers, detect_barre
from .models import Candidate, Voicing, pitch_class


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchConfig:
    """Bounds for a single voicing search."""

    max_span: int = 4
    max_fingers: int = 4
    min_sounded: int = 4
    max_results: int = 20
    allow_open: bool = True

    def __post_init__(self) -> None:
        if self.max_span < 0:
            raise ValueError(f"max_span must be non-negative, got {self.max_span}")
        if self.max_fingers < 1:
            raise ValueError(f"max_fingers must be at least 1, got {self.max_fingers}")
        if self.min_sounded < 1:
            raise ValueError(f"min_sounded must be at least 1, got {self.min_sounded}")
        if self.max_results < 1:
            raise ValueError(f"max_results must be at least 1, got {self.max_results}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SearchConfig":
        """Build from a mapping, ignoring keys that are not search bounds."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in names})

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "SearchConfig":
        """Read the ``search`` section of a cost-config YAML."""
        cfg = load_yaml_config(config_path, ["search"])
        return cls.from_mapping(cfg["search"] or {})


@dataclass
class SearchStats:
    """Counters collected during one search (logged at DEBUG)."""

    leaves: int = 0
    accepted: int = 0
    pruned_span: int = 0
    pruned_fingers: int = 0
    pruned_coverage: int = 0
    pruned_sounded: int = 0
    rejected_fingers: int = 0


class _Search:
    """One depth-first traversal. Owns its assignment stack; never shared."""

    def __init__(
        self,
        targets: frozenset[int],
        root: int,
        candidate_map: list[list[Candidate]],
        config: SearchConfig,
        cost_model: ErgonomicCostModel,
    ) -> None:
        self.targets = targets
        self.root = root
        self.candidate_map = candidate_map
        self.config = config
        self.cost_model = cost_model
        self.string_count = len(candidate_map)
        self.suffixes = suppliable_suffixes(candidate_map)
        self.stack: list[Candidate] = []
        self.results: list[Voicing] = []
        self.stats = SearchStats()

    def run(self) -> list[Voicing]:
        self._dfs(0)
        return self.results

    # ── Pruning predicates ────────────────────────────────────

    def _span_exceeded(self) -> bool:
        frets = [c.fret for c in self.stack if c.is_fretted]
        return len(frets) >= 2 and max(frets) - min(frets) > self.config.max_span

    def _finger_budget_exceeded(self) -> bool:
        distinct = {c.fret for c in self.stack if c.is_fretted}
        return len(distinct) > self.config.max_fingers

    def _coverage_unreachable(self, string: int) -> bool:
        covered = {c.pitch_class for c in self.stack if c.pitch_class is not None}
        missing = self.targets - covered
        return bool(missing - self.suffixes[string + 1])

    def _too_few_sounded(self, string: int) -> bool:
        sounded = sum(1 for c in self.stack if not c.is_muted)
        remaining = self.string_count - string - 1
        return sounded + remaining < self.config.min_sounded

    def _should_prune(self, string: int, candidate: Candidate) -> bool:
        if candidate.is_fretted and self._span_exceeded():
            self.stats.pruned_span += 1
            return True
        if self._finger_budget_exceeded():
            self.stats.pruned_fingers += 1
            return True
        if self._coverage_unreachable(string):
            self.stats.pruned_coverage += 1
            return True
        if self._too_few_sounded(string):
            self.stats.pruned_sounded += 1
            return True
        return False

    # ── Traversal ─────────────────────────────────────────────

    def _dfs(self, string: int) -> None:
        if string == self.string_count:
            self._visit_leaf()
            return

        for candidate in self.candidate_map[string]:
            self.stack.append(candidate)
            if not self._should_prune(string, candidate):
                self._dfs(string + 1)
            self.stack.pop()

    def _visit_leaf(self) -> None:
        self.stats.leaves += 1
        voicing = Voicing.from_candidates(self.stack)

        if voicing.sounded_count < self.config.min_sounded:
            return
        if not self.targets <= voicing.pitch_classes:
            return
        if count_fingers(voicing, detect_barre(voicing)) > self.config.max_fingers:
            self.stats.rejected_fingers += 1
            return

        self.stats.accepted += 1
        self.results.append(voicing.with_breakdown(self.cost_model.score(voicing, self.root)))


def rank_voicings(voicings: Iterable[Voicing]) -> list[Voicing]:
    """Sort scored voicings by ``(total_cost, fret tuple)`` ascending."""
    return sorted(voicings, key=lambda v: (v.total_cost, v.sort_key()))


def prune_subsets(ranked: Sequence[Voicing]) -> list[Voicing]:
    """Drop voicings dominated by an earlier, fuller voicing.

    A voicing is dominated when every string it sounds carries the identical
    fret in an earlier (better or equal) voicing that sounds strictly more
    strings.
    """
    kept: list[Voicing] = []
    for voicing in ranked:
        if not any(voicing.is_subset_of(existing) for existing in kept):
            kept.append(voicing)
    return kept


def generate_voicings(
    pitch_classes: Iterable[int],
    root: int,
    tuning: Sequence[int],
    max_fret: int,
    config: SearchConfig | None = None,
    cost_model: ErgonomicCostModel | None = None,
) -> list[Voicing]:
    """Find and rank playable voicings of a pitch-class set.

    Args:
        pitch_classes: Chord tones as pitch classes (reduced mod 12).
        root: Pitch class the bass should sound (reduced mod 12).
        tuning: Absolute open-string semitones, lowest string first.
        max_fret: Highest fret the search may use.
        config: Search bounds. Defaults to :class:`SearchConfig` defaults.
        cost_model: Scorer. Defaults to the project cost config.

    Returns:
        Up to ``config.max_results`` voicings, best first, each carrying its
        :class:`ErgonomicBreakdown`. An empty list means no playable voicing
        exists under these bounds.

    Raises:
        ValueError: If *tuning* is empty or *max_fret* is negative.
    """
    validate_search_inputs(tuning, max_fret)

    targets = normalize_pitch_classes(pitch_classes)
    if not targets:
        return []

    if config is None:
        config = SearchConfig()
    if config.min_sounded > len(tuning):
        logger.debug(
            "min_sounded=%d exceeds %d strings; no voicing possible",
            config.min_sounded,
            len(tuning),
        )
        return []

    if cost_model is None:
        cost_model = ErgonomicCostModel()

    candidate_map = build_candidate_map(targets, tuning, max_fret, config.allow_open)
    search = _Search(targets, pitch_class(root), candidate_map, config, cost_model)
    found = search.run()

    ranked = prune_subsets(rank_voicings(found))
    result = ranked[: config.max_results]

    logger.debug(
        "Voicing search %s: %s; %d ranked, %d after subset pruning, %d returned",
        sorted(targets),
        search.stats,
        len(found),
        len(ranked),
        len(result),
    )
    return result


def best_voicing(
    pitch_classes: Iterable[int],
    root: int,
    tuning: Sequence[int],
    max_fret: int,
    config: SearchConfig | None = None,
    cost_model: ErgonomicCostModel | None = None,
) -> Optional[Voicing]:
    """The single most playable voicing, or ``None`` if there is none."""
    voicings = generate_voicings(pitch_classes, root, tuning, max_fret, config, cost_model)
    return voicings[0] if voicings else None
