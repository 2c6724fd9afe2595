from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from commit_canvas.byte_costs import average_bytes
from commit_canvas.models import LanguageWeight, SelectionWeight

WEIGHT_SCALE = 10000


def build_selection_weights(weights: Sequence[LanguageWeight]) -> list[SelectionWeight]:
    """Turn target ratios into integer round-robin weights.

    Weight grows with the requested ratio and shrinks with the language's
    per-commit payload, so byte totals (what GitHub measures) track the ratios.
    """
    selection: list[SelectionWeight] = []
    for item in weights:
        if item.ratio <= 0:
            continue
        weight = max(1, (item.ratio * WEIGHT_SCALE) // average_bytes(item.language))
        selection.append(SelectionWeight(language=item.language, weight=weight))
    return selection


def select_language(weights: Sequence[SelectionWeight], index: int, fallback: str | None = None) -> str:
    """Deterministic weighted round-robin pick for commit ``index``."""
    if len(weights) == 1:
        return weights[0].language

    total = sum(item.weight for item in weights)
    if total == 0 or not weights:
        if fallback is None:
            raise ValueError("No selection weights and no fallback language.")
        return fallback

    position = index % total
    cumulative = 0
    for item in weights:
        cumulative += item.weight
        if position < cumulative:
            return item.language

    return weights[0].language


def cycle_distribution(weights: Sequence[SelectionWeight]) -> dict[str, int]:
    """Count how often each language is picked over one full cycle."""
    total = sum(item.weight for item in weights)
    return dict(Counter(select_language(weights, index) for index in range(total)))


class LanguageSelector:
    """Selection weights computed once per generation call."""

    def __init__(self, weights: Sequence[LanguageWeight]):
        if not weights:
            raise ValueError("LanguageSelector needs at least one language.")
        self.fallback = weights[0].language
        self.weights = build_selection_weights(weights)

    @property
    def cycle_length(self) -> int:
        return sum(item.weight for item in self.weights)

    def __call__(self, index: int) -> str:
        return select_language(self.weights, index, fallback=self.fallback)
