"""Validation and normalization of language ratios and contribution calendars."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from commit_canvas.errors import ValidationError
from commit_canvas.languages import Language, is_supported
from commit_canvas.models import ContributionDay, GitIdentity, LanguageWeight

RATIO_TOLERANCE = (95, 105)


def validate_language_weights(weights: Sequence[LanguageWeight]) -> None:
    """Reject unusable language configurations before any side effect."""
    if not weights:
        raise ValidationError("At least one language must be configured.")

    total = 0
    for index, weight in enumerate(weights):
        if not weight.language or not weight.language.strip():
            raise ValidationError(f"Language config [{index}]: language must not be empty.")
        if weight.ratio < 0:
            raise ValidationError(f"Language config [{index}]: ratio must not be negative.")
        if weight.ratio > 100:
            raise ValidationError(f"Language config [{index}]: ratio must not exceed 100.")
        if not is_supported(weight.language):
            raise ValidationError(f"Language config [{index}]: unsupported language {weight.language!r}.")
        total += weight.ratio

    if total == 0:
        raise ValidationError("Language ratios must not sum to 0.")


def normalize_language_weights(weights: Sequence[LanguageWeight]) -> list[LanguageWeight]:
    """Validate ``weights`` and rescale them toward a total of 100.

    Totals inside ``RATIO_TOLERANCE`` are kept as given. Anything else is
    rescaled with integer truncation, so the result may land a few points
    under 100.
    """
    validate_language_weights(weights)

    canonical = [
        LanguageWeight(language=w.language.strip().lower(), ratio=w.ratio, locked=w.locked) for w in weights
    ]
    total = sum(w.ratio for w in canonical)
    low, high = RATIO_TOLERANCE
    if low <= total <= high:
        return canonical

    return [
        LanguageWeight(language=w.language, ratio=(w.ratio * 100) // total, locked=w.locked)
        for w in canonical
    ]


def default_weights(language: str | None = None) -> list[LanguageWeight]:
    """Single-language configuration; markdown when nothing is given."""
    return [LanguageWeight(language=(language or Language.MARKDOWN.value), ratio=100)]


def validate_identity(identity: GitIdentity) -> GitIdentity:
    """Re-validate an identity that was built or mutated without validation."""
    try:
        return GitIdentity.model_validate(identity.model_dump())
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid git identity: {exc}") from exc


def normalize_contributions(days: Iterable[ContributionDay]) -> list[ContributionDay]:
    """Drop empty days and sort the rest by date."""
    days = list(days)
    for day in days:
        if day.count < 0:
            raise ValidationError(f"Invalid contribution count for {day.date.isoformat()}: {day.count}")

    active = sorted((day for day in days if day.count > 0), key=lambda day: day.date)
    if not active:
        raise ValidationError("No commits to generate: every contribution count is zero.")
    return active


def parse_language_weights(spec: str) -> list[LanguageWeight]:
    """Parse ``"go=50,python=50"`` into weights; a bare name means 100."""
    weights: list[LanguageWeight] = []
    for chunk in spec.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, sep, ratio = chunk.partition("=")
        if not sep:
            weights.append(LanguageWeight(language=name.strip(), ratio=100))
            continue
        try:
            value = int(ratio.strip())
        except ValueError as exc:
            raise ValidationError(f"Invalid ratio for {name.strip()!r}: {ratio.strip()!r}") from exc
        weights.append(LanguageWeight(language=name.strip(), ratio=value))
    return weights


def parse_contributions(payload: Any) -> list[ContributionDay]:
    """Validate a decoded JSON payload as a list of contribution days."""
    if not isinstance(payload, list):
        raise ValidationError("Contributions must be a JSON list of {date, count} objects.")
    try:
        return [ContributionDay.model_validate(item) for item in payload]
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid contribution entry: {exc}") from exc


def load_contributions(path: Path) -> list[ContributionDay]:
    """Read contributions exported as ``[{"date": "YYYY-MM-DD", "count": N}, ...]``."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"{path} is not valid JSON: {exc}") from exc
    return parse_contributions(payload)


def dump_contributions(days: Iterable[ContributionDay], path: Path) -> Path:
    """Write contributions in the same format ``load_contributions`` reads."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = [day.model_dump(mode="json") for day in days]
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path
