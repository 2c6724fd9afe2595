from __future__ import annotations

import json
from datetime import date

import pytest

from commit_canvas.errors import ValidationError
from commit_canvas.models import ContributionDay, LanguageWeight
from commit_canvas.schedule import (
    default_weights,
    dump_contributions,
    load_contributions,
    normalize_contributions,
    normalize_language_weights,
    parse_contributions,
    parse_language_weights,
    validate_language_weights,
)


def _weights(*pairs: tuple[str, int]) -> list[LanguageWeight]:
    return [LanguageWeight(language=name, ratio=ratio) for name, ratio in pairs]


def test_normalize_language_weights_given_total_inside_tolerance_when_normalized_then_ratios_are_unchanged() -> None:
    # Given
    weights = _weights(("Go", 52), ("python", 51))

    # When
    normalized = normalize_language_weights(weights)

    # Then
    assert [(w.language, w.ratio) for w in normalized] == [("go", 52), ("python", 51)]


def test_normalize_language_weights_given_total_outside_tolerance_when_normalized_then_truncating_rescale_is_applied() -> None:
    # Given
    weights = _weights(("markdown", 40), ("java", 40), ("python", 50))

    # When
    normalized = normalize_language_weights(weights)

    # Then
    assert [w.ratio for w in normalized] == [30, 30, 38]
    assert 97 <= sum(w.ratio for w in normalized) <= 100


def test_normalize_language_weights_given_locked_flag_when_normalized_then_flag_is_preserved() -> None:
    # Given
    weights = [LanguageWeight(language="rust", ratio=20, locked=True), LanguageWeight(language="go", ratio=20)]

    # When
    normalized = normalize_language_weights(weights)

    # Then
    assert [(w.ratio, w.locked) for w in normalized] == [(50, True), (50, False)]


@pytest.mark.parametrize(
    "weights",
    [
        [],
        [LanguageWeight(language="  ", ratio=100)],
        [LanguageWeight(language="go", ratio=-1), LanguageWeight(language="python", ratio=100)],
        [LanguageWeight(language="go", ratio=101)],
        [LanguageWeight(language="cobol", ratio=100)],
        [LanguageWeight(language="go", ratio=0), LanguageWeight(language="python", ratio=0)],
    ],
)
def test_validate_language_weights_given_unusable_config_when_validated_then_validation_error_is_raised(weights) -> None:
    # Given / When / Then
    with pytest.raises(ValidationError):
        validate_language_weights(weights)


def test_default_weights_given_no_language_when_built_then_markdown_takes_everything() -> None:
    # Given / When
    weights = default_weights()

    # Then
    assert [(w.language, w.ratio) for w in weights] == [("markdown", 100)]


def test_normalize_contributions_given_unsorted_days_with_zero_when_normalized_then_zero_is_dropped_and_order_is_ascending(
    sample_days,
) -> None:
    # Given / When
    days = normalize_contributions(sample_days)

    # Then
    assert [(d.date, d.count) for d in days] == [(date(2024, 1, 1), 2), (date(2024, 1, 2), 1)]


def test_normalize_contributions_given_only_zero_counts_when_normalized_then_no_commits_error_is_raised() -> None:
    # Given
    days = [ContributionDay(date=date(2024, 1, 1), count=0)]

    # When / Then
    with pytest.raises(ValidationError, match="No commits"):
        normalize_contributions(days)


def test_normalize_contributions_given_negative_count_when_normalized_then_validation_error_is_raised() -> None:
    # Given
    days = [ContributionDay(date=date(2024, 1, 1), count=-3)]

    # When / Then
    with pytest.raises(ValidationError, match="2024-01-01"):
        normalize_contributions(days)


def test_parse_language_weights_given_cli_string_when_parsed_then_pairs_and_bare_names_are_read() -> None:
    # Given / When
    pairs = parse_language_weights("go=50, python=50,")
    bare = parse_language_weights("rust")

    # Then
    assert [(w.language, w.ratio) for w in pairs] == [("go", 50), ("python", 50)]
    assert [(w.language, w.ratio) for w in bare] == [("rust", 100)]


def test_parse_language_weights_given_non_integer_ratio_when_parsed_then_validation_error_is_raised() -> None:
    # Given / When / Then
    with pytest.raises(ValidationError, match="go"):
        parse_language_weights("go=half")


def test_parse_contributions_given_non_list_or_bad_entry_when_parsed_then_validation_error_is_raised() -> None:
    # Given / When / Then
    with pytest.raises(ValidationError):
        parse_contributions({"date": "2024-01-01", "count": 1})
    with pytest.raises(ValidationError):
        parse_contributions([{"date": "not-a-date", "count": 1}])


def test_load_contributions_given_dumped_file_when_loaded_then_days_match(tmp_path, sample_days) -> None:
    # Given
    path = dump_contributions(sample_days, tmp_path / "nested" / "calendar.json")

    # When
    loaded = load_contributions(path)

    # Then
    assert loaded == sample_days
    assert json.loads(path.read_text(encoding="utf-8"))[0] == {"date": "2024-01-02", "count": 1}


def test_load_contributions_given_invalid_json_when_loaded_then_validation_error_is_raised(tmp_path) -> None:
    # Given
    path = tmp_path / "calendar.json"
    path.write_text("[{", encoding="utf-8")

    # When / Then
    with pytest.raises(ValidationError, match="not valid JSON"):
        load_contributions(path)
