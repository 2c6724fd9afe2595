from __future__ import annotations

import pytest

from commit_canvas.models import LanguageWeight, SelectionWeight
from commit_canvas.selector import (
    LanguageSelector,
    build_selection_weights,
    cycle_distribution,
    select_language,
)


def test_build_selection_weights_given_even_go_python_split_when_built_then_byte_costs_scale_weights() -> None:
    # Given
    weights = [LanguageWeight(language="go", ratio=50), LanguageWeight(language="python", ratio=50)]

    # When
    selection = build_selection_weights(weights)

    # Then
    assert selection == [
        SelectionWeight(language="go", weight=588),
        SelectionWeight(language="python", weight=769),
    ]


def test_build_selection_weights_given_tiny_ratio_and_zero_ratio_when_built_then_floor_is_one_and_zero_is_dropped() -> None:
    # Given
    weights = [
        LanguageWeight(language="vue", ratio=0),
        LanguageWeight(language="typescript", ratio=1),
        LanguageWeight(language="markdown", ratio=99),
    ]

    # When
    selection = build_selection_weights(weights)

    # Then
    assert [item.language for item in selection] == ["typescript", "markdown"]
    assert selection[0].weight == 10
    assert all(item.weight >= 1 for item in selection)


def test_select_language_given_weights_when_index_walks_a_cycle_then_picks_follow_cumulative_buckets() -> None:
    # Given
    weights = [SelectionWeight(language="go", weight=2), SelectionWeight(language="rust", weight=3)]

    # When
    picks = [select_language(weights, index) for index in range(10)]

    # Then
    assert picks == ["go", "go", "rust", "rust", "rust"] * 2


def test_select_language_given_single_language_when_selected_then_it_is_always_returned() -> None:
    # Given
    weights = [SelectionWeight(language="python", weight=1538)]

    # When
    picks = {select_language(weights, index) for index in range(0, 100000, 997)}

    # Then
    assert picks == {"python"}


def test_select_language_given_no_weights_when_selected_then_fallback_or_error() -> None:
    # Given / When / Then
    assert select_language([], 3, fallback="markdown") == "markdown"
    with pytest.raises(ValueError):
        select_language([], 3)


def test_select_language_given_same_arguments_when_called_twice_then_result_is_identical() -> None:
    # Given
    weights = build_selection_weights(
        [LanguageWeight(language="go", ratio=50), LanguageWeight(language="python", ratio=50)]
    )

    # When
    first = [select_language(weights, index) for index in range(0, 5000, 7)]
    second = [select_language(weights, index) for index in range(0, 5000, 7)]

    # Then
    assert first == second


def test_cycle_distribution_given_80_20_weights_when_counted_then_one_cycle_matches_weights_exactly() -> None:
    # Given
    weights = [SelectionWeight(language="java", weight=80), SelectionWeight(language="markdown", weight=20)]

    # When
    distribution = cycle_distribution(weights)

    # Then
    assert distribution == {"java": 80, "markdown": 20}


def test_language_selector_given_go_python_split_when_called_for_one_cycle_then_counts_equal_weights() -> None:
    # Given
    selector = LanguageSelector(
        [LanguageWeight(language="go", ratio=50), LanguageWeight(language="python", ratio=50)]
    )

    # When
    picks = [selector(index) for index in range(selector.cycle_length)]

    # Then
    assert selector.cycle_length == 1357
    assert picks.count("go") == 588
    assert picks.count("python") == 769
    assert selector(1357) == selector(0)


def test_language_selector_given_no_weights_when_built_then_value_error_is_raised() -> None:
    # Given / When / Then
    with pytest.raises(ValueError):
        LanguageSelector([])


def test_build_selection_weights_given_language_with_double_payload_when_built_then_weight_is_about_half() -> None:
    # Given
    weights = [LanguageWeight(language="vue", ratio=50), LanguageWeight(language="python", ratio=50)]

    # When
    vue, python = build_selection_weights(weights)

    # Then
    assert python.weight / vue.weight == pytest.approx(2.0, rel=0.01)


def test_language_selector_given_equal_byte_cost_and_80_20_ratios_when_sampled_then_split_converges() -> None:
    # Given
    selector = LanguageSelector(
        [LanguageWeight(language="javascript", ratio=80), LanguageWeight(language="c", ratio=20)]
    )

    # When
    picks = [selector(index) for index in range(50000)]

    # Then
    assert picks.count("javascript") / len(picks) == pytest.approx(0.8, abs=0.01)
