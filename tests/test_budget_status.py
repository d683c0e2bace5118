"""Tests for budget status derivation."""
import pytest
from fintrack.services.budget_status import (
    derive_budget_status,
    performance_bar_color,
    progress_color,
    progress_value,
    status_color,
)


@pytest.mark.parametrize("percentage, expected", [
    (0, "On Track"),
    (50.5, "On Track"),
    (90, "On Track"),
    (90.01, "Projected Over Budget"),
    (95.4, "Projected Over Budget"),
    (100, "Projected Over Budget"),
    (100.01, "Over Budget"),
    (250, "Over Budget"),
])
def test_status_label(percentage, expected):
    """Test status label thresholds at 90 and 100."""
    assert derive_budget_status(percentage) == expected


@pytest.mark.parametrize("percentage, expected", [
    (0, "success"),
    (70.0, "success"),
    (70.1, "warning"),
    (90, "warning"),
    (90.1, "error"),
    (150, "error"),
])
def test_progress_color(percentage, expected):
    """Test progress colour thresholds at 70 and 90, both inclusive."""
    assert progress_color(percentage) == expected


def test_projected_over_budget_scenario():
    """95.4% used reads as projected over budget with a critical bar."""
    assert derive_budget_status(95.4) == "Projected Over Budget"
    assert progress_color(95.4) == "error"


def test_label_and_color_thresholds_differ():
    """Between 70 and 90 the label is still on track while the bar warns."""
    assert derive_budget_status(80) == "On Track"
    assert progress_color(80) == "warning"


def test_derivation_is_repeatable():
    """Same input, same output, no matter how often it is asked."""
    labels = {derive_budget_status(95.4) for _ in range(10)}
    colors = {progress_color(95.4) for _ in range(10)}
    assert labels == {"Projected Over Budget"}
    assert colors == {"error"}


def test_status_color():
    assert status_color("On Track") == "success.main"
    assert status_color("Projected Over Budget") == "warning.main"
    assert status_color("Over Budget") == "error.main"
    assert status_color("Something else") == "text.primary"


def test_performance_bar_color_uses_its_own_scale():
    """The performance report colours at 80 and 100."""
    assert performance_bar_color(80) == "success"
    assert performance_bar_color(85) == "warning"
    assert performance_bar_color(100) == "warning"
    assert performance_bar_color(101) == "error"


def test_progress_value_caps_at_100():
    assert progress_value(42.5) == 42.5
    assert progress_value(180) == 100
