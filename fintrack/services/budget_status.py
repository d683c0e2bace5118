"""Budget health classification from a percentage-used figure.

The label and the progress colour use different thresholds (90 for the label,
70/90 for the colour). Both are kept as they are until product decides on a
single scale.
"""

OVER_BUDGET = "Over Budget"
PROJECTED_OVER_BUDGET = "Projected Over Budget"
ON_TRACK = "On Track"

SUCCESS = "success"
WARNING = "warning"
ERROR = "error"

_STATUS_COLORS = {
    ON_TRACK: "success.main",
    PROJECTED_OVER_BUDGET: "warning.main",
    OVER_BUDGET: "error.main",
}


def derive_budget_status(percentage_used: float) -> str:
    """Status label for a budget."""
    if percentage_used > 100:
        return OVER_BUDGET
    if percentage_used > 90:
        return PROJECTED_OVER_BUDGET
    return ON_TRACK


def progress_color(percentage_used: float) -> str:
    """Severity tier for the progress bar."""
    if percentage_used <= 70:
        return SUCCESS
    if percentage_used <= 90:
        return WARNING
    return ERROR


def status_color(status: str) -> str:
    """Text colour for a status label; unknown labels render as text."""
    return _STATUS_COLORS.get(status, "text.primary")


def performance_bar_color(percentage_used: float) -> str:
    """Bar colour on the budget performance report (80/100 scale)."""
    if percentage_used > 100:
        return ERROR
    if percentage_used > 80:
        return WARNING
    return SUCCESS


def progress_value(percentage_used: float) -> float:
    """Bar fill, capped at 100."""
    return min(percentage_used, 100)
