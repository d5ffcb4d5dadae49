# src/apidrift/models/change_level.py

from __future__ import annotations

from enum import Enum
from typing import Iterable


class ChangeLevel(str, Enum):
    """Compatibility impact of a change. Breaking > Warning > Change."""

    BREAKING = "Breaking"
    WARNING = "Warning"
    CHANGE = "Change"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def css_class(self) -> str:
        return self.value.lower()


_RANKS = {
    ChangeLevel.CHANGE: 0,
    ChangeLevel.WARNING: 1,
    ChangeLevel.BREAKING: 2,
}


def calculate_overall_change_level(violations: Iterable) -> ChangeLevel:
    """
    Combine the change levels of many violations into one verdict.

    Breaking if any violation is Breaking, else Warning if any is Warning,
    else Change (also for an empty input).
    """
    has_breaking = False
    has_warning = False

    for violation in violations:
        level = violation.change_level
        if level == ChangeLevel.BREAKING:
            has_breaking = True
        elif level == ChangeLevel.WARNING:
            has_warning = True

    if has_breaking:
        return ChangeLevel.BREAKING
    if has_warning:
        return ChangeLevel.WARNING
    return ChangeLevel.CHANGE
