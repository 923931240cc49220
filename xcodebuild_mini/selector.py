"""Select tests by substring."""

from collections.abc import Sequence

from xcodebuild_mini.models.outcome import TestSelection


def select_tests(identifiers: Sequence[str], only: str) -> TestSelection:
    """Keep identifiers containing `only` literally, preserving order.

    Matching is case sensitive and never treats the filter as a pattern.
    """
    return TestSelection(
        only=only,
        available=list(identifiers),
        selected=[identifier for identifier in identifiers if only in identifier],
    )
