"""Event filtering: target category set and start-time freshness."""

from datetime import datetime

from chatlog_translator.parser import LogEvent


class CategoryFilter:
    """Accepts events whose category code is exactly one of the targets.

    Matching is an exact, case-sensitive set lookup: no wildcards and no
    prefix matching.
    """

    def __init__(self, target_codes):
        self._targets = frozenset(target_codes)

    @property
    def targets(self) -> frozenset[str]:
        return self._targets

    def accepts(self, event: LogEvent) -> bool:
        return event.category_code in self._targets


def is_fresh(event: LogEvent, started_at: datetime) -> bool:
    """Return True if the event happened strictly after ``started_at``."""
    return event.timestamp > started_at
