from __future__ import annotations

from typing import Iterable, Optional

from schedule_engine.schemas.event import Override
from schedule_engine.schemas.occurrence import Occurrence

_REPLACEABLE_FIELDS = ("title", "description", "location", "start_time", "end_time")


class OverrideResolver:
    """
    Looks up and applies per-date overrides.

    Rules
    -----
    - Lookup is keyed by (event_id, "YYYY-MM-DD"); the first matching entry
      wins if the document contains duplicates.
    - A cancelled override suppresses the occurrence entirely.
    - Otherwise each replaceable field takes the override's value when it is
      present and non-empty, and the occurrence is flagged `is_overridden`.
    - Overrides never apply to static events.
    """

    def __init__(self, overrides: Iterable[Override]):
        self._overrides: tuple[Override, ...] = tuple(overrides)

    def get_override(self, event_id: str, date_string: str) -> Optional[Override]:
        for override in self._overrides:
            if override.event_id == event_id and override.date == date_string:
                return override
        return None

    @staticmethod
    def apply_override(
        occurrence: Occurrence,
        override: Optional[Override],
    ) -> Optional[Occurrence]:
        """
        Merge `override` into `occurrence`.

        Returns None when the occurrence is cancelled, the unchanged
        occurrence when there is nothing to apply.
        """
        if override is None or occurrence.type != "recurring":
            return occurrence

        if override.cancelled:
            return None

        updates: dict[str, object] = {"is_overridden": True}
        for field_name in _REPLACEABLE_FIELDS:
            value = getattr(override, field_name)
            if value:
                updates[field_name] = value

        return occurrence.model_copy(update=updates)
