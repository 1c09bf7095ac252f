from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

import httpx
from pydantic import ValidationError

from schedule_engine.core.config import get_settings
from schedule_engine.schemas.event import Override, ScheduleDocument, event_adapter
from schedule_engine.services.engine import ScheduleEngine

logger = logging.getLogger(__name__)


class ScheduleLoadError(RuntimeError):
    """
    Raised when none of the configured sources yields a usable schedule document.
    """


class ScheduleNotLoadedError(RuntimeError):
    """
    Raised when the engine is queried before a schedule document was loaded.
    """


def parse_schedule_document(payload: Any, source: str = "<memory>") -> ScheduleDocument:
    """
    Build a ScheduleDocument from decoded JSON.

    The envelope must be an object. Each event and override is validated on
    its own: malformed records are logged and skipped so one bad entry does
    not take down the whole calendar.
    """
    if not isinstance(payload, dict):
        raise ScheduleLoadError(f"{source}: schedule document must be a JSON object")

    raw_events = payload.get("events") or []
    raw_overrides = payload.get("overrides") or []
    if not isinstance(raw_events, list) or not isinstance(raw_overrides, list):
        raise ScheduleLoadError(f"{source}: 'events' and 'overrides' must be lists")

    events = []
    for index, raw in enumerate(raw_events):
        try:
            events.append(event_adapter.validate_python(raw))
        except ValidationError as exc:
            event_id = raw.get("id") if isinstance(raw, dict) else None
            logger.warning(
                "%s: skipping malformed event #%d (id=%s): %s",
                source,
                index,
                event_id,
                exc.errors(include_url=False),
            )

    overrides = []
    for index, raw in enumerate(raw_overrides):
        try:
            overrides.append(Override.model_validate(raw))
        except ValidationError as exc:
            logger.warning(
                "%s: skipping malformed override #%d: %s",
                source,
                index,
                exc.errors(include_url=False),
            )

    return ScheduleDocument(events=events, overrides=overrides)


class ScheduleStore:
    """
    Holds the currently loaded schedule document for the process.

    Responsibilities
    ----------------
    - Load the document from the first working source (file path or URL).
    - Swap documents atomically on reload; a failed reload keeps the old one.
    - Hand out ScheduleEngine instances, refusing while nothing is loaded.
    """

    def __init__(
        self,
        sources: Sequence[str],
        show_hidden: bool = False,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.sources = list(sources)
        self.show_hidden = show_hidden
        self._timeout_seconds = timeout_seconds
        self._document: Optional[ScheduleDocument] = None
        self._loaded_from: Optional[str] = None

    @property
    def is_loaded(self) -> bool:
        return self._document is not None

    @property
    def loaded_from(self) -> Optional[str]:
        return self._loaded_from

    async def _read_source(self, source: str) -> Any:
        if source.startswith("http://") or source.startswith("https://"):
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.get(source, headers={"Accept": "application/json"})
            if resp.status_code // 100 != 2:
                raise ScheduleLoadError(
                    f"{source}: fetch failed (status={resp.status_code})"
                )
            return resp.json()

        text = await asyncio.to_thread(Path(source).read_text, encoding="utf-8")
        return json.loads(text)

    async def load(self) -> ScheduleDocument:
        """
        Try each source in order; the first one that parses wins.

        Raises ScheduleLoadError when every source fails.
        """
        failures: list[str] = []

        for source in self.sources:
            try:
                payload = await self._read_source(source)
                document = parse_schedule_document(payload, source=source)
            except (OSError, ValueError, httpx.HTTPError, ScheduleLoadError) as exc:
                logger.warning("Schedule source %s unavailable: %s", source, exc)
                failures.append(f"{source}: {exc}")
                continue

            self._document = document
            self._loaded_from = source
            logger.info(
                "Loaded schedule from %s (%d events, %d overrides)",
                source,
                len(document.events),
                len(document.overrides),
            )
            return document

        raise ScheduleLoadError(
            "No schedule document could be loaded: " + "; ".join(failures or ["no sources configured"])
        )

    def set_document(self, document: ScheduleDocument, source: str = "<memory>") -> None:
        self._document = document
        self._loaded_from = source

    def engine(self) -> ScheduleEngine:
        if self._document is None:
            raise ScheduleNotLoadedError("Schedule document has not been loaded.")
        return ScheduleEngine(self._document, show_hidden=self.show_hidden)


_store_instance: Optional[ScheduleStore] = None


def get_schedule_store() -> ScheduleStore:
    """
    Lazily construct the process-wide ScheduleStore from settings.
    """
    global _store_instance
    if _store_instance is None:
        settings = get_settings()
        _store_instance = ScheduleStore(
            sources=settings.schedule_sources,
            show_hidden=settings.SHOW_HIDDEN_DEFAULT,
        )
    return _store_instance
