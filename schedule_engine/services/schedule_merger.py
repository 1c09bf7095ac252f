from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable

from schedule_engine.schemas.event import StaticEvent

logger = logging.getLogger(__name__)


def load_events_file(path: str | Path) -> Dict[str, Any]:
    """
    Load a raw schedule document, keeping base records untouched.
    """
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: schedule document must be a JSON object")
    data.setdefault("events", [])
    data.setdefault("overrides", [])
    return data


def write_events_file(path: str | Path, document: Dict[str, Any]) -> None:
    """
    Write `document` as pretty JSON, atomically replacing `path`.

    The data goes to a temp file in the same directory, is fsynced, and is
    then renamed over the target so readers never see a partial file.
    """
    target = Path(path)
    payload = json.dumps(document, indent=2, ensure_ascii=False)

    fd, temp_path = tempfile.mkstemp(
        dir=target.parent,
        prefix=".events-materialized-",
        suffix=".json.tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(temp_path, target)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise


def merge_events(
    base_path: str | Path,
    normalized_events: Iterable[StaticEvent],
    output_path: str | Path,
) -> int:
    """
    Append imported static events to the base document and write the result.

    Overrides from the base document are carried over unchanged. Returns the
    total number of events in the merged document.
    """
    document = load_events_file(base_path)
    for event in normalized_events:
        document["events"].append(event.model_dump(by_alias=True, mode="json", exclude_none=True))

    write_events_file(output_path, document)
    logger.info("Wrote %d events to %s", len(document["events"]), output_path)
    return len(document["events"])
