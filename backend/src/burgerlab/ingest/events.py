"""Structured per-run events.

Every event goes to the ``burgerlab.ingest`` logger with ``extra={"event": ...}``
and is also kept on the ``RunEvents`` instance so tests and the driver can
inspect what happened during a run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

logger = logging.getLogger("burgerlab.ingest")

EXTRACTION_STARTED = "extraction.started"
EXTRACTION_FAILED = "extraction.failed"
EXTRACTION_FINISHED = "extraction.finished"
MATCH_ACCEPTED = "match.accepted"
MATCH_REJECTED = "match.rejected"
ENRICH_FAILED = "enrich.failed"
UPSERT_CREATED = "upsert.created"
UPSERT_UPDATED = "upsert.updated"
UPSERT_FAILED = "upsert.failed"
RUN_FINISHED = "run.finished"

_WARNING_EVENTS = {EXTRACTION_FAILED, MATCH_REJECTED, ENRICH_FAILED, UPSERT_FAILED}


@dataclass(frozen=True)
class RunEvent:
    name: str
    brand: str
    data: Dict[str, Any]


@dataclass
class RunEvents:
    brand: str
    events: List[RunEvent] = field(default_factory=list)

    def emit(self, name: str, **data: Any) -> RunEvent:
        event = RunEvent(name=name, brand=self.brand, data=data)
        self.events.append(event)
        level = logging.WARNING if name in _WARNING_EVENTS else logging.INFO
        details = " ".join(f"{key}={value!r}" for key, value in data.items())
        logger.log(level, "[%s] %s %s", self.brand, name, details,
                   extra={"event": name, "brand": self.brand, "data": data})
        return event

    def named(self, name: str) -> List[RunEvent]:
        return [event for event in self.events if event.name == name]
