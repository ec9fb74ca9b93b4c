import logging

from burgerlab.ingest import events as ev
from burgerlab.ingest.events import RunEvents


def test_events_are_recorded_and_logged(caplog):
    events = RunEvents("kfc")
    with caplog.at_level(logging.INFO, logger="burgerlab.ingest"):
        events.emit(ev.MATCH_ACCEPTED, target="징거", score=100)
        events.emit(ev.MATCH_REJECTED, target="타워", best_score=42.0)

    assert [e.name for e in events.events] == [ev.MATCH_ACCEPTED, ev.MATCH_REJECTED]
    (accepted,) = events.named(ev.MATCH_ACCEPTED)
    assert accepted.brand == "kfc"
    assert accepted.data == {"target": "징거", "score": 100}

    info, warning = caplog.records
    assert info.levelno == logging.INFO
    assert warning.levelno == logging.WARNING
    assert warning.event == ev.MATCH_REJECTED
    assert "best_score=42.0" in warning.getMessage()
