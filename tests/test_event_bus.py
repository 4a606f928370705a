"""
Tests for TriageEventBus fan-out and failure isolation.
"""

import logging

import pytest

from clinictriage.domain.enums.triage import PatientPriority
from clinictriage.domain.events.event_bus import TriageEventBus, TriageObserver
from clinictriage.domain.events.triage_events import create_patient_registered_event

from .fakes import ExplodingObserver, RecordingObserver


def make_event():
    return create_patient_registered_event(
        "patient-1", "Juan Perez", PatientPriority.P2, ["chest pain"], "user-1"
    )


class SyncObserver(TriageObserver):
    def __init__(self):
        self.events = []

    def update(self, event):
        self.events.append(event)


def test_subscribe_is_idempotent():
    bus = TriageEventBus()
    observer = RecordingObserver()
    bus.subscribe(observer)
    bus.attach(observer)
    assert bus.get_observer_count() == 1


def test_unsubscribe_absent_observer_is_noop():
    bus = TriageEventBus()
    bus.unsubscribe(RecordingObserver())
    observer = RecordingObserver()
    bus.subscribe(observer)
    bus.detach(observer)
    assert bus.get_observer_count() == 0


@pytest.mark.asyncio
async def test_observers_run_in_subscription_order():
    calls = []
    bus = TriageEventBus()
    for label in ("first", "second", "third"):
        bus.subscribe(RecordingObserver(label, calls))
    await bus.notify(make_event())
    assert calls == ["first", "second", "third"]


@pytest.mark.asyncio
async def test_failing_observer_does_not_stop_the_others(caplog):
    calls = []
    bus = TriageEventBus()
    before = RecordingObserver("before", calls)
    exploding = ExplodingObserver(calls)
    after = RecordingObserver("after", calls)
    for observer in (before, exploding, after):
        bus.subscribe(observer)

    event = make_event()
    with caplog.at_level(logging.ERROR):
        await bus.notify(event)

    assert calls == ["before", "exploding", "after"]
    assert len(before.events) == 1
    assert exploding.update_count == 1
    assert after.events == [event]
    assert "Observer notification failed" in caplog.text


@pytest.mark.asyncio
async def test_sync_observers_are_supported():
    bus = TriageEventBus()
    observer = SyncObserver()
    bus.subscribe(observer)
    await bus.notify(make_event())
    assert len(observer.events) == 1


@pytest.mark.asyncio
async def test_notify_without_observers():
    await TriageEventBus().notify(make_event())
