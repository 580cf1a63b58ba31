"""Tests for the in-process event bus."""

from __future__ import annotations

from src.events.bus import MAX_FAILURES, EventBus
from src.events.payloads import MEETING_UPLOADED, MeetingUploaded

EVENT = MeetingUploaded(meeting_id="m1", title="Sync", transcript="hello there everyone")


class TestEventBus:
    def test_delivers_to_every_subscriber(self) -> None:
        bus = EventBus()
        seen: list[str] = []
        bus.subscribe(MEETING_UPLOADED, lambda e: seen.append(f"first:{e.meeting_id}"))
        bus.subscribe(MEETING_UPLOADED, lambda e: seen.append(f"second:{e.meeting_id}"))

        bus.emit(MEETING_UPLOADED, EVENT)

        assert seen == ["first:m1", "second:m1"]

    def test_emit_without_subscribers_is_a_no_op(self) -> None:
        bus = EventBus()
        bus.emit("nobody.listens", EVENT)
        assert not bus.failures

    def test_failing_subscriber_is_isolated(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        def broken(event: MeetingUploaded) -> None:
            raise RuntimeError("boom")

        bus.subscribe(MEETING_UPLOADED, broken)
        bus.subscribe(MEETING_UPLOADED, lambda e: seen.append(e.meeting_id))

        bus.emit(MEETING_UPLOADED, EVENT)

        assert seen == ["m1"]
        assert len(bus.failures) == 1
        assert bus.failures[0].topic == MEETING_UPLOADED
        assert "broken" in bus.failures[0].handler
        assert str(bus.failures[0].error) == "boom"

    def test_failure_record_is_bounded(self) -> None:
        bus = EventBus()

        def broken(event: MeetingUploaded) -> None:
            raise RuntimeError(event.meeting_id)

        bus.subscribe(MEETING_UPLOADED, broken)
        for n in range(MAX_FAILURES + 5):
            bus.emit(MEETING_UPLOADED, EVENT.model_copy(update={"meeting_id": f"m{n}"}))

        assert len(bus.failures) == MAX_FAILURES
        assert str(bus.failures[0].error) == "m5"
        assert str(bus.failures[-1].error) == f"m{MAX_FAILURES + 4}"

    def test_payload_serialises_camel_case(self) -> None:
        assert EVENT.to_record() == {
            "meetingId": "m1",
            "title": "Sync",
            "transcript": "hello there everyone",
        }
