import asyncio

from live_match_notifier.scheduler import Scheduler


class Recorder:
    def __init__(self, events, name, fail=False):
        self.events = events
        self.name = name
        self.fail = fail

    def check_live_matches(self):
        self.events.append(self.name)
        if self.fail:
            raise RuntimeError("detector exploded")
        return 0

    def update_match_statuses(self):
        self.events.append(self.name)
        return 0


def make_scheduler(events, detector_fails=False):
    async def fake_sleep(seconds):
        events.append(f"sleep {seconds}")

    return Scheduler(
        detector=Recorder(events, "detect", fail=detector_fails),
        updater=Recorder(events, "update"),
        interval=60,
        sleep=fake_sleep,
    )


def test_first_tick_runs_immediately_and_rearms_after_completion():
    events = []
    scheduler = make_scheduler(events)

    asyncio.run(scheduler.run(max_ticks=3))

    assert events == [
        "detect", "update", "sleep 60",
        "detect", "update", "sleep 60",
        "detect", "update",
    ]
    assert scheduler.ticks == 3


def test_detector_failure_does_not_skip_updater():
    events = []
    scheduler = make_scheduler(events, detector_fails=True)

    asyncio.run(scheduler.run(max_ticks=2))

    assert events == ["detect", "update", "sleep 60", "detect", "update"]


def test_tick_error_does_not_stop_loop(monkeypatch):
    events = []
    scheduler = make_scheduler(events)

    def broken_tick():
        events.append("tick")
        raise RuntimeError("boom")

    monkeypatch.setattr(scheduler, "tick", broken_tick)

    asyncio.run(scheduler.run(max_ticks=2))

    assert events == ["tick", "sleep 60", "tick"]
