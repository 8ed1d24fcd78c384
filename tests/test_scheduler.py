from daily_sweat.session.scheduler import TickScheduler


def test_fires_once_per_interval(clock, scheduler):
    calls = []
    scheduler.schedule_repeating(lambda: calls.append(clock.monotonic()))

    clock.advance(0.5)
    assert scheduler.run_due() == 0

    clock.advance(0.5)
    assert scheduler.run_due() == 1

    clock.advance(3)
    assert scheduler.run_due() == 3
    assert len(calls) == 4


def test_cancel_stops_callback(clock, scheduler):
    calls = []
    handle = scheduler.schedule_repeating(lambda: calls.append(1))

    assert scheduler.is_active(handle)
    assert scheduler.cancel(handle) is True
    assert scheduler.cancel(handle) is False
    assert scheduler.cancel(None) is False

    clock.advance(5)
    assert scheduler.run_due() == 0
    assert calls == []
    assert scheduler.active_count == 0


def test_handles_are_unique(scheduler):
    first = scheduler.schedule_repeating(lambda: None)
    scheduler.cancel(first)
    second = scheduler.schedule_repeating(lambda: None)

    assert first != second


def test_due_callbacks_fire_in_time_order(clock, scheduler):
    order = []
    scheduler.schedule_repeating(lambda: order.append("slow"), interval=2)
    scheduler.schedule_repeating(lambda: order.append("fast"), interval=1)

    clock.advance(2)
    scheduler.run_due()

    # fast@1, then slow@2 and fast@2 tie and fire in registration order
    assert order == ["fast", "slow", "fast"]


def test_callback_scheduled_while_firing_is_anchored_to_firing_time(clock, scheduler):
    fired_at = []
    handles = {}

    def second():
        fired_at.append(("second", scheduler._firing_at))

    def first():
        fired_at.append(("first", scheduler._firing_at))
        scheduler.cancel(handles["first"])
        handles["second"] = scheduler.schedule_repeating(second)

    handles["first"] = scheduler.schedule_repeating(first)

    # one late poll catches up on the missed ticks
    clock.advance(4)
    fired = scheduler.run_due()

    assert fired == 4
    assert fired_at == [
        ("first", 1001.0),
        ("second", 1002.0),
        ("second", 1003.0),
        ("second", 1004.0),
    ]


def test_cancel_all():
    scheduler = TickScheduler(clock=lambda: 0.0)
    scheduler.schedule_repeating(lambda: None)
    scheduler.schedule_repeating(lambda: None)

    scheduler.cancel_all()

    assert scheduler.active_count == 0


def test_catch_up_is_capped(clock, scheduler):
    calls = []
    scheduler.schedule_repeating(lambda: calls.append(1))

    clock.advance(100)
    assert scheduler.run_due(max_fires=10) == 10

    # the rest of the backlog is dropped, not replayed on the next poll
    assert scheduler.run_due() == 0
    clock.advance(1)
    assert scheduler.run_due() == 1
    assert len(calls) == 11
