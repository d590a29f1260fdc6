from academy.tasks import TaskScheduler


def test_tasks_run_in_due_order():
    scheduler = TaskScheduler()
    ran = []
    scheduler.schedule("b", 2, lambda: ran.append("b"))
    scheduler.schedule("a", 1, lambda: ran.append("a"))
    scheduler.schedule("c", 5, lambda: ran.append("c"))

    executed = scheduler.advance(3)

    assert executed == ["a", "b"]
    assert ran == ["a", "b"]
    assert scheduler.now == 3
    assert scheduler.pending_keys() == ["c"]


def test_equal_due_times_keep_schedule_order():
    scheduler = TaskScheduler()
    scheduler.schedule("first", 1, lambda: None)
    scheduler.schedule("second", 1, lambda: None)
    assert scheduler.advance(1) == ["first", "second"]


def test_rescheduling_a_key_replaces_the_task():
    scheduler = TaskScheduler()
    ran = []
    scheduler.schedule("job", 1, lambda: ran.append("old"))
    scheduler.schedule("job", 4, lambda: ran.append("new"))

    assert scheduler.advance(2) == []
    assert scheduler.due_at("job") == 4
    scheduler.advance(2)
    assert ran == ["new"]


def test_cancelled_task_never_runs():
    scheduler = TaskScheduler()
    ran = []
    scheduler.schedule("job", 1, lambda: ran.append("job"))

    assert scheduler.cancel("job") is True
    assert scheduler.cancel("job") is False
    scheduler.advance(10)
    assert ran == []
    assert not scheduler.is_pending("job")


def test_cancel_prefix_only_touches_matching_keys():
    scheduler = TaskScheduler()
    for key in ("scouting:m1", "scouting:m2", "event:next"):
        scheduler.schedule(key, 1, lambda: None)

    cancelled = scheduler.cancel_prefix("scouting:")

    assert sorted(cancelled) == ["scouting:m1", "scouting:m2"]
    assert scheduler.pending_keys() == ["event:next"]


def test_cancel_all_clears_everything():
    scheduler = TaskScheduler()
    scheduler.schedule("a", 1, lambda: None)
    scheduler.schedule("b", 2, lambda: None)
    scheduler.cancel_all()
    assert scheduler.pending_keys() == []
    assert scheduler.advance(5) == []


def test_callback_can_schedule_follow_up_inside_window():
    scheduler = TaskScheduler()
    ran = []

    def tick():
        ran.append(scheduler.now)
        if len(ran) < 3:
            scheduler.schedule("tick", 1, tick)

    scheduler.schedule("tick", 1, tick)
    scheduler.advance(10)

    assert ran == [1, 2, 3]
    assert scheduler.now == 10


def test_delay_is_relative_to_current_clock():
    scheduler = TaskScheduler(now=5)
    assert scheduler.schedule("job", 2, lambda: None) == 7
    assert scheduler.due_at("missing") is None
