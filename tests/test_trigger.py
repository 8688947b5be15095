import threading
import time

import pytest

import trigger as trigger_module

from controller import CycleResult
from trigger import (
    ExistingWorkPolicy,
    PeriodicTrigger,
    cancel_unique_work,
    enqueue_unique_periodic_work,
    get_unique_work,
    network_connected,
)


def make_trigger(work, name="TestLogger", connected=True, **kwargs):
    return PeriodicTrigger(
        name=name,
        work=work,
        interval_s=kwargs.pop("interval_s", 900),
        require_network=kwargs.pop("require_network", True),
        connectivity_check=lambda: connected,
        connectivity_poll_s=kwargs.pop("connectivity_poll_s", 60),
        backoff_initial_s=kwargs.pop("backoff_initial_s", 30),
        backoff_max_s=kwargs.pop("backoff_max_s", 5 * 60 * 60),
    )


def test_run_skipped_without_network():
    calls = []
    trigger = make_trigger(lambda: calls.append(1), connected=False)

    assert trigger.run_once() is None
    assert calls == []
    assert trigger._next_delay(None) == 60


def test_network_not_required():
    trigger = make_trigger(lambda: CycleResult.success(2), connected=False, require_network=False)

    assert trigger.run_once().is_success()


def test_success_keeps_regular_interval():
    trigger = make_trigger(lambda: CycleResult.success(2))

    assert trigger._next_delay(trigger.run_once()) == 900
    assert trigger.get_retry_attempt() == 0


def test_retry_uses_exponential_backoff():
    trigger = make_trigger(lambda: CycleResult.retry("radio off"), backoff_initial_s=30, backoff_max_s=100)

    delays = [trigger._next_delay(trigger.run_once()) for _ in range(4)]

    assert delays == [30, 60, 100, 100]
    assert trigger.get_retry_attempt() == 4


def test_success_after_retry_resets_backoff():
    results = iter([CycleResult.retry("boom"), CycleResult.success(2), CycleResult.retry("boom")])
    trigger = make_trigger(lambda: next(results))

    delays = [trigger._next_delay(trigger.run_once()) for _ in range(3)]

    assert delays == [30, 900, 30]


def test_unexpected_exception_becomes_retry():
    def work():
        raise RuntimeError("unexpected")

    result = make_trigger(work).run_once()

    assert not result.is_success()
    assert "unexpected" in result.reason


def test_start_runs_immediately_and_stop_joins():
    ran = threading.Event()

    def work():
        ran.set()
        return CycleResult.success(2)

    trigger = make_trigger(work)
    trigger.start()
    try:
        assert ran.wait(5)
        assert trigger.is_running()
    finally:
        trigger.stop(timeout=5)
    assert not trigger.is_running()
    assert trigger.get_run_counter() == 1


@pytest.fixture
def work_name():
    name = "UniqueLogger"
    yield name
    cancel_unique_work(name)


def test_keep_policy_keeps_existing_registration(work_name):
    first = make_trigger(lambda: CycleResult.success(2), name=work_name)
    second = make_trigger(lambda: CycleResult.success(2), name=work_name)

    assert enqueue_unique_periodic_work(first) is first
    assert enqueue_unique_periodic_work(second, policy=ExistingWorkPolicy.KEEP) is first
    assert not second.is_running()
    assert get_unique_work(work_name) is first


def test_replace_policy_stops_existing_registration(work_name):
    first = make_trigger(lambda: CycleResult.success(2), name=work_name)
    second = make_trigger(lambda: CycleResult.success(2), name=work_name)

    enqueue_unique_periodic_work(first)
    assert enqueue_unique_periodic_work(second, policy=ExistingWorkPolicy.REPLACE) is second
    assert not first.is_running()
    assert second.is_running()
    assert get_unique_work(work_name) is second


def test_replace_waits_for_in_flight_run_without_blocking_registry(work_name):
    started, release = threading.Event(), threading.Event()

    def slow_work():
        started.set()
        release.wait(5)
        return CycleResult.success(2)

    first = make_trigger(slow_work, name=work_name)
    second = make_trigger(lambda: CycleResult.success(2), name=work_name)
    enqueue_unique_periodic_work(first)
    assert started.wait(5)

    replacer = threading.Thread(
        target=enqueue_unique_periodic_work, args=(second, ExistingWorkPolicy.REPLACE)
    )
    replacer.start()
    try:
        deadline = time.monotonic() + 5
        while not first._stop_event.is_set() and time.monotonic() < deadline:
            time.sleep(0.01)
        assert first._stop_event.is_set()

        # the registry answers while the old run is still in flight
        assert trigger_module._unique_work_mutex.acquire(timeout=1)
        trigger_module._unique_work_mutex.release()
        assert get_unique_work(work_name) is first
        assert not second.is_running()
    finally:
        release.set()
        replacer.join(5)

    assert not first.is_running()
    assert second.is_running()
    assert get_unique_work(work_name) is second


def test_cancel_unknown_work():
    assert cancel_unique_work("NeverScheduled") is False


def test_network_connected_unreachable_host():
    # port 9 on an unroutable TEST-NET address
    assert network_connected("http://192.0.2.1:9/", timeout=0.2) is False
