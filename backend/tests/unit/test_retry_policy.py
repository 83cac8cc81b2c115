import pytest

from app.erp.retry import RetryPolicy


class Transient(Exception):
    pass


class Fatal(Exception):
    pass


def _flaky(failures, exc_type=Transient):
    state = {"calls": 0}

    def fn():
        state["calls"] += 1
        if state["calls"] <= failures:
            raise exc_type("boom")
        return "ok"

    return fn, state


def test_delay_doubles_per_attempt_and_is_capped():
    policy = RetryPolicy(attempts=5, base_delay=0.2, max_delay=1.0)

    assert [policy.get_delay(i) for i in range(4)] == pytest.approx([0.2, 0.4, 0.8, 1.0])


def test_full_jitter_scales_delay():
    policy = RetryPolicy(base_delay=0.4, jitter="full")
    assert policy.get_delay(1, rng=lambda: 0.5) == pytest.approx(0.4)


def test_succeeds_after_transient_failures_with_backoff_sleeps():
    sleeps = []
    fn, state = _flaky(2)
    policy = RetryPolicy(attempts=3, base_delay=0.2)

    assert policy.run(fn, should_retry=lambda e: isinstance(e, Transient), sleep=sleeps.append) == "ok"
    assert state["calls"] == 3
    assert sleeps == pytest.approx([0.2, 0.4])


def test_gives_up_after_attempts_without_sleeping_after_last():
    sleeps = []
    fn, state = _flaky(10)
    policy = RetryPolicy(attempts=3, base_delay=0.1)

    with pytest.raises(Transient):
        policy.run(fn, should_retry=lambda e: True, sleep=sleeps.append)
    assert state["calls"] == 3
    assert len(sleeps) == 2


def test_non_retryable_error_is_raised_immediately():
    sleeps = []
    fn, state = _flaky(1, exc_type=Fatal)

    with pytest.raises(Fatal):
        RetryPolicy(attempts=3).run(fn, should_retry=lambda e: isinstance(e, Transient), sleep=sleeps.append)
    assert state["calls"] == 1
    assert sleeps == []


def test_worst_case_delay_sums_backoff():
    assert RetryPolicy(attempts=3, base_delay=0.2).worst_case_delay() == pytest.approx(0.6)
