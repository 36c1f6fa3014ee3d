import time

import pytest

from labbench.timing import (
    Fcyc,
    FunctionTimer,
    KBestSampler,
    TimingMethod,
    ftimer_gettod,
    ftimer_itimer,
)


class FakeCounter:
    def __init__(self, values):
        self.values = list(values)
        self.plain = 0
        self.compensated = 0

    def start(self):
        self.plain += 1

    def get(self):
        return self.values.pop(0)

    def start_compensated(self):
        self.compensated += 1

    def get_compensated(self):
        return self.values.pop(0)


def test_sampler_keeps_smallest_sorted():
    s = KBestSampler(3, 20, 0.01)
    for v in (50.0, 30.0, 40.0, 10.0):
        s.add(v)
    assert s.values == [10.0, 30.0, 40.0]
    assert s.best() == 10.0
    assert s.samplecount == 4


def test_sampler_converges_on_equal_values():
    s = KBestSampler(3, 20, 0.01)
    for _ in range(3):
        s.add(100.0)
    assert s.converged()
    assert s.done()


def test_sampler_not_converged_before_k_samples():
    s = KBestSampler(3, 20, 0.01)
    s.add(100.0)
    s.add(100.0)
    assert not s.converged()
    assert not s.done()


def test_sampler_spread_values_not_converged():
    s = KBestSampler(3, 20, 0.01)
    for v in (100.0, 200.0, 300.0):
        s.add(v)
    assert not s.converged()


def test_sampler_done_at_maxsamples():
    s = KBestSampler(3, 4, 0.01)
    for v in (100.0, 200.0, 300.0, 400.0):
        s.add(v)
    assert not s.converged()
    assert s.done()


def test_sampler_best_without_samples_raises():
    with pytest.raises(ValueError):
        KBestSampler(3, 20, 0.01).best()


def test_sampler_rejects_bad_k():
    with pytest.raises(ValueError):
        KBestSampler(0, 20, 0.01)


def test_fcyc_stops_when_converged():
    counter = FakeCounter([500.0, 500.0, 500.0, 1.0])
    calls = []
    fc = Fcyc(counter=counter)
    assert fc.measure(lambda: calls.append(1)) == 500.0
    assert len(calls) == 3
    assert counter.plain == 3
    assert counter.compensated == 0


def test_fcyc_stops_at_maxsamples():
    values = [float(v) for v in (900, 100, 700, 300, 500)]
    counter = FakeCounter(values)
    calls = []
    fc = Fcyc(k=3, maxsamples=5, epsilon=0.01, counter=counter)
    assert fc.measure(lambda: calls.append(1)) == min(values)
    assert len(calls) == 5


def test_fcyc_compensated_counter():
    counter = FakeCounter([250.0, 250.0, 250.0])
    fc = Fcyc(compensate=True, counter=counter)
    assert fc.measure(lambda: None) == 250.0
    assert counter.compensated == 3
    assert counter.plain == 0


def test_fcyc_clear_cache_still_measures():
    counter = FakeCounter([80.0, 80.0, 80.0])
    fc = Fcyc(clear_cache=True, cache_bytes=4096, cache_block=32, counter=counter)
    assert fc.measure(lambda: None) == 80.0


def test_ftimer_gettod_runs_n_times_and_measures():
    calls = []

    def work():
        calls.append(1)
        time.sleep(0.01)

    result = ftimer_gettod(work, 3)
    assert len(calls) == 3
    assert result >= 0.005


def test_ftimer_gettod_rejects_zero_runs():
    with pytest.raises(ValueError):
        ftimer_gettod(lambda: None, 0)


def test_ftimer_itimer_runs_n_times():
    calls = []

    def work():
        calls.append(1)
        time.sleep(0.01)

    result = ftimer_itimer(work, 2)
    assert len(calls) == 2
    assert result >= 0.0


def test_function_timer_gettod_message_and_runs(capsys):
    timer = FunctionTimer(TimingMethod.GETTOD, 1)
    assert capsys.readouterr().out == "Measuring performance with gettimeofday().\n"
    calls = []
    assert timer.fsecs(lambda: calls.append(1)) >= 0.0
    assert len(calls) == 10


def test_function_timer_itimer_message_and_runs(capsys):
    timer = FunctionTimer(TimingMethod.ITIMER, 1)
    assert capsys.readouterr().out == "Measuring performance with the interval timer.\n"
    calls = []
    assert timer.fsecs(lambda: calls.append(1)) >= 0.0
    assert len(calls) == 10


def test_function_timer_quiet(capsys):
    FunctionTimer(TimingMethod.GETTOD, 0)
    assert capsys.readouterr().out == ""