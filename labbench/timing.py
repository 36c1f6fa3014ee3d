"""Estimate how long a function takes to run, in counter units or seconds."""

from __future__ import annotations

import bisect
import signal
import time
from array import array
from enum import Enum
from typing import Callable, Protocol

from labbench.clock import CycleCounter

K = 3
MAXSAMPLES = 20
EPSILON = 0.01
CACHE_BYTES = 1 << 19
CACHE_BLOCK = 32

MAX_ETIME = 86400
"""Initial value of the interval timers, in seconds."""

FSECS_RUNS = 10
"""Number of runs averaged by the interval and time-of-day timers."""


class Counter(Protocol):
    def start(self) -> None: ...

    def get(self) -> float: ...

    def start_compensated(self) -> None: ...

    def get_compensated(self) -> float: ...


class KBestSampler:
    """Keeps the k smallest samples and decides when they agree closely enough."""

    def __init__(self, k: int = K, maxsamples: int = MAXSAMPLES, epsilon: float = EPSILON) -> None:
        if k < 1:
            raise ValueError(f"k must be at least 1: {k}")
        self.k = k
        self.maxsamples = maxsamples
        self.epsilon = epsilon
        self.values: list[float] = []
        self.samplecount = 0

    def add(self, value: float) -> None:
        """Record one sample, keeping it if it is among the k smallest."""
        if len(self.values) < self.k:
            bisect.insort(self.values, value)
        elif value < self.values[-1]:
            self.values.pop()
            bisect.insort(self.values, value)
        self.samplecount += 1

    def converged(self) -> bool:
        """True when the k smallest samples lie within epsilon of each other."""
        return (
            self.samplecount >= self.k
            and (1 + self.epsilon) * self.values[0] >= self.values[self.k - 1]
        )

    def done(self) -> bool:
        """True when sampling should stop: converged or out of samples."""
        return self.converged() or self.samplecount >= self.maxsamples

    def best(self) -> float:
        """The smallest sample seen."""
        if not self.values:
            raise ValueError("no samples recorded")
        return self.values[0]


class Fcyc:
    """Estimates the running time of a function with the k-best scheme."""

    def __init__(
        self,
        k: int = K,
        maxsamples: int = MAXSAMPLES,
        epsilon: float = EPSILON,
        compensate: bool = False,
        clear_cache: bool = False,
        cache_bytes: int = CACHE_BYTES,
        cache_block: int = CACHE_BLOCK,
        counter: Counter | None = None,
    ) -> None:
        self.k = k
        self.maxsamples = maxsamples
        self.epsilon = epsilon
        self.compensate = compensate
        self.clear_cache = clear_cache
        self.cache_bytes = cache_bytes
        self.cache_block = cache_block
        self.counter: Counter = counter if counter is not None else CycleCounter()
        self._cache_buf: array | None = None
        self._sink = 0

    def _clear(self) -> None:
        if self._cache_buf is None or len(self._cache_buf) * self._itemsize() != self.cache_bytes:
            self._cache_buf = array("i", bytes(self.cache_bytes - self.cache_bytes % self._itemsize()))
        incr = max(1, self.cache_block // self._cache_buf.itemsize)
        self._sink += sum(self._cache_buf[::incr])

    @staticmethod
    def _itemsize() -> int:
        return array("i").itemsize

    def measure(self, f: Callable[[], object]) -> float:
        """Run ``f`` until the k best times agree and return the smallest."""
        sampler = KBestSampler(self.k, self.maxsamples, self.epsilon)
        if self.compensate:
            start, get = self.counter.start_compensated, self.counter.get_compensated
        else:
            start, get = self.counter.start, self.counter.get
        while True:
            if self.clear_cache:
                self._clear()
            start()
            f()
            sampler.add(get())
            if sampler.done():
                break
        return sampler.best()


def _check_runs(n: int) -> None:
    if n < 1:
        raise ValueError(f"number of runs must be at least 1: {n}")


def ftimer_itimer(f: Callable[[], object], n: int) -> float:
    """Average seconds per run of ``f`` over ``n`` runs, using the interval timers."""
    _check_runs(n)
    timers = (signal.ITIMER_VIRTUAL, signal.ITIMER_REAL, signal.ITIMER_PROF)
    for which in timers:
        signal.setitimer(which, MAX_ETIME)
    try:
        start = MAX_ETIME - signal.getitimer(signal.ITIMER_REAL)[0]
        for _ in range(n):
            f()
        tmeas = MAX_ETIME - signal.getitimer(signal.ITIMER_REAL)[0] - start
    finally:
        for which in timers:
            signal.setitimer(which, 0)
    return tmeas / n


def ftimer_gettod(f: Callable[[], object], n: int) -> float:
    """Average seconds per run of ``f`` over ``n`` runs, using the time of day."""
    _check_runs(n)
    start = time.time()
    for _ in range(n):
        f()
    return (time.time() - start) / n


class TimingMethod(Enum):
    """How FunctionTimer measures a function."""

    FCYC = "fcyc"
    ITIMER = "itimer"
    GETTOD = "gettod"


class FunctionTimer:
    """Measures the running time of a function in seconds."""

    def __init__(self, method: TimingMethod = TimingMethod.GETTOD, verbose: int = 0) -> None:
        self.method = method
        self.verbose = verbose
        self.mhz = 0.0
        self._fcyc: Fcyc | None = None
        if method is TimingMethod.FCYC:
            if verbose:
                print("Measuring performance with a cycle counter.")
            counter = CycleCounter()
            self._fcyc = Fcyc(
                k=3, maxsamples=20, epsilon=0.01,
                compensate=True, clear_cache=True, counter=counter,
            )
            self.mhz = counter.mhz(verbose > 0)
        elif method is TimingMethod.ITIMER:
            if verbose:
                print("Measuring performance with the interval timer.")
        elif verbose:
            print("Measuring performance with gettimeofday().")

    def fsecs(self, f: Callable[[], object]) -> float:
        """Return the running time of ``f`` in seconds."""
        if self.method is TimingMethod.FCYC:
            assert self._fcyc is not None
            return self._fcyc.measure(f) / (self.mhz * 1e6)
        if self.method is TimingMethod.ITIMER:
            return ftimer_itimer(f, FSECS_RUNS)
        return ftimer_gettod(f, FSECS_RUNS)