"""A cycle counter backed by the high-resolution clock, counting nanoseconds."""

from __future__ import annotations

import os
import sys
import time

NEVENT = 100
THRESHOLD = 1000
RECORDTHRESH = 3000


def _clock_ticks_per_second() -> int:
    try:
        return int(os.sysconf("SC_CLK_TCK"))
    except (AttributeError, ValueError, OSError):
        return 100


class CycleCounter:
    """Measures elapsed counter units, optionally discounting timer interrupts."""

    def __init__(self) -> None:
        self._start = 0
        self._start_tick = 0
        self.cyc_per_tick = 0.0
        self.ticks_per_second = _clock_ticks_per_second()

    def start(self) -> None:
        """Record the current value of the counter."""
        self._start = time.perf_counter_ns()

    def get(self) -> float:
        """Return the counter units elapsed since the last start."""
        result = float(time.perf_counter_ns() - self._start)
        if result < 0:
            print(f"Error: counter returns neg value: {result:.0f}", file=sys.stderr)
        return result

    def overhead(self) -> float:
        """Measure the cost of a start/get pair, run twice to warm caches."""
        result = 0.0
        for _ in range(2):
            self.start()
            result = self.get()
        return result

    def mhz_full(self, verbose: bool, sleeptime: int) -> float:
        """Estimate the counter rate in MHz by sleeping ``sleeptime`` seconds."""
        self.start()
        time.sleep(sleeptime)
        rate = self.get() / (1e6 * sleeptime)
        if verbose:
            print(f"Processor clock rate ~= {rate:.1f} MHz")
        return rate

    def mhz(self, verbose: bool) -> float:
        """Estimate the counter rate with the default sleep of two seconds."""
        return self.mhz_full(verbose, 2)

    def _user_ticks(self) -> int:
        return round(os.times().user * self.ticks_per_second)

    def _calibrate(self, verbose: bool) -> None:
        oldc = self._user_ticks()
        self.start()
        oldt = self.get()
        events = 0
        while events < NEVENT:
            newt = self.get()
            if newt - oldt >= THRESHOLD:
                newc = self._user_ticks()
                if newc > oldc:
                    cpt = (newt - oldt) / (newc - oldc)
                    if (self.cyc_per_tick == 0.0 or self.cyc_per_tick > cpt) and cpt > RECORDTHRESH:
                        self.cyc_per_tick = cpt
                    events += 1
                    oldc = newc
                oldt = newt
        if verbose:
            print(f"Setting cyc_per_tick to {self.cyc_per_tick:f}")

    def start_compensated(self) -> None:
        """Start a measurement that discounts time spent in timer ticks."""
        if self.cyc_per_tick == 0.0:
            self._calibrate(False)
        self._start_tick = self._user_ticks()
        self.start()

    def get_compensated(self) -> float:
        """Return elapsed units minus the estimated cost of timer ticks."""
        elapsed = self.get()
        ticks = self._user_ticks() - self._start_tick
        return elapsed - ticks * self.cyc_per_tick