"""A simulated memory system: a heap that grows with sbrk and never shrinks."""

from __future__ import annotations

import mmap

TRACEDIR = "/afs/cs/project/ics2/im/labs/malloclab/traces/"
"""Default directory where the driver looks for trace files."""

DEFAULT_TRACEFILES = (
    "amptjp-bal.rep",
    "cccp-bal.rep",
    "cp-decl-bal.rep",
    "expr-bal.rep",
    "coalescing-bal.rep",
    "random-bal.rep",
    "random2-bal.rep",
    "binary-bal.rep",
    "binary2-bal.rep",
    "realloc-bal.rep",
    "realloc2-bal.rep",
)
"""Trace files used by the driver when none is named."""

AVG_LIBC_THRUPUT = 600e3
"""Reference allocator throughput (ops/sec) that caps the throughput score."""

UTIL_WEIGHT = 0.60
"""Share of the performance index given to space utilization."""

ALIGNMENT = 8
"""Required payload alignment in bytes."""

MAX_HEAP = 20 * (1 << 20)
"""Largest heap the simulated memory system can hand out, in bytes."""


class OutOfMemoryError(MemoryError):
    """Raised when the simulated heap cannot grow as requested."""


class MemLib:
    """A flat simulated address space whose heap starts at address 0."""

    def __init__(self, max_heap: int = MAX_HEAP) -> None:
        if max_heap < 0:
            raise ValueError(f"heap size must not be negative: {max_heap}")
        self._storage = bytearray(max_heap)
        self._start_brk = 0
        self._brk = 0
        self._max_addr = max_heap

    def sbrk(self, incr: int) -> int:
        """Extend the heap by ``incr`` bytes and return the old break address."""
        if incr < 0 or self._brk + incr > self._max_addr:
            raise OutOfMemoryError("ERROR: mem_sbrk failed. Ran out of memory...")
        old_brk = self._brk
        self._brk += incr
        return old_brk

    def reset_brk(self) -> None:
        """Empty the heap by moving the break back to its start."""
        self._brk = self._start_brk

    def heap_lo(self) -> int:
        """Address of the first heap byte."""
        return self._start_brk

    def heap_hi(self) -> int:
        """Address of the last heap byte."""
        return self._brk - 1

    def heapsize(self) -> int:
        """Current heap size in bytes."""
        return self._brk - self._start_brk

    def pagesize(self) -> int:
        """The system page size."""
        return mmap.PAGESIZE

    def _check(self, addr: int, size: int) -> None:
        if size < 0 or addr < self._start_brk or addr + size > self._brk:
            raise IndexError(
                f"access {addr}:{addr + size} lies outside heap "
                f"{self._start_brk}:{self._brk}"
            )

    def read(self, addr: int, size: int) -> bytes:
        """Return ``size`` bytes of the heap starting at ``addr``."""
        self._check(addr, size)
        return bytes(self._storage[addr:addr + size])

    def write(self, addr: int, data: bytes) -> None:
        """Copy ``data`` into the heap at ``addr``."""
        data = bytes(data)
        self._check(addr, len(data))
        self._storage[addr:addr + len(data)] = data

    def fill(self, addr: int, value: int, size: int) -> None:
        """Set ``size`` bytes at ``addr`` to the low byte of ``value``."""
        self._check(addr, size)
        self._storage[addr:addr + size] = bytes([value & 0xFF]) * size