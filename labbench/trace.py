"""Allocator trace files and the range list that checks payload extents."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from labbench.memlib import ALIGNMENT

HDRLINES = 4
"""Number of header values at the top of a trace file."""


def linenum(opnum: int) -> int:
    """Line number (origin 1) in the trace file of request ``opnum``."""
    return opnum + HDRLINES + 1


class TraceError(Exception):
    """Raised when a trace file cannot be read or is malformed."""


class RangeError(Exception):
    """Raised when a payload is misaligned, outside the heap, or overlaps another."""


class OpType(Enum):
    """Kind of allocator request in a trace."""

    ALLOC = "a"
    FREE = "f"
    REALLOC = "r"


@dataclass(frozen=True)
class TraceOp:
    """One allocator request: its kind, block id and byte size."""

    type: OpType
    index: int
    size: int = 0


@dataclass
class Trace:
    """A parsed trace file, plus room to record the blocks handed out for it."""

    sugg_heapsize: int
    num_ids: int
    num_ops: int
    weight: int
    ops: list[TraceOp]
    name: str = ""
    blocks: list[int | None] = field(default_factory=list)
    block_sizes: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.blocks:
            self.blocks = [None] * self.num_ids
        if not self.block_sizes:
            self.block_sizes = [0] * self.num_ids


def _int(token: str, what: str, name: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise TraceError(f"Bad {what} ({token!r}) in tracefile {name}") from None


def parse_trace(text: str, name: str = "<trace>") -> Trace:
    """Parse the text of a trace file."""
    tokens = iter(text.split())

    def take(what: str) -> int:
        token = next(tokens, None)
        if token is None:
            raise TraceError(f"Unexpected end of tracefile {name} reading {what}")
        return _int(token, what, name)

    sugg_heapsize = take("heap size")
    num_ids = take("number of ids")
    num_ops = take("number of ops")
    weight = take("weight")

    ops: list[TraceOp] = []
    max_index = 0
    for kind in tokens:
        first = kind[0]
        if first in ("a", "r"):
            index = take("index")
            size = take("size")
            op_type = OpType.ALLOC if first == "a" else OpType.REALLOC
            ops.append(TraceOp(op_type, index, size))
            max_index = max(max_index, index)
        elif first == "f":
            ops.append(TraceOp(OpType.FREE, take("index")))
        else:
            raise TraceError(f"Bogus type character ({first}) in tracefile {name}")

    if max_index != num_ids - 1:
        raise TraceError(
            f"tracefile {name}: largest block id {max_index} does not match "
            f"{num_ids} ids"
        )
    if len(ops) != num_ops:
        raise TraceError(
            f"tracefile {name}: found {len(ops)} requests, header says {num_ops}"
        )
    return Trace(sugg_heapsize, num_ids, num_ops, weight, ops, name=name)


def read_trace(tracedir: str, filename: str) -> Trace:
    """Read and parse the trace file ``tracedir + filename``."""
    path = tracedir + filename
    try:
        with open(path, encoding="ascii") as tracefile:
            text = tracefile.read()
    except OSError as exc:
        raise TraceError(f"Could not open {path} in read_trace: {exc.strerror}") from exc
    return parse_trace(text, path)


class RangeList:
    """The extents of every allocated payload, used to detect overlaps."""

    def __init__(self) -> None:
        self._ranges: list[tuple[int, int]] = []

    def add(self, lo: int, size: int, heap_lo: int, heap_hi: int) -> None:
        """Check a new payload of ``size`` bytes at ``lo`` and remember it."""
        if size <= 0:
            raise ValueError(f"payload size must be positive: {size}")
        hi = lo + size - 1

        if lo % ALIGNMENT != 0:
            raise RangeError(
                f"Payload address (0x{lo:x}) not aligned to {ALIGNMENT} bytes"
            )

        if lo < heap_lo or lo > heap_hi or hi < heap_lo or hi > heap_hi:
            raise RangeError(
                f"Payload (0x{lo:x}:0x{hi:x}) lies outside heap "
                f"(0x{heap_lo:x}:0x{heap_hi:x})"
            )

        for plo, phi in reversed(self._ranges):
            if plo <= lo <= phi or plo <= hi <= phi:
                raise RangeError(
                    f"Payload (0x{lo:x}:0x{hi:x}) overlaps another payload "
                    f"(0x{plo:x}:0x{phi:x})"
                )

        self._ranges.append((lo, hi))

    def remove(self, lo: int) -> None:
        """Forget the payload that starts at ``lo``, if there is one."""
        for position in range(len(self._ranges) - 1, -1, -1):
            if self._ranges[position][0] == lo:
                del self._ranges[position]
                return

    def clear(self) -> None:
        """Forget every payload."""
        self._ranges.clear()

    def __len__(self) -> int:
        return len(self._ranges)