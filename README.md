# labbench

`labbench` is a set of building blocks for systems exercises:

* **Allocator experiments.** A simulated heap, a parser for allocation
  trace files, a range list that checks payload extents, and timers that
  measure how long a function takes.
* **Network I/O.** Robust buffered reads and writes on file descriptors,
  signal-safe output helpers, and helpers that open client and listening
  TCP sockets.
* **A CGI program** that adds two numbers.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The simulated heap: `labbench.memlib`

`MemLib(max_heap)` models a flat address space whose heap starts at
address 0. By default `max_heap` is `MAX_HEAP`, which is 20 MiB. The heap
grows with `sbrk` and never shrinks.

* `sbrk(incr)` extends the heap by `incr` bytes and returns the old break.
  It raises `OutOfMemoryError`, a `MemoryError`, if `incr` is negative or
  the heap would grow past its limit.
* `reset_brk()` empties the heap.
* `heap_lo()` and `heap_hi()` give the addresses of the first and last heap
  bytes. `heapsize()` gives the current size. `pagesize()` gives the system
  page size.
* `read(addr, size)`, `write(addr, data)` and `fill(addr, value, size)`
  access heap bytes. Any access outside the current heap raises
  `IndexError`.

The module also defines these settings:

* `ALIGNMENT`, which is 8;
* `UTIL_WEIGHT`, which is 0.60;
* `AVG_LIBC_THRUPUT`, which is 600 Kops/sec;
* `TRACEDIR`, the default trace directory;
* `DEFAULT_TRACEFILES`, the default list of trace file names.

## Trace files: `labbench.trace`

A trace file starts with four integers: the suggested heap size, the number
of block ids, the number of operations, and a weight. One request follows
per line:

```
a <id> <size>    allocate <size> bytes under <id>
r <id> <size>    reallocate block <id> to <size> bytes
f <id>           free block <id>
```

* `parse_trace(text, name)` turns the text into a `Trace`. A `Trace` holds
  a list of `TraceOp` records, each with an `OpType`, an index and a size.
  It also has `blocks` and `block_sizes` lists, one slot per id.
* `read_trace(tracedir, filename)` reads the file at `tracedir + filename`
  and parses it.
* Both raise `TraceError` in these cases:
  * the file cannot be opened;
  * a request type is unknown;
  * a number is malformed;
  * the largest id is not one less than the number of ids;
  * the count of requests differs from the header.

`RangeList` records the extent of every allocated payload.

* `add(lo, size, heap_lo, heap_hi)` raises `RangeError` if the payload is
  not aligned to `ALIGNMENT`, lies outside the heap, or overlaps a payload
  already recorded. It raises `ValueError` if `size` is not positive.
* `remove(lo)` forgets the payload starting at `lo`.
* `clear()` forgets all payloads.
* `len()` counts the payloads recorded.

```python
from labbench.memlib import MemLib
from labbench.trace import RangeList, parse_trace

trace = parse_trace("0\n2\n4\n1\na 0 16\na 1 24\nf 0\nf 1\n", "small.rep")

mem = MemLib()
p = mem.sbrk(16)
ranges = RangeList()
ranges.add(p, 16, mem.heap_lo(), mem.heap_hi())
mem.fill(p, 0x2A, 16)
```

## Timing: `labbench.clock` and `labbench.timing`

`CycleCounter` counts nanoseconds from the high-resolution clock.

* `start()` and `get()` measure elapsed units.
* `overhead()` measures the cost of a `start()`/`get()` pair.
* `mhz_full(verbose, sleeptime)` and `mhz(verbose)` estimate the counter
  rate by sleeping.
* `start_compensated()` and `get_compensated()` subtract an estimate of
  the time spent in timer ticks.

`labbench.timing` provides the following:

* `KBestSampler(k, maxsamples, epsilon)` keeps the `k` smallest samples.
  `converged()` reports whether they lie within `epsilon` of each other.
* `Fcyc(...).measure(f)` runs `f` until the K-best samples converge, or
  `maxsamples` runs pass, and returns the smallest.
* `ftimer_gettod(f, n)` and `ftimer_itimer(f, n)` return the average
  seconds per run over `n` runs. They use the wall clock and the interval
  timers respectively.
* `FunctionTimer(method, verbose).fsecs(f)` returns seconds using the
  `TimingMethod` chosen: `FCYC`, `ITIMER` or `GETTOD`. The default is
  `GETTOD`. `ITIMER` and `GETTOD` average 10 runs.

## Robust I/O: `labbench.rio`

* `readn(fd, n)` reads up to `n` bytes and stops early only at end of file.
* `writen(fd, data)` writes all of `data`.
* `Rio(fd)` is a buffered reader:
  * `readnb(n)` reads up to `n` bytes.
  * `readlineb(maxlen)` reads one line of at most `maxlen - 1` bytes. It
    returns `b""` at end of file.
  * Iterating over a `Rio` yields lines.
* `ltoa(value, base)` formats an integer in base 2 to 36.
* `sio_puts(s)` and `sio_putl(value)` write straight to standard output.

## Sockets: `labbench.net`

* `open_clientfd(hostname, port)` returns a socket connected to the first
  address that accepts the connection.
* `open_listenfd(port)` returns a socket bound with `SO_REUSEADDR` and
  listening on the numeric port.
* A failed name lookup raises `AddressLookupError`, an `OSError`.
* If no address works, the error from the last attempt is raised.

## The adder CGI program

```
QUERY_STRING="15000&213" labbench-adder
```

`labbench-adder` reads two numbers separated by `&` from `QUERY_STRING`.
It writes a `Connection`, `Content-length` and `Content-type` header,
followed by an HTML body that gives their sum. Each number is read like C's
`atoi`, so text that does not start with a number counts as 0. If
`QUERY_STRING` is not set, both numbers are 0. A query without `&` raises
`ValueError`.

The functions `atoi`, `parse_query` and `render` in `labbench.adder` can
also be called directly.

## What this package does not do

The package has no allocator to test. It also has no driver that replays
trace files against an allocator and computes a performance index. The
heap, trace parser, range list and timers are the pieces such a driver
would use, but you must put them together yourself.

It has no HTTP server and no proxy. `labbench.rio` and `labbench.net`
provide the I/O and socket helpers, but nothing here accepts connections,
parses HTTP requests or serves files. The adder is a stand-alone CGI
program and needs a web server of your own to run it.