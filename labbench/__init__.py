"""Simulated heap, trace files, timers, robust I/O, socket helpers and a CGI adder."""

__version__ = "0.1.0"

__all__ = [
    "adder",
    "clock",
    "memlib",
    "net",
    "rio",
    "timing",
    "trace",
]