# pipeline/log.py
#
# Shared pipeline logger with elapsed time.
#
# Design decisions:
#   - Progress goes to stdout, warnings to stderr, so an operator can redirect
#     the noisy progress stream and still see data problems.
#   - Elapsed time is shown so the operator can see how long each phase takes.
#   - No external dependencies: plain write with flush for immediate visibility.
#   - Thread-safe: a single write of one string is atomic in CPython, and the
#     per-territory workers log concurrently.
from __future__ import annotations

import sys
import time
from typing import TextIO

_start = time.monotonic()


def _emit(stream: TextIO, message: str) -> None:
    elapsed = time.monotonic() - _start
    minutes, seconds = divmod(int(elapsed), 60)
    stream.write(f"[igma {minutes:02d}:{seconds:02d}] {message}\n")
    stream.flush()


def log(message: str) -> None:
    """Write a timestamped progress line to stdout."""
    _emit(sys.stdout, message)


def warn(message: str) -> None:
    """Write a timestamped WARNING line to stderr."""
    _emit(sys.stderr, f"WARNING: {message}")
