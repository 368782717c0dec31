# prettystream/utils/logging.py
"""
Logging utilities: timers, memory monitoring, and progress tracking.

Provides lightweight performance monitoring for seeding runs. Output goes
through print() and tqdm, matching how the rest of the package reports.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, Protocol
import time
from contextlib import contextmanager

import psutil


class ProgressCallback(Protocol):
    """Protocol for progress callbacks used during long operations."""
    def __call__(self, step: int, total: int, **kwargs: Any) -> None:
        """Called periodically during operations to report progress."""
        ...


class Timer:
    """
    Simple timer for performance monitoring.

    Can be used as a context manager or manually started/stopped.
    Tracks wall time and, optionally, resident memory.
    """

    def __init__(self, name: str = "Timer", track_memory: bool = False, quiet: bool = False):
        self.name = name
        self.track_memory = track_memory
        self.quiet = quiet
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.start_memory: Optional[Dict[str, float]] = None
        self.end_memory: Optional[Dict[str, float]] = None

    def start(self) -> None:
        """Start the timer."""
        self.start_time = time.perf_counter()
        self.end_time = None
        if self.track_memory:
            self.start_memory = memory_info()

    def stop(self) -> float:
        """Stop the timer and return elapsed time in seconds."""
        if self.start_time is None:
            raise RuntimeError("Timer not started")
        self.end_time = time.perf_counter()
        if self.track_memory:
            self.end_memory = memory_info()
        return self.elapsed

    @property
    def elapsed(self) -> float:
        """Get elapsed time in seconds."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time

    @property
    def memory_delta(self) -> Optional[Dict[str, float]]:
        """Get memory usage delta (if tracking enabled)."""
        if not self.track_memory or self.start_memory is None or self.end_memory is None:
            return None
        return {
            key: self.end_memory[key] - self.start_memory[key]
            for key in self.start_memory
            if key in self.end_memory
        }

    def __enter__(self) -> 'Timer':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
        if not self.quiet:
            self.report()

    def report(self) -> None:
        """Print a timing report."""
        print(f"{self.name}: {self.elapsed:.3f} s elapsed")
        delta = self.memory_delta
        if delta is not None and "rss_mb" in delta:
            print(f"  Memory delta: {delta['rss_mb']:.1f} MB")


@contextmanager
def timeit(name: str = "Operation", track_memory: bool = False):
    """
    Context manager for timing operations.

    Example
    -------
    >>> with timeit("even_stream_data"):
    ...     pass
    """
    timer = Timer(name, track_memory=track_memory)
    with timer:
        yield timer


def memory_info() -> Dict[str, float]:
    """
    Current process memory usage in MB.

    Returns
    -------
    dict
        Keys 'rss_mb', 'vms_mb', 'available_mb', 'percent_used'
    """
    process = psutil.Process()
    mem = process.memory_info()
    vm = psutil.virtual_memory()
    return {
        "rss_mb": mem.rss / 1024 / 1024,
        "vms_mb": mem.vms / 1024 / 1024,
        "available_mb": vm.available / 1024 / 1024,
        "percent_used": float(vm.percent),
    }


def create_progress_callback(
    name: str = "Progress",
    update_every: int = 100,
    show_rate: bool = True,
) -> ProgressCallback:
    """
    Create a single-line progress callback for long-running operations.

    Parameters
    ----------
    name : str
        Name to show in progress messages
    update_every : int
        Update frequency (every N steps)
    show_rate : bool
        Whether to show processing rate

    Returns
    -------
    ProgressCallback
        Function that can be called with (step, total, **kwargs). Call it
        with step == total to finish the line.
    """
    start_time = time.perf_counter()

    def callback(step: int, total: int, **kwargs: Any) -> None:
        if step % update_every != 0 and step != total:
            return

        elapsed = time.perf_counter() - start_time
        msg = f"{name}: {step}/{total}"

        if show_rate and elapsed > 0:
            msg += f", {step / elapsed:.1f} steps/s"

        if kwargs:
            extra = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            msg += f", {extra}"

        print(f"\r{msg}", end="", flush=True)

        if step == total:
            print()

    return callback


class ProgressReporter:
    """
    Progress sink selected by style name.

    - 'none'   : silent
    - 'simple' : single-line print via create_progress_callback
    - 'tqdm'   : tqdm bar with an open-ended total
    """

    def __init__(self, style: str = "none", desc: str = "Seeding", update_every: int = 100):
        self.style = style
        self._callback: Optional[ProgressCallback] = None
        self._bar = None
        if style == "simple":
            self._callback = create_progress_callback(desc, update_every=update_every)
        elif style == "tqdm":
            from tqdm import tqdm
            self._bar = tqdm(desc=desc, unit="seed")
        elif style != "none":
            raise ValueError(f"Unknown progress style: {style}")

    def update(self, step: int, total: int, **kwargs: Any) -> None:
        if self._callback is not None:
            self._callback(step, total, **kwargs)
        elif self._bar is not None:
            self._bar.update(step - self._bar.n)
            if kwargs:
                self._bar.set_postfix(**kwargs)

    def close(self, step: int, **kwargs: Any) -> None:
        if self._callback is not None:
            self._callback(step, step, **kwargs)
        elif self._bar is not None:
            self._bar.update(step - self._bar.n)
            self._bar.close()
