"""Logging configuration for blastmap.

Logs to stderr so stdout stays free for CLI JSON output and the MCP
protocol. Provides tqdm progress bars for batch analyses.
"""

import logging
import os
import sys
import time
from collections.abc import Generator, Iterable
from contextlib import contextmanager
from typing import Any

from tqdm import tqdm

# Check if progress bars should be disabled
# - BLASTMAP_DISABLE_PROGRESS=1 explicitly disables
# - Non-TTY stderr also disables (common in MCP mode)
_DISABLE_PROGRESS = (
    os.getenv("BLASTMAP_DISABLE_PROGRESS", "").lower() in ("1", "true", "yes")
    or not sys.stderr.isatty()
)

# Create logger that outputs to stderr
logger = logging.getLogger("blastmap")
logger.setLevel(logging.INFO)

# Only add handler if not already configured
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "[blastmap] %(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


class TimingContext:
    """Context object that captures elapsed time from an operation.

    Attributes:
        elapsed: Elapsed time in seconds (set after context exits).
        elapsed_ms: Elapsed time in milliseconds (set after context exits).
    """

    def __init__(self) -> None:
        self.elapsed: float = 0.0
        self.elapsed_ms: float = 0.0
        self._start: float = 0.0

    def start(self) -> None:
        """Start the timer."""
        self._start = time.perf_counter()

    def stop(self) -> None:
        """Stop the timer and record elapsed time."""
        self.elapsed = time.perf_counter() - self._start
        self.elapsed_ms = self.elapsed * 1000


@contextmanager
def log_operation(
    operation: str,
    details: dict[str, Any] | None = None,
) -> Generator[TimingContext, None, None]:
    """Context manager for logging operation start/end with timing.

    Args:
        operation: Name of the operation.
        details: Optional details dict to include in start message.

    Yields:
        TimingContext object with elapsed time after context exits.

    Example:
        with log_operation("load_snapshot", {"symbols": 1200}) as timing:
            session.load(snapshot)
        print(f"Took {timing.elapsed_ms:.1f}ms")
    """
    details_str = ""
    if details:
        details_str = " " + " ".join(f"{k}={v}" for k, v in details.items())

    logger.debug("Starting %s%s", operation, details_str)

    ctx = TimingContext()
    ctx.start()

    try:
        yield ctx
    except Exception as e:
        ctx.stop()
        logger.error("%s failed after %.2fs: %s", operation, ctx.elapsed, e)
        raise
    else:
        ctx.stop()
        logger.info("Completed %s%s in %.1fms", operation, details_str, ctx.elapsed_ms)


def progress_bar[T](
    iterable: Iterable[T],
    desc: str | None = None,
    total: int | None = None,
    unit: str = "it",
    disable: bool = False,
) -> Iterable[T]:
    """Wrap an iterable with a progress bar on stderr.

    Automatically disabled when stderr is not a TTY (e.g., MCP mode) or
    when BLASTMAP_DISABLE_PROGRESS is set.

    Args:
        iterable: The iterable to wrap.
        desc: Description shown before the progress bar.
        total: Total number of items (required for generators).
        unit: Unit name for the items (e.g., "nodes").
        disable: If True, disable progress bar entirely.

    Returns:
        Wrapped iterable that shows progress.
    """
    if disable or _DISABLE_PROGRESS:
        return iterable

    return tqdm(
        iterable,
        desc=f"  {desc}" if desc else None,
        total=total,
        unit=unit,
        file=sys.stderr,
        ncols=80,
        leave=False,
        bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}]",
    )
