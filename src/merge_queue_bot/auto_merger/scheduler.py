"""Fixed-delay scheduler for repeated queue cycles."""

import time
from collections.abc import Callable
from typing import Any

from rich.markup import escape

from ..utils.logging import log_error, log_exception, log_info

DEFAULT_INTERVAL_SECONDS = 5 * 60


def run_forever(
    cycle: Callable[[], Any],
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    *,
    sleep: Callable[[float], Any] = time.sleep,
    max_cycles: int | None = None,
) -> int:
    """Run ``cycle`` repeatedly with a fixed delay between runs.

    The delay starts after a cycle completes, so cycles never overlap.
    A cycle that raises is logged and the next one is still scheduled.

    Parameters
    ----------
    cycle : Callable[[], Any]
        Zero-argument callable running one cycle.
    interval_seconds : float, optional
        Delay between the end of one cycle and the start of the next
        (default=300).
    sleep : Callable[[float], Any], optional
        Sleep function (default=time.sleep).
    max_cycles : int or None, optional
        Stop after this many cycles. None runs until interrupted.

    Returns
    -------
    int
        Number of cycles run.

    """
    cycles = 0
    try:
        while max_cycles is None or cycles < max_cycles:
            cycles += 1
            try:
                cycle()
            except Exception as e:
                log_error(f"Cycle {cycles} failed: {escape(str(e))}")
                log_exception()

            if max_cycles is not None and cycles >= max_cycles:
                break

            log_info(f"Next cycle in {interval_seconds:g}s")
            sleep(interval_seconds)
    except KeyboardInterrupt:
        log_info("Interrupted, stopping")

    return cycles
