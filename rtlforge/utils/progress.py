"""Rotating progress messages while a blocking call runs on a worker thread."""

from concurrent.futures import ThreadPoolExecutor, TimeoutError
from itertools import cycle
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


def run_with_progress(
    fn: Callable[[], T],
    messages: Sequence[str],
    on_message: Callable[[str], None],
    interval: float = 2.5,
) -> T:
    """Call ``fn`` and announce the next message every ``interval`` seconds.

    The rotation is cosmetic: it stops as soon as ``fn`` settles, and ``fn``'s
    return value or exception passes through unchanged.
    """
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(fn)
        for message in cycle(messages or ("Working...",)):
            on_message(message)
            try:
                return future.result(timeout=interval)
            except TimeoutError:
                continue


def progress_message(messages: Sequence[str], elapsed: float, interval: float = 2.5) -> str:
    """Message to show ``elapsed`` seconds into a request, advancing every ``interval``."""
    messages = messages or ("Working...",)
    return messages[int(elapsed // interval) % len(messages)]
