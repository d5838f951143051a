"""Order-preserving parallel map for independent per-document work"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def map_in_order(fn: Callable[[T], R], items: Sequence[T], workers: int = 1) -> list[R]:
    """Apply fn to every item, on a thread pool when workers > 1.

    Results keep input order; the first exception (in input order) propagates.
    """
    if workers > 1 and len(items) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(fn, items))
    return [fn(item) for item in items]
