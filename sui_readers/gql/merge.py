from __future__ import annotations

import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Generator, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from .events import debug, error

T = TypeVar("T")

_ITEM = "item"
_DONE = "done"
_FAILED = "failed"


def _pump(
    idx: int,
    source: Iterator[Any],
    demand: threading.Semaphore,
    stop: threading.Event,
    results: "queue.Queue[Tuple[int, str, Any]]",
    name: str,
) -> None:
    """Advance one side only when the consumer asks for more of it."""
    try:
        while True:
            demand.acquire()
            if stop.is_set():
                return
            try:
                item = next(source)
            except StopIteration:
                results.put((idx, _DONE, None))
                return
            except BaseException as e:  # noqa: BLE001
                error("merge.side.failed", stream=name, error=str(e)[:500])
                results.put((idx, _FAILED, e))
                return
            results.put((idx, _ITEM, item))
    finally:
        close = getattr(source, "close", None)
        if close is not None:
            close()


def merge(*streams: Iterable[T], names: Optional[Sequence[str]] = None) -> Generator[T, None, None]:
    """
    Interleave several lazy sequences in whatever order their units become ready.

    Each input runs on its own worker thread, so a slow page on one side never
    holds back the other. Every side advances one unit at a time and only
    while the consumer keeps asking. The first failure from any side is raised
    to the consumer and stops the rest. Closing the merged generator stops all
    sides; a request already in flight completes and its result is dropped.

    Interleave order is unspecified.
    """
    sources = [iter(s) for s in streams]
    labels: List[str] = list(names) if names is not None else [f"side-{i}" for i in range(len(sources))]
    if len(labels) != len(sources):
        raise ValueError("names must match the number of streams")
    if not sources:
        return

    results: "queue.Queue[Tuple[int, str, Any]]" = queue.Queue()
    demands = [threading.Semaphore(0) for _ in sources]
    stop = threading.Event()

    pool = ThreadPoolExecutor(max_workers=len(sources), thread_name_prefix="merge")
    try:
        for idx, source in enumerate(sources):
            pool.submit(_pump, idx, source, demands[idx], stop, results, labels[idx])
            demands[idx].release()

        live = len(sources)
        while live:
            idx, kind, payload = results.get()
            if kind == _DONE:
                debug("merge.side.done", stream=labels[idx])
                live -= 1
                continue
            if kind == _FAILED:
                raise payload
            yield payload
            demands[idx].release()
    finally:
        stop.set()
        for d in demands:
            d.release()
        pool.shutdown(wait=True)
