from __future__ import annotations

from typing import Any, Callable, Dict, Generator, Generic, Iterable, Optional, TypeVar

from .client import GraphQlClient
from .constants import LOG_EVERY_N_PAGES
from .events import count, debug, error, info
from .paged import PageQuery, fetch_page, successor

T = TypeVar("T")


class CursorTraversal(Generic[T]):
    """
    Lazy, single-pass walk over a paged query.

    Each time the consumer asks for the next unit, it is either taken from the
    current page or, once that page is used up and another exists, exactly one
    more request is issued. Nothing is prefetched: a consumer that stops
    iterating stops the requests.

    Failures are raised from the iterator at the page where they happened;
    nothing is requested afterwards. A traversal can be iterated only once.
    """

    def __init__(
        self,
        client: GraphQlClient,
        variables: PageQuery[Any],
        units: Callable[[Any], Iterable[T]],
        *,
        stream: Optional[str] = None,
    ):
        self._client = client
        self._variables = variables
        self._units = units
        self._stream = stream
        self._started = False

        self.stats: Dict[str, int] = {
            "pages": 0,
            "units": 0,
        }

    def __iter__(self) -> Generator[T, None, None]:
        if self._started:
            raise RuntimeError("CursorTraversal can only be iterated once; start a new traversal instead")
        self._started = True
        return self._run()

    def _run(self) -> Generator[T, None, None]:
        stream = self._stream
        op = self._variables.op
        info("traversal.start", stream=stream, op=op)

        variables: Optional[PageQuery[Any]] = self._variables
        page_index = 0
        while variables is not None:
            try:
                page = fetch_page(self._client, variables, page_index=page_index)
                units = list(self._units(page))
                next_vars = successor(page, variables, page_index=page_index)
            except Exception as e:
                error(
                    "traversal.failed",
                    stream=stream,
                    op=op,
                    page=page_index,
                    units=self.stats["units"],
                    error=str(e)[:500],
                )
                raise

            self.stats["pages"] += 1
            if self.stats["pages"] == 1 or self.stats["pages"] % LOG_EVERY_N_PAGES == 0:
                debug(
                    "traversal.progress",
                    stream=stream,
                    op=op,
                    page=page_index,
                    page_units=len(units),
                    units=self.stats["units"],
                )

            for unit in units:
                self.stats["units"] += 1
                yield unit

            variables = next_vars
            page_index += 1

        count("traversal.units", self.stats["units"], stream=stream, op=op)
        info("traversal.done", stream=stream, op=op, pages=self.stats["pages"], units=self.stats["units"])


def stream_units(
    client: GraphQlClient,
    variables: PageQuery[Any],
    units: Callable[[Any], Iterable[T]],
    *,
    stream: Optional[str] = None,
) -> Generator[T, None, None]:
    """Functional entry point: a fresh CursorTraversal, already started."""
    return iter(CursorTraversal(client, variables, units, stream=stream))
