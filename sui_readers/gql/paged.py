"""
Paged cursor driver.

A paged read is described by two narrow pieces:
- a *query* (frozen dataclass of request variables) that knows its GraphQL
  document and how to decode the page it fetches;
- a *page* that knows how to compute the query for its successor.

The successor query may be a different, narrower type than the initial one
(e.g. the first request navigates from an owning object, later ones go
straight to the map), so the driver never assumes a single page type.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Generic, Iterator, List, Optional, Protocol, TypeVar

from .client import GraphQlClient
from .errors import ClientError, MissingDataError, PaginationInvariantError
from .events import debug, error, info
from .fragments import PageInfo

P = TypeVar("P", bound="Paged")
Q = TypeVar("Q", bound="PageQuery")
P_co = TypeVar("P_co", covariant=True)


class PageQuery(Protocol[P_co]):
    op: ClassVar[str]
    after: Optional[str]

    def document(self) -> str: ...

    def to_json(self) -> Dict[str, Any]: ...

    def decode(self, data: Dict[str, Any], *, page: int) -> P_co: ...


class Paged(Protocol):
    page_info: PageInfo

    def next_variables(self, prev_vars: Any) -> Optional[PageQuery]: ...


def next_variables(page_info: PageInfo, variables: Q) -> Optional[Q]:
    """
    Variables for the page after the one described by `page_info`.

    Returns None when there is no next page; otherwise a copy of `variables`
    with only the `after` cursor replaced.
    """
    if not page_info.has_next_page:
        return None
    if page_info.end_cursor is None:
        raise PaginationInvariantError("hasNextPage is true but endCursor is missing")
    if variables.after is not None and page_info.end_cursor == variables.after:
        raise PaginationInvariantError(
            "Pagination is not advancing (endCursor repeated). "
            "This would cause an infinite loop."
        )
    return dataclasses.replace(variables, after=page_info.end_cursor)


def fetch_page(client: GraphQlClient, variables: PageQuery[P], *, page_index: int) -> P:
    """One round trip: request, check the envelope, decode. Errors carry `page_index`."""
    try:
        response = client.query(variables.document(), variables.to_json(), op=variables.op)
    except ClientError as e:
        if e.page is None:
            e.page = page_index
        raise

    data = response.try_into_data(page=page_index)
    if data is None:
        raise MissingDataError("data", page=page_index)
    return variables.decode(data, page=page_index)


def successor(page: Paged, variables: PageQuery[Any], *, page_index: int) -> Optional[PageQuery[Any]]:
    """`page.next_variables(variables)`, with cursor errors tagged by `page_index`."""
    try:
        return page.next_variables(variables)
    except PaginationInvariantError as e:
        if e.page is None:
            e.page = page_index
        raise


@dataclass
class Pages(Generic[P]):
    """The initial page and every subsequent one, in arrival order."""

    initial: P
    rest: List[Any]

    def __iter__(self) -> Iterator[Any]:
        yield self.initial
        yield from self.rest

    def __len__(self) -> int:
        return 1 + len(self.rest)


def query_paged(client: GraphQlClient, variables: PageQuery[P]) -> Pages[P]:
    """
    Materialize every page of a paged query.

    Requests are strictly sequential. Any failure aborts the whole call and the
    pages accumulated so far are discarded.
    """
    op = variables.op
    debug("paging.start", op=op)
    try:
        initial = fetch_page(client, variables, page_index=0)
        rest: List[Any] = []

        vars_ = successor(initial, variables, page_index=0)
        page_index = 1
        while vars_ is not None:
            page = fetch_page(client, vars_, page_index=page_index)
            next_vars = successor(page, vars_, page_index=page_index)
            rest.append(page)
            debug("paging.page.done", op=op, page=page_index)
            vars_ = next_vars
            page_index += 1
    except Exception as e:
        error("paging.failed", op=op, page=getattr(e, "page", None), error=str(e)[:500])
        raise

    info("paging.done", op=op, pages=1 + len(rest))
    return Pages(initial=initial, rest=rest)
