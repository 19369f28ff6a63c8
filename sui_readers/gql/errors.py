from __future__ import annotations

from typing import Any, Dict, List, Optional


class GqlError(Exception):
    """Base class for every failure of a GraphQL read. `page` is set when known."""

    def __init__(self, message: str, *, page: Optional[int] = None):
        super().__init__(message)
        self.page = page


class ClientError(GqlError):
    """Raised when the transport fails (connection, HTTP status, undecodable body)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, page: Optional[int] = None):
        super().__init__(message, page=page)
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        if self.page is None:
            return f"Client error: {base}"
        return f"Client error at page {self.page}: {base}"


class ServerError(GqlError):
    """Raised when the response envelope carries GraphQL errors."""

    def __init__(self, errors: List[Dict[str, Any]], *, page: Optional[int] = None):
        self.errors = list(errors)
        super().__init__(self._render(page), page=page)

    def _render(self, page: Optional[int]) -> str:
        page_info = f" at page {page}" if page is not None else ""
        lines = [f"Query execution produced the following errors{page_info}:"]
        for err in self.errors:
            if isinstance(err, dict):
                lines.append(str(err.get("message") or err))
            else:
                lines.append(str(err))
        return "\n".join(lines)


class MissingDataError(GqlError):
    """Raised when a non-optional value is absent; `path` names the hop that failed."""

    def __init__(self, path: str, *, page: Optional[int] = None):
        super().__init__(f"Missing data in response: {path}", page=page)
        self.path = path


class PaginationInvariantError(RuntimeError):
    """Raised when the server reports another page but its cursor is missing or repeated."""

    def __init__(self, message: str, *, page: Optional[int] = None):
        super().__init__(message)
        self.page = page

    def __str__(self) -> str:
        base = super().__str__()
        return base if self.page is None else f"{base} (page {self.page})"
