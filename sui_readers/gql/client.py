from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from sui_readers.utils import is_html_response, requests_retry_session, safe_variables_for_log

from .config import GqlConfig
from .constants import SLOW_RESPONSE_MS
from .errors import ClientError, ServerError
from .events import debug, error, warn


@dataclass(frozen=True)
class GraphQlResponse:
    """Decoded response envelope: `data` plus any server-side `errors`."""

    data: Optional[Dict[str, Any]] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @staticmethod
    def from_json(payload: Any) -> "GraphQlResponse":
        if not isinstance(payload, dict):
            raise ClientError(f"Unexpected GraphQL response shape: {type(payload).__name__}")
        data = payload.get("data")
        errors = payload.get("errors") or []
        if data is not None and not isinstance(data, dict):
            raise ClientError(f"Unexpected GraphQL `data` shape: {type(data).__name__}")
        return GraphQlResponse(data=data, errors=list(errors))

    def try_into_data(self, *, page: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """Return `data`, raising ServerError if the envelope carries errors."""
        if self.errors:
            raise ServerError(self.errors, page=page)
        return self.data


class GraphQlClient:
    """
    Minimal transport interface.

    - query(document, variables) -> GraphQlResponse
    - raises ClientError on transport failure
    """

    def query(
        self,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
        *,
        op: Optional[str] = None,
    ) -> GraphQlResponse:  # pragma: no cover
        raise NotImplementedError


class RequestsClient(GraphQlClient):
    """GraphQL-over-HTTP transport backed by a requests.Session."""

    def __init__(
        self,
        config: Optional[GqlConfig] = None,
        *,
        session: Optional[requests.Session] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self._config = config or GqlConfig.from_env()
        self._session = session or requests_retry_session(retries=self._config.request_retries)
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **(headers or {}),
        }

    @property
    def config(self) -> GqlConfig:
        return self._config

    @property
    def endpoint(self) -> str:
        return self._config.endpoint

    def query(
        self,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
        *,
        op: Optional[str] = None,
    ) -> GraphQlResponse:
        variables = variables or {}
        debug("graphql.request.start", op=op, variables=safe_variables_for_log(variables))

        t0 = time.perf_counter()
        try:
            resp = self._session.post(
                self._config.endpoint,
                json={"query": document, "variables": variables},
                headers=self._headers,
                timeout=(self._config.request_connect_timeout_s, self._config.request_timeout_s),
            )
        except requests.RequestException as e:
            error("graphql.request.failed", op=op, error=str(e)[:500])
            raise ClientError(f"{type(e).__name__}: {e}") from e

        duration_ms = int((time.perf_counter() - t0) * 1000)
        if duration_ms > SLOW_RESPONSE_MS:
            warn("graphql.slow_response", op=op, duration_ms=duration_ms, status_code=resp.status_code)

        debug("graphql.response", op=op, status_code=resp.status_code, duration_ms=duration_ms)

        if is_html_response(resp):
            error("graphql.html_response", op=op, status_code=resp.status_code)
            raise ClientError(
                "HTML response from GraphQL endpoint (blocked request or wrong URL)",
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            body = (resp.text or "")[:500]
            error("graphql.bad_body", op=op, status_code=resp.status_code, body=body)
            if not 200 <= resp.status_code < 300:
                raise ClientError(f"HTTP {resp.status_code}: {body}", status_code=resp.status_code) from e
            raise ClientError(f"Failed to decode JSON: {e}", status_code=resp.status_code) from e

        # Non-2xx statuses still count as a response when the body is a GraphQL envelope.
        if not 200 <= resp.status_code < 300 and not (
            isinstance(payload, dict) and ("errors" in payload or "data" in payload)
        ):
            raise ClientError(f"HTTP {resp.status_code}: {str(payload)[:500]}", status_code=resp.status_code)

        response = GraphQlResponse.from_json(payload)
        if response.errors:
            first = response.errors[0]
            msg = str(first.get("message") if isinstance(first, dict) else first)
            warn("graphql.error", op=op, error=msg[:500], error_count=len(response.errors))
        return response
