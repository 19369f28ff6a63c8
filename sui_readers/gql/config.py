from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .constants import DEFAULT_ENDPOINT


def _env_int(name: str, default: int) -> int:
    v = (os.getenv(name) or "").strip()
    if not v:
        return default
    try:
        n = int(v)
        return n if n > 0 else default
    except Exception:
        return default


def _env_optional_int(name: str) -> Optional[int]:
    v = (os.getenv(name) or "").strip()
    if not v:
        return None
    try:
        n = int(v)
        return n if n > 0 else None
    except Exception:
        return None


@dataclass(frozen=True)
class GqlConfig:
    endpoint: str = DEFAULT_ENDPOINT

    # None => ask the server (serviceConfig.maxPageSize)
    page_size: Optional[int] = None

    # Request knobs used by RequestsClient
    request_timeout_s: float = 60.0
    request_connect_timeout_s: float = 10.0
    # This layer never retries on its own; raise only if the transport should.
    request_retries: int = 0

    @staticmethod
    def from_env(overrides: Optional[Dict[str, Any]] = None) -> "GqlConfig":
        overrides = dict(overrides or {})

        endpoint = (
            overrides.get("endpoint")
            or overrides.get("url")
            or os.getenv("SUI_GQL_URL")
            or DEFAULT_ENDPOINT
        )

        page_size = overrides.get("page_size")
        if page_size is None:
            page_size = _env_optional_int("SUI_GQL_PAGE_SIZE")

        return GqlConfig(
            endpoint=str(endpoint).strip() or DEFAULT_ENDPOINT,
            page_size=int(page_size) if page_size is not None else None,
            request_timeout_s=float(
                overrides.get("request_timeout_s") or _env_int("SUI_GQL_REQUEST_TIMEOUT_S", 60)
            ),
            request_connect_timeout_s=float(
                overrides.get("request_connect_timeout_s") or _env_int("SUI_GQL_CONNECT_TIMEOUT_S", 10)
            ),
            request_retries=int(overrides.get("request_retries") or _env_int("SUI_GQL_HTTP_RETRIES", 0)),
        )
