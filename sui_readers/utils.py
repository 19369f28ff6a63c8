"""
Shared utilities for all readers.

Goals:
- One consistent HTTP stack (sessions + optional retry + timeouts)
- Small helpers to keep logged payloads short and free of secrets

Deliberately reader-only:
- NO terminal rendering or argument parsing
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

# -----------------------------
# HTTP sessions + retries
# -----------------------------
def requests_retry_session(
    retries: int = 0,
    backoff_factor: float = 0.6,
    status_forcelist: Tuple[int, ...] = (408, 425, 429, 500, 502, 503, 504),
    allowed_methods: Tuple[str, ...] = ("GET", "POST"),
    session: Optional[requests.Session] = None,
) -> requests.Session:
    """
    Creates a requests.Session with a connection pool and an optional retry strategy.

    Notes:
    - retries=0 (the default) means every failure surfaces to the caller on the first attempt.
    - POST is retryable when enabled because GraphQL reads are POSTs.
    """
    sess = session or requests.Session()

    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=set(m.upper() for m in allowed_methods),
        raise_on_status=False,  # status codes are turned into errors by the client
        respect_retry_after_header=True,
    )

    adapter = HTTPAdapter(max_retries=retry, pool_connections=8, pool_maxsize=8)
    sess.mount("http://", adapter)
    sess.mount("https://", adapter)
    return sess


def is_html_response(resp: requests.Response) -> bool:
    ct = (resp.headers.get("Content-Type") or "").lower()
    head = (resp.text[:200].lower() if resp.text else "")
    return ("text/html" in ct) or ("text/plain" in ct and "<html" in head)


_SENSITIVE_KEYS = {"api_key", "token", "authorization", "auth", "bearer", "apikey"}


def safe_variables_for_log(variables: Optional[Dict[str, Any]], max_len: int = 80) -> Dict[str, Any]:
    """Redact secrets and shorten long values (base64 BCS blobs) before logging."""
    out: Dict[str, Any] = {}
    for k, v in (variables or {}).items():
        key_norm = str(k).lower()
        if key_norm in _SENSITIVE_KEYS:
            out[k] = "[REDACTED]"
            continue
        if isinstance(v, dict):
            out[k] = safe_variables_for_log(v, max_len=max_len)
        elif isinstance(v, str) and len(v) > max_len:
            out[k] = v[:max_len] + "..."
        else:
            out[k] = v
    return out
