from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import MAX_UINT53
from .events import debug, warn


@dataclass(frozen=True)
class Anchor:
    """
    Ledger version a traversal is pinned to.

    strong (version set): every page request carries the version, so all pages
    describe one historical state even if the target mutates mid-traversal.

    weak (version None): requests omit the anchor and each page reflects the
    server's state at the time it is answered; completeness is not guaranteed.
    """

    version: Optional[int] = None

    def __post_init__(self) -> None:
        if self.version is None:
            return
        if isinstance(self.version, bool) or not isinstance(self.version, int):
            raise TypeError(f"anchor version must be an int, got {type(self.version).__name__}")
        if not 0 <= self.version <= MAX_UINT53:
            raise ValueError(f"anchor version out of range: {self.version}")

    @property
    def strong(self) -> bool:
        return self.version is not None

    @classmethod
    def pinned(cls, version: int) -> "Anchor":
        return cls(version=version)

    @classmethod
    def current(cls) -> "Anchor":
        return cls(version=None)


def resolve(explicit_version: Optional[int], *, stream: Optional[str] = None) -> Anchor:
    """Map a caller-supplied version (or None) to the anchor every request will carry."""
    anchor = Anchor(version=explicit_version)
    if anchor.strong:
        debug("anchor.pinned", stream=stream, version=anchor.version)
    else:
        warn("anchor.weak", stream=stream, reason="no version supplied; pages may reflect different states")
    return anchor
