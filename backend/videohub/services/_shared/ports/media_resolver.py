from __future__ import annotations

from typing import Protocol


class MediaResolver(Protocol):
    """Turn a transient local file into a stable, publicly reachable reference.

    Implementations delete the local file whether or not they succeed and
    return ``None`` on failure instead of raising.
    """

    def resolve(self, local_path: str) -> str | None: ...

    def discard(self, ref: str) -> None:
        """Remove media previously returned by :meth:`resolve`; unknown refs are ignored."""
        ...
