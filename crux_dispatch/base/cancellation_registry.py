"""URL-keyed registry of in-flight requests.

Purpose:
    Track every outstanding request that has a url so callers can cancel the
    earliest request for a url, or every request at once.

Design notes:
    - Entries live in an ordered list searched linearly. Several entries may
      share a url; they are distinct requests and are never merged, so a
      rapid re-fetch of the same endpoint stays individually cancellable.
    - Cancelling never removes an entry. The owning request removes its own
      entry (by identity, not by url) when it settles, which keeps two
      concurrent requests for the same url from deregistering each other.
    - ``pending_urls`` mirrors the entry list for diagnostics.
    - The registry holds no lock. All mutation happens on the event loop
      thread, immediately before and immediately after the transport await.
      Each dispatcher owns its own registry.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

# Receives an optional human-readable reason.
CancelHandle = Callable[[Optional[str]], object]


@dataclass(eq=False)
class CancellationEntry:
    """One in-flight request registered under ``url``.

    Attributes:
        url: Descriptor url the request was dispatched with.
        cancel: Handle that makes the request settle as cancelled.
    """

    url: str
    cancel: CancelHandle


class CancellationRegistry:
    """Ordered collection of :class:`CancellationEntry` objects."""

    def __init__(self) -> None:
        self._entries: List[CancellationEntry] = []
        self._pending_urls: List[str] = []

    def register(self, url: str, cancel: CancelHandle) -> CancellationEntry:
        """Append a new entry for ``url`` and return it.

        Never merges with an existing entry for the same url.
        """
        entry = CancellationEntry(url=url, cancel=cancel)
        self._entries.append(entry)
        self._pending_urls.append(url)
        return entry

    def find_first(self, url: str) -> Optional[int]:
        """Return the index of the earliest entry registered for ``url``."""
        for index, entry in enumerate(self._entries):
            if entry.url == url:
                return index
        return None

    def cancel_one(self, url: str, reason: Optional[str] = None) -> bool:
        """Invoke the cancel handle of the earliest entry for ``url``.

        Returns ``False`` when no request for ``url`` is in flight. The entry
        stays registered until its request settles.
        """
        index = self.find_first(url)
        if index is None:
            return False
        self._entries[index].cancel(reason)
        return True

    def cancel_all(self, reason: Optional[str] = None) -> int:
        """Invoke every registered cancel handle in registration order.

        Works on a snapshot so handles that settle synchronously cannot skip
        their neighbours. Returns the number of handles invoked.
        """
        snapshot = list(self._entries)
        for entry in snapshot:
            entry.cancel(reason)
        return len(snapshot)

    def deregister(self, entry: CancellationEntry) -> bool:
        """Remove exactly ``entry`` plus one matching url from the pending list.

        Returns ``False`` when the entry was already removed.
        """
        for index, candidate in enumerate(self._entries):
            if candidate is entry:
                del self._entries[index]
                break
        else:
            return False
        # url and entry lists always hold the same multiset of urls
        self._pending_urls.remove(entry.url)
        return True

    @property
    def pending_urls(self) -> tuple[str, ...]:
        """Urls with outstanding requests, in registration order."""
        return tuple(self._pending_urls)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        return any(e.url == url for e in self._entries)

    def __iter__(self) -> Iterator[CancellationEntry]:
        return iter(list(self._entries))


__all__ = ["CancellationEntry", "CancellationRegistry", "CancelHandle"]
