"""A pool of relay URLs grown by harvesting NIP-65 relay-list events."""

from __future__ import annotations

import threading
from typing import Any, Iterable

RELAY_LIST_KIND = 10002

SEED_RELAYS = (
    "wss://relay.orly.dev",
    "wss://relay.damus.io",
    "wss://nos.lol",
    "wss://relay.nostr.band",
    "wss://relay.snort.social",
    "wss://nostr.wine",
    "wss://relay.primal.net",
    "wss://nostr-pub.wellorder.net",
    "wss://nostr.mutinywallet.com",
    "wss://purplepag.es",
    "wss://relay.nostr.bg",
)
"""Well-known relays to seed the pool."""

DEFAULT_MAX_RELAYS = 1000


def normalize_url(url: str) -> str:
    """Clean a relay WebSocket URL; return "" if it is unusable.

    Only ws:// and wss:// are accepted, trailing slashes are removed and
    localhost relays are rejected.
    """
    url = url.strip()
    if not url.startswith(("wss://", "ws://")):
        return ""
    url = url.rstrip("/")
    lower = url.lower()
    if "localhost" in lower or "127.0.0.1" in lower:
        return ""
    return url


def _field(event: Any, name: str) -> Any:
    if isinstance(event, dict):
        return event.get(name)
    return getattr(event, name, None)


class RelayPool:
    """A bounded set of known relay URLs."""

    def __init__(
        self, seeds: Iterable[str] = SEED_RELAYS, max_relays: int = DEFAULT_MAX_RELAYS
    ) -> None:
        self.max_relays = max_relays if max_relays >= 1 else DEFAULT_MAX_RELAYS
        self._relays: dict[str, None] = {}
        self._lock = threading.Lock()
        for seed in seeds:
            url = normalize_url(seed)
            if url:
                self._relays[url] = None

    def ingest(self, event: Any) -> None:
        """Add the write-capable relays from a kind-10002 relay-list event.

        Tags are ["r", url] or ["r", url, "read"|"write"]; read-only relays
        are skipped. Ingesting stops once the pool is full.
        """
        if _field(event, "kind") != RELAY_LIST_KIND:
            return
        with self._lock:
            for tag in _field(event, "tags") or ():
                if len(tag) < 2 or tag[0] != "r":
                    continue
                url = normalize_url(tag[1])
                if not url:
                    continue
                if len(tag) >= 3 and tag[2] == "read":
                    continue
                if len(self._relays) >= self.max_relays:
                    return
                self._relays[url] = None

    def urls(self) -> list[str]:
        """Return all known relay URLs."""
        with self._lock:
            return list(self._relays)

    def size(self) -> int:
        """Return the number of known relays."""
        with self._lock:
            return len(self._relays)

    def __len__(self) -> int:
        return self.size()