"""Venue Registry -- the set of quote providers a router fans out to.

Registration order is preserved and defines both the fan-out order and
the tie-break order when two quotes score the same.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional

from .provider import QuoteProvider

logger = logging.getLogger(__name__)


class VenueRegistry:
    """Thread-safe, insertion-ordered registry of quote providers.

    Registering a provider under a name that is already taken replaces
    the old provider in place (last write wins), which allows hot-swapping
    a venue without changing its position.

    Example:
        registry = VenueRegistry()
        registry.register(kongswap)
        registry.list_venue_names()  # ["KongSwap"]
        providers = registry.snapshot()
    """

    def __init__(self, providers: Optional[Iterable[QuoteProvider]] = None) -> None:
        self._providers: Dict[str, QuoteProvider] = {}
        self._lock = threading.RLock()
        for provider in providers or ():
            self.register(provider)

    def register(self, provider: QuoteProvider) -> None:
        """Register a provider under its ``name``.

        Raises:
            TypeError: If ``provider`` is not a QuoteProvider.
        """
        if not isinstance(provider, QuoteProvider):
            raise TypeError(f"Expected a QuoteProvider, got {type(provider).__name__}")
        with self._lock:
            replaced = provider.name in self._providers
            self._providers[provider.name] = provider
        if replaced:
            logger.info(f"Replaced venue provider: {provider.name}")
        else:
            logger.info(f"Registered venue provider: {provider.name}")

    def unregister(self, name: str) -> bool:
        """Remove a venue. Returns True if it was registered."""
        with self._lock:
            removed = self._providers.pop(name, None) is not None
        if removed:
            logger.info(f"Unregistered venue provider: {name}")
        return removed

    def get(self, name: str) -> Optional[QuoteProvider]:
        with self._lock:
            return self._providers.get(name)

    def list_venue_names(self) -> List[str]:
        with self._lock:
            return list(self._providers)

    def snapshot(self) -> List[QuoteProvider]:
        """Copy of the providers in registration order."""
        with self._lock:
            return list(self._providers.values())

    def clear(self) -> None:
        with self._lock:
            self._providers.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._providers
