"""Reply routing (core domain)."""

from __future__ import annotations

from core.catalog import ReplyCatalog
from core.models import RoutingResult


class ReplyRouter:
    """Resolve a trigger identifier to a catalog entry.

    Routing is a pure function of the trigger and the immutable catalog:
    there is no per-sender memory, and an unmatched or empty trigger resolves
    to the catalog's default entry instead of raising.
    """

    def __init__(self, catalog: ReplyCatalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> ReplyCatalog:
        return self._catalog

    def route(self, trigger: str, recipient: str = "") -> RoutingResult:
        key = trigger.strip()
        entry = self._catalog.lookup(key) if key else None
        if entry is None:
            return RoutingResult(entry=self._catalog.default, recipient=recipient, trigger=key, matched=False)
        return RoutingResult(entry=entry, recipient=recipient, trigger=key, matched=True)
