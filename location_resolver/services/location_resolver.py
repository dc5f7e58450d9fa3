"""Location resolver service - session factory.

The service is long-lived and shared; it owns the read-only catalog
and the stateless engine. Every unit of work opens its own
ResolutionSession with a fresh cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..adapters.cache import InMemoryCache, NullCache
from ..config import ResolverConfig, get_config
from ..domain.models import Resolution
from ..ports.cache import CachePort
from ..ports.catalog import FacilityCatalogPort
from .resolution_engine import ResolutionEngine
from .session import ResolutionSession


@dataclass
class LocationResolverService:
    """Entry point for resolving free-text place references.

    Attributes:
        catalog: Read-only facility catalog shared by all sessions
        config: Resolver configuration
    """

    catalog: FacilityCatalogPort
    config: ResolverConfig = field(default_factory=lambda: get_config().resolver)

    _engine: ResolutionEngine = field(init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._engine = ResolutionEngine(catalog=self.catalog, config=self.config)

    @property
    def engine(self) -> ResolutionEngine:
        return self._engine

    def open_session(self, cache: Optional[CachePort[Resolution]] = None) -> ResolutionSession:
        """Start a resolution session with its own cache.

        Args:
            cache: Optional cache override; by default an InMemoryCache,
                or a NullCache when caching is disabled in config.

        Returns:
            A new ResolutionSession.
        """
        if cache is None:
            if self.config.cache_enabled:
                cache = InMemoryCache(max_size=self.config.cache_max_size, name="session")
            else:
                cache = NullCache()
        self._logger.debug(
            "Resolution session opened", extra={"cache_type": type(cache).__name__}
        )
        return ResolutionSession(engine=self._engine, cache=cache)
