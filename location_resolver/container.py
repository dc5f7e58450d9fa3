"""Dependency wiring for the location resolver.

A small hand-written container: each port type maps to a Binding (a
factory plus a lifetime). The catalog and the resolver service are
long-lived and shared; resolution sessions are not bound here, callers
open them from the service per unit of work.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional

from .config import AppConfig, get_config

_UNSET = object()


@dataclass
class Binding:
    """Factory registered for one port type.

    Attributes:
        factory: Zero-argument callable building the instance
        singleton: Build once and reuse when True
        instance: Cached instance for singleton bindings
    """

    factory: Callable[[], Any]
    singleton: bool = True
    instance: Any = field(default=_UNSET, repr=False)


@dataclass
class Container:
    """Registry of port bindings.

    Usage:
        container = Container.create_default()
        service = container.resolve(LocationResolverService)

        # Tests: swap the catalog for a fixture snapshot
        with container.override(FacilityCatalogPort, lambda: InMemoryFacilityCatalog(...)):
            service = container.resolve(LocationResolverService)

    Attributes:
        config: Application configuration used by the default bindings
    """

    config: AppConfig = field(default_factory=get_config)

    _bindings: Dict[type[Any], Binding] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Bind ``port_type`` to ``factory``, replacing any earlier binding.

        A replaced singleton is discarded; dependents that already hold
        it keep their reference.
        """
        with self._lock:
            self._bindings[port_type] = Binding(factory=factory, singleton=singleton)

    def resolve(self, port_type: type[Any]) -> Any:
        """Return an instance for ``port_type``.

        Raises:
            KeyError: If nothing is bound to the type.
        """
        with self._lock:
            binding = self._bindings.get(port_type)
            if binding is None:
                raise KeyError(f"Type not registered: {port_type}")
            if not binding.singleton:
                return binding.factory()
            if binding.instance is _UNSET:
                binding.instance = binding.factory()
            return binding.instance

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._bindings

    @contextmanager
    def override(
        self, port_type: type[Any], factory: Callable[[], Any]
    ) -> Iterator[Container]:
        """Temporarily rebind ``port_type``; the previous binding is restored on exit.

        Built singletons are dropped on entry and on exit, so none of
        them keeps a dependency from the other binding.
        """
        with self._lock:
            previous = self._bindings.get(port_type)
            self.register(port_type, factory)
            self.clear_singletons()
        try:
            yield self
        finally:
            with self._lock:
                if previous is None:
                    self._bindings.pop(port_type, None)
                else:
                    self._bindings[port_type] = previous
                self.clear_singletons()

    def clear_singletons(self) -> None:
        """Forget built singletons; the next resolve() rebuilds them."""
        with self._lock:
            for binding in self._bindings.values():
                binding.instance = _UNSET

    def clear_all(self) -> None:
        with self._lock:
            self._bindings.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Container with the production bindings.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.catalog import CSVFacilityRepository
        from .adapters.ingestion import AirportReader, UnlocodeReader
        from .ports.catalog import FacilityCatalogPort
        from .services import AliasGapReport, LocationResolverService

        config = config or get_config()
        container = cls(config=config)

        # Catalog (read-only snapshot shared by every session)
        container.register(
            FacilityCatalogPort,
            lambda: CSVFacilityRepository(config.catalog),
        )

        container.register(
            LocationResolverService,
            lambda: LocationResolverService(
                catalog=container.resolve(FacilityCatalogPort),
                config=config.resolver,
            ),
        )

        container.register(
            AliasGapReport,
            lambda: AliasGapReport(
                resolver=container.resolve(LocationResolverService),
                config=config.gap_report,
            ),
        )

        # Offline ingestion, one reader per run
        container.register(
            UnlocodeReader, lambda: UnlocodeReader(config.ingestion), singleton=False
        )
        container.register(
            AirportReader, lambda: AirportReader(config.ingestion), singleton=False
        )

        return container


_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Process-wide container, created with the default bindings on first use."""
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Drop the process-wide container (tests, config reloads)."""
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
