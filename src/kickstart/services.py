"""Name-keyed store of the services providers expose to each other."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from kickstart.errors import DuplicateServiceError, MissingDependencyError
from kickstart.injection import Injectable, Injector, injectable_from

__all__ = ["Service", "ServiceRegistry"]

logger = logging.getLogger("kickstart.services")


@dataclass(frozen=True)
class Service:
    """A bound service.

    Attributes:
        name: The name the service is looked up by.
        value: The bound value, or for a factory service the injectable producing it.
        description: Optional human-readable description, shown by ``describe``.
        factory: Whether ``value`` is invoked through the injector on every lookup.
    """

    name: str
    value: Any
    description: Optional[str] = None
    factory: bool = False


class ServiceRegistry:
    """Registry of named services.

    A name, once bound, cannot be rebound unless ``override=True`` is passed.
    Lookups are never cached by the registry, so a replacement is visible to
    every later ``get`` but not to values already handed out.
    """

    def __init__(self, injector: Optional[Injector] = None):
        self._services: dict[str, Service] = {}
        self._aliases: dict[str, str] = {}
        self._injector = injector or Injector()

    def register(
        self,
        name: str,
        value: Any,
        description: Optional[str] = None,
        override: bool = False,
    ) -> "ServiceRegistry":
        """Bind ``name`` to ``value``.

        Args:
            name: The service name.
            value: The value returned by ``get(name)``.
            description: Optional human-readable description.
            override: Replace an existing binding instead of failing.

        Returns:
            The registry, so calls can be chained.

        Raises:
            DuplicateServiceError: If ``name`` is already bound and ``override`` is false.
        """
        return self._bind(Service(name, value, description), override)

    def register_factory(
        self,
        name: str,
        factory: Union[Injectable, Callable],
        description: Optional[str] = None,
        override: bool = False,
    ) -> "ServiceRegistry":
        """Bind ``name`` to a factory invoked through the injector on each ``get``."""
        injectable = injectable_from(factory)
        if injectable.owner is None:
            injectable = injectable.bind(f"service '{name}'", injectable.method)
        return self._bind(Service(name, injectable, description, factory=True), override)

    def alias(self, alias: str, target: str) -> "ServiceRegistry":
        """Make ``alias`` resolve to whatever ``target`` is bound to at lookup time."""
        if alias in self._services or alias in self._aliases:
            raise DuplicateServiceError(alias)
        self._aliases[alias] = target
        return self

    def get(self, name: str) -> Any:
        """Return the value bound to ``name``.

        Raises:
            MissingDependencyError: If nothing is bound to ``name``.
        """
        service = self._services.get(self._aliases.get(name, name))
        if service is None:
            raise MissingDependencyError(name)
        if service.factory:
            return self._injector.invoke(service.value, self)
        return service.value

    def has(self, name: str) -> bool:
        return self._aliases.get(name, name) in self._services

    def describe(self) -> dict[str, Optional[str]]:
        """Map each bound service name to its description."""
        return {name: service.description for name, service in self._services.items()}

    def names(self) -> list[str]:
        """Bound service names, in the order they were first registered."""
        return list(self._services)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._services)

    def _bind(self, service: Service, override: bool) -> "ServiceRegistry":
        if service.name in self._aliases:
            raise DuplicateServiceError(service.name)
        if service.name in self._services:
            if not override:
                raise DuplicateServiceError(service.name)
            logger.warning("Service '%s' overridden", service.name)
        else:
            logger.debug("Service '%s' registered", service.name)

        self._services[service.name] = service
        return self
