"""Base class for providers, the units an application is assembled from."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional, Union

from kickstart.errors import InvalidInjectableError
from kickstart.injection import Injectable, injectable_from

if TYPE_CHECKING:
    from kickstart.application import Application

__all__ = ["Provider", "FunctionProvider"]


def _as_tuple(value: Union[str, Iterable[str], None]) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


class Provider:
    """A self-contained unit of application functionality.

    Subclasses describe themselves with class attributes and override
    :meth:`register` and/or :meth:`boot`. Both hooks are injectable: decorate
    them with :func:`kickstart.injection.inject` to receive services by name.
    Either hook may be a coroutine function.

    Attributes:
        name: Unique provider name; defaults to the class name.
        requires: Names of providers that must be registered and booted first.
        order: Tie-break between providers with no requirement between them.
            Lower values load earlier.
        environments: Environments the provider loads in. Empty means all;
            ``!tag`` excludes an environment.
        contexts: Execution contexts the provider loads in, matched like environments.
        events: Mapping of lifecycle event name to the name of the method handling it.
        active: Inactive providers are never loaded.

    Example:
        class DatabaseProvider(Provider):
            requires = ["LoggerProvider"]
            environments = ["local", "prod"]

            @inject("config", "log")
            def register(self, config, log):
                self.expose("db", connect(config.get("db_url")), "Database handle")
    """

    name: Optional[str] = None
    requires: Iterable[str] = ()
    order: int = 0
    environments: Iterable[str] = ()
    contexts: Iterable[str] = ()
    events: Mapping[str, str] = {}
    active: bool = True

    def __init__(self, app: Application):
        self.app = app
        self.name = self.name or type(self).__name__
        self.requires = _as_tuple(self.requires)
        self.environments = frozenset(_as_tuple(self.environments))
        self.contexts = frozenset(_as_tuple(self.contexts))
        self.events = dict(self.events)

    def register(self) -> Any:
        """Called once, in boot order, before any provider boots."""
        return None

    def boot(self) -> Any:
        """Called once, in boot order, after every provider has registered."""
        return None

    def expose(
        self,
        name: str,
        value: Any,
        description: Optional[str] = None,
        override: bool = False,
    ) -> None:
        """Bind a service in the application's registry."""
        self.app.services.register(name, value, description, override)

    def injectable(self, method_name: str) -> Injectable:
        """The named method as an injectable attributed to this provider."""
        method = getattr(self, method_name, None)
        if method is None or not callable(method):
            raise InvalidInjectableError(
                f"{self.name}.{method_name}", "no such method on provider"
            )
        return injectable_from(method, owner=self.name, method=method_name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class FunctionProvider(Provider):
    """Provider exposing the return value of a single injectable function as a service.

    Built by :meth:`kickstart.catalog.ProviderCatalog.provides`.
    """

    def __init__(
        self,
        app: Application,
        factory: Callable,
        service: str,
        description: Optional[str] = None,
        name: Optional[str] = None,
        requires: Iterable[str] = (),
        order: int = 0,
        environments: Iterable[str] = (),
        contexts: Iterable[str] = (),
    ):
        self.name = name or service
        self.requires = requires
        self.order = order
        self.environments = environments
        self.contexts = contexts
        super().__init__(app)
        self.service = service
        self.description = description
        self._factory = injectable_from(factory, owner=self.name)

    def register(self):
        result = self.app.injector.invoke(self._factory, self.app.services)
        if inspect.isawaitable(result):
            return self._expose_when_ready(result)
        self.expose(self.service, result, self.description)

    async def _expose_when_ready(self, pending):
        self.expose(self.service, await pending, self.description)
