"""
The application bootstrapper.

An :class:`Application` is built from a static list of provider entries. It
instantiates every provider with itself as the explicit application context,
then :meth:`Application.bootstrap` drives them through one run:

    IDLE → GATING → ORDERING → REGISTERING → BOOTING → READY
                                                  └──→ FAILED

Providers are registered one at a time in boot order, so a service exposed by
one provider is available to every provider registered after it. Booting starts
only once every provider has registered. Coroutine hooks are awaited before the
next provider runs. Any failure is terminal for the run; nothing already
registered or booted is undone.
"""

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from kickstart.catalog import flatten_entries
from kickstart.config import Settings
from kickstart.errors import (
    BootstrapStateError,
    DuplicateProviderError,
    KickstartError,
    MissingDependencyError,
    ProviderLoadError,
)
from kickstart.gating import ContextGate
from kickstart.graph import ProviderGraph
from kickstart.injection import Injector, injectable_from
from kickstart.provider import Provider
from kickstart.services import ServiceRegistry

__all__ = [
    "APPLICATION_BOOTED",
    "Application",
    "BootState",
    "DispatchReport",
    "HandlerFailure",
    "ProviderState",
]

logger = logging.getLogger("kickstart.application")

APPLICATION_BOOTED = "application.booted"


class BootState(Enum):
    """States of one bootstrap run."""

    IDLE = "idle"
    GATING = "gating"
    ORDERING = "ordering"
    REGISTERING = "registering"
    BOOTING = "booting"
    READY = "ready"
    FAILED = "failed"


class ProviderState(Enum):
    """Lifecycle of a single provider within a run."""

    DISCOVERED = "discovered"
    GATED_IN = "gated_in"
    GATED_OUT = "gated_out"
    REGISTERED = "registered"
    BOOTED = "booted"


@dataclass(frozen=True)
class HandlerFailure:
    """An event handler that raised, and what it raised."""

    provider: str
    method: str
    error: Exception


@dataclass
class DispatchReport:
    """Outcome of dispatching one event to every interested provider."""

    event: str
    handled: list[str] = field(default_factory=list)
    failures: list[HandlerFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class Application:
    """Owns the service registry and boot order for one bootstrap run.

    Args:
        providers: Provider classes or factories taking the application; nested
            lists and catalogs are flattened in order.
        environment: Active environment; defaults to ``settings.environment``.
        context: Active execution context; defaults to ``settings.context``.
        settings: Application settings, bound as the ``config`` service.

    Raises:
        DuplicateProviderError: If two providers share a name.
        ProviderLoadError: If a provider cannot be constructed.
    """

    def __init__(
        self,
        providers: Iterable[Any] = (),
        environment: Optional[str] = None,
        context: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.environment = environment or self.settings.environment
        self.context = context or self.settings.context

        self.injector = Injector({"app": self})
        self.services = ServiceRegistry(self.injector)

        self._gate = ContextGate(self.environment, self.context)
        self._graph = ProviderGraph()
        self._state = BootState.IDLE
        self._providers: dict[str, Provider] = {}
        self._provider_states: dict[str, ProviderState] = {}
        self._boot_order: tuple[str, ...] = ()

        self.services.register("config", self.settings, "Application settings")
        self.services.register("environment", self.environment, "Active environment")
        self.services.register("context", self.context, "Active execution context")

        self._discover(flatten_entries(providers))

    @property
    def state(self) -> BootState:
        return self._state

    @property
    def boot_order(self) -> tuple[str, ...]:
        return self._boot_order

    @property
    def providers(self) -> dict[str, Provider]:
        return dict(self._providers)

    def provider(self, name: str) -> Provider:
        return self._providers[name]

    def state_of(self, name: str) -> ProviderState:
        return self._provider_states[name]

    def is_registered(self, name: str) -> bool:
        return self._provider_states.get(name) in (
            ProviderState.REGISTERED,
            ProviderState.BOOTED,
        )

    def is_booted(self, name: str) -> bool:
        return self._provider_states.get(name) is ProviderState.BOOTED

    def get(self, name: str) -> Any:
        """Shortcut for ``app.services.get(name)``."""
        return self.services.get(name)

    def call(self, target: Any, extra: Optional[Mapping[str, Any]] = None) -> Any:
        """Call a function, or an :class:`Injectable`, with its declared services injected."""
        return self.injector.invoke(injectable_from(target), self.services, extra)

    async def call_async(
        self, target: Any, extra: Optional[Mapping[str, Any]] = None
    ) -> Any:
        return await self.injector.invoke_async(
            injectable_from(target), self.services, extra
        )

    def run(self) -> "Application":
        """Bootstrap synchronously. Must not be called from a running event loop."""
        return asyncio.run(self.bootstrap())

    async def bootstrap(self) -> "Application":
        """Gate, order, register and boot every provider, then raise ``application.booted``.

        Calling it again on a ready application does nothing.

        Raises:
            UnresolvedDependencyError: If an eligible provider requires an ineligible
                or unknown one. No provider code has run.
            CyclicDependencyError: If requirements form a cycle. No provider code has run.
            MissingDependencyError: If a hook declares a service that is not bound.
            ProviderLoadError: If a provider's ``register`` or ``boot`` raises.
            BootstrapStateError: If the application is mid-run or has failed.
        """
        if self._state is BootState.READY:
            return self
        if self._state is not BootState.IDLE:
            raise BootstrapStateError(self._state, "Application cannot be bootstrapped")

        started = time.perf_counter()
        logger.info(
            "Bootstrapping %d providers (environment=%s, context=%s)",
            len(self._providers),
            self.environment,
            self.context,
        )

        try:
            eligible, excluded = self._apply_gate()
            self._order(eligible, excluded)
            await self._run_phase(BootState.REGISTERING, "register", ProviderState.REGISTERED)
            await self._run_phase(BootState.BOOTING, "boot", ProviderState.BOOTED)
        except BaseException as err:
            self._state = BootState.FAILED
            if isinstance(err, KickstartError):
                logger.error("Bootstrap failed: %s", err)
            raise

        self._state = BootState.READY
        logger.info(
            "Application ready in %.1fms: %s",
            (time.perf_counter() - started) * 1000,
            ", ".join(self._boot_order),
        )

        await self.emit(APPLICATION_BOOTED)
        return self

    async def emit(self, event: str, payload: Any = None) -> DispatchReport:
        """Invoke every booted provider's handler for ``event``, in boot order.

        Handlers may declare ``event`` and ``payload`` alongside registered services.
        Those two names always resolve to the dispatched values, even when a service
        of the same name is registered.
        A failing handler is logged and recorded; the remaining handlers still run.

        Raises:
            BootstrapStateError: If the application is not ready.
        """
        if self._state is not BootState.READY:
            raise BootstrapStateError(self._state, f"Cannot emit '{event}' before ready")

        report = DispatchReport(event)
        extra = {"event": event, "payload": payload}

        for name in self._boot_order:
            provider = self._providers[name]
            method = provider.events.get(event)
            if method is None:
                continue

            try:
                await self.injector.invoke_async(
                    provider.injectable(method), self.services, extra
                )
            except Exception as err:
                logger.exception("Handler %s.%s for '%s' failed", name, method, event)
                report.failures.append(HandlerFailure(name, method, err))
            else:
                report.handled.append(name)

        return report

    def emit_sync(self, event: str, payload: Any = None) -> DispatchReport:
        """Synchronous :meth:`emit`. Must not be called from a running event loop."""
        return asyncio.run(self.emit(event, payload))

    def _discover(self, entries: list):
        for entry in entries:
            try:
                provider = entry(self)
            except KickstartError:
                raise
            except Exception as err:
                raise ProviderLoadError(_entry_name(entry), "discover", err) from err

            if provider.name in self._providers:
                raise DuplicateProviderError(provider.name)
            self._providers[provider.name] = provider
            self._provider_states[provider.name] = ProviderState.DISCOVERED
            logger.debug("Discovered provider %s", provider.name)

    def _apply_gate(self) -> tuple[list[Provider], list[Provider]]:
        self._state = BootState.GATING
        eligible, excluded = self._gate.partition(self._providers.values())

        for provider in eligible:
            self._provider_states[provider.name] = ProviderState.GATED_IN
        for provider in excluded:
            self._provider_states[provider.name] = ProviderState.GATED_OUT
            logger.debug("Provider %s gated out", provider.name)

        return eligible, excluded

    def _order(self, eligible: list[Provider], excluded: list[Provider]):
        self._state = BootState.ORDERING
        self._boot_order = self._graph.order(eligible, [p.name for p in excluded])

    async def _run_phase(
        self, state: BootState, phase: str, reached: ProviderState
    ):
        self._state = state
        logger.info("Running %s phase", phase)

        for name in self._boot_order:
            provider = self._providers[name]
            try:
                call = self.injector.bind(provider.injectable(phase), self.services)
                result = call()
                if inspect.isawaitable(result):
                    await result
            except MissingDependencyError as err:
                # already attributed by the injector to the hook that declared it
                if err.provider is not None:
                    raise
                raise ProviderLoadError(name, phase, err) from err
            except Exception as err:
                raise ProviderLoadError(name, phase, err) from err

            self._provider_states[name] = reached
            logger.debug("Provider %s %s", name, reached.value)


def _entry_name(entry: Any) -> str:
    func = getattr(entry, "func", entry)
    return getattr(func, "__name__", repr(entry))
