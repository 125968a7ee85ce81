"""Kickstart application bootstrapper.

Kickstart assembles an application from independent providers. Each provider
declares the providers it requires and the environments and execution contexts
it belongs to; kickstart gates the discovered providers, orders the eligible
ones so every requirement loads first, and runs them through two phases:
``register``, where providers expose named services, then ``boot``. Services
are injected into hooks by explicitly declared name, never by inspecting
signatures.

Key Features:
    - Static provider discovery lists with decorator registration
    - Environment and execution-context gating
    - Deterministic ordering with cycle and unresolved-requirement reporting
    - Name-based injection with override-aware service registry
    - Coroutine-aware register/boot hooks and lifecycle events

Basic Usage:
    >>> from kickstart import Provider, bootstrap, inject
    >>>
    >>> class GreetingProvider(Provider):
    ...     def register(self):
    ...         self.expose("greeting", "hello")
    >>>
    >>> class PrinterProvider(Provider):
    ...     requires = ["GreetingProvider"]
    ...
    ...     @inject("greeting")
    ...     def boot(self, greeting):
    ...         print(greeting)
    >>>
    >>> app = bootstrap([GreetingProvider, PrinterProvider])

The package consists of:
    - application: the bootstrapper and event dispatch
    - builders: high-level entry points
    - catalog: provider discovery lists
    - config: settings and environment/context constants
    - errors: framework-specific exceptions
    - gating: environment and context eligibility
    - graph: boot order computation
    - injection: injectables and the injector
    - provider: the provider base class
    - services: the service registry
"""

from kickstart.application import (
    APPLICATION_BOOTED,
    Application,
    BootState,
    DispatchReport,
    ProviderState,
)
from kickstart.builders import bootstrap, bootstrap_cli, make_application
from kickstart.catalog import ProviderCatalog
from kickstart.config import (
    CXT_CLI,
    CXT_TEST,
    CXT_WEB,
    ENV_DEV,
    ENV_LOCAL,
    ENV_PROD,
    Settings,
)
from kickstart.errors import (
    BootstrapStateError,
    CyclicDependencyError,
    DependencyError,
    DuplicateProviderError,
    DuplicateServiceError,
    InvalidInjectableError,
    KickstartError,
    MissingDependencyError,
    ProviderLoadError,
    UnresolvedDependencyError,
)
from kickstart.gating import ContextGate
from kickstart.graph import ProviderGraph
from kickstart.injection import Injectable, Injector, inject
from kickstart.provider import Provider
from kickstart.services import ServiceRegistry

__all__ = [
    "APPLICATION_BOOTED",
    "Application",
    "BootState",
    "DispatchReport",
    "ProviderState",
    "bootstrap",
    "bootstrap_cli",
    "make_application",
    "ProviderCatalog",
    "CXT_CLI",
    "CXT_TEST",
    "CXT_WEB",
    "ENV_DEV",
    "ENV_LOCAL",
    "ENV_PROD",
    "Settings",
    "BootstrapStateError",
    "CyclicDependencyError",
    "DependencyError",
    "DuplicateProviderError",
    "DuplicateServiceError",
    "InvalidInjectableError",
    "KickstartError",
    "MissingDependencyError",
    "ProviderLoadError",
    "UnresolvedDependencyError",
    "ContextGate",
    "ProviderGraph",
    "Injectable",
    "Injector",
    "inject",
    "Provider",
    "ServiceRegistry",
]
