"""Exceptions raised while wiring and bootstrapping an application."""

from typing import Iterable, Optional

__all__ = [
    "KickstartError",
    "DependencyError",
    "MissingDependencyError",
    "CyclicDependencyError",
    "UnresolvedDependencyError",
    "DuplicateServiceError",
    "DuplicateProviderError",
    "InvalidInjectableError",
    "ProviderLoadError",
    "BootstrapStateError",
]


class KickstartError(Exception):
    """Base class for every error raised by kickstart."""

    pass


class DependencyError(KickstartError):
    """Raised when a provider's or function's dependency cannot be satisfied."""

    pass


class MissingDependencyError(DependencyError):
    """Raised when a service name is not bound at the time it is needed.

    Attributes:
        name: The service name that could not be resolved.
        provider: Name of the provider whose function declared the dependency, if known.
        method: Name of the function or method that declared the dependency, if known.
    """

    def __init__(
        self, name: str, provider: Optional[str] = None, method: Optional[str] = None
    ):
        self.name = name
        self.provider = provider
        self.method = method
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.provider and self.method:
            return (
                f"Missing dependency '{self.name}' "
                f"declared by {self.provider}.{self.method}()"
            )
        if self.method:
            return f"Missing dependency '{self.name}' declared by {self.method}()"
        return f"Service '{self.name}' is not registered"

    def annotate(self, provider: Optional[str], method: Optional[str]):
        """Return a copy of this error attributed to the given provider and method."""
        return MissingDependencyError(self.name, provider, method)


class CyclicDependencyError(DependencyError):
    """Raised when provider requirements contain one or more cycles.

    Attributes:
        members: Every provider name lying on a cycle.
    """

    def __init__(self, members: Iterable[str]):
        self.members = frozenset(members)
        super().__init__(
            f"Cyclic dependency between providers: {', '.join(sorted(self.members))}"
        )


class UnresolvedDependencyError(DependencyError):
    """Raised when an eligible provider requires one that is absent or gated out."""

    def __init__(self, provider: str, dependency: str, gated_out: bool = False):
        self.provider = provider
        self.dependency = dependency
        self.gated_out = gated_out
        reason = (
            "is not eligible in the active environment/context"
            if gated_out
            else "was never discovered"
        )
        super().__init__(
            f"Provider '{provider}' requires '{dependency}', which {reason}"
        )


class DuplicateServiceError(KickstartError):
    """Raised when a service name is bound twice without an explicit override."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Service '{name}' has already been registered")


class DuplicateProviderError(KickstartError):
    """Raised when two discovered providers share a name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Duplicate provider name '{name}'")


class InvalidInjectableError(KickstartError):
    """Raised when something that is not callable, or is misdeclared, is injected."""

    def __init__(self, target: object, reason: str):
        self.target = target
        super().__init__(f"{target!r} cannot be injected: {reason}")


class ProviderLoadError(KickstartError):
    """Wraps an error raised by a provider's own lifecycle code.

    Attributes:
        provider: Name of the failing provider.
        phase: The lifecycle phase that failed, e.g. ``register`` or ``boot``.
        error: The original exception, also available as ``__cause__``.
    """

    def __init__(self, provider: str, phase: str, error: BaseException):
        self.provider = provider
        self.phase = phase
        self.error = error
        super().__init__(
            f"Provider '{provider}' failed during {phase}: "
            f"{type(error).__name__}: {error}"
        )


class BootstrapStateError(KickstartError):
    """Raised when an operation is not allowed in the application's current state."""

    def __init__(self, state: object, message: str):
        self.state = state
        super().__init__(f"{message} (state: {state})")
