"""Static discovery list of the providers an application is built from."""

import functools
import inspect
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from kickstart.errors import InvalidInjectableError
from kickstart.provider import FunctionProvider, Provider

__all__ = ["ProviderEntry", "ProviderCatalog", "flatten_entries"]

# A Provider subclass, or any callable taking the application and returning a Provider.
ProviderEntry = Callable[[Any], Provider]


def flatten_entries(entries: Iterable[Any]) -> list[ProviderEntry]:
    """Flatten nested lists and catalogs of provider entries, preserving order."""
    flattened = []
    for entry in entries:
        if isinstance(entry, (list, tuple, ProviderCatalog)):
            flattened.extend(flatten_entries(entry))
        elif callable(entry):
            flattened.append(entry)
        else:
            raise InvalidInjectableError(entry, "not a provider class or factory")
    return flattened


class ProviderCatalog:
    """Ordered list of provider entries, supporting explicit and decorator-based registration.

    Discovery order matters: it breaks ties between providers with equal ``order``
    and no requirement between them.
    """

    def __init__(self, entries: Iterable[Any] = ()):
        self._entries: list[ProviderEntry] = flatten_entries(entries)

    def add(self, *entries: Union[ProviderEntry, Iterable[Any]]) -> "ProviderCatalog":
        """Append provider entries explicitly.

        Args:
            entries: Provider classes, factories, or (nested) lists of them.
        """
        self._entries.extend(flatten_entries(entries))
        return self

    def provider(self, cls: type) -> type:
        """Class decorator appending a :class:`Provider` subclass.

        Example:
            @catalog.provider
            class CacheProvider(Provider):
                ...
        """
        if not (inspect.isclass(cls) and issubclass(cls, Provider)):
            raise InvalidInjectableError(cls, "not a Provider subclass")
        self._entries.append(cls)
        return cls

    def provides(
        self,
        service: Optional[str] = None,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        requires: Iterable[str] = (),
        order: int = 0,
        environments: Iterable[str] = (),
        contexts: Iterable[str] = (),
    ) -> Callable:
        """Decorator turning a function into a provider that exposes its result as a service.

        Args:
            service: Service name; defaults to the function name with any ``make_``
                prefix removed.
            name: Provider name; defaults to the service name.
            description: Service description.
            requires: Providers that must load first.
            order: Tie-break order.
            environments: Environment tags, as for :class:`Provider`.
            contexts: Context tags, as for :class:`Provider`.

        Returns:
            A decorator that registers the function and returns it unchanged.

        Example:
            @catalog.provides("greeting", requires=["ConfigProvider"])
            @inject("config")
            def make_greeting(config):
                return config.get("greeting", "hello")
        """

        def decorator(func: Callable) -> Callable:
            if not callable(func):
                raise InvalidInjectableError(func, "not callable")
            service_name = service or _inferred_name(func)
            self._entries.append(
                functools.partial(
                    FunctionProvider,
                    factory=func,
                    service=service_name,
                    description=description,
                    name=name,
                    requires=requires,
                    order=order,
                    environments=environments,
                    contexts=contexts,
                )
            )
            return func

        return decorator

    def entries(self) -> list[ProviderEntry]:
        return list(self._entries)

    def __iter__(self) -> Iterator[ProviderEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def _inferred_name(func: Callable) -> str:
    name = func.__name__
    return name[5:] if name.startswith("make_") else name
