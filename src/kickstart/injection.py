"""Explicit, name-based injection of services into functions.

A function that wants services declares their names up front, either with the
:func:`inject` decorator or by wrapping it in an :class:`Injectable`. The
:class:`Injector` looks each name up at call time; it never reads the
function's signature and never caches what it resolved, so a service that has
been overridden is seen by every call made after the override.
"""

import functools
import inspect
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from kickstart.errors import InvalidInjectableError, MissingDependencyError

if TYPE_CHECKING:
    from kickstart.services import ServiceRegistry

__all__ = [
    "RESERVED_NAMES",
    "Injectable",
    "Injector",
    "inject",
    "injectable_from",
]

RESERVED_NAMES = frozenset({"app", "request", "response"})

_MANIFEST_ATTRIBUTE = "__inject__"


@dataclass(frozen=True)
class Injectable:
    """A callable paired with the ordered names of the services it needs.

    Attributes:
        func: The function or bound method to call.
        dependencies: Service names, in the order they are passed positionally.
        owner: Name of the provider the function belongs to, used in error reports.
        method: Name of the function or method, used in error reports.
    """

    func: Callable
    dependencies: tuple[str, ...] = ()
    owner: Optional[str] = None
    method: Optional[str] = None

    def bind(self, owner: Optional[str], method: Optional[str] = None) -> "Injectable":
        return replace(self, owner=owner, method=method or self.method)

    @property
    def label(self) -> str:
        if self.owner:
            return f"{self.owner}.{self.method}"
        return self.method or repr(self.func)


def inject(*names: str) -> Callable:
    """Decorator declaring the services a function is called with.

    Args:
        names: Service names, matched positionally to the function's parameters.

    Returns:
        A decorator that records the names on the function and returns it unchanged.

    Example:
        @inject("config", "db")
        def register(self, config, db):
            ...
    """
    for name in names:
        if not isinstance(name, str) or not name:
            raise InvalidInjectableError(name, "dependency names must be non-empty strings")
    if len(set(names)) != len(names):
        raise InvalidInjectableError(names, "dependency names must be unique")

    def decorator(func: Callable) -> Callable:
        setattr(func, _MANIFEST_ATTRIBUTE, tuple(names))
        return func

    return decorator


def injectable_from(
    target: Any, owner: Optional[str] = None, method: Optional[str] = None
) -> Injectable:
    """Build an :class:`Injectable` from a function, method or existing injectable.

    Functions without a declared manifest are treated as having no dependencies.
    """
    if isinstance(target, Injectable):
        return target.bind(owner, method) if owner else target
    if not callable(target):
        raise InvalidInjectableError(target, "not callable")

    return Injectable(
        target,
        tuple(getattr(target, _MANIFEST_ATTRIBUTE, ())),
        owner,
        method or getattr(target, "__name__", None),
    )


class Injector:
    """Resolves an injectable's declared names and calls it.

    Reserved names (``app``, ``request``, ``response``) are never read from the
    registry. Their values come from ``defaults`` given at construction, or from
    the ``extra`` mapping supplied with each call. Any name present in ``extra``
    takes precedence over the registry.
    """

    def __init__(
        self,
        defaults: Optional[Mapping[str, Any]] = None,
        reserved: frozenset = RESERVED_NAMES,
    ):
        self._defaults = dict(defaults or {})
        self._reserved = frozenset(reserved) | frozenset(self._defaults)

    def resolve(
        self,
        injectable: Injectable,
        registry: "ServiceRegistry",
        extra: Optional[Mapping[str, Any]] = None,
    ) -> list[Any]:
        """Look up every declared dependency, in declaration order.

        Raises:
            MissingDependencyError: Annotated with the injectable's owner and method.
        """
        extra = extra or {}
        return [
            self._resolve_one(name, injectable, registry, extra)
            for name in injectable.dependencies
        ]

    def bind(
        self,
        injectable: Injectable,
        registry: "ServiceRegistry",
        extra: Optional[Mapping[str, Any]] = None,
    ) -> Callable[[], Any]:
        """Resolve dependencies now and return a zero-argument callable."""
        return functools.partial(
            injectable.func, *self.resolve(injectable, registry, extra)
        )

    def invoke(
        self,
        injectable: Injectable,
        registry: "ServiceRegistry",
        extra: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Call the injectable with its resolved dependencies.

        If the function is a coroutine function the returned awaitable is not awaited;
        use :meth:`invoke_async` for that.
        """
        return self.bind(injectable, registry, extra)()

    async def invoke_async(
        self,
        injectable: Injectable,
        registry: "ServiceRegistry",
        extra: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        result = self.invoke(injectable, registry, extra)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _resolve_one(self, name, injectable, registry, extra):
        if name in extra:
            return extra[name]
        if name in self._defaults:
            return self._defaults[name]
        if name in self._reserved:
            raise MissingDependencyError(name, injectable.owner, injectable.method)

        try:
            return registry.get(name)
        except MissingDependencyError as err:
            # errors from a nested factory already name their own dependency
            if err.name != name or err.method is not None:
                raise
            raise err.annotate(injectable.owner, injectable.method) from None
