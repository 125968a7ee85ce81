"""
Deterministic load ordering of providers from their declared requirements.

The order is a stable topological sort: whenever several providers have all
their requirements satisfied, the one with the lowest ``order`` value goes
first, and providers with equal ``order`` keep their discovery order. The
``order`` value is only ever a tie-break between providers that are ready at
the same time; it never moves a provider ahead of something it requires.
"""

import heapq
from collections import defaultdict, deque
from typing import TYPE_CHECKING, Iterable, Sequence

from kickstart.errors import (
    CyclicDependencyError,
    DuplicateProviderError,
    UnresolvedDependencyError,
)

if TYPE_CHECKING:
    from kickstart.provider import Provider

__all__ = ["ProviderGraph"]


class _RequirementGraph:
    """
    Internal helper holding provider requirements as a directed graph.

    Each node is a provider name; each provider keeps the set of names it still
    waits on. Traversal removes satisfied nodes one at a time and raises if a
    residue of mutually-waiting providers is left over.
    """

    def __init__(self):
        self._waiting_on: dict[str, set[str]] = {}
        self._dependants: dict[str, list[str]] = defaultdict(list)
        self._rank: dict[str, tuple[int, int]] = {}

    def add(self, name: str, requires: Iterable[str], rank: tuple[int, int]):
        """
        Add a provider node.

        Args:
            name: The provider name.
            requires: Names of the providers it must load after.
            rank: ``(order, discovery index)`` used to break ties.
        """
        self._waiting_on[name] = set(requires)
        self._rank[name] = rank
        for dependency in self._waiting_on[name]:
            self._dependants[dependency].append(name)

    def traverse(self):
        """
        Yield provider names so that each comes after everything it requires.

        Raises:
            CyclicDependencyError: If providers remain that wait on each other.
        """
        ready = [
            (self._rank[name], name)
            for name, waiting_on in self._waiting_on.items()
            if not waiting_on
        ]
        heapq.heapify(ready)

        while ready:
            _, next_item = heapq.heappop(ready)
            yield next_item
            self._release(next_item, ready)

        if self._waiting_on:
            raise CyclicDependencyError(self._cycle_members())

    def _release(self, resolved: str, ready: list):
        del self._waiting_on[resolved]

        for dependant in self._dependants.get(resolved, ()):
            waiting_on = self._waiting_on[dependant]
            waiting_on.discard(resolved)
            if not waiting_on:
                heapq.heappush(ready, (self._rank[dependant], dependant))

    def _cycle_members(self) -> set[str]:
        """
        Names of the leftover providers that can reach themselves.

        Providers left over only because they require something on a cycle are
        not cycle members and are not reported.
        """
        return {name for name in self._waiting_on if self._reaches(name, name)}

    def _reaches(self, start: str, target: str) -> bool:
        seen = set()
        queue = deque(self._waiting_on[start])
        while queue:
            name = queue.popleft()
            if name == target:
                return True
            if name in seen:
                continue
            seen.add(name)
            queue.extend(self._waiting_on.get(name, ()))
        return False


class ProviderGraph:
    """Computes the boot order for a set of eligible providers."""

    def order(
        self, providers: Sequence["Provider"], excluded: Iterable[str] = ()
    ) -> tuple[str, ...]:
        """
        Return provider names in dependency-respecting load order.

        Args:
            providers: The eligible providers, in discovery order.
            excluded: Names of discovered providers that were gated out, used to
                report why a requirement is unresolved.

        Raises:
            DuplicateProviderError: If two providers share a name.
            UnresolvedDependencyError: If a provider requires a name not in ``providers``.
            CyclicDependencyError: If requirements form one or more cycles.
        """
        names = self._unique_names(providers)
        self._check_resolvable(providers, names, set(excluded))

        graph = _RequirementGraph()
        for index, provider in enumerate(providers):
            graph.add(provider.name, provider.requires, (provider.order, index))

        return tuple(graph.traverse())

    @staticmethod
    def _unique_names(providers: Sequence["Provider"]) -> set[str]:
        names = set()
        for provider in providers:
            if provider.name in names:
                raise DuplicateProviderError(provider.name)
            names.add(provider.name)
        return names

    @staticmethod
    def _check_resolvable(providers, names: set[str], excluded: set[str]):
        for provider in providers:
            for dependency in provider.requires:
                if dependency not in names:
                    raise UnresolvedDependencyError(
                        provider.name, dependency, dependency in excluded
                    )
