"""Eligibility of providers for the active environment and execution context."""

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from kickstart.provider import Provider

__all__ = ["ContextGate", "is_eligible", "tags_match"]


def tags_match(stated: Iterable[str], current: str) -> bool:
    """Check whether a provider's stated tags admit the current tag.

    Tags prefixed with ``!`` exclude the named tag. The remaining tags, if there
    are any, must include the current tag. No stated tags admit everything.

    Example:
        >>> tags_match([], "local")                # True
        >>> tags_match(["uat"], "local")           # False
        >>> tags_match(["!prod"], "local")         # True
        >>> tags_match(["!prod"], "prod")          # False
        >>> tags_match(["dev", "local"], "local")  # True
    """
    stated = list(stated)
    provided = [t for t in stated if not t.startswith("!")]
    excluded = [t[1:] for t in stated if t.startswith("!")]

    return current not in excluded and (not provided or current in provided)


def is_eligible(provider: "Provider", environment: str, context: str) -> bool:
    """Whether ``provider`` may load in the given environment and context.

    Inactive providers are never eligible.
    """
    return (
        provider.active
        and tags_match(provider.environments, environment)
        and tags_match(provider.contexts, context)
    )


class ContextGate:
    """Filters providers down to those eligible for one environment and context."""

    def __init__(self, environment: str, context: str):
        self.environment = environment
        self.context = context

    def is_eligible(self, provider: "Provider") -> bool:
        return is_eligible(provider, self.environment, self.context)

    def partition(
        self, providers: Iterable["Provider"]
    ) -> tuple[list["Provider"], list["Provider"]]:
        """Split providers into eligible and excluded lists, preserving order."""
        eligible, excluded = [], []
        for provider in providers:
            (eligible if self.is_eligible(provider) else excluded).append(provider)
        return eligible, excluded
