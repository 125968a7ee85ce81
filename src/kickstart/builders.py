"""High level entry points for constructing and bootstrapping applications."""

from typing import Any, Iterable, Optional

from kickstart.application import Application
from kickstart.config import CXT_CLI, Settings

__all__ = ["make_application", "bootstrap", "bootstrap_cli"]


def make_application(
    providers: Iterable[Any],
    environment: Optional[str] = None,
    context: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Application:
    """
    Construct an application from a discovery list without bootstrapping it.

    Args:
        providers: Provider classes, factories, catalogs, or nested lists of them.
        environment: The active environment; defaults to the settings' environment.
        context: The active execution context; defaults to the settings' context.
        settings: Settings to bind as ``config``. If None, they are loaded from the
            environment and any ``.env`` file, and logging is set up from them.

    Returns:
        An :class:`Application` in the ``IDLE`` state with every provider discovered.

    Raises:
        DuplicateProviderError: If two providers share a name.
        ProviderLoadError: If a provider cannot be constructed.
    """
    if settings is None:
        settings = Settings.from_env()
        settings.setup_logging()
    return Application(providers, environment, context, settings)


def bootstrap(
    providers: Iterable[Any],
    environment: Optional[str] = None,
    context: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Application:
    """
    Construct an application and run it to the ``READY`` state synchronously.

    The process entry point is expected to log any raised error and exit; a failed
    application is never resumed.

    Raises:
        KickstartError: Any bootstrap failure, see :meth:`Application.bootstrap`.
    """
    return make_application(providers, environment, context, settings).run()


def bootstrap_cli(
    providers: Iterable[Any],
    environment: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Application:
    """:func:`bootstrap` in the ``cli`` execution context."""
    return bootstrap(providers, environment, CXT_CLI, settings)
