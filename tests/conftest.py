import pytest

from kickstart.config import CXT_WEB, ENV_LOCAL, Settings
from kickstart.provider import Provider


def make_provider_class(
    name,
    requires=(),
    order=0,
    environments=(),
    contexts=(),
    active=True,
    events=None,
    **methods,
):
    attributes = {
        "name": name,
        "requires": requires,
        "order": order,
        "environments": environments,
        "contexts": contexts,
        "active": active,
        "events": events or {},
    }
    attributes.update(methods)
    return type(name, (Provider,), attributes)


@pytest.fixture
def provider_class():
    return make_provider_class


@pytest.fixture
def make_provider():
    def make(name, **kwargs):
        return make_provider_class(name, **kwargs)(None)

    return make


@pytest.fixture
def settings():
    return Settings(
        app_name="test-app",
        environment=ENV_LOCAL,
        context=CXT_WEB,
        log_level="DEBUG",
        values={"greeting": "hello"},
    )
