import logging

import pytest

from kickstart.errors import DuplicateServiceError, MissingDependencyError
from kickstart.injection import inject
from kickstart.services import ServiceRegistry


@pytest.fixture
def registry():
    return ServiceRegistry()


def test_registered_value_is_returned(registry):
    registry.register("greeting", "hello", "A friendly greeting")

    assert registry.get("greeting") == "hello"
    assert registry.has("greeting")
    assert "greeting" in registry


def test_get_unbound_name_raises(registry):
    with pytest.raises(MissingDependencyError, match="Service 'nope' is not registered") as exc_info:
        registry.get("nope")

    assert exc_info.value.name == "nope"
    assert exc_info.value.provider is None


def test_falsy_values_are_still_bound(registry):
    registry.register("zero", 0).register("nothing", None)

    assert registry.get("zero") == 0
    assert registry.get("nothing") is None


def test_has_has_no_side_effects(registry):
    assert not registry.has("missing")
    assert len(registry) == 0


def test_duplicate_registration_raises(registry):
    registry.register("db", "first")

    with pytest.raises(DuplicateServiceError, match="'db' has already been registered"):
        registry.register("db", "second")

    assert registry.get("db") == "first"


def test_override_replaces_binding_and_logs(registry, caplog):
    registry.register("db", "first")

    with caplog.at_level(logging.WARNING, logger="kickstart.services"):
        registry.register("db", "second", override=True)

    assert registry.get("db") == "second"
    assert "Service 'db' overridden" in caplog.text


def test_override_is_not_seen_by_values_already_handed_out(registry):
    registry.register("settings", {"debug": False})
    handed_out = registry.get("settings")

    registry.register("settings", {"debug": True}, override=True)

    assert handed_out == {"debug": False}
    assert registry.get("settings") == {"debug": True}


def test_describe_lists_descriptions_in_registration_order(registry):
    registry.register("b", 2, "Second letter")
    registry.register("a", 1)

    assert registry.describe() == {"b": "Second letter", "a": None}
    assert registry.names() == ["b", "a"]


def test_factory_service_is_invoked_on_every_lookup(registry):
    calls = []

    @inject("prefix")
    def make_label(prefix):
        calls.append(prefix)
        return f"{prefix}-{len(calls)}"

    registry.register("prefix", "label")
    registry.register_factory("label", make_label, "Numbered label")

    assert registry.get("label") == "label-1"
    assert registry.get("label") == "label-2"


def test_factory_service_missing_dependency_names_factory(registry):
    @inject("absent")
    def make_thing(absent):
        return absent

    registry.register_factory("thing", make_thing)

    with pytest.raises(MissingDependencyError) as exc_info:
        registry.get("thing")

    assert exc_info.value.name == "absent"
    assert exc_info.value.provider == "service 'thing'"
    assert exc_info.value.method == "make_thing"


def test_alias_resolves_target_at_lookup_time(registry):
    registry.register("database", "sqlite")
    registry.alias("db", "database")

    assert registry.get("db") == "sqlite"

    registry.register("database", "postgres", override=True)
    assert registry.get("db") == "postgres"


def test_alias_to_unbound_target_is_missing(registry):
    registry.alias("db", "database")

    assert not registry.has("db")
    with pytest.raises(MissingDependencyError):
        registry.get("db")


def test_alias_cannot_shadow_a_service(registry):
    registry.register("db", "sqlite")

    with pytest.raises(DuplicateServiceError):
        registry.alias("db", "other")


def test_service_cannot_shadow_an_alias(registry):
    registry.alias("db", "database")

    with pytest.raises(DuplicateServiceError):
        registry.register("db", "sqlite", override=True)
