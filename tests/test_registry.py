import pytest

from pulsar_admin_cli.cli_shared import RegistryError
from pulsar_admin_cli.commands import build_registry
from pulsar_admin_cli.name_args import ExactlyN
from pulsar_admin_cli.registry import CommandRegistry, ResourceGroup
from pulsar_admin_cli.verb_cmd import LongDescription, VerbCommand


def _verb(name):
    return VerbCommand(
        name=name,
        short=f"{name} it",
        description=LongDescription(used_for=f"{name} it."),
        policy=ExactlyN(0),
        run=lambda vc: {"verb": name},
    )


def test_resolve_is_deterministic():
    registry = build_registry()
    first = registry.resolve("ledger", "delete")
    assert registry.resolve("ledger", "delete") is first
    assert registry.resolve("ns-isolation-policy", "get") is registry.resolve("ns-isolation-policy", "get")


def test_resolve_unknown_verb_and_noun():
    registry = build_registry()
    with pytest.raises(RegistryError) as exc:
        registry.resolve("ledger", "explode")
    assert str(exc.value) == "unknown verb 'explode' for resource 'ledger'"
    with pytest.raises(RegistryError) as exc:
        registry.resolve("topic", "list")
    assert str(exc.value) == "unknown resource 'topic'"


def test_default_registry_layout():
    registry = build_registry()
    assert registry.nouns() == ("cluster", "ledger", "ns-isolation-policy")
    assert registry.verb_names("ledger") == ("list", "get", "delete")
    assert registry.verb_names("ns-isolation-policy") == ("list", "get", "set", "delete", "brokers", "broker")


def test_list_returns_metadata_in_registration_order():
    registry = CommandRegistry([ResourceGroup(noun="thing", help="Things", verbs=(_verb("b"), _verb("a")))])
    infos = registry.list()
    assert [(i.noun, i.name) for i in infos] == [("thing", "b"), ("thing", "a")]
    assert infos[0].short == "b it"
    assert infos[0].text == "USED FOR:\n    b it."
    assert registry.noun_help("thing") == "Things"


def test_duplicates_rejected_at_build_time():
    with pytest.raises(ValueError):
        CommandRegistry([ResourceGroup(noun="thing", help="", verbs=(_verb("a"), _verb("a")))])
    with pytest.raises(ValueError):
        CommandRegistry(
            [
                ResourceGroup(noun="thing", help="", verbs=(_verb("a"),)),
                ResourceGroup(noun="thing", help="", verbs=(_verb("b"),)),
            ]
        )


def test_registry_is_read_only():
    registry = CommandRegistry([ResourceGroup(noun="thing", help="", verbs=(_verb("a"),))])
    with pytest.raises(TypeError):
        registry._table["other"] = {}  # type: ignore[index]
    assert not hasattr(registry, "register")


def test_independent_registries_do_not_share_state():
    one = CommandRegistry([ResourceGroup(noun="thing", help="", verbs=(_verb("a"),))])
    two = CommandRegistry([ResourceGroup(noun="other", help="", verbs=(_verb("a"),))])
    assert one.nouns() == ("thing",)
    assert two.nouns() == ("other",)


def test_docs_text_covers_every_verb():
    registry = build_registry()
    text = registry.docs_text()
    for info in registry.list():
        assert f"{info.noun} {info.name}\n" in text
    assert "REQUIRED PERMISSION:" in registry.docs_text("ns-isolation-policy")
    with pytest.raises(RegistryError):
        registry.docs_text("nope")
