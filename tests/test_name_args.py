import pytest

from pulsar_admin_cli.cli_shared import ArgumentError
from pulsar_admin_cli.name_args import (
    AtLeastN,
    AtMostN,
    ExactlyN,
    MultiName,
    describe_policy,
    validate,
)


LEDGER_ID_ERR = "the ledger id is not specified or the ledger id is specified more than one"


@pytest.mark.parametrize("args", [[], ["1", "2"], ["a", "b", "c"]])
def test_exactly_one_rejects_wrong_arity(args):
    with pytest.raises(ArgumentError) as exc:
        validate(ExactlyN(1, label="ledger id"), args)
    assert str(exc.value) == LEDGER_ID_ERR


@pytest.mark.parametrize("arg", ["1", "a", "-1", "", "  "])
def test_exactly_one_accepts_any_content(arg):
    assert validate(ExactlyN(1, label="ledger id"), [arg]) == (arg,)


def test_exactly_zero_lists_unexpected_args():
    assert validate(ExactlyN(0, label="cluster list"), []) == ()
    with pytest.raises(ArgumentError) as exc:
        validate(ExactlyN(0, label="cluster list"), ["x", "y"])
    assert str(exc.value) == "cluster list does not accept name arguments, got: x, y"


def test_exactly_n_generic_message_and_override():
    with pytest.raises(ArgumentError) as exc:
        validate(ExactlyN(3, label="topic"), ["a"])
    assert str(exc.value) == "expected exactly 3 topic arguments, got 1"

    with pytest.raises(ArgumentError) as exc:
        validate(ExactlyN(1, label="x", message="custom arity"), [])
    assert str(exc.value) == "custom arity"


def test_at_most_and_at_least():
    assert validate(AtMostN(2, label="broker"), []) == ()
    assert validate(AtMostN(2, label="broker"), ["a", "b"]) == ("a", "b")
    with pytest.raises(ArgumentError) as exc:
        validate(AtMostN(2, label="broker"), ["a", "b", "c"])
    assert str(exc.value) == "at most 2 broker arguments are allowed, got 3"

    assert validate(AtLeastN(1, label="namespace"), ["a", "b"]) == ("a", "b")
    with pytest.raises(ArgumentError) as exc:
        validate(AtLeastN(1, label="namespace"), [])
    assert str(exc.value) == "at least 1 namespace arguments are required, got 0"


def test_multi_name_reports_missing_names():
    policy = MultiName(("cluster name", "policy name"))
    assert validate(policy, ["standalone", "p1"]) == ("standalone", "p1")
    for args in ([], ["standalone"], ["a", "b", "c"]):
        with pytest.raises(ArgumentError) as exc:
            validate(policy, args)
        assert str(exc.value) == "need to specified the cluster name and the policy name"


def test_multi_name_joins_three_names():
    policy = MultiName(("tenant", "namespace", "topic"))
    with pytest.raises(ArgumentError) as exc:
        validate(policy, ["t"])
    assert str(exc.value) == "need to specified the tenant, the namespace and the topic"


def test_multi_name_needs_two_names():
    with pytest.raises(ValueError):
        MultiName(("only",))


def test_validate_rejects_unknown_policy():
    with pytest.raises(TypeError):
        validate(object(), [])  # type: ignore[arg-type]


def test_describe_policy():
    assert describe_policy(ExactlyN(1, label="ledger id")) == "(ledger-id)"
    assert describe_policy(ExactlyN(0)) == ""
    assert describe_policy(MultiName(("cluster name", "policy name"))) == "(cluster-name) (policy-name)"
