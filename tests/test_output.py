import io
import json
import re

import pytest

from pulsar_admin_cli.cli_shared import (
    ArgumentError,
    DomainParseError,
    NotFoundError,
    TransportError,
)
from pulsar_admin_cli.output import EXIT_FAILURE, EXIT_OK, EXIT_USAGE, format_json, render
from pulsar_admin_cli.verb_cmd import InvocationResult, StatusMessage

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


def _plain(s: str) -> str:
    return _ANSI_RE.sub("", s)


def _render(result, *, pretty=True):
    out, err = io.StringIO(), io.StringIO()
    code = render(result, out, err, pretty=pretty)
    return code, out.getvalue(), err.getvalue()


@pytest.mark.parametrize(
    "payload",
    [
        {"namespaces": ["default"], "primary": ["aaa"], "secondary": []},
        [1, 2.5, "x", True, None, {"a": {"b": []}}],
        "plain string",
        0,
        False,
        {"unicode": "ledger-ß-✓"},
    ],
)
def test_success_round_trips_through_json(payload):
    code, out, err = _render(InvocationResult(payload=payload))
    assert code == EXIT_OK
    assert err == ""
    assert json.loads(out) == payload


def test_success_preserves_key_order():
    payload = {"zeta": 1, "alpha": 2, "mid": {"z": 0, "a": 1}}
    _code, out, _err = _render(InvocationResult(payload=payload))
    assert list(json.loads(out)) == ["zeta", "alpha", "mid"]
    assert out.index('"zeta"') < out.index('"alpha"')
    assert '\n  "alpha": 2' in out


def test_compact_output():
    _code, out, _err = _render(InvocationResult(payload={"a": [1, 2]}), pretty=False)
    assert out == '{"a":[1,2]}\n'


def test_status_message_written_as_text():
    code, out, err = _render(InvocationResult(payload=StatusMessage("Successfully delete the ledger 7")))
    assert code == EXIT_OK
    assert out == "Successfully delete the ledger 7\n"
    assert err == ""


@pytest.mark.parametrize(
    ("error", "expected_code"),
    [
        (ArgumentError("the ledger id is not specified or the ledger id is specified more than one"), EXIT_USAGE),
        (DomainParseError("invalid ledger id a"), EXIT_FAILURE),
        (NotFoundError("code: 404 reason: Policy [p1] not found"), EXIT_FAILURE),
        (TransportError("http request failed: <urlopen error refused>"), EXIT_FAILURE),
    ],
)
def test_failure_goes_only_to_err_with_message_verbatim(error, expected_code):
    code, out, err = _render(InvocationResult(error=error))
    assert code == expected_code
    assert out == ""
    assert _plain(err) == f"error: {error.message}\n"


def test_unserializable_payload_reported_on_err_only():
    code, out, err = _render(InvocationResult(payload={"obj": object()}))
    assert code == EXIT_FAILURE
    assert out == ""
    assert "cannot render response" in _plain(err)


def test_invocation_result_requires_exactly_one_branch():
    with pytest.raises(ValueError):
        InvocationResult()
    with pytest.raises(ValueError):
        InvocationResult(payload={"a": 1}, error=NotFoundError("x"))
    assert InvocationResult(payload={}).ok
    assert not InvocationResult(error=NotFoundError("x")).ok


def test_format_json_handles_sets_and_bytes():
    assert format_json({"s": {2, 1}, "b": b"ok"}, pretty=False) == '{"s":[1,2],"b":"ok"}'
