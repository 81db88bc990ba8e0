import socket
from urllib.error import URLError

import pytest

from pulsar_admin_cli.admin_client import AdminApiError, AdminTransportError, MalformedResponseError
from pulsar_admin_cli.cli_shared import (
    ArgumentError,
    ClassifiedError,
    ConflictError,
    ErrorKind,
    NotFoundError,
    PermissionDeniedError,
    TransportError,
    UnknownError,
)
from pulsar_admin_cli.error_classifier import classify


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (400, ArgumentError),
        (401, PermissionDeniedError),
        (403, PermissionDeniedError),
        (404, NotFoundError),
        (409, ConflictError),
        (412, ArgumentError),
        (503, TransportError),
        (500, UnknownError),
        (418, UnknownError),
    ],
)
def test_http_status_mapping_keeps_message(status, expected):
    raw = AdminApiError(status=status, reason="Cluster does not exist", method="GET", path="/x")
    out = classify(raw)
    assert type(out) is expected
    assert out.message == f"code: {status} reason: Cluster does not exist"
    assert out.cause is raw


def test_transport_failures():
    assert classify(AdminTransportError("http request failed: refused")).kind == ErrorKind.TRANSPORT
    assert classify(URLError("refused")).kind == ErrorKind.TRANSPORT
    assert classify(ConnectionRefusedError("refused")).kind == ErrorKind.TRANSPORT
    assert classify(socket.timeout("timed out")).kind == ErrorKind.TRANSPORT
    out = classify(TimeoutError("timed out"))
    assert isinstance(out, TransportError)
    assert out.message == "timed out"


def test_malformed_response_is_unknown():
    raw = MalformedResponseError(status=200, reason="malformed response from GET /x: bad json")
    out = classify(raw)
    assert isinstance(out, UnknownError)
    assert out.message == "code: 200 reason: malformed response from GET /x: bad json"


def test_already_classified_is_returned_as_is():
    err = NotFoundError("gone")
    assert classify(err) is err


class _BrokenStr(Exception):
    def __str__(self):
        raise RuntimeError("boom")


@pytest.mark.parametrize(
    "raw",
    [ValueError("bad"), RuntimeError(""), _BrokenStr(), {"weird": "shape"}, None, 42, KeyError("k")],
)
def test_classify_is_total(raw):
    out = classify(raw)
    assert isinstance(out, ClassifiedError)
    assert out.message


def test_unrecognized_error_keeps_text_or_type_name():
    assert classify(ValueError("bad value")).message == "bad value"
    assert classify(RuntimeError("")).message == "RuntimeError"
    assert classify(_BrokenStr()).message == "_BrokenStr"


def test_dns_failure_is_transport():
    assert classify(socket.gaierror(-2, "Name or service not known")).kind == ErrorKind.TRANSPORT


@pytest.mark.parametrize("raw", [FileNotFoundError(2, "No such file"), PermissionError(13, "Permission denied")])
def test_local_os_errors_are_not_transport(raw):
    out = classify(raw)
    assert isinstance(out, UnknownError)
    assert out.cause is raw
