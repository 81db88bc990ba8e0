from __future__ import annotations

import socket
from urllib.error import URLError

from .admin_client import AdminApiError, AdminTransportError, MalformedResponseError
from .cli_shared import (
    ArgumentError,
    ClassifiedError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    TransportError,
    UnknownError,
)

_STATUS_KINDS: dict[int, type[ClassifiedError]] = {
    400: ArgumentError,
    401: PermissionDeniedError,
    403: PermissionDeniedError,
    404: NotFoundError,
    405: ArgumentError,
    408: TransportError,
    409: ConflictError,
    412: ArgumentError,
    422: ArgumentError,
    502: TransportError,
    503: TransportError,
    504: TransportError,
}

# Network failures only; local OSErrors such as FileNotFoundError stay unknown.
_TRANSPORT_ERRORS = (URLError, ConnectionError, TimeoutError, socket.timeout, socket.gaierror, socket.herror)


def _message_of(raw: object) -> str:
    try:
        text = str(raw)
    except Exception:
        text = ""
    if text:
        return text
    return type(raw).__name__


def classify(raw: object) -> ClassifiedError:
    """Map a failure of the remote call onto one ClassifiedError kind.

    The original message is kept verbatim; this never raises.
    """
    if isinstance(raw, ClassifiedError):
        return raw
    msg = _message_of(raw)
    if isinstance(raw, AdminTransportError):
        return TransportError(msg, cause=raw)
    if isinstance(raw, MalformedResponseError):
        return UnknownError(msg, cause=raw)
    if isinstance(raw, AdminApiError):
        kind = _STATUS_KINDS.get(raw.status or 0, UnknownError)
        return kind(msg, cause=raw)
    if isinstance(raw, _TRANSPORT_ERRORS):
        return TransportError(msg, cause=raw)
    return UnknownError(msg, cause=raw)
