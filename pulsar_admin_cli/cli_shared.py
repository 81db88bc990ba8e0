from __future__ import annotations

import enum
import os
import sys
from dataclasses import dataclass


class AdminCliError(Exception):
    """Base for every error the CLI turns into an operator-facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UsageError(AdminCliError):
    pass


class RegistryError(AdminCliError):
    pass


class DomainParseError(AdminCliError):
    """A name argument was present but its content is not acceptable."""


class ErrorKind(str, enum.Enum):
    ARGUMENT = "argument"
    NOT_FOUND = "not-found"
    PERMISSION = "permission"
    CONFLICT = "conflict"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class ClassifiedError(AdminCliError):
    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, cause: object = None) -> None:
        super().__init__(message)
        self.cause = cause


class ArgumentError(ClassifiedError):
    kind = ErrorKind.ARGUMENT


class NotFoundError(ClassifiedError):
    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(ClassifiedError):
    kind = ErrorKind.PERMISSION


class ConflictError(ClassifiedError):
    kind = ErrorKind.CONFLICT


class TransportError(ClassifiedError):
    kind = ErrorKind.TRANSPORT


class UnknownError(ClassifiedError):
    kind = ErrorKind.UNKNOWN


PULSAR_ADMIN_WEB_SERVICE_URL = "PULSAR_ADMIN_WEB_SERVICE_URL"
PULSAR_ADMIN_BK_SERVICE_URL = "PULSAR_ADMIN_BK_SERVICE_URL"
PULSAR_ADMIN_REQUEST_TIMEOUT = "PULSAR_ADMIN_REQUEST_TIMEOUT"

DEFAULT_WEB_SERVICE_URL = "http://localhost:8080"
DEFAULT_BK_SERVICE_URL = "http://localhost:8080"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


@dataclass(frozen=True)
class GlobalOpts:
    web_service_url: str = DEFAULT_WEB_SERVICE_URL
    bk_service_url: str = DEFAULT_BK_SERVICE_URL
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT_SECONDS
    pretty: bool = True


def _env_or_none(*names: str) -> str | None:
    for n in names:
        v = (os.environ.get(n) or "").strip()
        if v:
            return v
    return None


def _parse_timeout(raw: str | int | None, *, source: str) -> int:
    if raw is None or str(raw).strip() == "":
        return DEFAULT_REQUEST_TIMEOUT_SECONDS
    try:
        val = int(str(raw).strip())
    except ValueError as e:
        raise UsageError(f"invalid request timeout {raw!r} ({source}): expected whole seconds") from e
    if val <= 0:
        raise UsageError(f"invalid request timeout {raw!r} ({source}): must be positive")
    return val


def _require_url(val: str, name: str) -> str:
    v = (val or "").strip().rstrip("/")
    if not v.startswith(("http://", "https://")):
        raise UsageError(f"invalid {name} {val!r}: expected an http:// or https:// URL")
    return v


def resolve_global_opts(
    *,
    web_service_url: str | None = None,
    bk_service_url: str | None = None,
    request_timeout: int | None = None,
    plain_json: bool = False,
) -> GlobalOpts:
    """Merge flags over environment over defaults."""
    web = web_service_url or _env_or_none(PULSAR_ADMIN_WEB_SERVICE_URL) or DEFAULT_WEB_SERVICE_URL
    bk = bk_service_url or _env_or_none(PULSAR_ADMIN_BK_SERVICE_URL) or DEFAULT_BK_SERVICE_URL
    if request_timeout is not None:
        timeout = _parse_timeout(request_timeout, source="--request-timeout")
    else:
        timeout = _parse_timeout(
            _env_or_none(PULSAR_ADMIN_REQUEST_TIMEOUT), source=f"env {PULSAR_ADMIN_REQUEST_TIMEOUT}"
        )
    return GlobalOpts(
        web_service_url=_require_url(web, "web service url"),
        bk_service_url=_require_url(bk, "bookkeeper service url"),
        request_timeout=timeout,
        pretty=not plain_json,
    )
