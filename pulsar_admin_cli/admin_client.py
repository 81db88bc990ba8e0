from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from .cli_shared import GlobalOpts


class AdminApiError(Exception):
    """Non-2xx answer from an admin REST endpoint."""

    def __init__(self, *, status: int | None, reason: str, method: str = "", path: str = "") -> None:
        self.status = status
        self.reason = reason
        self.method = method
        self.path = path
        super().__init__(self._format())

    def _format(self) -> str:
        if self.status is None:
            return self.reason
        return f"code: {self.status} reason: {self.reason}"


class AdminTransportError(AdminApiError):
    def __init__(self, reason: str, *, method: str = "", path: str = "") -> None:
        super().__init__(status=None, reason=reason, method=method, path=path)


class MalformedResponseError(AdminApiError):
    pass


def _http_request(
    *,
    method: str,
    url: str,
    headers: dict[str, str],
    body: bytes | None = None,
    timeout_seconds: int = 30,
) -> tuple[int, dict[str, str], bytes]:
    req = Request(url, data=body, method=str(method).upper())
    for k, v in headers.items():
        req.add_header(k, v)
    try:
        with urlopen(req, timeout=timeout_seconds) as resp:
            status = getattr(resp, "status", 200)
            hdrs = {k.lower(): v for k, v in dict(resp.headers).items()}
            data = resp.read()
            return int(status), hdrs, data
    except HTTPError as e:
        hdrs = {k.lower(): v for k, v in dict(e.headers or {}).items()}
        data = e.read() if hasattr(e, "read") else b""
        return int(getattr(e, "code", 0) or 0), hdrs, data
    except (URLError, OSError) as e:
        raise AdminTransportError(f"http request failed: {e}", method=method, path=url) from e


def _error_reason(text: str) -> str:
    try:
        parsed = json.loads(text) if text else None
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        for key in ("reason", "message", "error"):
            val = str(parsed.get(key) or "").strip()
            if val:
                return val
    return text.strip()


class _RestClient:
    def __init__(self, base_url: str, *, timeout_seconds: int) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def request(
        self,
        method: str,
        path: str,
        *,
        query: dict[str, Any] | None = None,
        body_obj: Any = None,
    ) -> Any:
        p = path if path.startswith("/") else f"/{path}"
        query_clean = {
            k: str(v).lower() if isinstance(v, bool) else str(v)
            for k, v in (query or {}).items()
            if v is not None and str(v).strip() != ""
        }
        url = f"{self.base_url}{p}"
        if query_clean:
            url += f"?{urlencode(query_clean)}"

        body_bytes = None
        headers = {"accept": "application/json"}
        if body_obj is not None:
            body_bytes = json.dumps(body_obj, separators=(",", ":")).encode("utf-8")
            headers["content-type"] = "application/json"

        status, _hdrs, data = _http_request(
            method=method,
            url=url,
            headers=headers,
            body=body_bytes,
            timeout_seconds=self.timeout_seconds,
        )
        text = data.decode("utf-8", errors="replace")
        if status < 200 or status >= 300:
            reason = _error_reason(text) or f"{method} {p} failed"
            raise AdminApiError(status=status, reason=reason, method=method, path=p)
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise MalformedResponseError(
                status=status,
                reason=f"malformed response from {method} {p}: {e}",
                method=method,
                path=p,
            ) from e


def _seg(value: str) -> str:
    return quote(str(value), safe="")


class Ledgers:
    """BookKeeper HTTP admin ledger endpoints."""

    def __init__(self, rest: _RestClient) -> None:
        self._rest = rest

    def list_ledgers(self, *, print_metadata: bool = False) -> Any:
        return self._rest.request(
            "GET", "/api/v1/ledger/list/", query={"print_metadata": print_metadata or None}
        )

    def get_metadata(self, ledger_id: int) -> Any:
        return self._rest.request("GET", "/api/v1/ledger/metadata/", query={"ledger_id": ledger_id})

    def delete_ledger(self, ledger_id: int) -> None:
        self._rest.request("DELETE", "/api/v1/ledger/delete/", query={"ledger_id": ledger_id})


class NsIsolationPolicies:
    def __init__(self, rest: _RestClient) -> None:
        self._rest = rest

    def _base(self, cluster: str) -> str:
        return f"/admin/v2/clusters/{_seg(cluster)}/namespaceIsolationPolicies"

    def list_policies(self, cluster: str) -> Any:
        return self._rest.request("GET", self._base(cluster))

    def get_policy(self, cluster: str, policy: str) -> Any:
        return self._rest.request("GET", f"{self._base(cluster)}/{_seg(policy)}")

    def create_or_update(self, cluster: str, policy: str, data: dict[str, Any]) -> None:
        self._rest.request("POST", f"{self._base(cluster)}/{_seg(policy)}", body_obj=data)

    def delete_policy(self, cluster: str, policy: str) -> None:
        self._rest.request("DELETE", f"{self._base(cluster)}/{_seg(policy)}")

    def list_brokers(self, cluster: str) -> Any:
        return self._rest.request("GET", f"{self._base(cluster)}/brokers")

    def get_broker(self, cluster: str, broker: str) -> Any:
        return self._rest.request("GET", f"{self._base(cluster)}/brokers/{_seg(broker)}")


class Clusters:
    def __init__(self, rest: _RestClient) -> None:
        self._rest = rest

    def list_clusters(self) -> Any:
        return self._rest.request("GET", "/admin/v2/clusters")

    def get_cluster(self, name: str) -> Any:
        return self._rest.request("GET", f"/admin/v2/clusters/{_seg(name)}")


@dataclass
class AdminClient:
    web_service_url: str
    bk_service_url: str
    timeout_seconds: int = 30

    def _web(self) -> _RestClient:
        return _RestClient(self.web_service_url, timeout_seconds=self.timeout_seconds)

    def ledgers(self) -> Ledgers:
        return Ledgers(_RestClient(self.bk_service_url, timeout_seconds=self.timeout_seconds))

    def ns_isolation_policies(self) -> NsIsolationPolicies:
        return NsIsolationPolicies(self._web())

    def clusters(self) -> Clusters:
        return Clusters(self._web())


def new_admin_client(g: GlobalOpts) -> AdminClient:
    return AdminClient(
        web_service_url=g.web_service_url,
        bk_service_url=g.bk_service_url,
        timeout_seconds=g.request_timeout,
    )
