from __future__ import annotations

from typing import Any, Iterable

import click

from ..cli_shared import DomainParseError
from ..name_args import ExactlyN, MultiName
from ..registry import ResourceGroup
from ..verb_cmd import Example, LongDescription, Output, StatusMessage, VerbCommand, VerbContext

_SUPER_USER = "This command requires super-user permissions."

_CLUSTER = ExactlyN(1, label="cluster name")
_CLUSTER_AND_POLICY = MultiName(("cluster name", "policy name"))

_AUTO_FAILOVER_POLICY_TYPES = ("min_available",)

_SET_REQUIRED = (
    ("namespaces", "--namespaces"),
    ("primary", "--primary"),
    ("auto_failover_policy_type", "--auto-failover-policy-type"),
    ("auto_failover_policy_params", "--auto-failover-policy-params"),
)

_CLUSTER_NAME_ERR = Output(
    desc="Reason: Cluster name does not exist, please check cluster name.",
    out="error: code: 412 reason: Cluster name does not exist.",
)
_POLICY_PARAMS_ERR = Output(
    desc="need to specified the cluster name and the policy name, please add cluster name and policy name",
    out="error: need to specified the cluster name and the policy name",
)


def _csv_values(raw: Iterable[str] | None) -> list[str]:
    out: list[str] = []
    for item in raw or ():
        for part in str(item).split(","):
            v = part.strip()
            if v and v not in out:
                out.append(v)
    return out


def parse_failover_params(raw: str) -> dict[str, str]:
    """Parse ``min_limit=3,usage_threshold=100`` into an ordered mapping."""
    params: dict[str, str] = {}
    for part in (raw or "").split(","):
        item = part.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        if not sep or not key.strip() or not value.strip():
            raise DomainParseError(f"invalid auto failover policy params {raw}")
        params[key.strip()] = value.strip()
    if not params:
        raise DomainParseError(f"invalid auto failover policy params {raw}")
    return params


def _check_required(vc: VerbContext, required: Iterable[tuple[str, str]]) -> None:
    # Name-argument arity is validated before any of these.
    missing = [opt for name, opt in required if not vc.flag(name)]
    if missing:
        raise DomainParseError(f"missing required option {', '.join(missing)}")


def build_isolation_data(vc: VerbContext) -> dict[str, Any]:
    _check_required(vc, _SET_REQUIRED)
    policy_type = str(vc.flag("auto_failover_policy_type", "")).strip()
    if policy_type not in _AUTO_FAILOVER_POLICY_TYPES:
        raise DomainParseError(f"invalid auto failover policy type {policy_type}")
    namespaces = _csv_values(vc.flag("namespaces", ()))
    if not namespaces:
        raise DomainParseError("the namespaces of the isolation policy are empty")
    primary = _csv_values(vc.flag("primary", ()))
    if not primary:
        raise DomainParseError("the primary brokers of the isolation policy are empty")
    return {
        "namespaces": namespaces,
        "primary": primary,
        "secondary": _csv_values(vc.flag("secondary", ())),
        "auto_failover_policy": {
            "policy_type": policy_type,
            "parameters": parse_failover_params(str(vc.flag("auto_failover_policy_params", ""))),
        },
    }


def _run_list(vc: VerbContext) -> Any:
    return vc.admin().ns_isolation_policies().list_policies(vc.name_args[0])


def _run_get(vc: VerbContext) -> Any:
    cluster_name, policy_name = vc.name_args
    return vc.admin().ns_isolation_policies().get_policy(cluster_name, policy_name)


def _run_set(vc: VerbContext) -> Any:
    cluster_name, policy_name = vc.name_args
    data = build_isolation_data(vc)
    vc.admin().ns_isolation_policies().create_or_update(cluster_name, policy_name, data)
    return StatusMessage(f"Create/Update namespaces isolation policy {policy_name} successfully")


def _run_delete(vc: VerbContext) -> Any:
    cluster_name, policy_name = vc.name_args
    vc.admin().ns_isolation_policies().delete_policy(cluster_name, policy_name)
    return StatusMessage(f"Delete namespaces isolation policy {policy_name} successfully")


def _run_brokers(vc: VerbContext) -> Any:
    return vc.admin().ns_isolation_policies().list_brokers(vc.name_args[0])


def _run_broker(vc: VerbContext) -> Any:
    _check_required(vc, (("broker", "--broker"),))
    broker = str(vc.flag("broker", "")).strip()
    if not broker:
        raise DomainParseError("the broker name is empty")
    return vc.admin().ns_isolation_policies().get_broker(vc.name_args[0], broker)


list_cmd = VerbCommand(
    name="list",
    short="List all namespace isolation policies of a cluster",
    description=LongDescription(
        used_for="List all namespace isolation policies of a cluster.",
        permission=_SUPER_USER,
        examples=(
            Example(
                desc="List all namespace isolation policies of a cluster",
                command="pulsar-admin ns-isolation-policy list (cluster-name)",
            ),
        ),
        outputs=(
            Output(
                desc="normal output",
                out='{\n  "test-policy": {\n    "namespaces": [\n      "default"\n    ],\n'
                '    "primary": [\n      "aaa"\n    ],\n    "secondary": []\n  }\n}',
            ),
            _CLUSTER_NAME_ERR,
        ),
    ),
    policy=_CLUSTER,
    run=_run_list,
)

get_cmd = VerbCommand(
    name="get",
    short="Get namespace isolation policy of a cluster",
    description=LongDescription(
        used_for="Get namespace isolation policy of a cluster.",
        permission=_SUPER_USER,
        examples=(
            Example(
                desc="Get namespace isolation policy of a cluster",
                command="pulsar-admin ns-isolation-policy get (cluster-name) (policy-name)",
            ),
        ),
        outputs=(
            Output(
                desc="normal output",
                out="{\n"
                '  "namespaces": [\n    "default"\n  ],\n'
                '  "primary": [\n    "aaa"\n  ],\n'
                '  "secondary": [],\n'
                '  "auto_failover_policy": {\n'
                '    "policy_type": "min_available",\n'
                '    "parameters": {\n'
                '      "min_limit": "3",\n'
                '      "usage_threshold": "100"\n'
                "    }\n"
                "  }\n"
                "}",
            ),
            Output(
                desc="NamespaceIsolationPolicies for cluster standalone does not exist, please check policy name.",
                out="error: code: 404 reason: NamespaceIsolationPolicies for cluster standalone does not exist",
            ),
            _CLUSTER_NAME_ERR,
            _POLICY_PARAMS_ERR,
        ),
    ),
    policy=_CLUSTER_AND_POLICY,
    run=_run_get,
)

set_cmd = VerbCommand(
    name="set",
    short="Create/Update a namespace isolation policy for a cluster",
    description=LongDescription(
        used_for="Create/Update a namespace isolation policy for a cluster.",
        permission=_SUPER_USER,
        examples=(
            Example(
                desc="Create/Update a namespace isolation policy for a cluster",
                command="pulsar-admin ns-isolation-policy set (cluster-name) (policy-name)"
                " --auto-failover-policy-params min_limit=3,usage_threshold=100"
                " --auto-failover-policy-type min_available"
                " --namespaces default --primary test-broker-.* --secondary test-broker-backup-.*",
            ),
        ),
        outputs=(
            Output(
                desc="normal output",
                out="Create/Update namespaces isolation policy (policy-name) successfully",
            ),
            _CLUSTER_NAME_ERR,
            _POLICY_PARAMS_ERR,
        ),
    ),
    policy=_CLUSTER_AND_POLICY,
    run=_run_set,
    options=(
        click.Option(
            ["--namespaces"],
            multiple=True,
            help="Namespaces regex patterns (repeatable or comma separated)",
        ),
        click.Option(
            ["--primary"],
            multiple=True,
            help="Primary brokers regex patterns (repeatable or comma separated)",
        ),
        click.Option(
            ["--secondary"],
            multiple=True,
            help="Secondary brokers regex patterns (repeatable or comma separated)",
        ),
        click.Option(
            ["--auto-failover-policy-type"],
            help="Auto failover policy type name, only 'min_available' is supported",
        ),
        click.Option(
            ["--auto-failover-policy-params"],
            help="Comma separated key=value parameters of the auto failover policy",
        ),
    ),
)

delete_cmd = VerbCommand(
    name="delete",
    short="Delete namespace isolation policy of a cluster",
    description=LongDescription(
        used_for="Delete namespace isolation policy of a cluster.",
        permission=_SUPER_USER,
        examples=(
            Example(
                desc="Delete namespace isolation policy of a cluster",
                command="pulsar-admin ns-isolation-policy delete (cluster-name) (policy-name)",
            ),
        ),
        outputs=(
            Output(desc="normal output", out="Delete namespaces isolation policy (policy-name) successfully"),
            _CLUSTER_NAME_ERR,
            _POLICY_PARAMS_ERR,
        ),
    ),
    policy=_CLUSTER_AND_POLICY,
    run=_run_delete,
)

brokers_cmd = VerbCommand(
    name="brokers",
    short="List all brokers with namespace-isolation policies attached to it",
    description=LongDescription(
        used_for="List all brokers with namespace-isolation policies attached to it.",
        permission=_SUPER_USER,
        examples=(
            Example(
                desc="List all brokers with namespace-isolation policies attached to it",
                command="pulsar-admin ns-isolation-policy brokers (cluster-name)",
            ),
        ),
        outputs=(
            Output(
                desc="normal output",
                out='[\n  {\n    "brokerName": "127.0.0.1:8080",\n'
                '    "policyName": "test-policy",\n    "isPrimary": true\n  }\n]',
            ),
            _CLUSTER_NAME_ERR,
        ),
    ),
    policy=_CLUSTER,
    run=_run_brokers,
)

broker_cmd = VerbCommand(
    name="broker",
    short="Get a broker with namespace-isolation policies attached to it",
    description=LongDescription(
        used_for="Get a broker with namespace-isolation policies attached to it.",
        permission=_SUPER_USER,
        examples=(
            Example(
                desc="Get a broker with namespace-isolation policies attached to it",
                command="pulsar-admin ns-isolation-policy broker (cluster-name) --broker (broker address)",
            ),
        ),
        outputs=(
            Output(
                desc="normal output",
                out='{\n  "brokerName": "127.0.0.1:8080",\n'
                '  "policyName": "test-policy",\n  "isPrimary": true\n}',
            ),
            _CLUSTER_NAME_ERR,
        ),
    ),
    policy=_CLUSTER,
    run=_run_broker,
    options=(click.Option(["--broker"], help="Broker address, e.g. 127.0.0.1:8080"),),
)


GROUP = ResourceGroup(
    noun="ns-isolation-policy",
    help="Operations about namespace isolation policy",
    verbs=(list_cmd, get_cmd, set_cmd, delete_cmd, brokers_cmd, broker_cmd),
)
