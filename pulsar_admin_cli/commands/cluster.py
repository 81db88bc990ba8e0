from __future__ import annotations

from typing import Any

from ..name_args import ExactlyN
from ..registry import ResourceGroup
from ..verb_cmd import Example, LongDescription, Output, VerbCommand, VerbContext


def _run_list(vc: VerbContext) -> Any:
    return vc.admin().clusters().list_clusters()


def _run_get(vc: VerbContext) -> Any:
    return vc.admin().clusters().get_cluster(vc.name_args[0])


list_cmd = VerbCommand(
    name="list",
    short="List the available pulsar clusters",
    description=LongDescription(
        used_for="This command is used for listing the list of available pulsar clusters.",
        permission="This command does not need any permission.",
        examples=(Example(desc="List the list of available pulsar clusters", command="pulsar-admin cluster list"),),
        outputs=(Output(desc="normal output", out='[\n  "standalone"\n]'),),
    ),
    policy=ExactlyN(0, label="cluster list"),
    run=_run_list,
)

get_cmd = VerbCommand(
    name="get",
    short="Get the configuration data for the specified cluster",
    description=LongDescription(
        used_for="This command is used for getting the cluster data of the specified cluster.",
        permission="This command requires super-user permissions.",
        examples=(
            Example(
                desc="getting the (cluster-name) data",
                command="pulsar-admin cluster get (cluster-name)",
            ),
        ),
        outputs=(
            Output(
                desc="normal output",
                out='{\n  "serviceUrl": "http://localhost:8080",\n'
                '  "brokerServiceUrl": "pulsar://localhost:6650"\n}',
            ),
            Output(
                desc="the cluster name is not specified or the cluster name is specified more than one",
                out="error: the cluster name is not specified or the cluster name is specified more than one",
            ),
            Output(
                desc="the specified cluster does not exist in the broker",
                out="error: code: 404 reason: Cluster does not exist",
            ),
        ),
    ),
    policy=ExactlyN(1, label="cluster name"),
    run=_run_get,
)


GROUP = ResourceGroup(
    noun="cluster",
    help="Operations about cluster",
    verbs=(list_cmd, get_cmd),
)
