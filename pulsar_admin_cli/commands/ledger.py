from __future__ import annotations

import re
from typing import Any

import click

from ..cli_shared import DomainParseError
from ..name_args import ExactlyN
from ..registry import ResourceGroup
from ..verb_cmd import Example, LongDescription, Output, StatusMessage, VerbCommand, VerbContext

_INT64_MAX = 2**63 - 1
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")

_LEDGER_ID = ExactlyN(1, label="ledger id")


def parse_ledger_id(raw: str) -> int:
    if not _DECIMAL_RE.fullmatch(raw):
        raise DomainParseError(f"invalid ledger id {raw}")
    val = int(raw, 10)
    if val < 0 or val > _INT64_MAX:
        raise DomainParseError(f"invalid ledger id {raw}")
    return val


def _run_list(vc: VerbContext) -> Any:
    return vc.admin().ledgers().list_ledgers(print_metadata=bool(vc.flag("print_metadata", False)))


def _run_get(vc: VerbContext) -> Any:
    ledger_id = parse_ledger_id(vc.name_args[0])
    return vc.admin().ledgers().get_metadata(ledger_id)


def _run_delete(vc: VerbContext) -> Any:
    ledger_id = parse_ledger_id(vc.name_args[0])
    vc.admin().ledgers().delete_ledger(ledger_id)
    return StatusMessage(f"Successfully delete the ledger {ledger_id}")


_ID_ERRORS = (
    Output(
        desc="the ledger id is not specified or the ledger id is specified more than one",
        out="error: the ledger id is not specified or the ledger id is specified more than one",
    ),
    Output(desc="the specified ledger id is invalid", out="error: invalid ledger id <ledger-id>"),
)

list_cmd = VerbCommand(
    name="list",
    short="List all the ledgers",
    description=LongDescription(
        used_for="This command is used for listing all the ledgers.",
        permission="none",
        examples=(
            Example(desc="List all the ledgers", command="pulsar-admin ledger list"),
            Example(
                desc="List all the ledgers with their metadata",
                command="pulsar-admin ledger list --print-metadata",
            ),
        ),
        outputs=(Output(desc="normal output", out='{\n  "1": null,\n  "2": null\n}'),),
    ),
    policy=ExactlyN(0, label="ledger list"),
    run=_run_list,
    options=(
        click.Option(
            ["--print-metadata"],
            is_flag=True,
            default=False,
            help="Print the metadata of every ledger",
        ),
    ),
)

get_cmd = VerbCommand(
    name="get",
    short="Get the metadata of a ledger",
    description=LongDescription(
        used_for="This command is used for getting the metadata of the specified ledger.",
        permission="none",
        examples=(Example(desc="Get the metadata of the ledger", command="pulsar-admin ledger get (ledger-id)"),),
        outputs=(
            Output(
                desc="normal output",
                out='{\n  "storeSystemtimeAsLedgerCreationTime": false,\n'
                '  "metadataFormatVersion": 3,\n  "ensembleSize": 1\n}',
            ),
        )
        + _ID_ERRORS,
    ),
    policy=_LEDGER_ID,
    run=_run_get,
)

delete_cmd = VerbCommand(
    name="delete",
    short="Delete a ledger",
    description=LongDescription(
        used_for="This command is used for deleting a ledger.",
        permission="none",
        examples=(Example(desc="Delete the specified ledger", command="pulsar-admin ledger delete (ledger-id)"),),
        outputs=(Output(desc="normal output", out="Successfully delete the ledger (ledger-id)"),) + _ID_ERRORS,
    ),
    policy=_LEDGER_ID,
    run=_run_delete,
)


GROUP = ResourceGroup(
    noun="ledger",
    help="Operations about BookKeeper ledgers",
    verbs=(list_cmd, get_cmd, delete_cmd),
)
