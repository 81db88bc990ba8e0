from __future__ import annotations

import json
from typing import Any, TextIO

from rich.console import Console
from rich.markup import escape

from .cli_shared import AdminCliError, ErrorKind
from .verb_cmd import InvocationResult, StatusMessage

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    if isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def format_json(obj: Any, *, pretty: bool) -> str:
    # Key order from the remote payload is kept as-is.
    if pretty:
        return json.dumps(obj, indent=2, ensure_ascii=False, default=_json_default)
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, default=_json_default)


def print_error(err: TextIO, msg: str) -> None:
    console = Console(file=err, highlight=False, soft_wrap=True, emoji=False)
    console.print(f"[bold red]error:[/bold red] {escape(msg)}")


def exit_code_for(error: AdminCliError) -> int:
    if getattr(error, "kind", None) == ErrorKind.ARGUMENT:
        return EXIT_USAGE
    return EXIT_FAILURE


def render(result: InvocationResult, out: TextIO, err: TextIO, *, pretty: bool = True) -> int:
    """Write the result to exactly one stream and return the exit code."""
    if result.error is not None:
        print_error(err, result.error.message)
        return exit_code_for(result.error)

    payload = result.payload
    if isinstance(payload, StatusMessage):
        text = payload.text
    else:
        try:
            text = format_json(payload, pretty=pretty)
        except (TypeError, ValueError) as e:
            print_error(err, f"cannot render response: {e}")
            return EXIT_FAILURE
    out.write(text + "\n")
    out.flush()
    return EXIT_OK
