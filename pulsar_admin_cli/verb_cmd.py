from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

import click

from .admin_client import AdminClient
from .cli_shared import AdminCliError, ArgumentError, DomainParseError
from .error_classifier import classify
from .name_args import ArgumentPolicy, describe_policy, validate

ClientFactory = Callable[[], AdminClient]

_INDENT = "    "


@dataclass(frozen=True)
class Example:
    desc: str
    command: str


@dataclass(frozen=True)
class Output:
    desc: str
    out: str


@dataclass(frozen=True)
class LongDescription:
    used_for: str
    permission: str = ""
    examples: tuple[Example, ...] = ()
    outputs: tuple[Output, ...] = ()

    def example_text(self) -> str:
        lines: list[str] = []
        for ex in self.examples:
            lines.append(f"{_INDENT}#{ex.desc}")
            lines.append(f"{_INDENT}{ex.command}")
            lines.append("")
        return "\n".join(lines).rstrip("\n")

    def to_text(self) -> str:
        sections = [f"USED FOR:\n{_INDENT}{self.used_for}"]
        if self.permission:
            sections.append(f"REQUIRED PERMISSION:\n{_INDENT}{self.permission}")
        if self.examples:
            sections.append(f"EXAMPLES:\n{self.example_text()}")
        if self.outputs:
            out_lines: list[str] = []
            for o in self.outputs:
                out_lines.append(f"{_INDENT}#{o.desc}")
                out_lines.extend(f"{_INDENT}{line}" for line in o.out.splitlines())
                out_lines.append("")
            sections.append("OUTPUT:\n" + "\n".join(out_lines).rstrip("\n"))
        return "\n\n".join(sections)


@dataclass(frozen=True)
class StatusMessage:
    """Success payload printed as plain text, for calls that return nothing."""

    text: str


@dataclass(frozen=True)
class InvocationResult:
    payload: Any = None
    error: AdminCliError | None = None

    def __post_init__(self) -> None:
        has_payload = self.payload is not None
        has_error = self.error is not None
        if has_payload == has_error:
            raise ValueError("InvocationResult needs exactly one of payload or error")

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class VerbContext:
    """What a verb body sees during a single invocation."""

    name_args: tuple[str, ...]
    flags: Mapping[str, Any]
    _client_factory: ClientFactory = field(repr=False)
    _client: AdminClient | None = field(default=None, repr=False)

    def admin(self) -> AdminClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def flag(self, name: str, default: Any = None) -> Any:
        val = self.flags.get(name)
        return default if val is None else val


RunFunc = Callable[[VerbContext], Any]


@dataclass(frozen=True)
class VerbCommand:
    name: str
    short: str
    description: LongDescription
    policy: ArgumentPolicy
    run: RunFunc = field(repr=False)
    options: tuple[click.Option, ...] = field(default=(), repr=False)

    def describe(self) -> str:
        return self.description.to_text()

    def usage(self) -> str:
        return describe_policy(self.policy)


def execute(
    verb: VerbCommand,
    name_args: Sequence[str],
    flags: Mapping[str, Any] | None,
    client_factory: ClientFactory,
) -> InvocationResult:
    try:
        args = validate(verb.policy, name_args)
    except ArgumentError as e:
        return InvocationResult(error=e)

    vc = VerbContext(name_args=args, flags=dict(flags or {}), _client_factory=client_factory)
    try:
        payload = verb.run(vc)
    except DomainParseError as e:
        return InvocationResult(error=e)
    except Exception as e:
        return InvocationResult(error=classify(e))
    if payload is None:
        payload = StatusMessage(f"{verb.name} completed")
    return InvocationResult(payload=payload)
