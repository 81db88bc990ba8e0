from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from .cli_shared import ArgumentError


@dataclass(frozen=True)
class ExactlyN:
    n: int
    label: str = "name"
    message: str | None = None


@dataclass(frozen=True)
class AtMostN:
    n: int
    label: str = "name"
    message: str | None = None


@dataclass(frozen=True)
class AtLeastN:
    n: int
    label: str = "name"
    message: str | None = None


@dataclass(frozen=True)
class MultiName:
    """Two or more independent names, e.g. ("cluster name", "policy name")."""

    names: tuple[str, ...]
    message: str | None = None

    def __post_init__(self) -> None:
        if len(self.names) < 2:
            raise ValueError("MultiName needs at least two names")


ArgumentPolicy = Union[ExactlyN, AtMostN, AtLeastN, MultiName]


def _join_names(names: Sequence[str]) -> str:
    parts = [f"the {n}" for n in names]
    if len(parts) == 1:
        return parts[0]
    return ", ".join(parts[:-1]) + " and " + parts[-1]


def _exactly_message(policy: ExactlyN, got: Sequence[str]) -> str:
    if policy.n == 1:
        return (
            f"the {policy.label} is not specified or "
            f"the {policy.label} is specified more than one"
        )
    if policy.n == 0:
        return f"{policy.label} does not accept name arguments, got: {', '.join(got)}"
    return f"expected exactly {policy.n} {policy.label} arguments, got {len(got)}"


def validate(policy: ArgumentPolicy, raw_args: Sequence[str]) -> tuple[str, ...]:
    """Check the arity of positional name args; content is never inspected."""
    args = tuple(raw_args)
    k = len(args)
    if isinstance(policy, ExactlyN):
        if k != policy.n:
            raise ArgumentError(policy.message or _exactly_message(policy, args))
    elif isinstance(policy, AtMostN):
        if k > policy.n:
            raise ArgumentError(
                policy.message
                or f"at most {policy.n} {policy.label} arguments are allowed, got {k}"
            )
    elif isinstance(policy, AtLeastN):
        if k < policy.n:
            raise ArgumentError(
                policy.message
                or f"at least {policy.n} {policy.label} arguments are required, got {k}"
            )
    elif isinstance(policy, MultiName):
        if k != len(policy.names):
            raise ArgumentError(policy.message or f"need to specified {_join_names(policy.names)}")
    else:
        raise TypeError(f"unsupported argument policy: {policy!r}")
    return args


def describe_policy(policy: ArgumentPolicy) -> str:
    """Short usage hint for help output, e.g. ``(cluster-name) (policy-name)``."""
    if isinstance(policy, MultiName):
        return " ".join(f"({n.replace(' ', '-')})" for n in policy.names)
    label = policy.label.replace(" ", "-")
    if isinstance(policy, ExactlyN):
        return " ".join(f"({label})" for _ in range(policy.n))
    if isinstance(policy, AtMostN):
        return f"[{label}...] (at most {policy.n})"
    return f"({label}...) (at least {policy.n})"
