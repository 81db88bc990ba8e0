from __future__ import annotations

from ..registry import CommandRegistry
from . import cluster, ledger, ns_isolation_policy


def build_registry() -> CommandRegistry:
    return CommandRegistry((cluster.GROUP, ledger.GROUP, ns_isolation_policy.GROUP))


__all__ = ["build_registry"]
