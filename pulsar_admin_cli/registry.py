from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from .cli_shared import RegistryError
from .verb_cmd import VerbCommand


@dataclass(frozen=True)
class ResourceGroup:
    noun: str
    help: str
    verbs: tuple[VerbCommand, ...]


@dataclass(frozen=True)
class VerbInfo:
    noun: str
    name: str
    short: str
    text: str


class CommandRegistry:
    """Verbs grouped by resource noun; fixed once constructed."""

    def __init__(self, groups: Iterable[ResourceGroup]) -> None:
        table: dict[str, Mapping[str, VerbCommand]] = {}
        helps: dict[str, str] = {}
        for group in groups:
            if group.noun in table:
                raise ValueError(f"duplicate resource noun: {group.noun}")
            verbs: dict[str, VerbCommand] = {}
            for verb in group.verbs:
                if verb.name in verbs:
                    raise ValueError(f"duplicate verb {verb.name!r} for resource {group.noun!r}")
                verbs[verb.name] = verb
            table[group.noun] = MappingProxyType(verbs)
            helps[group.noun] = group.help
        self._table: Mapping[str, Mapping[str, VerbCommand]] = MappingProxyType(table)
        self._helps: Mapping[str, str] = MappingProxyType(helps)

    def nouns(self) -> tuple[str, ...]:
        return tuple(self._table)

    def noun_help(self, noun: str) -> str:
        self._verbs_for(noun)
        return self._helps[noun]

    def verb_names(self, noun: str) -> tuple[str, ...]:
        return tuple(self._verbs_for(noun))

    def _verbs_for(self, noun: str) -> Mapping[str, VerbCommand]:
        verbs = self._table.get(noun)
        if verbs is None:
            raise RegistryError(f"unknown resource {noun!r}")
        return verbs

    def resolve(self, noun: str, verb: str) -> VerbCommand:
        found = self._verbs_for(noun).get(verb)
        if found is None:
            raise RegistryError(f"unknown verb {verb!r} for resource {noun!r}")
        return found

    def list(self, noun: str | None = None) -> tuple[VerbInfo, ...]:
        nouns = (noun,) if noun is not None else self.nouns()
        out: list[VerbInfo] = []
        for n in nouns:
            for v in self._verbs_for(n).values():
                out.append(VerbInfo(noun=n, name=v.name, short=v.short, text=v.describe()))
        return tuple(out)

    def docs_text(self, noun: str | None = None) -> str:
        blocks = []
        for info in self.list(noun):
            title = f"{info.noun} {info.name}"
            blocks.append(f"{title}\n{'=' * len(title)}\n{info.short}\n\n{info.text}")
        return "\n\n".join(blocks)
