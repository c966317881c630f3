"""Variable store owned by one evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping

from .values import Value, to_value


@dataclass
class Environment:
    """Holds every variable visible to an evaluator.

    Entries are only ever added or overwritten; nothing is removed behind
    the caller's back.
    """

    variables: dict[str, Value] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object] | None) -> "Environment":
        env = cls()
        if mapping:
            env.update(mapping)
        return env

    def get(self, name: str) -> Value | None:
        return self.variables.get(name)

    def set(self, name: str, value: Value) -> None:
        self.variables[name] = value

    def update(self, mapping: Mapping[str, object]) -> None:
        for name, obj in mapping.items():
            self.variables[name] = to_value(obj)

    def __contains__(self, name: object) -> bool:
        return name in self.variables

    def __iter__(self) -> Iterator[str]:
        return iter(self.variables)

    def __len__(self) -> int:
        return len(self.variables)
