"""Immutable layer-visibility state: layer name -> opacity in [0, 1]."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterable, Iterator

from utils.validation import is_valid_opacity


class RevealState(Mapping):
    """A frozen mapping of layer names to opacities.

    Raises:
        ValueError: If any opacity lies outside [0, 1]
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, float] | None = None) -> None:
        data = {}
        for name, value in (values or {}).items():
            if not is_valid_opacity(value):
                raise ValueError(f"Opacity for {name!r} must be in [0, 1], got {value!r}")
            data[str(name)] = float(value)
        self._values = MappingProxyType(data)

    @classmethod
    def hidden(cls, layers: Iterable[str]) -> "RevealState":
        return cls({name: 0.0 for name in layers})

    def updated(self, values: Mapping[str, float]) -> "RevealState":
        """Copy with some layers overridden."""
        merged = dict(self._values)
        merged.update(values)
        return RevealState(merged)

    def shown(self, *layers: str, opacity: float = 1.0) -> "RevealState":
        return self.updated({name: opacity for name in layers})

    def visible(self) -> tuple[str, ...]:
        """Layers with a non-zero opacity, in mapping order."""
        return tuple(name for name, value in self._values.items() if value > 0)

    def __getitem__(self, name: str) -> float:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def to_dict(self) -> dict[str, float]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"RevealState({dict(self._values)!r})"
