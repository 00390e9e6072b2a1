"""
Chart handle -- the explicit result of building a chart.

A builder returns a ``ChartHandle`` instead of stashing references on a DOM
node. The handle owns the scales, the plot dimensions, the static scaffolding
(always visible) and the named layers whose opacity the reveal sequencer
controls. Every layer starts at opacity 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from charts.scales import LinearScale


@dataclass
class SvgElement:
    """One SVG node: tag, attributes, optional text and children."""

    tag: str
    attrs: dict[str, Any] = field(default_factory=dict)
    text: str | None = None
    children: list["SvgElement"] = field(default_factory=list)

    def walk(self) -> Iterator["SvgElement"]:
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class Layer:
    """An independently opacity-controlled group of elements."""

    name: str
    kind: str                     # axis | grid | line | area | annotation | legend
    elements: list[SvgElement] = field(default_factory=list)
    transform: str | None = None
    opacity: float = 0.0

    @property
    def css_class(self) -> str:
        return f"layer layer-{self.name}"

    def texts(self) -> list[str]:
        """All text content in the layer, in document order."""
        return [el.text for top in self.elements for el in top.walk() if el.text]


@dataclass
class ChartHandle:
    """Everything a caller needs to render and animate one chart."""

    name: str
    x: LinearScale
    y: LinearScale
    width: float                  # plot area, margins excluded
    height: float
    margin: dict[str, float]
    layers: dict[str, Layer] = field(default_factory=dict)
    static: list[SvgElement] = field(default_factory=list)

    @property
    def outer_width(self) -> float:
        return self.width + self.margin["left"] + self.margin["right"]

    @property
    def outer_height(self) -> float:
        return self.height + self.margin["top"] + self.margin["bottom"]

    @property
    def layer_names(self) -> tuple[str, ...]:
        return tuple(self.layers)

    def add_layer(self, layer: Layer) -> Layer:
        if layer.name in self.layers:
            raise ValueError(f"Duplicate layer {layer.name!r} in chart {self.name!r}")
        self.layers[layer.name] = layer
        return layer

    def layer(self, name: str) -> Layer:
        """Look up a layer by name.

        Raises:
            KeyError: If the chart has no such layer
        """
        try:
            return self.layers[name]
        except KeyError:
            raise KeyError(f"Chart {self.name!r} has no layer {name!r}") from None

    def opacities(self) -> dict[str, float]:
        return {name: layer.opacity for name, layer in self.layers.items()}

    def apply_opacities(self, values: dict[str, float]) -> None:
        """Write opacities onto the layers (used when rendering a snapshot)."""
        for name, value in values.items():
            self.layer(name).opacity = value

    def summary(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "x_domain": list(self.x.domain),
            "y_domain": list(self.y.domain),
            "layers": list(self.layer_names),
        }
