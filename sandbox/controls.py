#!/usr/bin/env python3
"""
Control panel elements.

The panel is a flat list of elements, each either a slider holding a value in
[0, 1] or a push button. Four sliders drive the market model, two only affect
how the scene is lit, and one button restores the market sliders to their
defaults.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .constants import DEFAULT_BRIGHTNESS, DEFAULT_LIGHT, MARKET_DEFAULTS
from .economics import MarketGraph
from .exceptions import ConfigurationError
from .vector_utils import clamp

MARKET_SLIDERS = ("outside", "tax", "reduction", "slide")
DISPLAY_SLIDERS = ("brightness", "light")
RESET_BUTTON = "reset"


class ElementKind(Enum):
    BUTTON = "button"
    SLIDER = "slider"


@dataclass
class Element:
    name: str
    kind: ElementKind
    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    value: Optional[float] = None
    label: str = ""

    def set_value(self, value: float) -> float:
        if self.kind is not ElementKind.SLIDER:
            raise ConfigurationError(f"{self.name!r} is a {self.kind.value}, not a slider")
        self.value = clamp(float(value), 0.0, 1.0)
        return self.value


def default_elements() -> List[Element]:
    return [
        Element("brightness", ElementKind.SLIDER, (1.0, 1.0, 1.0), DEFAULT_BRIGHTNESS, "Brightness"),
        Element("light", ElementKind.SLIDER, (1.0, 0.25, 0.25), DEFAULT_LIGHT, "Light angle"),
        Element("outside", ElementKind.SLIDER, (0.25, 1.0, 0.25), MARKET_DEFAULTS["outside"], "Outside benefit"),
        Element("tax", ElementKind.SLIDER, (1.0, 0.25, 0.25), MARKET_DEFAULTS["tax"], "Tax"),
        Element("reduction", ElementKind.SLIDER, (0.25, 0.25, 1.0), MARKET_DEFAULTS["reduction"], "Quantity reduction"),
        Element("slide", ElementKind.SLIDER, (1.0, 1.0, 1.0), MARKET_DEFAULTS["slide"], "Graph slide"),
        Element(RESET_BUTTON, ElementKind.BUTTON, (1.0, 1.0, 1.0), None, "Reset market"),
    ]


class ControlPanel:
    """Slider values and the market they describe. Not thread-safe on its own."""

    def __init__(self, elements: Optional[List[Element]] = None):
        self.elements = elements if elements is not None else default_elements()
        self._by_name: Dict[str, Element] = {e.name: e for e in self.elements}

    def element(self, name: str) -> Element:
        try:
            return self._by_name[name]
        except KeyError:
            raise ConfigurationError(f"unknown control {name!r}") from None

    def value(self, name: str) -> float:
        element = self.element(name)
        if element.kind is not ElementKind.SLIDER:
            raise ConfigurationError(f"{name!r} has no value")
        return element.value

    def set_slider(self, name: str, value: float) -> float:
        return self.element(name).set_value(value)

    def press(self, name: str) -> None:
        element = self.element(name)
        if element.kind is not ElementKind.BUTTON:
            raise ConfigurationError(f"{name!r} is not a button")
        if name == RESET_BUTTON:
            self.reset_market()

    def reset_market(self) -> None:
        for name, value in MARKET_DEFAULTS.items():
            self._by_name[name].value = value

    def market_graph(self) -> MarketGraph:
        """Outside, tax and slide are centred on zero; reduction is used as is."""
        return MarketGraph(
            outside=self.value("outside") - 0.5,
            tax=self.value("tax") - 0.5,
            reduction=self.value("reduction"),
            slide=self.value("slide") - 0.5,
        )

    def display_values(self) -> Dict[str, float]:
        return {name: self.value(name) for name in DISPLAY_SLIDERS}

    def values(self) -> Dict[str, float]:
        return {e.name: e.value for e in self.elements if e.kind is ElementKind.SLIDER}
