"""Tests for the control panel."""

import pytest

from sandbox.controls import ControlPanel, ElementKind
from sandbox.economics import MarketGraph
from sandbox.exceptions import ConfigurationError


@pytest.fixture
def panel():
    return ControlPanel()


class TestDefaults:
    def test_six_sliders_and_one_button(self, panel):
        kinds = [e.kind for e in panel.elements]
        assert kinds.count(ElementKind.SLIDER) == 6
        assert kinds.count(ElementKind.BUTTON) == 1

    def test_default_market_is_undistorted(self, panel):
        market = panel.market_graph()
        assert (market.outside, market.tax, market.reduction, market.slide) == (0.0, 0.0, 0.0, 0.0)
        assert market.surplus() == MarketGraph().surplus()

    def test_display_values(self, panel):
        assert panel.display_values() == {"brightness": 0.5, "light": 0.5}


class TestSliders:
    def test_values_are_clamped(self, panel):
        assert panel.set_slider("outside", 1.7) == 1.0
        assert panel.set_slider("outside", -0.2) == 0.0
        assert panel.value("outside") == 0.0

    def test_slider_remap(self, panel):
        panel.set_slider("tax", 0.75)
        panel.set_slider("reduction", 0.25)
        market = panel.market_graph()
        assert market.tax == pytest.approx(0.25)
        assert market.reduction == pytest.approx(0.25)

    def test_reset_button_restores_market_sliders(self, panel):
        panel.set_slider("tax", 0.9)
        panel.set_slider("reduction", 0.6)
        panel.set_slider("brightness", 0.1)
        panel.press("reset")
        assert panel.value("tax") == 0.5
        assert panel.value("reduction") == 0.0
        assert panel.value("brightness") == 0.1

    def test_values_lists_sliders_only(self, panel):
        assert set(panel.values()) == {"brightness", "light", "outside", "tax", "reduction", "slide"}


class TestErrors:
    def test_unknown_control(self, panel):
        with pytest.raises(ConfigurationError):
            panel.element("gravity")

    def test_button_has_no_value(self, panel):
        with pytest.raises(ConfigurationError):
            panel.set_slider("reset", 0.5)
        with pytest.raises(ConfigurationError):
            panel.value("reset")

    def test_slider_cannot_be_pressed(self, panel):
        with pytest.raises(ConfigurationError):
            panel.press("tax")
