"""Tests for the scale mappers."""
import math

import pytest

from graph_encoding.core.exceptions import ConfigurationError
from graph_encoding.visualization.scale_mappers import (
    CategoricalColorScale,
    ColorRampScale,
    FixedScale,
    LabelScale,
    LinearSizeScale,
    generate_palette,
    resolve_palette,
    to_hex,
)


class TestColorParsing:
    def test_short_hex_expanded(self):
        assert to_hex("#ABC") == "#aabbcc"

    def test_rgb_string(self):
        assert to_hex("rgb(228,26,28)") == "#e41a1c"

    @pytest.mark.parametrize("bad", ["red", "#12345", "#gggggg", 42])
    def test_unsupported_colors_rejected(self, bad):
        with pytest.raises(ConfigurationError):
            to_hex(bad)

    def test_named_plotly_palettes(self):
        assert resolve_palette("Set1")[0] == "#e41a1c"
        assert resolve_palette("Viridis")[0] == "#440154"

    def test_unknown_palette(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_palette("NotAPalette")
        assert exc_info.value.field == "palette"


class TestLinearSizeScale:
    def test_endpoints_and_midpoint(self):
        scale = LinearSizeScale.from_values([1, 3, 2], (2, 10))
        assert scale(1) == 2.0
        assert scale(3) == 10.0
        assert scale(2) == 6.0

    def test_constant_domain_maps_to_max(self):
        scale = LinearSizeScale.from_values([4, 4, 4], (2, 10))
        assert scale(4) == 10.0

    def test_missing_value_gets_min_size(self):
        scale = LinearSizeScale.from_values([1, None, 3], (2, 10))
        assert scale(None) == 2.0

    def test_log_scale(self):
        scale = LinearSizeScale.from_values([1, 10, 100], (1, 3), log=True)
        assert scale(1) == 1.0
        assert scale(10) == pytest.approx(2.0)
        assert scale(100) == 3.0

    def test_log_scale_rejects_non_positive(self):
        with pytest.raises(ConfigurationError):
            LinearSizeScale.from_values([0, 10], (1, 3), log=True, field_name="weight")

    def test_non_numeric_values_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            LinearSizeScale.from_values([1, "two"], (1, 3), field_name="score")
        assert exc_info.value.field == "score"

    def test_booleans_are_not_numeric(self):
        with pytest.raises(ConfigurationError):
            LinearSizeScale.from_values([True, False], (1, 3))

    @pytest.mark.parametrize("size_range", [(0, 10), (10, 2), (-1, 3), (5,), (1, 2, 3)])
    def test_invalid_ranges(self, size_range):
        with pytest.raises(ConfigurationError):
            LinearSizeScale.from_values([1, 2], size_range)

    def test_range_must_be_a_pair(self):
        with pytest.raises(ConfigurationError) as exc_info:
            LinearSizeScale.from_values([1, 2], (5,))
        assert exc_info.value.field == "size_range"

    def test_legend(self):
        legend = LinearSizeScale.from_values([1, 3], (2, 10)).legend()
        assert legend == {"type": "size", "scale": "linear", "domain": [1.0, 3.0], "range": [2.0, 10.0]}


class TestColorRampScale:
    def test_interpolates_between_anchors(self):
        scale = ColorRampScale.from_values([0, 10], ["#000000", "#ffffff"], "#cccccc")
        assert scale(0) == "#000000"
        assert scale(10) == "#ffffff"
        assert scale(5) == "#808080"

    def test_constant_domain_uses_last_anchor(self):
        scale = ColorRampScale.from_values([3, 3], ["#000000", "#ffffff"], "#cccccc")
        assert scale(3) == "#ffffff"

    def test_missing_value_gets_neutral(self):
        scale = ColorRampScale.from_values([0, 1], "Viridis", "#CCC")
        assert scale(None) == "#cccccc"

    def test_default_palette_end_points(self):
        viridis = resolve_palette("Viridis")
        scale = ColorRampScale.from_values([0, 1], "Viridis", "#cccccc")
        assert scale(0) == viridis[0]
        assert scale(1) == viridis[-1]


class TestCategoricalColorScale:
    def test_sorted_assignment(self):
        scale = CategoricalColorScale.from_values(
            ["b", "a", None, "b"], ["#ff0000", "#00ff00", "#0000ff"], "#cccccc")
        assert scale("a") == "#ff0000"
        assert scale("b") == "#00ff00"
        assert scale(None) == "#cccccc"

    def test_numbers_sort_before_strings(self):
        scale = CategoricalColorScale.from_values(
            ["x", 2, 1], ["#ff0000", "#00ff00", "#0000ff"], "#cccccc")
        assert [entry["value"] for entry in scale.legend()["entries"]] == [1, 2, "x"]

    def test_assignment_is_stable_across_input_order(self):
        first = CategoricalColorScale.from_values(["p", "q", "r"], "Set1", "#cccccc")
        second = CategoricalColorScale.from_values(["r", "p", "q"], "Set1", "#cccccc")
        assert first == second

    def test_palette_grows_with_categories(self):
        scale = CategoricalColorScale.from_values(list(range(12)), "Set1", "#cccccc")
        assert len(set(scale.mapping.values())) == 12

    def test_unseen_value_gets_fallback(self):
        scale = CategoricalColorScale.from_values(["a"], "Set1", "#cccccc")
        assert scale("zzz") == "#cccccc"


def test_generate_palette_uses_base_when_large_enough():
    assert generate_palette(2, ["#111111", "#222222", "#333333"]) == ["#111111", "#222222"]


def test_generate_palette_generates_distinct_hues():
    colors = generate_palette(5, ["#111111"])
    assert len(colors) == 5
    assert len(set(colors)) == 5
    assert all(c.startswith("#") and len(c) == 7 for c in colors)


def test_fixed_and_label_scales():
    assert FixedScale("#123456")(None) == "#123456"
    assert LabelScale()(None) is None
    assert LabelScale("n={value}")(3) == "n=3"
    assert not math.isnan(FixedScale(2.0)(7))
